from typing import List
from sqlalchemy.orm import Session, selectinload

from exam_portal.crud.base import CRUDBase
from exam_portal.models.quiz import Quiz
from exam_portal.models.subject import Subject
from exam_portal.schemas.subject import SubjectCreate, SubjectUpdate

class CRUDSubject(CRUDBase[Subject, SubjectCreate, SubjectUpdate]):
    def get_multi_with_quizzes(self, db: Session) -> List[Subject]:
        return (
            db.query(Subject)
            .options(selectinload(Subject.quizzes).selectinload(Quiz.questions))
            .order_by(Subject.id)
            .all()
        )


subject = CRUDSubject(Subject)
