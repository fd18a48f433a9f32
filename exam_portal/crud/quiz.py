from typing import List
from sqlalchemy.orm import Session, selectinload

from exam_portal.crud.base import CRUDBase
from exam_portal.models.quiz import Quiz
from exam_portal.schemas.quiz import QuizCreate, QuizUpdate

class CRUDQuiz(CRUDBase[Quiz, QuizCreate, QuizUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Quiz).options(
            selectinload(Quiz.subject),
            selectinload(Quiz.questions)
        )

    def get_multi_with_counts(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Quiz]:
        return (
            self._query_with_relationships(db)
            .order_by(Quiz.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_subject(self, db: Session, *, subject_id: int) -> List[Quiz]:
        return (
            self._query_with_relationships(db)
            .filter(Quiz.subject_id == subject_id)
            .order_by(Quiz.id)
            .all()
        )


quiz = CRUDQuiz(Quiz)
