from typing import List, Sequence
from sqlalchemy.orm import Session, selectinload

from exam_portal.crud.base import CRUDBase
from exam_portal.models.question import Question
from exam_portal.schemas.question import QuestionCreate, QuestionUpdate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionUpdate]):
    def get_by_quiz(self, db: Session, *, quiz_id: int) -> List[Question]:
        return db.query(Question).filter(Question.quiz_id == quiz_id).order_by(Question.id).all()

    def get_by_ids(self, db: Session, *, ids: Sequence[int]) -> List[Question]:
        if not ids:
            return []
        return db.query(Question).filter(Question.id.in_(list(ids))).all()

    def get_multi_with_quiz(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Question]:
        return (
            db.query(Question)
            .options(selectinload(Question.quiz))
            .order_by(Question.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def create_many(self, db: Session, *, objs_in: Sequence[QuestionCreate]) -> List[Question]:
        db_objs = [Question(**obj_in.model_dump()) for obj_in in objs_in]
        db.add_all(db_objs)
        db.commit()
        for db_obj in db_objs:
            db.refresh(db_obj)
        return db_objs


question = CRUDQuestion(Question)
