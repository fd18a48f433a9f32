import logging
from typing import List
from sqlalchemy.orm import Session

from exam_portal.core.exceptions import NotFoundError, ValidationFailedError
from exam_portal.crud.question import question as crud_question
from exam_portal.crud.quiz import quiz as crud_quiz
from exam_portal.models.question import Question
from exam_portal.schemas.question import QuestionCreate, QuestionUpdate

logger = logging.getLogger(__name__)


class QuestionService:

    def _get_or_404(self, db: Session, question_id: int) -> Question:
        question = crud_question.get(db, id=question_id)
        if not question:
            raise NotFoundError("Question not found.")
        return question

    def _require_quiz(self, db: Session, quiz_id: int):
        if not crud_quiz.get(db, id=quiz_id):
            raise NotFoundError("Quiz not found.")

    def get_questions(self, db: Session) -> List[Question]:
        return crud_question.get_multi_with_quiz(db, limit=10000)

    def get_question(self, db: Session, question_id: int) -> Question:
        return self._get_or_404(db, question_id)

    def get_questions_by_quiz(self, db: Session, quiz_id: int) -> List[Question]:
        self._require_quiz(db, quiz_id)
        return crud_question.get_by_quiz(db, quiz_id=quiz_id)

    def create_question(self, db: Session, question_in: QuestionCreate) -> Question:
        self._require_quiz(db, question_in.quiz_id)
        return crud_question.create(db, obj_in=question_in)

    def create_questions(self, db: Session, questions_in: List[QuestionCreate]) -> List[Question]:
        """All-or-nothing: every referenced quiz must exist before anything is written."""
        if not questions_in:
            raise ValidationFailedError("No questions provided.")

        for quiz_id in {q.quiz_id for q in questions_in}:
            self._require_quiz(db, quiz_id)

        questions = crud_question.create_many(db, objs_in=questions_in)
        logger.info(f"Imported {len(questions)} question(s)")
        return questions

    def update_question(self, db: Session, question_id: int, question_in: QuestionUpdate) -> Question:
        question = self._get_or_404(db, question_id)
        self._require_quiz(db, question_in.quiz_id)
        return crud_question.update(db, db_obj=question, obj_in=question_in)

    def delete_question(self, db: Session, question_id: int) -> Question:
        self._get_or_404(db, question_id)
        return crud_question.delete(db, id=question_id)


question_service = QuestionService()
