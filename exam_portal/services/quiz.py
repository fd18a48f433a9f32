from typing import List
from sqlalchemy.orm import Session

from exam_portal.core.exceptions import NotFoundError
from exam_portal.crud.quiz import quiz as crud_quiz
from exam_portal.crud.subject import subject as crud_subject
from exam_portal.models.quiz import Quiz
from exam_portal.schemas.quiz import QuizCreate, QuizUpdate


class QuizService:

    def _get_or_404(self, db: Session, quiz_id: int) -> Quiz:
        quiz = crud_quiz.get(db, id=quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found.")
        return quiz

    def _require_subject(self, db: Session, subject_id: int):
        if not crud_subject.get(db, id=subject_id):
            raise NotFoundError("Subject not found.")

    def get_quizzes(self, db: Session) -> List[Quiz]:
        return crud_quiz.get_multi_with_counts(db, limit=1000)

    def get_quiz(self, db: Session, quiz_id: int) -> Quiz:
        return self._get_or_404(db, quiz_id)

    def get_quizzes_by_subject(self, db: Session, subject_id: int) -> List[Quiz]:
        self._require_subject(db, subject_id)
        return crud_quiz.get_by_subject(db, subject_id=subject_id)

    def create_quiz(self, db: Session, quiz_in: QuizCreate) -> Quiz:
        self._require_subject(db, quiz_in.subject_id)
        return crud_quiz.create(db, obj_in=quiz_in)

    def update_quiz(self, db: Session, quiz_id: int, quiz_in: QuizUpdate) -> Quiz:
        quiz = self._get_or_404(db, quiz_id)
        self._require_subject(db, quiz_in.subject_id)
        return crud_quiz.update(db, db_obj=quiz, obj_in=quiz_in)

    def delete_quiz(self, db: Session, quiz_id: int) -> Quiz:
        self._get_or_404(db, quiz_id)
        return crud_quiz.delete(db, id=quiz_id)


quiz_service = QuizService()
