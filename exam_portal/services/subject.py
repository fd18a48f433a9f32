from typing import List
from sqlalchemy.orm import Session

from exam_portal.core.exceptions import NotFoundError
from exam_portal.crud.subject import subject as crud_subject
from exam_portal.models.subject import Subject
from exam_portal.schemas.quiz import QuizSummary
from exam_portal.schemas.subject import SubjectCreate, SubjectUpdate, SubjectWithQuizzes


class SubjectService:

    def _get_or_404(self, db: Session, subject_id: int) -> Subject:
        subject = crud_subject.get(db, id=subject_id)
        if not subject:
            raise NotFoundError("Subject not found.")
        return subject

    def get_subjects(self, db: Session) -> List[Subject]:
        return crud_subject.get_multi(db, limit=1000)

    def get_subject(self, db: Session, subject_id: int) -> Subject:
        return self._get_or_404(db, subject_id)

    def get_catalog(self, db: Session) -> List[SubjectWithQuizzes]:
        """Subjects with their quizzes and question counts, as offered to students."""
        return [
            SubjectWithQuizzes(
                id=subject.id,
                name=subject.name,
                quizzes=[QuizSummary.model_validate(quiz, from_attributes=True) for quiz in subject.quizzes]
            )
            for subject in crud_subject.get_multi_with_quizzes(db)
        ]

    def create_subject(self, db: Session, subject_in: SubjectCreate) -> Subject:
        return crud_subject.create(db, obj_in=subject_in)

    def update_subject(self, db: Session, subject_id: int, subject_in: SubjectUpdate) -> Subject:
        subject = self._get_or_404(db, subject_id)
        return crud_subject.update(db, db_obj=subject, obj_in=subject_in)

    def delete_subject(self, db: Session, subject_id: int) -> Subject:
        # Quizzes and their questions go with the subject; exam results are kept.
        self._get_or_404(db, subject_id)
        return crud_subject.delete(db, id=subject_id)


subject_service = SubjectService()
