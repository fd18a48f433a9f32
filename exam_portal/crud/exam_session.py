from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from exam_portal.core.constants import ExamSessionStatusEnum, OptionKeyEnum
from exam_portal.models.exam_session import ExamSession, ExamResultItem
from exam_portal.schemas.exam_session import (
    ClosedExamState,
    ExamResult,
    ExamSessionRecord,
    ExamSummary,
    OpenExamState,
)
from exam_portal.utils.timeutils import as_utc


class CRUDExamSession:
    """Exam sessions are created open, closed exactly once and otherwise never rewritten."""

    def get(self, db: Session, id: str) -> Optional[ExamSession]:
        return db.get(ExamSession, id)

    def get_with_results(self, db: Session, id: str) -> Optional[ExamSession]:
        return (
            db.query(ExamSession)
            .options(selectinload(ExamSession.results))
            .filter(ExamSession.id == id)
            .first()
        )

    def create_open(
        self, db: Session, *, id: str, user_id: int, quiz_id: int,
        question_ids: List[int], started_at: datetime
    ) -> ExamSession:
        db_obj = ExamSession(
            id=id,
            user_id=user_id,
            quiz_id=quiz_id,
            question_ids=list(question_ids),
            status=ExamSessionStatusEnum.OPEN,
            total_questions=len(question_ids),
            started_at=started_at,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def close(
        self, db: Session, *, id: str, answers: Dict[int, Optional[OptionKeyEnum]],
        summary: ExamSummary, submitted_at: datetime
    ) -> bool:
        """Open -> closed as a conditional update. Returns False if the session was not open."""
        result = db.execute(
            update(ExamSession)
            .where(ExamSession.id == id, ExamSession.status == ExamSessionStatusEnum.OPEN)
            .values(
                status=ExamSessionStatusEnum.CLOSED,
                answers={str(question_id): (answer.value if answer else None) for question_id, answer in answers.items()},
                correct_answers=summary.correct_answers,
                percentage=summary.percentage,
                submitted_at=submitted_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            return False

        db.add_all([
            ExamResultItem(
                exam_session_id=id,
                position=position,
                question_id=item.question_id,
                question_text=item.question_text,
                user_answer=item.user_answer,
                correct_answer=item.correct_answer,
                is_correct=item.is_correct,
            )
            for position, item in enumerate(summary.results)
        ])
        db.commit()
        return True

    def delete_open_started_before(self, db: Session, *, cutoff: datetime) -> int:
        deleted = (
            db.query(ExamSession)
            .filter(
                ExamSession.status == ExamSessionStatusEnum.OPEN,
                ExamSession.started_at < cutoff
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    def to_record(self, db_obj: ExamSession) -> ExamSessionRecord:
        if db_obj.status == ExamSessionStatusEnum.CLOSED:
            state = ClosedExamState(
                started_at=as_utc(db_obj.started_at),
                submitted_at=as_utc(db_obj.submitted_at),
                summary=ExamSummary(
                    total_questions=db_obj.total_questions,
                    correct_answers=db_obj.correct_answers,
                    percentage=db_obj.percentage,
                    results=[ExamResult.model_validate(item) for item in db_obj.results],
                ),
            )
        else:
            state = OpenExamState(started_at=as_utc(db_obj.started_at))

        return ExamSessionRecord(
            id=db_obj.id,
            user_id=db_obj.user_id,
            quiz_id=db_obj.quiz_id,
            question_ids=list(db_obj.question_ids),
            state=state,
        )


exam_session = CRUDExamSession()
