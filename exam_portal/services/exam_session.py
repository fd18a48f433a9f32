import logging
import random
import uuid
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.constants import ExamSessionStatusEnum
from exam_portal.core.exceptions import (
    AlreadySubmittedError,
    InsufficientPoolError,
    NotFoundError,
    ValidationFailedError,
)
from exam_portal.crud.exam_session import exam_session as crud_exam_session
from exam_portal.crud.question import question as crud_question
from exam_portal.crud.quiz import quiz as crud_quiz
from exam_portal.models.exam_session import ExamSession
from exam_portal.models.question import Question
from exam_portal.schemas.exam_session import (
    ClosedExamState,
    ExamQuestion,
    ExamSummary,
    ExamView,
    SubmittedAnswer,
)
from exam_portal.services.sampler import sample_question_ids
from exam_portal.services.scoring import collect_answers, score_exam
from exam_portal.utils.locks import KeyedLock
from exam_portal.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

EXAM_NOT_AVAILABLE = "Exam not found or already submitted."
EXAM_NOT_FOUND = "Exam not found."
RESULTS_NOT_FOUND = "Results not found."


class ExamSessionService:
    """
    Lifecycle of an exam session: open on start, closed by exactly one submit.

    Questions are referenced by id and resolved on demand, so answer keys stay
    in the store and only reach the client through ExamQuestion, which has no
    field for them. Scoring reads the answer keys as they are at submission
    time; an admin editing a question while an exam is in flight changes how
    that exam is scored. Once its quiz is deleted an open session can neither
    be viewed nor submitted; it stays open until the abandoned-session sweep
    removes it.
    """

    def __init__(self):
        self._submission_locks = KeyedLock()

    def _require_owned(self, exam_session: Optional[ExamSession], user_id: Optional[int], detail: str) -> ExamSession:
        # Someone else's session is reported exactly like a missing one.
        if not exam_session or (user_id is not None and exam_session.user_id != user_id):
            raise NotFoundError(detail)
        return exam_session

    def _require_question_count(self, question_count: int):
        allowed = settings.EXAM_QUESTION_COUNTS
        if question_count not in allowed:
            raise ValidationFailedError(
                f"Question count must be one of {', '.join(str(c) for c in allowed)}.",
                details={"allowed": list(allowed), "requested": question_count}
            )

    def _require_unique_answers(self, answers: List[SubmittedAnswer]):
        question_ids = [answer.question_id for answer in answers]
        if len(question_ids) != len(set(question_ids)):
            raise ValidationFailedError("Duplicate question_ids found in submission.")

    def _to_exam_question(self, question: Question) -> ExamQuestion:
        return ExamQuestion(
            id=question.id,
            text=question.text,
            option1=question.option1,
            option2=question.option2,
            option3=question.option3,
            option4=question.option4,
        )

    def start_exam(
        self, db: Session, *, user_id: int, quiz_id: int, question_count: int,
        rng: Optional[random.Random] = None
    ) -> str:
        self._require_question_count(question_count)

        quiz = crud_quiz.get(db, id=quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found.")

        pool = crud_question.get_by_quiz(db, quiz_id=quiz_id)
        if len(pool) < question_count:
            raise InsufficientPoolError(available=len(pool), requested=question_count)

        question_ids = sample_question_ids(pool, question_count, rng=rng)
        exam_session = crud_exam_session.create_open(
            db,
            id=str(uuid.uuid4()),
            user_id=user_id,
            quiz_id=quiz_id,
            question_ids=question_ids,
            started_at=utcnow()
        )
        logger.info(f"Exam {exam_session.id} started by user {user_id} on quiz {quiz_id} with {question_count} questions")
        return exam_session.id

    def get_exam_view(self, db: Session, *, exam_id: str, user_id: Optional[int] = None) -> ExamView:
        exam_session = self._require_owned(crud_exam_session.get(db, id=exam_id), user_id, EXAM_NOT_AVAILABLE)
        if exam_session.status != ExamSessionStatusEnum.OPEN:
            raise NotFoundError(EXAM_NOT_AVAILABLE)

        quiz = crud_quiz.get(db, id=exam_session.quiz_id)
        if not quiz:
            raise NotFoundError(EXAM_NOT_AVAILABLE)

        questions = {q.id: q for q in crud_question.get_by_ids(db, ids=exam_session.question_ids)}
        return ExamView(
            exam_id=exam_session.id,
            quiz_name=quiz.name,
            questions=[
                self._to_exam_question(questions[question_id])
                for question_id in exam_session.question_ids
                if question_id in questions
            ]
        )

    def submit_exam(
        self, db: Session, *, exam_id: str, answers: List[SubmittedAnswer], user_id: Optional[int] = None
    ) -> ExamSummary:
        with self._submission_locks.hold(exam_id):
            exam_session = self._require_owned(crud_exam_session.get(db, id=exam_id), user_id, EXAM_NOT_FOUND)
            if exam_session.status != ExamSessionStatusEnum.OPEN:
                logger.warning(f"Rejected resubmission of exam {exam_id}")
                raise AlreadySubmittedError()

            if not crud_quiz.get(db, id=exam_session.quiz_id):
                raise NotFoundError(EXAM_NOT_FOUND)

            self._require_unique_answers(answers)

            question_ids = list(exam_session.question_ids)
            questions = {q.id: q for q in crud_question.get_by_ids(db, ids=question_ids)}
            summary = score_exam(question_ids, answers, questions)

            closed = crud_exam_session.close(
                db,
                id=exam_id,
                answers=collect_answers(question_ids, answers),
                summary=summary,
                submitted_at=utcnow()
            )
            if not closed:
                # Lost the race to another process, or the session was evicted meanwhile.
                if crud_exam_session.get(db, id=exam_id) is None:
                    raise NotFoundError(EXAM_NOT_FOUND)
                logger.warning(f"Rejected concurrent submission of exam {exam_id}")
                raise AlreadySubmittedError()

        logger.info(
            f"Exam {exam_id} submitted: {summary.correct_answers}/{summary.total_questions} "
            f"({summary.percentage:.2f}%)"
        )
        return summary

    def get_exam_results(self, db: Session, *, exam_id: str, user_id: Optional[int] = None) -> ExamSummary:
        exam_session = self._require_owned(
            crud_exam_session.get_with_results(db, id=exam_id), user_id, RESULTS_NOT_FOUND
        )
        record = crud_exam_session.to_record(exam_session)
        if not isinstance(record.state, ClosedExamState):
            raise NotFoundError(RESULTS_NOT_FOUND)
        return record.state.summary

    def evict_abandoned_sessions(self, db: Session, now: Optional[datetime] = None) -> int:
        ttl_hours = settings.EXAM_SESSION_TTL_HOURS
        if ttl_hours <= 0:
            return 0

        cutoff = (now or utcnow()) - timedelta(hours=ttl_hours)
        evicted = crud_exam_session.delete_open_started_before(db, cutoff=cutoff)
        if evicted:
            logger.info(f"Evicted {evicted} abandoned exam session(s) started before {cutoff.isoformat()}")
        return evicted


exam_session_service = ExamSessionService()
