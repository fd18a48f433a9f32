import random
import threading
from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.constants import ExamSessionStatusEnum, OptionKeyEnum
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
from exam_portal.models.user import User
from exam_portal.schemas.exam_session import ClosedExamState, OpenExamState, SubmittedAnswer
from exam_portal.services.exam_session import exam_session_service
from exam_portal.services.scoring import collect_answers, score_exam
from exam_portal.utils.timeutils import utcnow


def _correct_answers(db: Session, exam_id: str):
    exam = crud_exam_session.get(db, id=exam_id)
    questions = {q.id: q for q in crud_question.get_by_ids(db, ids=exam.question_ids)}
    return [SubmittedAnswer(question_id=qid, answer=questions[qid].correct) for qid in exam.question_ids]


class TestStartExam:
    def test_start_creates_open_session_with_distinct_questions(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(30)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)

        exam = crud_exam_session.get(db_session, id=exam_id)
        assert exam.status == ExamSessionStatusEnum.OPEN
        assert exam.user_id == student_user.id
        assert len(exam.question_ids) == 20
        assert len(set(exam.question_ids)) == 20
        pool_ids = {q.id for q in crud_question.get_by_quiz(db_session, quiz_id=quiz.id)}
        assert set(exam.question_ids) <= pool_ids

    def test_start_uses_the_whole_pool_when_sizes_match(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(
            db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=25, rng=random.Random(3)
        )
        exam = crud_exam_session.get(db_session, id=exam_id)
        pool_ids = sorted(q.id for q in crud_question.get_by_quiz(db_session, quiz_id=quiz.id))
        assert sorted(exam.question_ids) == pool_ids

    def test_insufficient_pool_reports_both_numbers(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(10)
        with pytest.raises(InsufficientPoolError) as exc_info:
            exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)

        assert exc_info.value.available == 10
        assert exc_info.value.requested == 20
        assert "10" in exc_info.value.detail and "20" in exc_info.value.detail
        assert db_session.query(ExamSession).count() == 0

    def test_unknown_quiz_is_not_found(self, db_session: Session, student_user: User):
        with pytest.raises(NotFoundError):
            exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=999, question_count=20)

    def test_question_count_outside_allowed_buckets_is_rejected(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(30)
        with pytest.raises(ValidationFailedError) as exc_info:
            exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=7)
        assert exc_info.value.details["allowed"] == [20, 25, 50]

    def test_sessions_are_independent(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        first = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        second = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        assert first != second

        exam_session_service.submit_exam(db_session, exam_id=first, answers=[])
        assert exam_session_service.get_exam_view(db_session, exam_id=second).exam_id == second


class TestExamView:
    def test_view_hides_answer_keys(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)

        view = exam_session_service.get_exam_view(db_session, exam_id=exam_id, user_id=student_user.id)
        assert view.quiz_name == quiz.name
        assert len(view.questions) == 20
        for question in view.questions:
            dumped = question.model_dump()
            assert "correct" not in dumped
            assert set(dumped) == {"id", "text", "option1", "option2", "option3", "option4"}

    def test_view_preserves_session_order(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        exam = crud_exam_session.get(db_session, id=exam_id)

        view = exam_session_service.get_exam_view(db_session, exam_id=exam_id)
        assert [q.id for q in view.questions] == exam.question_ids

    def test_unknown_exam_is_not_found(self, db_session: Session):
        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_view(db_session, exam_id="missing")

    def test_other_users_exam_is_not_found(self, db_session: Session, student_user: User, other_student: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_view(db_session, exam_id=exam_id, user_id=other_student.id)

    def test_view_after_quiz_deleted_is_not_found(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        crud_quiz.delete(db_session, id=quiz.id)
        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_view(db_session, exam_id=exam_id)


class TestSubmitExam:
    def test_submit_scores_and_closes(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)

        summary = exam_session_service.submit_exam(
            db_session, exam_id=exam_id, answers=_correct_answers(db_session, exam_id), user_id=student_user.id
        )
        assert summary.total_questions == 20
        assert summary.correct_answers == 20
        assert summary.percentage == 100

        db_session.expire_all()
        exam = crud_exam_session.get(db_session, id=exam_id)
        assert exam.status == ExamSessionStatusEnum.CLOSED
        assert exam.submitted_at is not None
        assert len(exam.answers) == 20

    def test_two_of_three_correct(self, db_session: Session, student_user: User, quiz_factory, monkeypatch):
        monkeypatch.setattr(settings, "EXAM_QUESTION_COUNTS", [3])
        quiz = quiz_factory(3)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=3)
        answers = _correct_answers(db_session, exam_id)
        wrong = next(k for k in OptionKeyEnum if k != answers[2].answer)
        answers[2] = SubmittedAnswer(question_id=answers[2].question_id, answer=wrong)

        summary = exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=answers)
        assert summary.correct_answers == 2
        assert round(summary.percentage, 2) == 66.67
        assert [r.is_correct for r in summary.results] == [True, True, False]

    def test_null_answer_counts_as_incorrect(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        answers = _correct_answers(db_session, exam_id)
        answers[0] = SubmittedAnswer(question_id=answers[0].question_id, answer=None)

        summary = exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=answers)
        assert summary.correct_answers == 19
        assert summary.results[0].user_answer is None
        assert summary.results[0].is_correct is False

    def test_second_submit_is_rejected_and_result_unchanged(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        first = exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[])

        with pytest.raises(AlreadySubmittedError):
            exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=_correct_answers(db_session, exam_id))

        assert exam_session_service.get_exam_results(db_session, exam_id=exam_id) == first

    def test_view_after_submit_is_not_found(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[])
        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_view(db_session, exam_id=exam_id)

    def test_duplicate_question_ids_are_rejected(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        question_id = crud_exam_session.get(db_session, id=exam_id).question_ids[0]
        answers = [
            SubmittedAnswer(question_id=question_id, answer=OptionKeyEnum.OPTION1),
            SubmittedAnswer(question_id=question_id, answer=OptionKeyEnum.OPTION2),
        ]
        with pytest.raises(ValidationFailedError):
            exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=answers)

        db_session.expire_all()
        assert crud_exam_session.get(db_session, id=exam_id).status == ExamSessionStatusEnum.OPEN

    def test_duplicate_payload_on_closed_exam_is_already_submitted(
        self, db_session: Session, student_user: User, quiz_factory
    ):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        question_id = crud_exam_session.get(db_session, id=exam_id).question_ids[0]
        exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[])

        duplicated = [SubmittedAnswer(question_id=question_id, answer=OptionKeyEnum.OPTION1)] * 2
        with pytest.raises(AlreadySubmittedError):
            exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=duplicated)

    def test_duplicate_payload_on_missing_exam_is_not_found(self, db_session: Session):
        duplicated = [SubmittedAnswer(question_id=1, answer=OptionKeyEnum.OPTION1)] * 2
        with pytest.raises(NotFoundError):
            exam_session_service.submit_exam(db_session, exam_id="missing", answers=duplicated)

    def test_submit_after_quiz_deleted_is_not_found(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        crud_quiz.delete(db_session, id=quiz.id)

        with pytest.raises(NotFoundError):
            exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[])

        db_session.expire_all()
        assert crud_exam_session.get(db_session, id=exam_id).status == ExamSessionStatusEnum.OPEN

    def test_unknown_question_ids_are_skipped(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        answers = _correct_answers(db_session, exam_id) + [SubmittedAnswer(question_id=10_000, answer=OptionKeyEnum.OPTION1)]

        summary = exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=answers)
        assert summary.correct_answers == 20
        assert 10_000 not in {r.question_id for r in summary.results}

    def test_submit_unknown_exam_is_not_found(self, db_session: Session):
        with pytest.raises(NotFoundError):
            exam_session_service.submit_exam(db_session, exam_id="missing", answers=[])

    def test_submit_other_users_exam_is_not_found(self, db_session: Session, student_user: User, other_student: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        with pytest.raises(NotFoundError):
            exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[], user_id=other_student.id)

    def test_results_survive_question_edits(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        summary = exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=_correct_answers(db_session, exam_id))

        first_id = summary.results[0].question_id
        question = crud_question.get(db_session, id=first_id)
        crud_question.update(db_session, db_obj=question, obj_in={"text": "Rewritten?"})

        results = exam_session_service.get_exam_results(db_session, exam_id=exam_id)
        assert results.results[0].question_text == summary.results[0].question_text

    def test_concurrent_submissions_close_exactly_once(self, session_factory, student_user: User, quiz_factory, db_session: Session):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        answers = _correct_answers(db_session, exam_id)

        barrier = threading.Barrier(2)
        outcomes = []

        def submit():
            db = session_factory()
            try:
                barrier.wait()
                outcomes.append(exam_session_service.submit_exam(db, exam_id=exam_id, answers=answers))
            except AlreadySubmittedError as exc:
                outcomes.append(exc)
            finally:
                db.close()

        threads = [threading.Thread(target=submit) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        summaries = [o for o in outcomes if not isinstance(o, AlreadySubmittedError)]
        rejections = [o for o in outcomes if isinstance(o, AlreadySubmittedError)]
        assert len(summaries) == 1
        assert len(rejections) == 1
        db_session.expire_all()
        assert exam_session_service.get_exam_results(db_session, exam_id=exam_id) == summaries[0]

    def test_conditional_close_only_succeeds_once(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        exam = crud_exam_session.get(db_session, id=exam_id)
        questions = {q.id: q for q in crud_question.get_by_ids(db_session, ids=exam.question_ids)}

        question_ids = list(exam.question_ids)
        summary = score_exam(question_ids, [], questions)
        answers = collect_answers(question_ids, [])

        assert crud_exam_session.close(db_session, id=exam_id, answers=answers, summary=summary, submitted_at=utcnow())
        assert not crud_exam_session.close(db_session, id=exam_id, answers=answers, summary=summary, submitted_at=utcnow())


class TestExamResults:
    def test_results_before_submit_are_not_found(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_results(db_session, exam_id=exam_id)

    def test_results_are_stable(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        summary = exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=_correct_answers(db_session, exam_id)[:10])

        first = exam_session_service.get_exam_results(db_session, exam_id=exam_id, user_id=student_user.id)
        second = exam_session_service.get_exam_results(db_session, exam_id=exam_id, user_id=student_user.id)
        assert first == second == summary
        assert first.correct_answers == 10
        assert first.percentage == 50

    def test_other_users_results_are_not_found(self, db_session: Session, student_user: User, other_student: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[])
        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_results(db_session, exam_id=exam_id, user_id=other_student.id)

    def test_record_exposes_summary_only_when_closed(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)

        record = crud_exam_session.to_record(crud_exam_session.get_with_results(db_session, id=exam_id))
        assert isinstance(record.state, OpenExamState)
        assert not record.is_submitted

        exam_session_service.submit_exam(db_session, exam_id=exam_id, answers=[])
        db_session.expire_all()
        record = crud_exam_session.to_record(crud_exam_session.get_with_results(db_session, id=exam_id))
        assert isinstance(record.state, ClosedExamState)
        assert record.is_submitted
        assert record.state.summary.total_questions == 20


class TestEviction:
    def test_abandoned_open_sessions_are_evicted(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        stale = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        finished = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        exam_session_service.submit_exam(db_session, exam_id=finished, answers=[])

        later = utcnow() + timedelta(hours=settings.EXAM_SESSION_TTL_HOURS + 1)
        assert exam_session_service.evict_abandoned_sessions(db_session, now=later) == 1

        with pytest.raises(NotFoundError):
            exam_session_service.get_exam_view(db_session, exam_id=stale)
        with pytest.raises(NotFoundError):
            exam_session_service.submit_exam(db_session, exam_id=stale, answers=[])
        assert exam_session_service.get_exam_results(db_session, exam_id=finished).total_questions == 20

    def test_recent_sessions_are_kept(self, db_session: Session, student_user: User, quiz_factory):
        quiz = quiz_factory(25)
        exam_id = exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        assert exam_session_service.evict_abandoned_sessions(db_session) == 0
        assert exam_session_service.get_exam_view(db_session, exam_id=exam_id).exam_id == exam_id

    def test_eviction_can_be_disabled(self, db_session: Session, student_user: User, quiz_factory, monkeypatch):
        monkeypatch.setattr(settings, "EXAM_SESSION_TTL_HOURS", 0)
        quiz = quiz_factory(25)
        exam_session_service.start_exam(db_session, user_id=student_user.id, quiz_id=quiz.id, question_count=20)
        assert exam_session_service.evict_abandoned_sessions(db_session, now=utcnow() + timedelta(days=365)) == 0
