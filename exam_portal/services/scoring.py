"""Scoring of a submitted exam against the stored answer keys."""
from typing import Dict, Mapping, Optional, Sequence

from exam_portal.core.constants import OptionKeyEnum
from exam_portal.models.question import Question
from exam_portal.schemas.exam_session import ExamResult, ExamSummary, SubmittedAnswer


def collect_answers(
    question_ids: Sequence[int], submitted: Sequence[SubmittedAnswer]
) -> Dict[int, Optional[OptionKeyEnum]]:
    """Map every question of the session to the submitted option; omitted questions map to None."""
    by_question = {answer.question_id: answer.answer for answer in submitted}
    return {question_id: by_question.get(question_id) for question_id in question_ids}


def score_exam(
    question_ids: Sequence[int],
    submitted: Sequence[SubmittedAnswer],
    questions: Mapping[int, Question],
) -> ExamSummary:
    """
    Score a submission. Results follow ``question_ids`` order, not submission order.

    Answers for ids outside the session are ignored, as are session questions
    that no longer exist in the store. The percentage is always taken over the
    full length of ``question_ids``.
    """
    if not question_ids:
        raise ValueError("An exam must contain at least one question")

    answers = collect_answers(question_ids, submitted)
    results = []
    for question_id in question_ids:
        question = questions.get(question_id)
        if question is None:
            continue

        answer = answers[question_id]
        results.append(ExamResult(
            question_id=question_id,
            question_text=question.text,
            user_answer=question.option_text(answer) if answer is not None else None,
            correct_answer=question.option_text(question.correct),
            is_correct=answer is not None and OptionKeyEnum(answer) == OptionKeyEnum(question.correct),
        ))

    correct_answers = sum(1 for result in results if result.is_correct)
    total_questions = len(question_ids)
    return ExamSummary(
        total_questions=total_questions,
        correct_answers=correct_answers,
        percentage=correct_answers / total_questions * 100,
        results=results,
    )
