from sqlalchemy.orm import Session

from exam_portal.crud.question import question as crud_question
from exam_portal.crud.quiz import quiz as crud_quiz
from exam_portal.crud.subject import subject as crud_subject
from exam_portal.crud.user import user as crud_user
from exam_portal.schemas.stats import Stats


def get_stats(db: Session) -> Stats:
    return Stats(
        subjects_count=crud_subject.count(db),
        quizzes_count=crud_quiz.count(db),
        questions_count=crud_question.count(db),
        students_count=crud_user.count_students(db),
    )
