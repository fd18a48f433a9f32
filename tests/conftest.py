import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["TESTING"] = "true"

from datetime import timedelta
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

import main
from exam_portal.core.constants import OptionKeyEnum, RoleEnum
from exam_portal.core.database import Base, get_db
from exam_portal.core.security import create_access_token, get_password_hash
from exam_portal.crud.question import question as crud_question
from exam_portal.crud.quiz import quiz as crud_quiz
from exam_portal.crud.subject import subject as crud_subject
from exam_portal.crud.user import user as crud_user
from exam_portal.models import exam_session, question, quiz, subject, user  # noqa: F401
from exam_portal.models.quiz import Quiz
from exam_portal.models.user import User
from exam_portal.utils.timeutils import utcnow

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def database_engine(tmp_path):
    # A file database gives every session its own connection, which the
    # concurrent submission tests rely on.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(database_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=database_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture(scope="function")
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    main.app.dependency_overrides[get_db] = override_get_db
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


def _create_user(db: Session, username: str, role: RoleEnum, expiration=None) -> User:
    return crud_user.create(db, obj_in={
        "username": username,
        "hashed_password": get_password_hash(TEST_PASSWORD),
        "role": role,
        "expiration": expiration,
    })


def _token_for(user: User) -> str:
    return create_access_token(data={"user_id": user.id, "role": user.role.value})


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return _create_user(db_session, "admin-test", RoleEnum.ADMIN)


@pytest.fixture
def student_user(db_session: Session) -> User:
    return _create_user(db_session, "student-test", RoleEnum.STUDENT, expiration=utcnow() + timedelta(hours=24))


@pytest.fixture
def other_student(db_session: Session) -> User:
    return _create_user(db_session, "student-other", RoleEnum.STUDENT, expiration=utcnow() + timedelta(hours=24))


@pytest.fixture
def expired_student(db_session: Session) -> User:
    return _create_user(db_session, "student-expired", RoleEnum.STUDENT, expiration=utcnow() - timedelta(hours=1))


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return _token_for(admin_user)


@pytest.fixture
def student_token(student_user: User) -> str:
    return _token_for(student_user)


@pytest.fixture
def other_student_token(other_student: User) -> str:
    return _token_for(other_student)


@pytest.fixture
def expired_student_token(expired_student: User) -> str:
    return _token_for(expired_student)


@pytest.fixture
def auth_headers() -> Callable[[str], dict]:
    def _headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def quiz_factory(db_session: Session) -> Callable[..., Quiz]:
    """Creates a subject and quiz with ``question_count`` questions; answer key cycles option1..option4."""
    keys = list(OptionKeyEnum)

    def _create(question_count: int = 25, name: str = "Algebra Basics", subject_name: str = "Mathematics") -> Quiz:
        subject_obj = crud_subject.create(db_session, obj_in={"name": subject_name})
        quiz_obj = crud_quiz.create(db_session, obj_in={"subject_id": subject_obj.id, "name": name, "description": ""})
        for i in range(question_count):
            crud_question.create(db_session, obj_in={
                "quiz_id": quiz_obj.id,
                "text": f"Question {i + 1}?",
                "option1": f"A{i + 1}",
                "option2": f"B{i + 1}",
                "option3": f"C{i + 1}",
                "option4": f"D{i + 1}",
                "correct": keys[i % len(keys)],
            })
        return quiz_obj

    return _create
