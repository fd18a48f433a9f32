import logging
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from exam_portal.core.constants import RoleEnum
from exam_portal.core.exceptions import NotFoundError, ValidationFailedError
from exam_portal.core.security import get_password_hash
from exam_portal.crud.user import user as crud_user
from exam_portal.models.user import User
from exam_portal.schemas.user import StudentCreate, UserCreate
from exam_portal.services.access import access_service
from exam_portal.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class StudentService:

    def _get_student_or_404(self, db: Session, student_id: int) -> User:
        student = crud_user.get_student(db, id=student_id)
        if not student:
            raise NotFoundError("Student not found.")
        return student

    def get_students(self, db: Session) -> List[User]:
        return crud_user.get_students(db, limit=10000)

    def create_student(self, db: Session, student_in: StudentCreate, now: Optional[datetime] = None) -> User:
        if student_in.access_hours < 1:
            raise ValidationFailedError("Access hours must be at least 1.")

        if crud_user.get_by_username(db, username=student_in.username):
            raise ValidationFailedError("Username already exists")

        expiration = (now or utcnow()) + timedelta(hours=student_in.access_hours)
        student = crud_user.create(db, obj_in=UserCreate(
            username=student_in.username,
            hashed_password=get_password_hash(student_in.password),
            role=RoleEnum.STUDENT,
            expiration=expiration
        ))
        logger.info(f"Student {student.username} created with access until {expiration.isoformat()}")
        return student

    def extend_student_access(self, db: Session, student_id: int, hours: int, now: Optional[datetime] = None) -> User:
        student = self._get_student_or_404(db, student_id)
        return access_service.extend(db, student, hours, now=now)

    def delete_student(self, db: Session, student_id: int) -> User:
        # Exam sessions keep their user reference so results stay queryable.
        self._get_student_or_404(db, student_id)
        return crud_user.delete(db, id=student_id)


student_service = StudentService()
