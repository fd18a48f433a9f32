from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from exam_portal.core.constants import RoleEnum
from exam_portal.crud.base import CRUDBase
from exam_portal.models.user import User
from exam_portal.schemas.user import UserCreate, UserUpdate

class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_username(self, db: Session, *, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def get_student(self, db: Session, *, id: int) -> Optional[User]:
        return db.query(User).filter(User.id == id, User.role == RoleEnum.STUDENT).first()

    def get_students(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[User]:
        return (
            db.query(User)
            .filter(User.role == RoleEnum.STUDENT)
            .order_by(User.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_students(self, db: Session) -> int:
        return db.query(func.count(User.id)).filter(User.role == RoleEnum.STUDENT).scalar() or 0


user = CRUDUser(User)
