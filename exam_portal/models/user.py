from sqlalchemy import Column, String, Integer, DateTime, Enum
from sqlalchemy.sql import func
from exam_portal.core.database import Base
from exam_portal.core.constants import RoleEnum

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(RoleEnum), nullable=False, default=RoleEnum.STUDENT)
    expiration = Column(DateTime(timezone=True), nullable=True)  # None means unrestricted access

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
