from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

from exam_portal.core.constants import RoleEnum
from exam_portal.utils.timeutils import as_utc

def _not_blank(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value

class UserBase(BaseModel):
    username: str

class UserCreate(UserBase):
    """Internal schema; the password is hashed before it reaches the store."""
    hashed_password: str
    role: RoleEnum = RoleEnum.STUDENT
    expiration: Optional[datetime] = None

class UserUpdate(BaseModel):
    hashed_password: Optional[str] = None
    expiration: Optional[datetime] = None

class StudentCreate(UserBase):
    password: str
    access_hours: int

    @field_validator("username")
    def validate_username(cls, v):
        return _not_blank(v, "Username").strip()

    @field_validator("password")
    def validate_password(cls, v):
        return _not_blank(v, "Password")

class ExtendAccessRequest(BaseModel):
    hours: int

class User(UserBase):
    """Public view of a user; never carries the password hash."""
    id: int
    role: RoleEnum
    expiration: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("expiration", "created_at")
    def stored_as_utc(cls, v):
        return as_utc(v)
