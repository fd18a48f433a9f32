from pydantic import BaseModel
from typing import Optional

from exam_portal.core.constants import RoleEnum
from exam_portal.schemas.user import User

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenPayload(BaseModel):
    user_id: Optional[int] = None
    role: Optional[RoleEnum] = None
    jti: Optional[str] = None
    exp: Optional[int] = None

class LoginRequest(BaseModel):
    username: str
    password: str

class LoginResponse(BaseModel):
    token: Token
    user: User
