from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from exam_portal.core.constants import RoleEnum
from exam_portal.core.database import get_db
from exam_portal.core.security import decode_access_token
from exam_portal.crud.user import user as user_crud
from exam_portal.models.user import User
from exam_portal.schemas.token import TokenPayload
from exam_portal.services.access import access_service

http_bearer = HTTPBearer()

__all__ = [
    "get_db",
    "get_current_user",
    "require_admin",
    "require_student",
    "require_active_student",
]

def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer)
) -> User:
    try:
        payload = decode_access_token(credentials.credentials)
        token_data = TokenPayload(**payload)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    if token_data.user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = user_crud.get(db, id=token_data.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return user

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != RoleEnum.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user

def require_student(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != RoleEnum.STUDENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student access required"
        )
    return current_user

def require_active_student(current_user: User = Depends(require_student)) -> User:
    """Students whose access window has closed may not start anything new."""
    access_service.require_active(current_user)
    return current_user
