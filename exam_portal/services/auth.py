import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from exam_portal.core.config import settings
from exam_portal.core.constants import RoleEnum
from exam_portal.core.security import create_access_token, get_password_hash, verify_password
from exam_portal.crud.user import user as crud_user
from exam_portal.models.user import User
from exam_portal.schemas.token import LoginResponse, Token
from exam_portal.schemas.user import User as UserSchema, UserCreate
from exam_portal.services.access import access_service

logger = logging.getLogger(__name__)


class AuthService:
    def login(self, db: Session, *, username: str, password: str) -> LoginResponse:
        user = crud_user.get_by_username(db, username=username)
        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
            )

        access_service.require_active(user)

        access_token = create_access_token(data={"user_id": user.id, "role": user.role.value})
        return LoginResponse(
            token=Token(access_token=access_token, token_type="bearer"),
            user=UserSchema.model_validate(user)
        )

    def ensure_first_admin(self, db: Session) -> User:
        admin = crud_user.get_by_username(db, username=settings.FIRST_ADMIN_USERNAME)
        if admin:
            return admin

        admin = crud_user.create(db, obj_in=UserCreate(
            username=settings.FIRST_ADMIN_USERNAME,
            hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
            role=RoleEnum.ADMIN,
            expiration=None
        ))
        logger.info(f"Created default admin user '{admin.username}'")
        return admin


auth_service = AuthService()
