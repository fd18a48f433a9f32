import logging
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session

from exam_portal.core.constants import RoleEnum
from exam_portal.core.exceptions import AccessExpiredError, ValidationFailedError
from exam_portal.crud.user import user as crud_user
from exam_portal.models.user import User
from exam_portal.utils.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)


class AccessService:
    """Time-limited student access. Evaluated on every call, never cached."""

    def is_active(self, user: User, now: Optional[datetime] = None) -> bool:
        expiration = as_utc(user.expiration)
        if expiration is None:
            return True
        return expiration > (now or utcnow())

    def require_active(self, user: User, now: Optional[datetime] = None):
        if user.role == RoleEnum.ADMIN:
            return
        if not self.is_active(user, now=now):
            raise AccessExpiredError()

    def extend(self, db: Session, user: User, hours: int, now: Optional[datetime] = None) -> User:
        # Extending an expired account restarts the clock from now.
        if isinstance(hours, bool) or not isinstance(hours, int) or hours < 1:
            raise ValidationFailedError("Hours must be a positive integer.")

        now = now or utcnow()
        current = as_utc(user.expiration)
        base_time = current if current is not None and current > now else now
        new_expiration = base_time + timedelta(hours=hours)

        updated_user = crud_user.update(db, db_obj=user, obj_in={"expiration": new_expiration})
        logger.info(f"Access for user {user.id} extended by {hours}h until {new_expiration.isoformat()}")
        return updated_user


access_service = AccessService()
