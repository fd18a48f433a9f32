import logging

from exam_portal.core.database import Base, SessionLocal, engine
from exam_portal.models import exam_session, question, quiz, subject, user  # noqa: F401
from exam_portal.services.auth import auth_service

logger = logging.getLogger(__name__)


def init_db():
    """Create the schema and seed the default administrator."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        auth_service.ensure_first_admin(db)
    finally:
        db.close()
    logger.info("Database initialised")
