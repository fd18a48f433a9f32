import logging
import os
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from exam_portal.core.config import settings
from exam_portal.core.database import SessionLocal
from exam_portal.services.exam_session import exam_session_service

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def evict_abandoned_exam_sessions():
    db = SessionLocal()
    try:
        evicted = exam_session_service.evict_abandoned_sessions(db)
        logger.debug(f"Abandoned exam session sweep finished: {evicted} evicted")
    except Exception as e:
        logger.error(f"Error evicting abandoned exam sessions: {e}")
    finally:
        db.close()


def start_scheduler():
    if os.getenv("TESTING") == "true":
        logger.info("Scheduler disabled in test environment")
        return

    if settings.EXAM_SESSION_TTL_HOURS <= 0:
        logger.info("Exam session eviction disabled")
        return

    if not scheduler.running:
        scheduler.add_job(
            evict_abandoned_exam_sessions,
            'interval',
            minutes=settings.EXAM_SESSION_SWEEP_MINUTES,
            id='evict_abandoned_exam_sessions',
            name='Evict Abandoned Exam Sessions',
            replace_existing=True
        )
        scheduler.start()
        logger.info(
            f"Scheduler started: abandoned exam sessions swept every "
            f"{settings.EXAM_SESSION_SWEEP_MINUTES} minutes"
        )


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
