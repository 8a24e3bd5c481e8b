import logging
import os
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from app.core.config import settings
from app.services.notification_worker import notification_worker

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

REMINDER_JOB_ID = "due_schedule_reminders"


def process_due_schedules():
    try:
        notification_worker.process_due_schedules()
    except Exception as e:
        logger.error(f"[Worker] processDueSchedules error: {e}", exc_info=True)


def start_scheduler():
    if os.getenv("TESTING") == "true":
        logger.info("Scheduler disabled in test environment")
        return

    if not settings.NOTIFICATION_WORKER_ENABLED:
        logger.info("Notification worker disabled by configuration")
        return

    if not scheduler.running:
        scheduler.add_job(
            process_due_schedules,
            'interval',
            seconds=settings.NOTIFICATION_WORKER_INTERVAL_SECONDS,
            id=REMINDER_JOB_ID,
            name='Create reminders for due scheduled activities',
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        scheduler.start()
        logger.info(
            f"Notification worker started. Interval: {settings.NOTIFICATION_WORKER_INTERVAL_SECONDS}s"
        )


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
