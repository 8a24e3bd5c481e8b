"""
Reminder materialisation for due scheduled activities.

Each tick scans every incomplete activity whose date and time have passed
and inserts one "Reminder" notification per occurrence, skipping those that
already have a matching reminder. The duplicate check and the insert are two
separate statements, so suppression is best-effort: two ticks running at the
same moment could both insert. The in-flight lock below keeps ticks inside
this process from overlapping.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core.constants import NotificationTypeEnum
from app.core.database import SessionLocal
from app.crud.notification import notification as crud_notification
from app.crud.schedule import schedule as crud_schedule
from app.models.schedule import UserSchedule
from app.services.scheduling import build_reminder_message
from app.utils.timestamps import combine_send_time, format_store_timestamp, local_now

logger = logging.getLogger(__name__)


def _snapshot(row: UserSchedule) -> dict:
    return {
        "schedule_id": row.schedule_id,
        "user_id": row.user_id,
        "scheduled_date": row.scheduled_date,
        "scheduled_time": row.scheduled_time,
        "activity_type": row.activity_type,
        "activity_details": row.activity_details,
    }


@dataclass
class TickSummary:
    now: Optional[datetime] = None
    scanned: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0
    ran: bool = True


class NotificationWorker:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Callable[[], datetime] = local_now,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self._in_flight = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._in_flight.locked()

    def process_due_schedules(self, now: Optional[datetime] = None) -> TickSummary:
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Previous reminder tick still running; skipping this one")
            return TickSummary(ran=False)
        try:
            return self._run_tick(now or self.clock())
        finally:
            self._in_flight.release()

    def _run_tick(self, now: datetime) -> TickSummary:
        summary = TickSummary(now=now)
        db = self.session_factory()
        try:
            # Commits expire ORM rows, so work from plain snapshots
            due = [_snapshot(row) for row in crud_schedule.get_due(db, now=now)]
            summary.scanned = len(due)
            for activity in due:
                try:
                    if self._remind(db, activity):
                        summary.created += 1
                    else:
                        summary.skipped += 1
                except Exception as e:
                    db.rollback()
                    summary.failed += 1
                    logger.error(f"Failed to create reminder for schedule #{activity['schedule_id']}: {e}")
        finally:
            db.close()

        if summary.scanned:
            logger.info(
                f"Reminder tick at {format_store_timestamp(now)}: "
                f"{summary.created} created, {summary.skipped} skipped, {summary.failed} failed"
            )
        return summary

    def _remind(self, db: Session, activity: dict) -> bool:
        user_id = activity["user_id"]
        send_time = combine_send_time(activity["scheduled_date"], activity["scheduled_time"])
        message = build_reminder_message(
            activity["activity_type"], activity["activity_details"], activity["scheduled_time"]
        )

        existing = crud_notification.find_existing_reminder(
            db, user_id=user_id, send_time=send_time, message=message
        )
        if existing:
            return False
        crud_notification.insert(
            db,
            user_id=user_id,
            message=message,
            send_time=send_time,
            type=NotificationTypeEnum.REMINDER.value,
        )
        return True

notification_worker = NotificationWorker()
