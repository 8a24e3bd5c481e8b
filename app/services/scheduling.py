import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional, Union

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import ACTIVITY_TYPES, FALSE_LITERALS, MAX_STORE_ID, TRUE_LITERALS, NotificationTypeEnum
from app.core.exceptions import InternalError, NotFoundError, ValidationError
from app.crud.notification import notification as crud_notification
from app.crud.schedule import schedule as crud_schedule
from app.models.notification import Notification
from app.models.schedule import UserSchedule
from app.schemas.schedule import ActivityTypeStats, ScheduleCreate, ScheduleStats
from app.utils.timestamps import combine_send_time, format_store_time, local_now, parse_store_timestamp

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("scheduled_date", "scheduled_time", "activity_type")


def build_reminder_message(activity_type: str, activity_details: Optional[str], scheduled_time: Union[time, str]) -> str:
    details = f" ({activity_details})" if activity_details else ""
    return f"Reminder: {activity_type}{details} at {format_store_time(scheduled_time)}"


def coerce_completion_flag(value: Any) -> bool:
    """Parse a loosely typed completion flag; anything outside the accepted literals is rejected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return value == 1
    elif isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_LITERALS:
            return True
        if normalized in FALSE_LITERALS:
            return False
    raise ValidationError(
        "Invalid is_completed value. Use true/false, yes/no or 1/0.",
        field="is_completed",
    )


def parse_notification_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValidationError("Invalid notification id. It must be a number.", field="notification_id")
    if isinstance(raw, float) and math.isfinite(raw) and raw.is_integer():
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    raise ValidationError("Invalid notification id. It must be a number.", field="notification_id")


class SchedulingService:
    def __init__(self, clock=local_now):
        self.clock = clock

    def schedule_activity(self, db: Session, *, user_id: int, schedule_in: ScheduleCreate) -> UserSchedule:
        for field in REQUIRED_FIELDS:
            if not getattr(schedule_in, field):
                raise ValidationError(f"Missing required field: {field}", field=field)

        activity_type = str(schedule_in.activity_type).strip()
        if activity_type not in ACTIVITY_TYPES:
            raise ValidationError(
                f"Invalid activity_type. Allowed: {', '.join(ACTIVITY_TYPES)}",
                field="activity_type",
            )
        schedule_in = schedule_in.model_copy(update={"activity_type": activity_type})

        schedule = crud_schedule.create_for_user(db, user_id=user_id, obj_in=schedule_in)
        logger.info(f"Scheduled {activity_type} #{schedule.schedule_id} for user {user_id}")

        if schedule_in.notify is True:
            message = build_reminder_message(activity_type, schedule_in.activity_details, schedule_in.scheduled_time)
            crud_notification.insert(
                db,
                user_id=user_id,
                message=message,
                send_time=combine_send_time(schedule_in.scheduled_date, schedule_in.scheduled_time),
                type=NotificationTypeEnum.REMINDER.value,
            )
        return schedule

    def mark_completed(self, db: Session, *, user_id: int, schedule_id: int, is_completed: Any) -> UserSchedule:
        flag = coerce_completion_flag(is_completed)
        affected = crud_schedule.mark_completed(db, user_id=user_id, schedule_id=schedule_id, is_completed=flag)
        if not affected:
            raise NotFoundError("Schedule not found for this user.", resource_type="schedule", resource_id=schedule_id)
        return crud_schedule.get_for_user(db, user_id=user_id, schedule_id=schedule_id)

    def toggle_completed(self, db: Session, *, user_id: int, schedule_id: int) -> UserSchedule:
        current = crud_schedule.get_for_user(db, user_id=user_id, schedule_id=schedule_id)
        if not current:
            raise NotFoundError("Schedule not found for this user.", resource_type="schedule", resource_id=schedule_id)
        affected = crud_schedule.mark_completed(
            db, user_id=user_id, schedule_id=schedule_id, is_completed=not current.is_completed
        )
        if not affected:
            # Row vanished between the read and the write
            raise InternalError("Failed to update schedule.", details={"schedule_id": schedule_id})
        return crud_schedule.get_for_user(db, user_id=user_id, schedule_id=schedule_id)

    def list_schedules_for_date(self, db: Session, *, user_id: int, scheduled_date: date) -> List[UserSchedule]:
        return crud_schedule.get_for_date(db, user_id=user_id, scheduled_date=scheduled_date)

    def get_schedule_by_id(self, db: Session, *, user_id: int, schedule_id: int) -> Optional[UserSchedule]:
        return crud_schedule.get_for_user(db, user_id=user_id, schedule_id=schedule_id)

    def list_schedules(self, db: Session, *, user_id: int) -> List[UserSchedule]:
        return crud_schedule.get_all_for_user(db, user_id=user_id)

    def list_upcoming(self, db: Session, *, user_id: int, now: Optional[datetime] = None) -> List[UserSchedule]:
        start = now or self.clock()
        end = start + timedelta(minutes=settings.UPCOMING_WINDOW_MINUTES)
        return crud_schedule.get_upcoming(db, user_id=user_id, start=start, end=end)

    def get_stats(self, db: Session, *, user_id: int, today: Optional[date] = None) -> ScheduleStats:
        today = today or self.clock().date()
        week_start = today - timedelta(days=today.weekday())
        week_end = week_start + timedelta(days=6)
        weekly = crud_schedule.get_weekly_stats(db, user_id=user_id, week_start=week_start, week_end=week_end)
        streak_days = crud_schedule.count_completed_days(
            db, user_id=user_id, since=today - timedelta(days=settings.STREAK_LOOKBACK_DAYS)
        )
        return ScheduleStats(
            week_start=week_start,
            week_end=week_end,
            weekly_stats=[ActivityTypeStats(**row) for row in weekly],
            streak_days=streak_days,
        )

    def delete_schedule(self, db: Session, *, user_id: int, schedule_id: int) -> None:
        affected = crud_schedule.delete_for_user(db, user_id=user_id, schedule_id=schedule_id)
        if not affected:
            raise NotFoundError("Activity not found or not authorized.", resource_type="schedule", resource_id=schedule_id)
        logger.info(f"Deleted schedule #{schedule_id} for user {user_id}")

    def list_due_notifications(
        self, db: Session, *, now: Optional[Union[str, datetime]] = None, user_id: Optional[int] = None
    ) -> List[Notification]:
        now_ts = parse_store_timestamp(now) or self.clock()
        return crud_notification.get_due(db, now=now_ts, user_id=user_id)

    def mark_notification_read(self, db: Session, *, notification_id: Any, user_id: Optional[int] = None) -> int:
        parsed_id = parse_notification_id(notification_id)
        if not 1 <= parsed_id <= MAX_STORE_ID:
            # No stored row can carry an id outside the INTEGER key range
            raise NotFoundError("Notification not found.", resource_type="notification", resource_id=parsed_id)
        if user_id is not None:
            existing = crud_notification.get(db, id=parsed_id)
            if not existing or existing.user_id != user_id:
                raise NotFoundError("Notification not found.", resource_type="notification", resource_id=parsed_id)
        affected = crud_notification.mark_as_read(db, notification_id=parsed_id)
        if not affected:
            raise NotFoundError("Notification not found.", resource_type="notification", resource_id=parsed_id)
        return parsed_id

scheduling_service = SchedulingService()
