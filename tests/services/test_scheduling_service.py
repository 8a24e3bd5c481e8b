from datetime import date, datetime, time

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import InternalError, NotFoundError, ValidationError
from app.crud.schedule import schedule as crud_schedule
from app.models.notification import Notification
from app.schemas.schedule import ScheduleCreate
from app.services.scheduling import (
    build_reminder_message,
    coerce_completion_flag,
    parse_notification_id,
    scheduling_service,
)


def _schedule_in(**overrides):
    data = {
        "scheduled_date": "2024-06-01",
        "scheduled_time": "07:00:00",
        "activity_type": "Exercise",
        "activity_details": "Morning Run",
    }
    data.update(overrides)
    return ScheduleCreate(**data)


@pytest.mark.parametrize("activity_type", ["Exercise", "Meal", "Meditation", "Sleep"])
def test_schedule_activity_accepts_every_activity_type(db_session: Session, user_id, activity_type):
    schedule = scheduling_service.schedule_activity(
        db_session, user_id=user_id, schedule_in=_schedule_in(activity_type=activity_type)
    )
    assert schedule.activity_type == activity_type
    assert schedule.is_completed is False


@pytest.mark.parametrize("activity_type", ["Running", "exercise", "SLEEP", "Meal!", "   "])
def test_schedule_activity_rejects_other_activity_types(db_session: Session, user_id, activity_type):
    with pytest.raises(ValidationError) as exc_info:
        scheduling_service.schedule_activity(
            db_session, user_id=user_id, schedule_in=_schedule_in(activity_type=activity_type)
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.details["field"] == "activity_type"


def test_schedule_activity_trims_activity_type(db_session: Session, user_id):
    schedule = scheduling_service.schedule_activity(
        db_session, user_id=user_id, schedule_in=_schedule_in(activity_type="  Meditation ")
    )
    assert schedule.activity_type == "Meditation"


@pytest.mark.parametrize("missing", ["scheduled_date", "scheduled_time", "activity_type"])
def test_schedule_activity_requires_fields(db_session: Session, user_id, missing):
    with pytest.raises(ValidationError) as exc_info:
        scheduling_service.schedule_activity(
            db_session, user_id=user_id, schedule_in=_schedule_in(**{missing: None})
        )
    assert exc_info.value.message == f"Missing required field: {missing}"
    assert db_session.query(Notification).count() == 0


def test_schedule_activity_without_notify_creates_no_notification(db_session: Session, user_id):
    scheduling_service.schedule_activity(db_session, user_id=user_id, schedule_in=_schedule_in())
    assert db_session.query(Notification).count() == 0


def test_schedule_activity_with_notify_creates_reminder(db_session: Session, user_id):
    scheduling_service.schedule_activity(db_session, user_id=user_id, schedule_in=_schedule_in(notify=True))

    reminders = db_session.query(Notification).all()
    assert len(reminders) == 1
    assert reminders[0].user_id == user_id
    assert reminders[0].type == "Reminder"
    assert reminders[0].send_time == datetime(2024, 6, 1, 7, 0, 0)
    assert reminders[0].message == "Reminder: Exercise (Morning Run) at 07:00:00"


def test_reminder_message_template():
    assert build_reminder_message("Exercise", "Morning Run", time(7, 0)) == "Reminder: Exercise (Morning Run) at 07:00:00"
    assert build_reminder_message("Sleep", None, time(22, 30)) == "Reminder: Sleep at 22:30:00"
    assert build_reminder_message("Meal", "", "12:00:00") == "Reminder: Meal at 12:00:00"


@pytest.mark.parametrize(
    "raw,expected",
    [
        (True, True), (False, False), (1, True), (0, False),
        ("true", True), ("TRUE", True), (" yes ", True), ("1", True), ("y", True),
        ("false", False), ("No", False), ("0", False), ("n", False),
    ],
)
def test_coerce_completion_flag_accepts_known_literals(raw, expected):
    assert coerce_completion_flag(raw) is expected


@pytest.mark.parametrize("raw", [None, 2, -1, "maybe", "", "on", [], {}])
def test_coerce_completion_flag_rejects_everything_else(raw):
    with pytest.raises(ValidationError):
        coerce_completion_flag(raw)


def test_mark_completed_is_idempotent(db_session: Session, schedule_factory, user_id):
    row = schedule_factory()

    first = scheduling_service.mark_completed(db_session, user_id=user_id, schedule_id=row.schedule_id, is_completed=True)
    second = scheduling_service.mark_completed(db_session, user_id=user_id, schedule_id=row.schedule_id, is_completed="yes")

    assert first.is_completed is True
    assert second.is_completed is True


def test_mark_completed_wrong_owner_is_not_found(db_session: Session, schedule_factory, other_user_id):
    row = schedule_factory()
    with pytest.raises(NotFoundError) as exc_info:
        scheduling_service.mark_completed(db_session, user_id=other_user_id, schedule_id=row.schedule_id, is_completed=True)
    assert exc_info.value.status_code == 404


def test_mark_completed_unknown_id_is_not_found(db_session: Session, user_id):
    with pytest.raises(NotFoundError):
        scheduling_service.mark_completed(db_session, user_id=user_id, schedule_id=424242, is_completed=True)


def test_toggle_completed_flips_back_and_forth(db_session: Session, schedule_factory, user_id):
    row = schedule_factory()

    toggled = scheduling_service.toggle_completed(db_session, user_id=user_id, schedule_id=row.schedule_id)
    assert toggled.is_completed is True

    toggled_again = scheduling_service.toggle_completed(db_session, user_id=user_id, schedule_id=row.schedule_id)
    assert toggled_again.is_completed is False


def test_toggle_completed_wrong_owner_is_not_found(db_session: Session, schedule_factory, other_user_id):
    row = schedule_factory()
    with pytest.raises(NotFoundError):
        scheduling_service.toggle_completed(db_session, user_id=other_user_id, schedule_id=row.schedule_id)


def test_toggle_completed_raises_internal_error_when_row_vanishes(db_session: Session, schedule_factory, user_id, monkeypatch):
    row = schedule_factory()
    monkeypatch.setattr(crud_schedule, "mark_completed", lambda db, **kwargs: 0)

    with pytest.raises(InternalError) as exc_info:
        scheduling_service.toggle_completed(db_session, user_id=user_id, schedule_id=row.schedule_id)
    assert exc_info.value.status_code == 500


def test_get_schedule_by_id_is_owner_scoped(db_session: Session, schedule_factory, user_id, other_user_id):
    row = schedule_factory()
    assert scheduling_service.get_schedule_by_id(db_session, user_id=user_id, schedule_id=row.schedule_id).schedule_id == row.schedule_id
    assert scheduling_service.get_schedule_by_id(db_session, user_id=other_user_id, schedule_id=row.schedule_id) is None


def test_list_schedules_for_date(db_session: Session, schedule_factory, user_id):
    schedule_factory(scheduled_time=time(12, 0), activity_type="Meal")
    schedule_factory(scheduled_time=time(7, 0))

    rows = scheduling_service.list_schedules_for_date(db_session, user_id=user_id, scheduled_date=date(2024, 6, 1))

    assert [r.activity_type for r in rows] == ["Exercise", "Meal"]


def test_list_due_notifications_parses_store_timestamp(db_session: Session, notification_factory):
    due = notification_factory(send_time=datetime(2024, 6, 1, 7, 0))
    notification_factory(send_time=datetime(2024, 6, 1, 8, 0))

    rows = scheduling_service.list_due_notifications(db_session, now="2024-06-01 07:30:00")

    assert [n.notification_id for n in rows] == [due.notification_id]


def test_list_due_notifications_rejects_bad_timestamp(db_session: Session):
    with pytest.raises(ValidationError):
        scheduling_service.list_due_notifications(db_session, now="yesterday-ish")


def test_list_due_notifications_defaults_to_clock(db_session: Session, notification_factory, monkeypatch):
    notification_factory(send_time=datetime(2024, 6, 1, 7, 0))
    monkeypatch.setattr(scheduling_service, "clock", lambda: datetime(2024, 6, 1, 6, 0))

    assert scheduling_service.list_due_notifications(db_session) == []


@pytest.mark.parametrize("raw", ["abc", "", "1.5", None, True, float("nan"), float("inf")])
def test_parse_notification_id_rejects_non_integers(raw):
    with pytest.raises(ValidationError) as exc_info:
        parse_notification_id(raw)
    assert exc_info.value.status_code == 400


def test_parse_notification_id_accepts_integer_forms():
    assert parse_notification_id("42") == 42
    assert parse_notification_id(" 7 ") == 7
    assert parse_notification_id(3) == 3


def test_mark_notification_read_rejects_non_numeric_id(db_session: Session):
    with pytest.raises(ValidationError):
        scheduling_service.mark_notification_read(db_session, notification_id="abc")


def test_mark_notification_read_flags_row(db_session: Session, notification_factory, user_id):
    row = notification_factory()
    assert scheduling_service.mark_notification_read(db_session, notification_id=str(row.notification_id)) == row.notification_id
    db_session.expire_all()
    assert db_session.get(Notification, row.notification_id).is_read is True


def test_mark_notification_read_unknown_id_is_not_found(db_session: Session):
    with pytest.raises(NotFoundError):
        scheduling_service.mark_notification_read(db_session, notification_id=987654)


def test_mark_notification_read_scoped_to_caller(db_session: Session, notification_factory, other_user_id):
    row = notification_factory()
    with pytest.raises(NotFoundError):
        scheduling_service.mark_notification_read(db_session, notification_id=row.notification_id, user_id=other_user_id)
    db_session.expire_all()
    assert db_session.get(Notification, row.notification_id).is_read is False


def test_list_upcoming_uses_configured_window(db_session: Session, schedule_factory, user_id):
    soon = schedule_factory(scheduled_time=time(7, 45))
    schedule_factory(scheduled_time=time(8, 30))

    rows = scheduling_service.list_upcoming(db_session, user_id=user_id, now=datetime(2024, 6, 1, 7, 0))

    assert [r.schedule_id for r in rows] == [soon.schedule_id]


def test_get_stats_reports_week_and_streak(db_session: Session, schedule_factory, user_id):
    # 2024-06-05 is a Wednesday; its week runs 2024-06-03 .. 2024-06-09
    schedule_factory(scheduled_date=date(2024, 6, 3), activity_type="Exercise", is_completed=True)
    schedule_factory(scheduled_date=date(2024, 6, 4), activity_type="Exercise")
    schedule_factory(scheduled_date=date(2024, 6, 9), activity_type="Sleep", is_completed=True)
    schedule_factory(scheduled_date=date(2024, 6, 1), activity_type="Meal", is_completed=True)

    stats = scheduling_service.get_stats(db_session, user_id=user_id, today=date(2024, 6, 5))

    assert stats.week_start == date(2024, 6, 3)
    assert stats.week_end == date(2024, 6, 9)
    by_type = {s.activity_type: s for s in stats.weekly_stats}
    assert set(by_type) == {"Exercise", "Sleep"}
    assert by_type["Exercise"].total_scheduled == 2
    assert by_type["Exercise"].completed == 1
    assert stats.streak_days == 3


def test_delete_schedule_wrong_owner_is_not_found(db_session: Session, schedule_factory, user_id, other_user_id):
    schedule_id = schedule_factory().schedule_id
    with pytest.raises(NotFoundError):
        scheduling_service.delete_schedule(db_session, user_id=other_user_id, schedule_id=schedule_id)
    scheduling_service.delete_schedule(db_session, user_id=user_id, schedule_id=schedule_id)
    assert scheduling_service.get_schedule_by_id(db_session, user_id=user_id, schedule_id=schedule_id) is None


@pytest.mark.parametrize("raw", ["99999999999999999999", 2**63, 0, -5])
def test_mark_notification_read_out_of_range_id_is_not_found(db_session: Session, raw):
    with pytest.raises(NotFoundError):
        scheduling_service.mark_notification_read(db_session, notification_id=raw)
