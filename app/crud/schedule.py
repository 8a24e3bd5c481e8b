from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase, store_errors
from app.models.schedule import UserSchedule
from app.schemas.schedule import ScheduleCreate


class CRUDSchedule(CRUDBase[UserSchedule, ScheduleCreate, ScheduleCreate]):
    """Owner-scoped data access for UserSchedules."""

    def create_for_user(self, db: Session, *, user_id: int, obj_in: ScheduleCreate) -> UserSchedule:
        data = obj_in.model_dump(exclude={"notify"})
        data["user_id"] = user_id
        data["is_completed"] = False
        return self.create(db, obj_in=data)

    def get_for_user(self, db: Session, *, user_id: int, schedule_id: int) -> Optional[UserSchedule]:
        with store_errors(db, "get schedule"):
            return (
                db.query(self.model)
                .filter(self.model.schedule_id == schedule_id, self.model.user_id == user_id)
                .first()
            )

    def mark_completed(self, db: Session, *, user_id: int, schedule_id: int, is_completed: bool) -> int:
        """Returns the number of matched rows; 0 means missing or owned by someone else."""
        with store_errors(db, "mark schedule completed"):
            affected = (
                db.query(self.model)
                .filter(self.model.schedule_id == schedule_id, self.model.user_id == user_id)
                .update({self.model.is_completed: is_completed}, synchronize_session=False)
            )
            db.commit()
        return affected

    def get_for_date(self, db: Session, *, user_id: int, scheduled_date: date) -> List[UserSchedule]:
        with store_errors(db, "list schedules for date"):
            return (
                db.query(self.model)
                .filter(self.model.user_id == user_id, self.model.scheduled_date == scheduled_date)
                .order_by(self.model.scheduled_time.asc())
                .all()
            )

    def get_all_for_user(self, db: Session, *, user_id: int) -> List[UserSchedule]:
        with store_errors(db, "list schedules"):
            return (
                db.query(self.model)
                .filter(self.model.user_id == user_id)
                .order_by(self.model.scheduled_date.asc(), self.model.scheduled_time.asc())
                .all()
            )

    def get_due(self, db: Session, *, now: datetime) -> List[UserSchedule]:
        """Incomplete activities of every user whose date and time are at or before `now`."""
        today, current_time = now.date(), now.time()
        with store_errors(db, "list due schedules"):
            return (
                db.query(self.model)
                .filter(
                    self.model.is_completed == False,
                    or_(
                        self.model.scheduled_date < today,
                        and_(
                            self.model.scheduled_date == today,
                            self.model.scheduled_time <= current_time,
                        ),
                    ),
                )
                .order_by(
                    self.model.scheduled_date.asc(),
                    self.model.scheduled_time.asc(),
                    self.model.schedule_id.asc(),
                )
                .all()
            )

    def get_upcoming(self, db: Session, *, user_id: int, start: datetime, end: datetime) -> List[UserSchedule]:
        """Incomplete activities for one user falling within [start, end]."""
        candidates = (
            db.query(self.model)
            .filter(
                self.model.user_id == user_id,
                self.model.is_completed == False,
                self.model.scheduled_date >= start.date(),
                self.model.scheduled_date <= end.date(),
            )
            .order_by(self.model.scheduled_date.asc(), self.model.scheduled_time.asc())
        )
        with store_errors(db, "list upcoming schedules"):
            rows = candidates.all()
        return [
            row for row in rows
            if start <= datetime.combine(row.scheduled_date, row.scheduled_time) <= end
        ]

    def get_weekly_stats(self, db: Session, *, user_id: int, week_start: date, week_end: date) -> List[dict]:
        completed = func.sum(case((self.model.is_completed == True, 1), else_=0))
        with store_errors(db, "schedule stats"):
            rows = (
                db.query(
                    self.model.activity_type,
                    func.count(self.model.schedule_id),
                    completed,
                )
                .filter(
                    self.model.user_id == user_id,
                    self.model.scheduled_date >= week_start,
                    self.model.scheduled_date <= week_end,
                )
                .group_by(self.model.activity_type)
                .order_by(self.model.activity_type.asc())
                .all()
            )
        return [
            {"activity_type": activity_type, "total_scheduled": total, "completed": int(done or 0)}
            for activity_type, total, done in rows
        ]

    def count_completed_days(self, db: Session, *, user_id: int, since: date) -> int:
        with store_errors(db, "count completed days"):
            return (
                db.query(func.count(func.distinct(self.model.scheduled_date)))
                .filter(
                    self.model.user_id == user_id,
                    self.model.is_completed == True,
                    self.model.scheduled_date >= since,
                )
                .scalar()
            ) or 0

    def delete_for_user(self, db: Session, *, user_id: int, schedule_id: int) -> int:
        with store_errors(db, "delete schedule"):
            affected = (
                db.query(self.model)
                .filter(self.model.schedule_id == schedule_id, self.model.user_id == user_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        return affected

schedule = CRUDSchedule(UserSchedule)
