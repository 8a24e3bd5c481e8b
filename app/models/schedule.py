from sqlalchemy import Column, Integer, String, Boolean, Date, Time, DateTime, Text, Enum, Index
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import ACTIVITY_TYPES, ScheduleStatusEnum

class UserSchedule(Base):
    __tablename__ = "UserSchedules"

    schedule_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(Time, nullable=False)
    activity_type = Column(Enum(*ACTIVITY_TYPES, name="activity_type_enum"), nullable=False)
    activity_details = Column(Text, nullable=True)
    notes = Column(String(500), nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Backs the worker's scan for incomplete, already-due activities
    __table_args__ = (
        Index("ix_user_schedules_due", "is_completed", "scheduled_date", "scheduled_time"),
    )

    @property
    def status(self) -> str:
        if self.is_completed:
            return ScheduleStatusEnum.COMPLETED.value
        return ScheduleStatusEnum.PENDING.value
