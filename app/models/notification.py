from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Index
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import NotificationTypeEnum

class Notification(Base):
    __tablename__ = "Notifications"

    notification_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    message = Column(Text, nullable=False)
    send_time = Column(DateTime, nullable=False)  # naive local time, when the reminder is due
    type = Column(String(50), nullable=False, default=NotificationTypeEnum.REMINDER.value)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_notifications_due", "is_read", "send_time"),
    )
