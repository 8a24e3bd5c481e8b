from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

from app.core.constants import NotificationTypeEnum

class NotificationBase(BaseModel):
    """Base schema for a notification."""
    message: str
    send_time: datetime
    type: str = NotificationTypeEnum.REMINDER.value

class NotificationCreate(NotificationBase):
    """Schema for creating a notification."""
    user_id: int

class NotificationUpdate(BaseModel):
    """Schema for updating a notification (marking as read is the only transition)."""
    is_read: bool

class Notification(NotificationBase):
    """Schema for reading a notification, includes ID and status."""
    notification_id: int
    user_id: int
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
