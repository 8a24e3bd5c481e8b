from datetime import datetime
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.constants import NotificationTypeEnum
from app.crud.base import CRUDBase, store_errors
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate, NotificationUpdate

class CRUDNotification(CRUDBase[Notification, NotificationCreate, NotificationUpdate]):
    """CRUD operations for Notifications."""

    def insert(
        self,
        db: Session,
        *,
        user_id: int,
        message: str,
        send_time: datetime,
        type: str = NotificationTypeEnum.REMINDER.value,
    ) -> Notification:
        notification_in = NotificationCreate(user_id=user_id, message=message, send_time=send_time, type=type)
        return self.create(db, obj_in=notification_in)

    def get_due(self, db: Session, *, now: datetime, user_id: Optional[int] = None) -> List[Notification]:
        query = db.query(self.model).filter(self.model.send_time <= now, self.model.is_read == False)
        if user_id is not None:
            query = query.filter(self.model.user_id == user_id)
        with store_errors(db, "list due notifications"):
            return query.order_by(self.model.send_time.asc(), self.model.notification_id.asc()).all()

    def mark_as_read(self, db: Session, *, notification_id: int) -> int:
        with store_errors(db, "mark notification read"):
            affected = (
                db.query(self.model)
                .filter(self.model.notification_id == notification_id)
                .update({self.model.is_read: True}, synchronize_session=False)
            )
            db.commit()
        return affected

    def find_existing_reminder(
        self,
        db: Session,
        *,
        user_id: int,
        send_time: datetime,
        message: str,
        type: str = NotificationTypeEnum.REMINDER.value,
    ) -> Optional[Notification]:
        with store_errors(db, "find existing reminder"):
            return (
                db.query(self.model)
                .filter(
                    self.model.user_id == user_id,
                    self.model.send_time == send_time,
                    self.model.message == message,
                    self.model.type == type,
                )
                .first()
            )

notification = CRUDNotification(Notification)
