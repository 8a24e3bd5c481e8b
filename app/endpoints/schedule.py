from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.constants import MAX_STORE_ID
from app.core.exceptions import NotFoundError
from app.schemas.notification import Notification
from app.schemas.response import APIResponse
from app.schemas.schedule import Schedule, ScheduleCompletionUpdate, ScheduleCreate, ScheduleStats
from app.schemas.user import CurrentUser
from app.services.scheduling import scheduling_service
from app.utils import deps

router = APIRouter()

# Static paths are declared before "/{schedule_id}" so they are matched first.

@router.post("", response_model=APIResponse[Schedule], status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule_in: ScheduleCreate,
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    """Schedule an activity; pass `notify: true` to create its reminder right away."""
    schedule = scheduling_service.schedule_activity(db, user_id=user.id, schedule_in=schedule_in)
    return APIResponse(message="Activity scheduled successfully", data=schedule)

@router.post("/activities", response_model=APIResponse[Schedule], status_code=status.HTTP_201_CREATED)
async def create_activity(
    schedule_in: ScheduleCreate,
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    schedule = scheduling_service.schedule_activity(db, user_id=user.id, schedule_in=schedule_in)
    return APIResponse(message="Activity scheduled successfully", data=schedule)

@router.get("/activities", response_model=APIResponse[List[Schedule]])
async def list_activities(
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    """All scheduled activities of the current user, oldest first."""
    data = scheduling_service.list_schedules(db, user_id=user.id)
    return APIResponse(message="Activities fetched successfully", data=data)

@router.get("/upcoming", response_model=APIResponse[List[Schedule]])
async def list_upcoming_activities(
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    """Incomplete activities starting within the upcoming window (one hour by default)."""
    data = scheduling_service.list_upcoming(db, user_id=user.id)
    return APIResponse(message="Upcoming activities fetched successfully", data=data)

@router.get("/stats", response_model=APIResponse[ScheduleStats])
async def get_schedule_stats(
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    data = scheduling_service.get_stats(db, user_id=user.id)
    return APIResponse(message="Schedule statistics fetched successfully", data=data)

@router.get("/notifications/due", response_model=APIResponse[List[Notification]])
async def list_due_notifications(
    now: Optional[str] = None,
    db: Session = Depends(deps.get_db),
    user: Optional[CurrentUser] = Depends(deps.get_optional_user)
):
    """Unread notifications due at `now` (YYYY-MM-DD HH:MM:SS, defaults to the server clock).

    Authenticated callers only see their own; anonymous pollers see every user's.
    """
    data = scheduling_service.list_due_notifications(db, now=now, user_id=user.id if user else None)
    return APIResponse(message="Due notifications fetched successfully", data=data)

@router.patch("/notifications/{notification_id}/read", response_model=APIResponse[dict])
async def mark_notification_read(
    notification_id: str,
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    parsed_id = scheduling_service.mark_notification_read(db, notification_id=notification_id, user_id=user.id)
    return APIResponse(message="Notification marked as read.", data={"notification_id": parsed_id})

@router.get("/date/{scheduled_date}", response_model=APIResponse[List[Schedule]])
async def list_schedules_for_date(
    scheduled_date: date,
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    data = scheduling_service.list_schedules_for_date(db, user_id=user.id, scheduled_date=scheduled_date)
    return APIResponse(message="Schedules fetched successfully", data=data)

@router.patch("/activities/{schedule_id}/complete", response_model=APIResponse[Schedule])
async def complete_activity(
    schedule_id: int = Path(..., ge=1, le=MAX_STORE_ID),
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    schedule = scheduling_service.mark_completed(db, user_id=user.id, schedule_id=schedule_id, is_completed=True)
    return APIResponse(message="Activity marked as completed", data=schedule)

@router.delete("/activities/{schedule_id}", response_model=APIResponse[None])
async def delete_activity(
    schedule_id: int = Path(..., ge=1, le=MAX_STORE_ID),
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    scheduling_service.delete_schedule(db, user_id=user.id, schedule_id=schedule_id)
    return APIResponse(message="Activity deleted successfully")

@router.patch("/{schedule_id}/toggle", response_model=APIResponse[Schedule])
async def toggle_schedule_completed(
    schedule_id: int = Path(..., ge=1, le=MAX_STORE_ID),
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    schedule = scheduling_service.toggle_completed(db, user_id=user.id, schedule_id=schedule_id)
    return APIResponse(message="Schedule toggled.", data=schedule)

@router.patch("/{schedule_id}", response_model=APIResponse[Schedule])
async def mark_schedule_completed(
    completion_in: ScheduleCompletionUpdate,
    schedule_id: int = Path(..., ge=1, le=MAX_STORE_ID),
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    schedule = scheduling_service.mark_completed(
        db, user_id=user.id, schedule_id=schedule_id, is_completed=completion_in.is_completed
    )
    return APIResponse(message="Schedule updated.", data=schedule)

@router.get("/{schedule_id}", response_model=APIResponse[Schedule])
async def get_schedule(
    schedule_id: int = Path(..., ge=1, le=MAX_STORE_ID),
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    schedule = scheduling_service.get_schedule_by_id(db, user_id=user.id, schedule_id=schedule_id)
    if not schedule:
        raise NotFoundError("Schedule not found.", resource_type="schedule", resource_id=schedule_id)
    return APIResponse(message="Schedule fetched successfully", data=schedule)

@router.delete("/{schedule_id}", response_model=APIResponse[None])
async def delete_schedule(
    schedule_id: int = Path(..., ge=1, le=MAX_STORE_ID),
    db: Session = Depends(deps.get_db),
    user: CurrentUser = Depends(deps.get_current_user)
):
    scheduling_service.delete_schedule(db, user_id=user.id, schedule_id=schedule_id)
    return APIResponse(message="Activity deleted successfully")
