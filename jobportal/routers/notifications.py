from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import get_current_user
from ..database import get_db
from ..exceptions import ResourceNotFoundException
from ..schemas import NotificationOut, page_info

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    is_read: bool | None = Query(None, alias="isRead"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    rows, total, unread = crud.list_notifications(db, current_user.id, is_read, page, limit)
    return {
        "notifications": [NotificationOut.model_validate(n) for n in rows],
        "pagination": page_info(page, limit, total, "totalNotifications"),
        "unreadCount": unread,
    }


@router.put("/mark-all-read")
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    updated = crud.mark_all_notifications_read(db, current_user.id)
    return {"msg": "All notifications marked as read", "updated": updated}


@router.put("/{notification_id}/read")
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    notification = crud.mark_notification_read(db, notification_id, current_user.id)
    if notification is None:
        raise ResourceNotFoundException("Notification", notification_id)
    return {"notification": NotificationOut.model_validate(notification), "msg": "Notification marked as read"}
