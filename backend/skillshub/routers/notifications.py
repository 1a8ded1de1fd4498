from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillshub.database import get_db
from skillshub.dependencies import get_current_identity
from skillshub.models import Notification
from skillshub.schemas import NotificationUpdate
from skillshub.services.access import commit_or_raise, get_owned_notification
from skillshub.services.auth import Identity

router = APIRouter()

NOTIFICATION_PAGE_SIZE = 50


@router.get("")
def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    query = db.query(Notification).filter(Notification.user_id == identity.user_id)
    if unread_only:
        query = query.filter(Notification.read == False)  # noqa: E712

    notifications = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(NOTIFICATION_PAGE_SIZE)
        .all()
    )
    unread_count = (
        db.query(Notification)
        .filter(Notification.user_id == identity.user_id, Notification.read == False)  # noqa: E712
        .count()
    )

    return {
        "notifications": [
            {
                "id": n.id,
                "type": n.type,
                "title": n.title,
                "message": n.message,
                "link": n.link,
                "read": n.read,
                "createdAt": n.created_at,
            }
            for n in notifications
        ],
        "unreadCount": unread_count,
    }


@router.patch("")
def update_notifications(
    data: NotificationUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Mark one of the caller's notifications, or all of them, as read."""
    if data.notification_id is not None:
        notification = get_owned_notification(db, identity, data.notification_id)
        notification.read = data.read
    else:
        db.query(Notification).filter(
            Notification.user_id == identity.user_id,
            Notification.read == False,  # noqa: E712
        ).update({Notification.read: True}, synchronize_session=False)

    commit_or_raise(db, "Failed to update notification")
    return {"success": True}
