from sqlalchemy.orm import Session

from skillshub.models import Notification
from skillshub.models.enums import NotificationType


def notify(
    db: Session,
    user_id: int,
    type: NotificationType | str,
    title: str,
    message: str,
    link: str | None = None,
) -> Notification:
    """Queue a notification in the current transaction."""
    notification = Notification(
        user_id=user_id,
        type=NotificationType(type).value,
        title=title,
        message=message,
        link=link,
        read=False,
    )
    db.add(notification)
    return notification
