from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.models import Notification, NotificationType

logger = logging.getLogger(__name__)

def notify(
    db: Session,
    user_id: int,
    type: NotificationType,
    title: str,
    message: str,
    data: Optional[dict] = None,
) -> Notification:
    """Queue an in-app notification; the caller commits"""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data,
    )
    db.add(notification)
    logger.info(f"Notification queued for user {user_id}: {type.value}")
    return notification
