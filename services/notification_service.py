"""
Notification Service - in-app notifications for a single user.

Handles:
- Creating notifications (application approved, new document, new message, ...)
- Listing and counting unread notifications
- Marking notifications as read
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func

from database.models import Notification

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ['info', 'success', 'warning', 'alert', 'message', 'application', 'document']


class NotificationService:
    """Service for managing a user's notifications."""

    def __init__(self, session, user_id: str = None):
        self.session = session
        self.user_id = user_id

    def create_notification(self, user_id: str, title: str, message: str = None,
                            notification_type: str = 'info') -> Optional[Dict]:
        """
        Create a notification for a user.

        Args:
            user_id: Recipient
            title: Notification title
            message: Body text
            notification_type: One of NOTIFICATION_TYPES

        Returns:
            Created notification dict or None on failure
        """
        try:
            notification = Notification(
                user_id=user_id,
                type=notification_type if notification_type in NOTIFICATION_TYPES else 'info',
                title=title,
                message=message,
                is_read=False
            )
            self.session.add(notification)
            self.session.flush()

            logger.info(f"Created notification for {user_id}: {title}")
            return notification.to_dict()

        except Exception as e:
            logger.error(f"Error creating notification: {e}")
            return None

    def get_notifications(self, unread_only: bool = False, limit: int = 50) -> List[Dict]:
        query = self.session.query(Notification).filter(Notification.user_id == self.user_id)
        if unread_only:
            query = query.filter(Notification.is_read == False)  # noqa: E712
        notifications = query.order_by(Notification.created_at.desc()).limit(limit).all()
        return [n.to_dict() for n in notifications]

    def get_unread_count(self) -> int:
        return self.session.query(func.count(Notification.id)).filter(
            Notification.user_id == self.user_id,
            Notification.is_read == False  # noqa: E712
        ).scalar() or 0

    def _get(self, notification_id: str) -> Optional[Notification]:
        return self.session.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == self.user_id
        ).first()

    def mark_as_read(self, notification_id: str) -> bool:
        notification = self._get(notification_id)
        if not notification:
            return False
        notification.is_read = True
        notification.read_at = datetime.utcnow()
        self.session.flush()
        return True

    def mark_all_as_read(self) -> int:
        """Mark every unread notification of the user as read; returns how many changed."""
        unread = self.session.query(Notification).filter(
            Notification.user_id == self.user_id,
            Notification.is_read == False  # noqa: E712
        ).all()

        now = datetime.utcnow()
        for notification in unread:
            notification.is_read = True
            notification.read_at = now
        self.session.flush()
        return len(unread)

    def delete_notification(self, notification_id: str) -> bool:
        notification = self._get(notification_id)
        if not notification:
            return False
        self.session.delete(notification)
        self.session.flush()
        return True
