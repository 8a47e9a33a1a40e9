"""Notification service - Business logic for in-app notifications"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification
from .repository import NotificationRepository
from .schemas import NotificationResponse

logger = logging.getLogger(__name__)


def to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        userId=notification.user_id,
        message=notification.message,
        isRead=notification.is_read,
        createdAt=notification.created_at,
    )


class NotificationService:
    """Service layer for notification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def get_notifications(self, user_id: int) -> list[NotificationResponse]:
        return [to_response(n) for n in self.repo.get_notifications(self.db, user_id)]

    def get_unread_count(self, user_id: int) -> int:
        return self.repo.get_unread_count(self.db, user_id)

    def create_notification(self, user_id: int, message: str) -> NotificationResponse:
        if not self.repo.user_exists(self.db, user_id):
            raise HTTPException(status_code=404, detail="User not found")
        notification = self.repo.create_notification(self.db, user_id, message)
        logger.info(f"🔔 Notification {notification.id} created for user {user_id}")
        return to_response(notification)

    def mark_as_read(self, notification_id: int, user_id: int) -> None:
        if not self.repo.mark_as_read(self.db, notification_id, user_id):
            raise HTTPException(status_code=404, detail="Notification not found")

    def mark_all_as_read(self, user_id: int) -> int:
        updated = self.repo.mark_all_as_read(self.db, user_id)
        logger.info(f"Marked {updated} notifications as read for user {user_id}")
        return updated

    def notify_vendor_for_booking(self, booking_id: int, message: str) -> Optional[NotificationResponse]:
        """Notify the vendor who owns the booked service; None when the booking is unknown"""
        user_id = self.repo.get_vendor_user_id_for_booking(self.db, booking_id)
        if user_id is None:
            logger.warning(f"⚠️ No vendor found for booking {booking_id}; notification skipped")
            return None
        return self.create_notification(user_id, message)

    def notify_customer_for_booking(self, booking_id: int, message: str) -> Optional[NotificationResponse]:
        """Notify the customer who made the booking; None when the booking is unknown"""
        customer_id = self.repo.get_customer_id_for_booking(self.db, booking_id)
        if customer_id is None:
            logger.warning(f"⚠️ No customer found for booking {booking_id}; notification skipped")
            return None
        return self.create_notification(customer_id, message)
