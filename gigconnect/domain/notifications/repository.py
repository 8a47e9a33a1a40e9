"""Notification repository - Database operations for in-app notifications"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Booking, Notification, Service, User, Vendor

NOTIFICATION_LIST_LIMIT = 50


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def get_notifications(db: Session, user_id: int, limit: int = NOTIFICATION_LIST_LIMIT) -> list[Notification]:
        """Get notifications for a user, newest first"""
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_unread_count(db: Session, user_id: int) -> int:
        return int(
            db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .scalar()
            or 0
        )

    @staticmethod
    def user_exists(db: Session, user_id: int) -> bool:
        return db.query(User.id).filter(User.id == user_id).first() is not None

    @staticmethod
    def create_notification(db: Session, user_id: int, message: str) -> Notification:
        notification = Notification(user_id=user_id, message=message, is_read=False)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_as_read(db: Session, notification_id: int, user_id: int) -> int:
        """Mark one of the user's notifications as read. Returns rows updated."""
        updated = (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def mark_all_as_read(db: Session, user_id: int) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def get_vendor_user_id_for_booking(db: Session, booking_id: int) -> Optional[int]:
        """User id of the vendor who owns the booked service"""
        row = (
            db.query(Vendor.user_id)
            .select_from(Booking)
            .join(Service, Service.id == Booking.service_id)
            .join(Vendor, Vendor.id == Service.vendor_id)
            .filter(Booking.id == booking_id)
            .first()
        )
        return row[0] if row else None

    @staticmethod
    def get_customer_id_for_booking(db: Session, booking_id: int) -> Optional[int]:
        row = db.query(Booking.customer_id).filter(Booking.id == booking_id).first()
        return row[0] if row else None
