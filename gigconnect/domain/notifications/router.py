"""Notification router - FastAPI endpoints for in-app notifications"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    BookingNotification,
    BookingNotificationResponse,
    NotificationCreate,
    NotificationResponse,
    UnreadCountResponse,
)
from .service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("/users/{user_id}", response_model=list[NotificationResponse])
def get_notifications(
    user_id: int,
    service: NotificationService = Depends(get_notification_service),
):
    """Latest notifications for a user, newest first"""
    return service.get_notifications(user_id)


@router.get("/users/{user_id}/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    user_id: int,
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(unread_count=service.get_unread_count(user_id))


@router.post("", response_model=NotificationResponse, status_code=201)
def create_notification(
    data: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
):
    return service.create_notification(data.userId, data.message)


@router.post("/users/{user_id}/read-all")
def mark_all_read(
    user_id: int,
    service: NotificationService = Depends(get_notification_service),
):
    updated = service.mark_all_as_read(user_id)
    return {"message": "Notifications marked as read", "updated": updated}


@router.post("/users/{user_id}/{notification_id}/read")
def mark_read(
    user_id: int,
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
):
    service.mark_as_read(notification_id, user_id)
    return {"message": "Notification marked as read"}


@router.post("/bookings/{booking_id}/vendor", response_model=BookingNotificationResponse)
def notify_booking_vendor(
    booking_id: int,
    data: BookingNotification,
    service: NotificationService = Depends(get_notification_service),
):
    """Notify the vendor whose service was booked"""
    notification = service.notify_vendor_for_booking(booking_id, data.message)
    return BookingNotificationResponse(delivered=notification is not None, notification=notification)


@router.post("/bookings/{booking_id}/customer", response_model=BookingNotificationResponse)
def notify_booking_customer(
    booking_id: int,
    data: BookingNotification,
    service: NotificationService = Depends(get_notification_service),
):
    """Notify the customer who made the booking"""
    notification = service.notify_customer_for_booking(booking_id, data.message)
    return BookingNotificationResponse(delivered=notification is not None, notification=notification)
