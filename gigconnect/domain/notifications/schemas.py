"""Notification domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class NotificationCreate(BaseModel):
    """Schema for creating a notification"""

    userId: int
    message: str = Field(..., min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Message must not be blank")
        return v


class BookingNotification(BaseModel):
    """Schema for notifying one party of a booking"""

    message: str = Field(..., min_length=1, max_length=2000)


class NotificationResponse(BaseModel):
    id: int
    userId: int
    message: str
    isRead: bool
    createdAt: Optional[datetime] = None


class UnreadCountResponse(BaseModel):
    unread_count: int


class BookingNotificationResponse(BaseModel):
    delivered: bool
    notification: Optional[NotificationResponse] = None
