"""
Pydantic schemas for notifications.
"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from schoolraise.schemas.common import CamelModel, min_length

VALID_NOTIFICATION_TYPES = {"info", "success", "warning", "error"}


class NotificationCreate(CamelModel):
    """Single notification (POST /api/notifications). Without recipient_id it targets the sender."""
    title: str
    message: str
    type: str = "info"
    recipient_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        return min_length(v, 2, "Title")

    @field_validator("message")
    @classmethod
    def message_required(cls, v: str) -> str:
        return min_length(v, 5, "Message")

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in VALID_NOTIFICATION_TYPES:
            raise ValueError(f"Invalid notification type. Accepted values: {sorted(VALID_NOTIFICATION_TYPES)}")
        return v


class MassNotificationCreate(NotificationCreate):
    """Notification sent to every student of a school (POST /api/notifications/mass)."""
    school_id: Optional[int] = None


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    title: str
    message: str
    type: str
    read: bool
    created_at: datetime


class MassNotificationResult(CamelModel):
    count: int
    emailed: int = 0
