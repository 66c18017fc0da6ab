"""
Router for in-app notifications of the current user.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolraise.database import get_db
from schoolraise.dependencies import get_current_user
from schoolraise.models.user import User
from schoolraise.presentation import queries
from schoolraise.schemas.notification import (
    MassNotificationCreate,
    MassNotificationResult,
    NotificationCreate,
    NotificationResponse,
)
from schoolraise.services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse], summary="My notifications")
def list_notifications(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return notification_service.get_notifications(db, user.id)


@router.get("/unread", response_model=List[NotificationResponse], summary="My unread notifications")
def list_unread(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return notification_service.get_notifications(db, user.id, unread_only=True)


@router.post("", response_model=NotificationResponse, status_code=201, summary="Send a notification")
def create_notification(
    data: NotificationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        notification = notification_service.create_notification(db, user, data)
    except ValueError as e:
        message = str(e)
        raise HTTPException(status_code=404 if "not found" in message else 403, detail=message)

    queries.invalidate(queries.AFTER_NOTIFICATION, user_id=notification.user_id)
    return notification


@router.post("/mass", response_model=MassNotificationResult, status_code=201, summary="Notify every student of a school")
def mass_notification(
    data: MassNotificationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Schools target their own students; an admin picks the school with schoolId."""
    try:
        result = notification_service.send_mass_notification(db, user, data)
    except ValueError as e:
        message = str(e)
        if "not found" in message:
            raise HTTPException(status_code=404, detail=message)
        if message.startswith("Only"):
            raise HTTPException(status_code=403, detail=message)
        raise HTTPException(status_code=400, detail=message)

    if result.count:
        queries.invalidate(queries.AFTER_NOTIFICATION)
    return result


@router.put("/read-all", summary="Mark all my notifications as read")
def mark_all_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    count = notification_service.mark_all_as_read(db, user.id)
    queries.invalidate(queries.AFTER_NOTIFICATION, user_id=user.id)
    return {"updated": count}


@router.put("/{notification_id}/read", response_model=NotificationResponse, summary="Mark a notification as read")
def mark_read(notification_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification = notification_service.mark_as_read(db, notification_id, user.id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    queries.invalidate(queries.AFTER_NOTIFICATION, user_id=user.id)
    return notification
