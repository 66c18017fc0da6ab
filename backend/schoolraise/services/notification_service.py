"""
Business service for in-app notifications.

Rules:
- an admin may notify any user
- a school may notify itself or its own students
- a student may only notify itself
- a mass notification reaches every student of a school
An email copy is sent when NOTIFICATION_EMAILS_ENABLED is set; an SMTP failure
is logged and never cancels the in-app notification.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.models.notification import Notification
from schoolraise.models.student import Student
from schoolraise.models.user import User, UserRole
from schoolraise.schemas.notification import (
    MassNotificationCreate,
    MassNotificationResult,
    NotificationCreate,
)
from schoolraise.services import school_service, student_service
from schoolraise.services.email_service import send_notification_email

logger = logging.getLogger(__name__)


def get_notifications(db: Session, user_id: int, unread_only: bool = False) -> list[Notification]:
    """Notifications of a user, newest first."""
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.read.is_(False))
    return db.execute(
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
    ).scalars().all()


def create_notification(db: Session, sender: User, data: NotificationCreate) -> Notification:
    """
    Creates a notification for data.recipient_id (or the sender itself).
    Raises ValueError when the recipient does not exist ("not found")
    or is out of the sender's reach.
    """
    recipient_id = data.recipient_id or sender.id
    recipient = db.get(User, recipient_id)
    if recipient is None:
        raise ValueError("Recipient not found.")
    if not _can_notify(db, sender, recipient):
        raise ValueError("You are not allowed to notify this user.")

    notification = Notification(
        user_id=recipient.id,
        title=data.title,
        message=data.message,
        type=data.type,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)

    _email_copy(recipient.email, data.title, data.message)
    logger.info("Notification %s sent by user %s to user %s", notification.id, sender.id, recipient.id)
    return notification


def send_mass_notification(db: Session, sender: User, data: MassNotificationCreate) -> MassNotificationResult:
    """
    Sends the same notification to every student of a school.
    A school account always targets its own school; an admin must give school_id.
    """
    if sender.role == UserRole.SCHOOL.value:
        school = school_service.get_school_by_user_id(db, sender.id)
        if school is None:
            raise ValueError("School not found.")
        if data.school_id is not None and data.school_id != school.id:
            raise ValueError("You can only notify the students of your own school.")
    elif sender.role == UserRole.ADMIN.value:
        if data.school_id is None:
            raise ValueError("A school must be selected.")
        school = school_service.get_school(db, data.school_id)
        if school is None:
            raise ValueError("School not found.")
    else:
        raise ValueError("Only schools and admins can send mass notifications.")

    recipients = student_service.get_student_user_ids(db, school.id)
    if not recipients:
        return MassNotificationResult(count=0)

    db.add_all([
        Notification(user_id=user_id, title=data.title, message=data.message, type=data.type)
        for user_id, _ in recipients
    ])
    db.commit()

    emailed = sum(1 for _, email in recipients if _email_copy(email, data.title, data.message))
    logger.info(
        "Mass notification from user %s: %d students of school %s, %d emails",
        sender.id, len(recipients), school.id, emailed,
    )
    return MassNotificationResult(count=len(recipients), emailed=emailed)


def mark_as_read(db: Session, notification_id: int, user_id: int) -> Optional[Notification]:
    """Marks one of the user's notifications as read. None when it is not theirs or absent."""
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        return None
    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: int) -> int:
    """Marks every unread notification of the user as read and returns how many changed."""
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
    )
    db.commit()
    return result.rowcount or 0


def _can_notify(db: Session, sender: User, recipient: User) -> bool:
    if sender.role == UserRole.ADMIN.value or sender.id == recipient.id:
        return True
    if sender.role == UserRole.SCHOOL.value and recipient.role == UserRole.STUDENT.value:
        school = school_service.get_school_by_user_id(db, sender.id)
        student = db.execute(select(Student).where(Student.user_id == recipient.id)).scalar()
        return school is not None and student is not None and student.school_id == school.id
    return False


def _email_copy(to_email: str, title: str, message: str) -> bool:
    if not settings.NOTIFICATION_EMAILS_ENABLED or not to_email:
        return False
    try:
        send_notification_email(to_email, title, message)
        return True
    except Exception as exc:
        logger.error("Notification email to %s failed: %s", to_email, exc)
        return False
