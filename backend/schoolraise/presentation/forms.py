"""
Form handlers behind the HTML pages.

A handler validates the posted fields with the API schemas, dispatches the
write through the service layer and, on success only, invalidates the cached
queries the write affects. Failures come back as a FormResult with messages
ready to display; nothing is invalidated in that case.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.models.user import User
from schoolraise.presentation import queries
from schoolraise.schemas.fundraiser import FundraiserCreate, FundraiserUpdate
from schoolraise.schemas.notification import MassNotificationCreate, NotificationCreate
from schoolraise.schemas.school import SchoolUpdate
from schoolraise.services import fundraiser_service, notification_service, school_service

logger = logging.getLogger(__name__)


@dataclass
class FormResult:
    ok: bool
    message: str = ""
    errors: list[str] = field(default_factory=list)


def _fail(*errors: str) -> FormResult:
    logger.info("Form rejected: %s", "; ".join(errors))
    return FormResult(ok=False, message=errors[0] if errors else "", errors=list(errors))


def validation_messages(exc: ValidationError) -> list[str]:
    return [error["msg"].removeprefix("Value error, ") for error in exc.errors()]


def _blank_to_none(form: Mapping[str, str], *names: str) -> dict:
    return {name: (form.get(name) or "").strip() or None for name in names}


def _cents(amount: Optional[str]) -> Optional[int]:
    """Display amount ("12.50") to integer cents; None when blank."""
    if amount is None or not str(amount).strip():
        return None
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError("Price must be a number.")
    if not value.is_finite():
        raise ValueError("Price must be a number.")
    return int((value * 100).to_integral_value())


def edit_school(db: Session, user: User, school: School, form: Mapping[str, str]) -> FormResult:
    values = {k: v for k, v in _blank_to_none(form, "name", "admin_name").items() if v is not None}
    if "address" in form:
        values["address"] = form["address"].strip()
    try:
        data = SchoolUpdate(**values)
    except ValidationError as e:
        return _fail(*validation_messages(e))

    if school_service.update_school(db, school.id, data) is None:
        return _fail("Failed to update school information")

    queries.invalidate(queries.AFTER_SCHOOL_UPDATE)
    return FormResult(ok=True, message="School information updated")


def create_notification(db: Session, user: User, form: Mapping[str, str]) -> FormResult:
    values = _blank_to_none(form, "title", "message", "type", "recipient_id")
    values["type"] = values["type"] or "info"
    try:
        data = NotificationCreate(**values)
        notification = notification_service.create_notification(db, user, data)
    except ValidationError as e:
        return _fail(*validation_messages(e))
    except ValueError as e:
        return _fail(str(e))

    queries.invalidate(queries.AFTER_NOTIFICATION, user_id=notification.user_id)
    return FormResult(ok=True, message="Notification sent")


def mass_notification(db: Session, user: User, form: Mapping[str, str]) -> FormResult:
    values = _blank_to_none(form, "title", "message", "type", "school_id")
    values["type"] = values["type"] or "info"
    try:
        data = MassNotificationCreate(**values)
        result = notification_service.send_mass_notification(db, user, data)
    except ValidationError as e:
        return _fail(*validation_messages(e))
    except ValueError as e:
        return _fail(str(e))

    if result.count:
        queries.invalidate(queries.AFTER_NOTIFICATION)
    return FormResult(ok=True, message=f"Notification sent to {result.count} students")


def create_fundraiser(db: Session, school: School, form: Mapping[str, str]) -> FormResult:
    values = _blank_to_none(form, "name", "location", "event_date")
    try:
        values["price"] = _cents(form.get("price"))
        values["is_active"] = bool(form.get("is_active"))
        data = FundraiserCreate(**values)
    except ValidationError as e:
        return _fail(*validation_messages(e))
    except ValueError as e:
        return _fail(str(e))

    fundraiser_service.create_fundraiser(db, school.id, data)
    queries.invalidate(queries.AFTER_FUNDRAISER_WRITE)
    return FormResult(ok=True, message="Fundraiser created")


def edit_fundraiser(db: Session, school: School, fundraiser_id: int, form: Mapping[str, str]) -> FormResult:
    values = {k: v for k, v in _blank_to_none(form, "name", "location", "event_date").items() if v is not None}
    try:
        price = _cents(form.get("price"))
        if price is not None:
            values["price"] = price
        values["is_active"] = bool(form.get("is_active"))
        data = FundraiserUpdate(**values)
        fundraiser = fundraiser_service.update_fundraiser(db, fundraiser_id, data, school_id=school.id)
    except ValidationError as e:
        return _fail(*validation_messages(e))
    except ValueError as e:
        return _fail(str(e))

    if fundraiser is None:
        return _fail("Fundraiser not found")
    queries.invalidate(queries.AFTER_FUNDRAISER_WRITE)
    return FormResult(ok=True, message="Fundraiser updated")


def join_fundraiser(db: Session, student: Student, fundraiser_id: int) -> FormResult:
    try:
        fundraiser_service.join_fundraiser(db, student, fundraiser_id)
    except ValueError as e:
        return _fail(str(e))

    queries.invalidate(queries.AFTER_JOIN)
    return FormResult(ok=True, message="You joined the fundraiser")


def mark_all_read(db: Session, user: User) -> FormResult:
    count = notification_service.mark_all_as_read(db, user.id)
    queries.invalidate(queries.AFTER_NOTIFICATION, user_id=user.id)
    return FormResult(ok=True, message=f"{count} notifications marked as read")
