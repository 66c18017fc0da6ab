"""
Business service for fundraisers (creation, edition, listings, enrollment).

Flow for a student:
  1. The student sees the fundraisers of their own school, current or past
  2. Joining an active, upcoming fundraiser creates one student_fundraisers row (one ticket)
  3. Joining twice is refused: (student_id, fundraiser_id) is unique
"""

import io
import logging
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

import qrcode
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.models.fundraiser import Fundraiser, StudentFundraiser
from schoolraise.models.student import Student
from schoolraise.schemas.fundraiser import (
    FundraiserCreate,
    FundraiserUpdate,
    StudentFundraiserResponse,
)

logger = logging.getLogger(__name__)


def create_fundraiser(db: Session, school_id: int, data: FundraiserCreate) -> Fundraiser:
    fundraiser = Fundraiser(
        name=data.name,
        location=data.location,
        school_id=school_id,
        is_active=data.is_active,
        event_date=data.event_date,
        price=data.price or settings.DEFAULT_TICKET_PRICE_CENTS,
    )
    db.add(fundraiser)
    db.commit()
    db.refresh(fundraiser)

    logger.info("Fundraiser created: %s (%s) for school %s", fundraiser.name, fundraiser.id, school_id)
    return fundraiser


def get_fundraiser(db: Session, fundraiser_id: int) -> Optional[Fundraiser]:
    return db.get(Fundraiser, fundraiser_id)


def update_fundraiser(
    db: Session, fundraiser_id: int, data: FundraiserUpdate, school_id: Optional[int] = None
) -> Optional[Fundraiser]:
    """
    Updates the provided fields of a fundraiser.
    When school_id is given, the fundraiser must belong to that school (ValueError otherwise).
    Returns None when the fundraiser does not exist.
    """
    fundraiser = db.get(Fundraiser, fundraiser_id)
    if fundraiser is None:
        return None
    if school_id is not None and fundraiser.school_id != school_id:
        raise ValueError("This fundraiser belongs to another school.")

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(fundraiser, field, value)

    db.commit()
    db.refresh(fundraiser)
    return fundraiser


def get_school_fundraisers(db: Session, school_id: int) -> list[Fundraiser]:
    """Every fundraiser of a school, latest event first."""
    return db.execute(
        select(Fundraiser)
        .where(Fundraiser.school_id == school_id)
        .order_by(Fundraiser.event_date.desc(), Fundraiser.id.desc())
    ).scalars().all()


def get_student_fundraisers(
    db: Session, student: Student, past: bool = False, now: Optional[datetime] = None
) -> list[StudentFundraiserResponse]:
    """
    Fundraisers of the student's school, flagged with the student's enrollment.
    Current = active and not yet held (soonest first); past = the others (latest first).
    """
    now = now or datetime.now()
    current = and_(Fundraiser.is_active.is_(True), Fundraiser.event_date >= now)

    query = (
        select(Fundraiser, StudentFundraiser.joined_at)
        .outerjoin(
            StudentFundraiser,
            and_(
                StudentFundraiser.fundraiser_id == Fundraiser.id,
                StudentFundraiser.student_id == student.id,
            ),
        )
        .where(Fundraiser.school_id == student.school_id)
    )
    if past:
        query = query.where(or_(Fundraiser.is_active.is_(False), Fundraiser.event_date < now))
        query = query.order_by(Fundraiser.event_date.desc(), Fundraiser.id.desc())
    else:
        query = query.where(current).order_by(Fundraiser.event_date.asc(), Fundraiser.id.asc())

    result = []
    for fundraiser, joined_at in db.execute(query).all():
        item = StudentFundraiserResponse.model_validate(fundraiser)
        item.joined = joined_at is not None
        item.joined_at = joined_at
        result.append(item)
    return result


def join_fundraiser(db: Session, student: Student, fundraiser_id: int) -> StudentFundraiser:
    """
    Enrolls a student in a fundraiser (one ticket).

    Raises ValueError when:
    - the fundraiser does not exist (message contains "not found")
    - it belongs to another school, is inactive or already held
    - the student already joined it
    """
    fundraiser = db.get(Fundraiser, fundraiser_id)
    if fundraiser is None:
        raise ValueError("Fundraiser not found.")
    if fundraiser.school_id != student.school_id:
        raise ValueError("This fundraiser belongs to another school.")
    if not fundraiser.is_active or fundraiser.event_date < datetime.now():
        raise ValueError("This fundraiser is no longer open.")

    already = db.execute(
        select(StudentFundraiser.id).where(
            StudentFundraiser.student_id == student.id,
            StudentFundraiser.fundraiser_id == fundraiser_id,
        )
    ).scalar()
    if already:
        raise ValueError("Student already joined this fundraiser.")

    enrollment = StudentFundraiser(student_id=student.id, fundraiser_id=fundraiser_id)
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        # Unique (student_id, fundraiser_id) hit by a concurrent request
        db.rollback()
        raise ValueError("Student already joined this fundraiser.")
    db.refresh(enrollment)

    logger.info("Student %s joined fundraiser %s", student.id, fundraiser_id)
    return enrollment


def share_url(fundraiser_id: int, referral_student_id: Optional[int] = None) -> str:
    """Public page URL of a fundraiser, with the referring student when known."""
    url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/fundraiser/{fundraiser_id}"
    if referral_student_id is not None:
        url += "?" + urlencode({"ref": referral_student_id})
    return url


def generate_qr_image(data: str) -> bytes:
    """PNG image of a QR code encoding the given data."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
