"""
Tests for the fundraiser service: creation, edition, listings and enrollment.
"""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from conftest import add_fundraiser, add_school, add_student, add_ticket

from schoolraise.models.fundraiser import StudentFundraiser
from schoolraise.schemas.fundraiser import FundraiserCreate, FundraiserUpdate
from schoolraise.services import fundraiser_service


def future(days=10):
    return datetime.now() + timedelta(days=days)


# ============================================================
# Schemas
# ============================================================

def test_fundraiser_create_rejects_short_name():
    with pytest.raises(ValidationError):
        FundraiserCreate(name=" ", location="Hall", event_date=future())


def test_fundraiser_create_rejects_non_positive_price():
    with pytest.raises(ValidationError) as exc:
        FundraiserCreate(name="Fair", location="Hall", event_date=future(), price=0)
    assert "positive" in str(exc.value)


def test_fundraiser_create_accepts_camel_case():
    data = FundraiserCreate.model_validate(
        {"name": "Fair", "location": "Hall", "eventDate": "2026-12-01T10:00:00", "isActive": False}
    )
    assert data.is_active is False
    assert data.price is None


# ============================================================
# create / update
# ============================================================

def test_create_fundraiser_uses_default_price(db):
    school = add_school(db)
    db.commit()

    fundraiser = fundraiser_service.create_fundraiser(
        db, school.id, FundraiserCreate(name="Fair", location="Hall", event_date=future())
    )

    assert fundraiser.id is not None
    assert fundraiser.price == 1000
    assert fundraiser.is_active is True


def test_update_fundraiser_changes_only_given_fields(db):
    school = add_school(db)
    fundraiser = add_fundraiser(db, school, "Fair", price=1500)
    db.commit()

    updated = fundraiser_service.update_fundraiser(db, fundraiser.id, FundraiserUpdate(price=2000), school.id)

    assert updated.price == 2000
    assert updated.name == "Fair"


def test_update_fundraiser_of_another_school_is_refused(db):
    owner = add_school(db, "Owner School")
    other = add_school(db, "Other School")
    fundraiser = add_fundraiser(db, owner)
    db.commit()

    with pytest.raises(ValueError, match="another school"):
        fundraiser_service.update_fundraiser(db, fundraiser.id, FundraiserUpdate(name="Hijack"), other.id)


def test_update_unknown_fundraiser_returns_none(db):
    assert fundraiser_service.update_fundraiser(db, 404, FundraiserUpdate(name="Nope")) is None


# ============================================================
# Listings
# ============================================================

def test_school_fundraisers_latest_event_first(db):
    school = add_school(db)
    add_fundraiser(db, school, "Soon", days=2)
    add_fundraiser(db, school, "Later", days=30)
    db.commit()

    names = [f.name for f in fundraiser_service.get_school_fundraisers(db, school.id)]

    assert names == ["Later", "Soon"]


def test_student_fundraisers_split_current_and_past(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    upcoming = add_fundraiser(db, school, "Upcoming", days=5)
    add_fundraiser(db, school, "Held", days=-5)
    add_fundraiser(db, school, "Cancelled", days=5, is_active=False)
    other = add_school(db, "Other School")
    add_fundraiser(db, other, "Elsewhere", days=5)
    add_ticket(db, student, upcoming)
    db.commit()

    current = fundraiser_service.get_student_fundraisers(db, student)
    past = fundraiser_service.get_student_fundraisers(db, student, past=True)

    assert [f.name for f in current] == ["Upcoming"]
    assert current[0].joined is True
    assert current[0].joined_at is not None
    assert sorted(f.name for f in past) == ["Cancelled", "Held"]
    assert all(not f.joined for f in past)


# ============================================================
# join_fundraiser
# ============================================================

def test_join_fundraiser_creates_one_ticket(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    fundraiser = add_fundraiser(db, school)
    db.commit()

    enrollment = fundraiser_service.join_fundraiser(db, student, fundraiser.id)

    assert enrollment.student_id == student.id
    assert db.query(StudentFundraiser).count() == 1


def test_join_fundraiser_twice_is_refused(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    fundraiser = add_fundraiser(db, school)
    db.commit()
    fundraiser_service.join_fundraiser(db, student, fundraiser.id)

    with pytest.raises(ValueError, match="already joined"):
        fundraiser_service.join_fundraiser(db, student, fundraiser.id)
    assert db.query(StudentFundraiser).count() == 1


def test_join_fundraiser_of_another_school_is_refused(db):
    school = add_school(db, "Mine")
    other = add_school(db, "Theirs")
    student = add_student(db, school, "amy")
    fundraiser = add_fundraiser(db, other)
    db.commit()

    with pytest.raises(ValueError, match="another school"):
        fundraiser_service.join_fundraiser(db, student, fundraiser.id)


def test_join_closed_fundraiser_is_refused(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    held = add_fundraiser(db, school, days=-1)
    db.commit()

    with pytest.raises(ValueError, match="no longer open"):
        fundraiser_service.join_fundraiser(db, student, held.id)


def test_join_unknown_fundraiser(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    db.commit()

    with pytest.raises(ValueError, match="not found"):
        fundraiser_service.join_fundraiser(db, student, 999)


def test_duplicate_enrollment_row_violates_unique_constraint(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    fundraiser = add_fundraiser(db, school)
    add_ticket(db, student, fundraiser)
    db.commit()

    db.add(StudentFundraiser(student_id=student.id, fundraiser_id=fundraiser.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


# ============================================================
# Sharing
# ============================================================

def test_share_url_with_referral(monkeypatch):
    monkeypatch.setattr(fundraiser_service.settings, "PUBLIC_BASE_URL", "https://raise.example.com/")

    assert fundraiser_service.share_url(7) == "https://raise.example.com/fundraiser/7"
    assert fundraiser_service.share_url(7, 3) == "https://raise.example.com/fundraiser/7?ref=3"


def test_generate_qr_image_is_png():
    png = fundraiser_service.generate_qr_image("https://raise.example.com/fundraiser/7")
    assert png.startswith(b"\x89PNG")
