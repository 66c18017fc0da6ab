"""
Tests for the page form handlers: validation, dispatch and cache invalidation.
"""

from unittest.mock import MagicMock, patch

import pytest

from conftest import (
    add_fundraiser,
    add_school,
    add_student,
    add_ticket,
    add_user,
    make_fundraiser_mock,
    make_school_mock,
    make_student_mock,
    make_user_mock,
)

from schoolraise.models.user import User
from schoolraise.presentation import forms, queries


def warm(registry, user_id, *keys):
    cache = registry.for_user(user_id)
    for key in keys:
        cache.fetch(key, lambda: "cached")
    return cache


# ============================================================
# edit_school
# ============================================================

def test_edit_school_invalid_name_keeps_cache(fresh_query_cache):
    cache = warm(fresh_query_cache, 2, queries.USER_INFO)
    with patch("schoolraise.presentation.forms.school_service.update_school") as update:
        result = forms.edit_school(MagicMock(), make_user_mock(2, "school"), make_school_mock(), {"name": "X"})

    assert not result.ok
    assert "School name must be at least 2 characters." in result.errors
    update.assert_not_called()
    assert cache.keys() == [queries.USER_INFO]


def test_edit_school_success_invalidates_user_info(fresh_query_cache):
    cache = warm(fresh_query_cache, 2, queries.USER_INFO, queries.NOTIFICATIONS)
    with patch("schoolraise.presentation.forms.school_service.update_school") as update:
        update.return_value = make_school_mock()
        result = forms.edit_school(
            MagicMock(), make_user_mock(2, "school"), make_school_mock(),
            {"name": "Greenfield High", "admin_name": "", "address": ""},
        )

    assert result.ok
    data = update.call_args.args[2]
    assert data.model_dump(exclude_unset=True) == {"name": "Greenfield High", "address": ""}
    assert cache.keys() == [queries.NOTIFICATIONS]


# ============================================================
# Fundraisers
# ============================================================

def test_create_fundraiser_converts_price_to_cents():
    with patch("schoolraise.presentation.forms.fundraiser_service.create_fundraiser") as create:
        create.return_value = make_fundraiser_mock()
        result = forms.create_fundraiser(MagicMock(), make_school_mock(), {
            "name": "Spring Fair", "location": "Hall", "event_date": "2026-12-01T18:00",
            "price": "12.50", "is_active": "on",
        })

    assert result.ok
    data = create.call_args.args[2]
    assert data.price == 1250
    assert data.is_active is True


def test_create_fundraiser_blank_price_uses_default():
    with patch("schoolraise.presentation.forms.fundraiser_service.create_fundraiser") as create:
        forms.create_fundraiser(MagicMock(), make_school_mock(), {
            "name": "Spring Fair", "location": "Hall", "event_date": "2026-12-01T18:00", "price": "",
        })

    assert create.call_args.args[2].price is None


def test_create_fundraiser_rejects_bad_price():
    with patch("schoolraise.presentation.forms.fundraiser_service.create_fundraiser") as create:
        result = forms.create_fundraiser(MagicMock(), make_school_mock(), {
            "name": "Spring Fair", "location": "Hall", "event_date": "2026-12-01T18:00", "price": "ten",
        })

    assert not result.ok
    assert result.message == "Price must be a number."
    create.assert_not_called()


def test_edit_fundraiser_of_other_school(fresh_query_cache):
    cache = warm(fresh_query_cache, 2, queries.SCHOOL_FUNDRAISERS)
    with patch("schoolraise.presentation.forms.fundraiser_service.update_fundraiser") as update:
        update.side_effect = ValueError("This fundraiser belongs to another school.")
        result = forms.edit_fundraiser(MagicMock(), make_school_mock(), 7, {"name": "Gala"})

    assert not result.ok
    assert cache.keys() == [queries.SCHOOL_FUNDRAISERS]


# ============================================================
# Join / notifications
# ============================================================

def test_join_invalidates_every_user_sales(fresh_query_cache):
    student_cache = warm(fresh_query_cache, 3, queries.STUDENT_FUNDRAISERS, queries.STUDENT_SALES)
    school_cache = warm(fresh_query_cache, 2, queries.SCHOOL_SALES, queries.SCHOOL_STUDENTS)
    with patch("schoolraise.presentation.forms.fundraiser_service.join_fundraiser"):
        result = forms.join_fundraiser(MagicMock(), make_student_mock(), 4)

    assert result.ok
    assert student_cache.keys() == []
    assert school_cache.keys() == [queries.SCHOOL_STUDENTS]


def test_join_refused_reports_reason():
    with patch("schoolraise.presentation.forms.fundraiser_service.join_fundraiser") as join:
        join.side_effect = ValueError("Student already joined this fundraiser.")
        result = forms.join_fundraiser(MagicMock(), make_student_mock(), 4)

    assert not result.ok
    assert result.message == "Student already joined this fundraiser."


def test_create_notification_invalidates_recipient_only(fresh_query_cache):
    recipient_cache = warm(fresh_query_cache, 3, queries.NOTIFICATIONS)
    sender_cache = warm(fresh_query_cache, 2, queries.NOTIFICATIONS)
    with patch("schoolraise.presentation.forms.notification_service.create_notification") as create:
        create.return_value = MagicMock(user_id=3)
        result = forms.create_notification(MagicMock(), make_user_mock(2, "school"), {
            "title": "Reminder", "message": "Bring your tickets tomorrow.", "recipient_id": "3",
        })

    assert result.ok
    assert create.call_args.args[2].recipient_id == 3
    assert recipient_cache.keys() == []
    assert sender_cache.keys() == [queries.NOTIFICATIONS]


def test_mass_notification_validation_error():
    result = forms.mass_notification(MagicMock(), make_user_mock(2, "school"), {"title": "Hi", "message": "yo"})
    assert not result.ok
    assert "Message must be at least 5 characters." in result.errors


def test_mark_all_read():
    with patch("schoolraise.presentation.forms.notification_service.mark_all_as_read") as mark_all:
        mark_all.return_value = 2
        result = forms.mark_all_read(MagicMock(), make_user_mock(2, "school"))

    assert result.message == "2 notifications marked as read"


# ============================================================
# Cached sales summaries follow the writes (SQLite)
# ============================================================

def test_price_edit_refreshes_student_sales(db):
    school = add_school(db)
    student = add_student(db, school, "amy")
    fundraiser = add_fundraiser(db, school, price=1000)
    add_ticket(db, student, fundraiser)
    db.commit()
    student_user = db.get(User, student.user_id)

    assert queries.fetch(db, student_user, queries.STUDENT_SALES).data.total_amount == 1000

    result = forms.edit_fundraiser(db, school, fundraiser.id, {"price": "25.00", "is_active": "on"})

    assert result.ok
    assert queries.fetch(db, student_user, queries.STUDENT_SALES).data.total_amount == 2500


def test_school_rename_refreshes_admin_sales(db):
    school = add_school(db, "Greenfield High")
    admin = add_user(db, "admin", "admin")
    db.commit()

    before = queries.fetch(db, admin, queries.ADMIN_SALES).data
    assert [row.school_name for row in before.schools] == ["Greenfield High"]

    school_user = db.get(User, school.user_id)
    result = forms.edit_school(db, school_user, school, {"name": "Greenfield College", "address": ""})

    assert result.ok
    after = queries.fetch(db, admin, queries.ADMIN_SALES).data
    assert [row.school_name for row in after.schools] == ["Greenfield College"]


# ============================================================
# Price parsing
# ============================================================

@pytest.mark.parametrize("price", ["Infinity", "-inf", "nan"])
def test_create_fundraiser_rejects_non_finite_price(price):
    with patch("schoolraise.presentation.forms.fundraiser_service.create_fundraiser") as create:
        result = forms.create_fundraiser(MagicMock(), make_school_mock(), {
            "name": "Spring Fair", "location": "Hall", "event_date": "2026-12-01T18:00", "price": price,
        })

    assert not result.ok
    assert result.message == "Price must be a number."
    create.assert_not_called()
