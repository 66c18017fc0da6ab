"""
API tests for single fundraisers: details, edition and QR code.
"""

from unittest.mock import patch

from conftest import make_fundraiser_mock, make_school_mock

SERVICE = "schoolraise.routers.fundraisers.fundraiser_service"


def test_get_fundraiser_is_public(client):
    with patch(f"{SERVICE}.get_fundraiser") as get_one:
        get_one.return_value = make_fundraiser_mock(7, name="Winter Gala")
        response = client.get("/api/fundraisers/7")

    assert response.status_code == 200
    assert response.json()["name"] == "Winter Gala"
    assert response.json()["schoolId"] == 1


def test_get_fundraiser_not_found(client):
    with patch(f"{SERVICE}.get_fundraiser") as get_one:
        get_one.return_value = None
        assert client.get("/api/fundraisers/7").status_code == 404


# ============================================================
# PUT /api/fundraisers/{id}
# ============================================================

def test_update_requires_session(client):
    assert client.put("/api/fundraisers/7", json={"name": "New name"}).status_code == 401


def test_student_cannot_update(client, student_user):
    assert client.put("/api/fundraisers/7", json={"name": "New name"}).status_code == 403


def test_school_updates_own_fundraiser(client, school_user):
    user, _ = school_user
    with patch("schoolraise.routers.fundraisers.school_service.get_school_by_user_id") as get_school, \
         patch(f"{SERVICE}.update_fundraiser") as update:
        get_school.return_value = make_school_mock(school_id=1, user_id=user.id)
        update.return_value = make_fundraiser_mock(7, name="New name")
        response = client.put("/api/fundraisers/7", json={"name": "New name"})

    assert response.status_code == 200
    assert update.call_args.kwargs["school_id"] == 1


def test_school_cannot_update_other_school_fundraiser(client, school_user):
    with patch("schoolraise.routers.fundraisers.school_service.get_school_by_user_id") as get_school, \
         patch(f"{SERVICE}.update_fundraiser") as update:
        get_school.return_value = make_school_mock()
        update.side_effect = ValueError("This fundraiser belongs to another school.")
        response = client.put("/api/fundraisers/7", json={"name": "New name"})

    assert response.status_code == 403


def test_admin_updates_any_fundraiser(client, admin_user):
    with patch(f"{SERVICE}.update_fundraiser") as update:
        update.return_value = make_fundraiser_mock(7, is_active=False)
        response = client.put("/api/fundraisers/7", json={"isActive": False})

    assert response.status_code == 200
    assert update.call_args.kwargs["school_id"] is None
    assert response.json()["isActive"] is False


def test_update_unknown_fundraiser(client, admin_user):
    with patch(f"{SERVICE}.update_fundraiser") as update:
        update.return_value = None
        assert client.put("/api/fundraisers/7", json={"name": "New name"}).status_code == 404


# ============================================================
# GET /api/fundraisers/{id}/qr
# ============================================================

def test_qr_code_png(client):
    with patch(f"{SERVICE}.get_fundraiser") as get_one, \
         patch(f"{SERVICE}.share_url") as share_url, \
         patch(f"{SERVICE}.generate_qr_image") as generate:
        get_one.return_value = make_fundraiser_mock(7)
        share_url.return_value = "http://localhost:8000/fundraiser/7?ref=3"
        generate.return_value = b"\x89PNG fake"
        response = client.get("/api/fundraisers/7/qr?ref=3")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    share_url.assert_called_once_with(7, 3)
    generate.assert_called_once_with("http://localhost:8000/fundraiser/7?ref=3")


def test_qr_code_unknown_fundraiser(client):
    with patch(f"{SERVICE}.get_fundraiser") as get_one:
        get_one.return_value = None
        assert client.get("/api/fundraisers/7/qr").status_code == 404
