"""
Server-rendered pages.

GET requests on dashboard paths go through the routing table (render, redirect
to /auth or to the role fallback, or the not-found page). Form posts follow
post/redirect/get: the outcome travels in the "message" or "error" query parameter.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.database import get_db
from schoolraise.dependencies import get_optional_user, get_session_id
from schoolraise.models.user import User, UserRole
from schoolraise.presentation import components, forms, queries
from schoolraise.presentation.pages import PAGE_BUILDERS
from schoolraise.presentation.routing import AUTH_PATH, Action, decide, home_for
from schoolraise.routers.auth import set_session_cookie
from schoolraise.schemas.school import SchoolSummary
from schoolraise.schemas.user import RegisterRequest
from schoolraise.services import (
    auth_service,
    fundraiser_service,
    school_service,
    session_service,
    student_service,
)

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.filters["currency"] = components.format_currency
templates.env.filters["date"] = components.format_date

router = APIRouter(tags=["Pages"], include_in_schema=False)

NAV_LINKS = {
    UserRole.ADMIN.value: [("/", "Dashboard"), ("/admin/schools", "Schools"), ("/admin/students", "Students")],
    UserRole.SCHOOL.value: [
        ("/school", "Dashboard"),
        ("/school/students", "Students"),
        ("/school/fundraisers", "Fundraisers"),
        ("/school/profile", "Profile"),
    ],
    UserRole.STUDENT.value: [("/student", "Dashboard"), ("/student/fundraisers", "Fundraisers")],
}


def _render(request: Request, template: str, user: Optional[User], context: dict, status_code: int = 200):
    context = {
        "user": user,
        "nav_links": NAV_LINKS.get(user.role, []) if user is not None else [],
        "message": request.query_params.get("message"),
        "error": request.query_params.get("error"),
        **context,
    }
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def _redirect(location: str, result: Optional[forms.FormResult] = None) -> RedirectResponse:
    if result is not None:
        key = "message" if result.ok else "error"
        location = f"{location}?{urlencode({key: result.message})}"
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


def _guard(user: Optional[User], role: UserRole) -> Optional[RedirectResponse]:
    """Redirect for a form post made without a session or with the wrong role."""
    if user is None:
        return _redirect(AUTH_PATH)
    if user.role != role.value:
        return _redirect(home_for(user))
    return None


def not_found_page(request: Request, user: Optional[User] = None):
    return _render(request, "not_found.html", user, {"title": "Page not found"}, status_code=404)


# --- Authentication ---

def _auth_page(request: Request, db: Session, error: Optional[str] = None, status_code: int = 200):
    schools = [SchoolSummary.model_validate(s) for s in school_service.get_all_schools(db)]
    return _render(
        request, "auth.html", None,
        {"title": "Sign in", "schools": schools, "form_error": error},
        status_code=status_code,
    )


@router.get("/auth")
def auth_page(request: Request, user: Optional[User] = Depends(get_optional_user), db: Session = Depends(get_db)):
    if user is not None:
        return _redirect(home_for(user))
    return _auth_page(request, db)


@router.post("/auth/login")
def login_form(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    user = auth_service.authenticate(db, email.strip(), password)
    if user is None:
        return _auth_page(request, db, "Invalid email or password", status_code=401)

    response = _redirect(home_for(user))
    set_session_cookie(response, session_service.create_session(db, user))
    return response


@router.post("/auth/register")
def register_form(
    request: Request,
    email: str = Form(...),
    username: str = Form(...),
    password: str = Form(...),
    role: str = Form(...),
    name: Optional[str] = Form(None),
    admin_name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    school_id: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    try:
        data = RegisterRequest(
            email=email.strip(),
            username=username,
            password=password,
            role=role,
            name=name or None,
            admin_name=admin_name or None,
            address=address or None,
            school_id=school_id or None,
        )
        user = auth_service.register_user(db, data)
    except ValidationError as e:
        return _auth_page(request, db, "; ".join(forms.validation_messages(e)), status_code=400)
    except ValueError as e:
        return _auth_page(request, db, str(e), status_code=400)

    queries.invalidate(queries.AFTER_REGISTER)
    response = _redirect(home_for(user))
    set_session_cookie(response, session_service.create_session(db, user))
    return response


@router.post("/auth/logout")
def logout_form(sid: Optional[str] = Depends(get_session_id), db: Session = Depends(get_db)):
    user = session_service.get_session_user(db, sid)
    session_service.destroy_session(db, sid)
    if user is not None:
        queries.query_caches.drop(user.id)
    response = _redirect(AUTH_PATH)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


# --- Public fundraiser page ---

@router.get("/fundraiser/{fundraiser_id}")
def public_fundraiser(
    request: Request,
    fundraiser_id: int,
    ref: Optional[int] = None,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    fundraiser = fundraiser_service.get_fundraiser(db, fundraiser_id)
    if fundraiser is None:
        return not_found_page(request, user)

    referrer = student_service.get_student(db, ref) if ref is not None else None
    return _render(request, "public_fundraiser.html", user, {
        "title": fundraiser.name,
        "fundraiser": fundraiser,
        "school": school_service.get_school(db, fundraiser.school_id),
        "referrer": referrer.user.username if referrer is not None and referrer.user else None,
        "share_url": fundraiser_service.share_url(fundraiser.id, ref),
        "qr_url": f"/api/fundraisers/{fundraiser.id}/qr" + (f"?ref={ref}" if ref is not None else ""),
    })


# --- Form posts ---

@router.post("/school/profile")
def edit_school_form(
    name: str = Form(""),
    admin_name: str = Form(""),
    address: str = Form(""),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    redirect = _guard(user, UserRole.SCHOOL)
    if redirect is not None:
        return redirect
    school = school_service.get_school_by_user_id(db, user.id)
    if school is None:
        return _redirect("/school/profile", forms.FormResult(ok=False, message="School not found"))
    result = forms.edit_school(db, user, school, {"name": name, "admin_name": admin_name, "address": address})
    return _redirect("/school/profile", result)


@router.post("/school/fundraisers")
def create_fundraiser_form(
    name: str = Form(""),
    location: str = Form(""),
    event_date: str = Form(""),
    price: str = Form(""),
    is_active: Optional[str] = Form(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    redirect = _guard(user, UserRole.SCHOOL)
    if redirect is not None:
        return redirect
    school = school_service.get_school_by_user_id(db, user.id)
    if school is None:
        return _redirect("/school/fundraisers", forms.FormResult(ok=False, message="School not found"))
    result = forms.create_fundraiser(db, school, {
        "name": name, "location": location, "event_date": event_date, "price": price, "is_active": is_active,
    })
    return _redirect("/school/fundraisers", result)


@router.post("/school/fundraisers/{fundraiser_id}")
def edit_fundraiser_form(
    fundraiser_id: int,
    name: str = Form(""),
    location: str = Form(""),
    event_date: str = Form(""),
    price: str = Form(""),
    is_active: Optional[str] = Form(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    redirect = _guard(user, UserRole.SCHOOL)
    if redirect is not None:
        return redirect
    school = school_service.get_school_by_user_id(db, user.id)
    if school is None:
        return _redirect("/school/fundraisers", forms.FormResult(ok=False, message="School not found"))
    result = forms.edit_fundraiser(db, school, fundraiser_id, {
        "name": name, "location": location, "event_date": event_date, "price": price, "is_active": is_active,
    })
    return _redirect("/school/fundraisers", result)


@router.post("/student/fundraisers/{fundraiser_id}/join")
def join_fundraiser_form(
    fundraiser_id: int,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    redirect = _guard(user, UserRole.STUDENT)
    if redirect is not None:
        return redirect
    student = student_service.get_student_by_user_id(db, user.id)
    if student is None:
        return _redirect("/student/fundraisers", forms.FormResult(ok=False, message="Student not found"))
    return _redirect("/student/fundraisers", forms.join_fundraiser(db, student, fundraiser_id))


@router.post("/notifications")
def notification_form(
    title: str = Form(""),
    message: str = Form(""),
    type: str = Form("info"),
    recipient_id: str = Form(""),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if user is None:
        return _redirect(AUTH_PATH)
    result = forms.create_notification(db, user, {
        "title": title, "message": message, "type": type, "recipient_id": recipient_id,
    })
    return _redirect(home_for(user), result)


@router.post("/notifications/mass")
def mass_notification_form(
    title: str = Form(""),
    message: str = Form(""),
    type: str = Form("info"),
    school_id: str = Form(""),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if user is None:
        return _redirect(AUTH_PATH)
    result = forms.mass_notification(db, user, {
        "title": title, "message": message, "type": type, "school_id": school_id,
    })
    return _redirect(home_for(user), result)


@router.post("/notifications/read-all")
def read_all_form(user: Optional[User] = Depends(get_optional_user), db: Session = Depends(get_db)):
    if user is None:
        return _redirect(AUTH_PATH)
    return _redirect(home_for(user), forms.mark_all_read(db, user))


# --- Role-gated pages (must stay last: catch-all) ---

@router.get("/{path:path}")
def page(
    request: Request,
    path: str,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if path == "api" or path.startswith("api/"):
        return JSONResponse(status_code=404, content={"detail": "Not Found"})

    decision = decide(path, user)
    if decision.action == Action.NOT_FOUND:
        return not_found_page(request, user)
    if decision.action == Action.REDIRECT:
        return _redirect(decision.location)

    context = PAGE_BUILDERS[decision.route.page](db, user, request.query_params)
    return _render(request, f"{decision.route.page}.html", user, context)
