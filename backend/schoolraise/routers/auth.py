"""
Router for registration, login and the current user.
The session id travels in an HttpOnly cookie backed by the session table.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.database import get_db
from schoolraise.dependencies import get_current_user, get_session_id
from schoolraise.models.user import User
from schoolraise.presentation import queries
from schoolraise.schemas.student import DashboardStats, UserInfoResponse
from schoolraise.schemas.user import LoginRequest, RegisterRequest, UserResponse
from schoolraise.services import auth_service, school_service, session_service

router = APIRouter(prefix="/api", tags=["Auth"])


def set_session_cookie(response: Response, sid: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sid,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse, status_code=201, summary="Create an account")
def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    """
    Creates a user and the record matching its role (school or student),
    then opens a session for it.
    """
    try:
        user = auth_service.register_user(db, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    set_session_cookie(response, session_service.create_session(db, user))
    queries.invalidate(queries.AFTER_REGISTER)
    return user


@router.post("/login", response_model=UserResponse, summary="Log in")
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    set_session_cookie(response, session_service.create_session(db, user))
    return user


@router.post("/logout", status_code=204, summary="Log out")
def logout(sid: str = Depends(get_session_id), db: Session = Depends(get_db)):
    user = session_service.get_session_user(db, sid)
    session_service.destroy_session(db, sid)
    if user is not None:
        queries.query_caches.drop(user.id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/user", response_model=UserResponse, summary="Current user")
def current_user(user: User = Depends(get_current_user)):
    return user


@router.get("/user/info", response_model=UserInfoResponse, summary="Current user with school/student")
def current_user_info(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return auth_service.get_user_info(db, user)


@router.get("/dashboard/stats", response_model=DashboardStats, summary="Platform counters")
def dashboard_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return school_service.get_dashboard_stats(db)
