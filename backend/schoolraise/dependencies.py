"""
FastAPI dependencies for authentication and role checks.

The session cookie is resolved against the persisted session store.
API routes get 401 without a session and 403 on a role mismatch; HTML pages
use get_optional_user and redirect instead.
"""

from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.database import get_db
from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.models.user import User, UserRole
from schoolraise.services import school_service, session_service, student_service


def get_session_id(
    sid: Optional[str] = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return sid


def get_optional_user(
    sid: Optional[str] = Depends(get_session_id),
    db: Session = Depends(get_db),
) -> Optional[User]:
    return session_service.get_session_user(db, sid)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def require_role(role: UserRole):
    """Dependency factory: the current user must have the given role."""

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role != role.value:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return checker


def get_current_school(
    user: User = Depends(require_role(UserRole.SCHOOL)),
    db: Session = Depends(get_db),
) -> School:
    school = school_service.get_school_by_user_id(db, user.id)
    if school is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")
    return school


def get_current_student(
    user: User = Depends(require_role(UserRole.STUDENT)),
    db: Session = Depends(get_db),
) -> Student:
    student = student_service.get_student_by_user_id(db, user.id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student
