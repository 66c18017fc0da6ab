"""
Loaders behind the cached page queries.

Keys are the JSON endpoint paths serving the same data, so a page and the
API agree on what a write has to invalidate. Loaders return Pydantic models,
never ORM rows, because cached values outlive the request session.
"""

from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.models.user import User
from schoolraise.presentation.query_cache import QueryCacheRegistry, QueryState
from schoolraise.schemas.fundraiser import FundraiserResponse
from schoolraise.schemas.notification import NotificationResponse
from schoolraise.schemas.school import SchoolSummary
from schoolraise.services import (
    auth_service,
    fundraiser_service,
    notification_service,
    sales_service,
    school_service,
    student_service,
)

USER_INFO = "/api/user/info"
ADMIN_SCHOOLS = "/api/admin/schools"
ADMIN_STUDENTS = "/api/admin/students"
ADMIN_SALES = "/api/admin/sales-summary"
DASHBOARD_STATS = "/api/dashboard/stats"
SCHOOL_STUDENTS = "/api/school/students"
SCHOOL_FUNDRAISERS = "/api/school/fundraisers"
SCHOOL_SALES = "/api/school/sales-summary"
STUDENT_SCHOOL = "/api/student/school"
STUDENT_FUNDRAISERS = "/api/student/fundraisers"
STUDENT_PAST_FUNDRAISERS = "/api/student/past-fundraisers"
STUDENT_SALES = "/api/student/sales-summary"
NOTIFICATIONS = "/api/notifications"
NOTIFICATIONS_UNREAD = "/api/notifications/unread"

# Keys touched by each kind of write; invalidated for every user.
AFTER_REGISTER = (ADMIN_SCHOOLS, ADMIN_STUDENTS, ADMIN_SALES, DASHBOARD_STATS, SCHOOL_STUDENTS, USER_INFO)
AFTER_SCHOOL_UPDATE = (USER_INFO, ADMIN_SCHOOLS, ADMIN_STUDENTS, ADMIN_SALES, STUDENT_SCHOOL)
# Sales amounts sum each ticket's fundraiser price, so a price edit reaches every summary.
AFTER_FUNDRAISER_WRITE = (
    SCHOOL_FUNDRAISERS,
    STUDENT_FUNDRAISERS,
    STUDENT_PAST_FUNDRAISERS,
    ADMIN_SALES,
    SCHOOL_SALES,
    STUDENT_SALES,
)
AFTER_JOIN = (STUDENT_FUNDRAISERS, STUDENT_PAST_FUNDRAISERS, STUDENT_SALES, SCHOOL_SALES, ADMIN_SALES)
AFTER_NOTIFICATION = (NOTIFICATIONS, NOTIFICATIONS_UNREAD)

query_caches = QueryCacheRegistry(ttl_seconds=settings.QUERY_CACHE_TTL_SECONDS)


def _school_id(db: Session, user: User) -> int:
    school = school_service.get_school_by_user_id(db, user.id)
    if school is None:
        raise LookupError("School not found")
    return school.id


def _student(db: Session, user: User):
    student = student_service.get_student_by_user_id(db, user.id)
    if student is None:
        raise LookupError("Student not found")
    return student


def _student_school(db: Session, user: User) -> Optional[SchoolSummary]:
    school = school_service.get_school(db, _student(db, user).school_id)
    return SchoolSummary.model_validate(school) if school is not None else None


def _fundraisers(rows) -> list[FundraiserResponse]:
    return [FundraiserResponse.model_validate(row) for row in rows]


def _notifications(rows) -> list[NotificationResponse]:
    return [NotificationResponse.model_validate(row) for row in rows]


LOADERS: Dict[str, Callable[[Session, User], Any]] = {
    USER_INFO: lambda db, user: auth_service.get_user_info(db, user),
    ADMIN_SCHOOLS: lambda db, user: school_service.get_all_schools_with_student_count(db),
    ADMIN_STUDENTS: lambda db, user: student_service.get_all_students(db),
    ADMIN_SALES: lambda db, user: sales_service.platform_sales_summary(db),
    DASHBOARD_STATS: lambda db, user: school_service.get_dashboard_stats(db),
    SCHOOL_STUDENTS: lambda db, user: student_service.get_students_by_school(db, _school_id(db, user)),
    SCHOOL_FUNDRAISERS: lambda db, user: _fundraisers(
        fundraiser_service.get_school_fundraisers(db, _school_id(db, user))
    ),
    SCHOOL_SALES: lambda db, user: sales_service.school_sales_summary(db, _school_id(db, user)),
    STUDENT_SCHOOL: _student_school,
    STUDENT_FUNDRAISERS: lambda db, user: fundraiser_service.get_student_fundraisers(db, _student(db, user)),
    STUDENT_PAST_FUNDRAISERS: lambda db, user: fundraiser_service.get_student_fundraisers(
        db, _student(db, user), past=True
    ),
    STUDENT_SALES: lambda db, user: sales_service.student_sales_summary(db, _student(db, user).id),
    NOTIFICATIONS: lambda db, user: _notifications(notification_service.get_notifications(db, user.id)),
    NOTIFICATIONS_UNREAD: lambda db, user: _notifications(
        notification_service.get_notifications(db, user.id, unread_only=True)
    ),
}


def fetch(db: Session, user: User, key: str, registry: Optional[QueryCacheRegistry] = None) -> QueryState:
    """Cached read of one query for the user."""
    loader = LOADERS[key]
    cache = (registry or query_caches).for_user(user.id)
    return cache.fetch(key, lambda: loader(db, user))


def invalidate(keys, user_id: Optional[int] = None, registry: Optional[QueryCacheRegistry] = None) -> None:
    (registry or query_caches).invalidate(keys, user_id=user_id)
