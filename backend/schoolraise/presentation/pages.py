"""
Page builders: one function per page name of the routing table.

A builder reads everything through the per-user query cache and returns the
template context. Templates are named after the page ("school_dashboard" ->
"school_dashboard.html").
"""

from typing import Callable, Dict, Mapping

from sqlalchemy.orm import Session

from schoolraise.models.user import User
from schoolraise.presentation import components, queries

DASHBOARD_LIMIT = 5

PageBuilder = Callable[[Session, User, Mapping[str, str]], dict]


def _notifications(db: Session, user: User) -> dict:
    unread = queries.fetch(db, user, queries.NOTIFICATIONS_UNREAD)
    return {
        "notifications": components.notification_list(queries.fetch(db, user, queries.NOTIFICATIONS), limit=10),
        "unread_count": len(unread.data or []),
    }


def admin_dashboard(db: Session, user: User, params: Mapping[str, str]) -> dict:
    stats = queries.fetch(db, user, queries.DASHBOARD_STATS)
    sales = queries.fetch(db, user, queries.ADMIN_SALES)
    return {
        "title": "Admin Dashboard",
        "cards": [
            components.stat_card("Total Schools", stats, lambda s: s.total_schools),
            components.stat_card("Total Students", stats, lambda s: s.total_students),
            components.stat_card("Tickets Sold", sales, lambda s: s.total_tickets),
            components.stat_card("Total Sales", sales, lambda s: s.total_amount, money=True),
        ],
        "sales": sales.data,
        "schools": components.school_table(queries.fetch(db, user, queries.ADMIN_SCHOOLS), limit=DASHBOARD_LIMIT),
        "students": components.student_table(
            queries.fetch(db, user, queries.ADMIN_STUDENTS),
            limit=DASHBOARD_LIMIT,
            show_school=True,
            view_all_link="/admin/students",
        ),
        **_notifications(db, user),
    }


def admin_schools(db: Session, user: User, params: Mapping[str, str]) -> dict:
    state = queries.fetch(db, user, queries.ADMIN_SCHOOLS)
    return {
        "title": "Schools",
        "search": params.get("q", ""),
        "schools": components.school_table(state, search=params.get("q")),
        "school_options": [(item.school.id, item.school.name) for item in state.data or []],
    }


def admin_students(db: Session, user: User, params: Mapping[str, str]) -> dict:
    return {
        "title": "Students",
        "search": params.get("q", ""),
        "students": components.student_table(
            queries.fetch(db, user, queries.ADMIN_STUDENTS), search=params.get("q"), show_school=True
        ),
    }


def school_dashboard(db: Session, user: User, params: Mapping[str, str]) -> dict:
    info = queries.fetch(db, user, queries.USER_INFO)
    sales = queries.fetch(db, user, queries.SCHOOL_SALES)
    return {
        "title": "School Dashboard",
        "info": info.data,
        "cards": [
            components.stat_card("Students", info, lambda i: i.school.student_count if i.school else 0),
            components.stat_card("Tickets Sold", sales, lambda s: s.total_tickets),
            components.stat_card("Participating Students", sales, lambda s: s.student_count),
            components.stat_card("Total Sales", sales, lambda s: s.total_amount, money=True),
        ],
        "students": components.student_table(
            queries.fetch(db, user, queries.SCHOOL_STUDENTS),
            limit=DASHBOARD_LIMIT,
            view_all_link="/school/students",
        ),
        "fundraisers": components.fundraiser_table(
            queries.fetch(db, user, queries.SCHOOL_FUNDRAISERS),
            limit=DASHBOARD_LIMIT,
            empty_message="No fundraising events have been created by your school yet.",
            view_all_link="/school/fundraisers",
        ),
        **_notifications(db, user),
    }


def school_students(db: Session, user: User, params: Mapping[str, str]) -> dict:
    return {
        "title": "Students",
        "search": params.get("q", ""),
        "students": components.student_table(
            queries.fetch(db, user, queries.SCHOOL_STUDENTS), search=params.get("q")
        ),
    }


def school_fundraisers(db: Session, user: User, params: Mapping[str, str]) -> dict:
    return {
        "title": "Fundraisers",
        "fundraisers": components.fundraiser_table(
            queries.fetch(db, user, queries.SCHOOL_FUNDRAISERS),
            empty_message="No fundraising events have been created by your school yet.",
        ),
    }


def school_profile(db: Session, user: User, params: Mapping[str, str]) -> dict:
    info = queries.fetch(db, user, queries.USER_INFO)
    school = info.data.school.school if info.data is not None and info.data.school else None
    return {"title": "School Profile", "info_state": info, "school": school}


def student_dashboard(db: Session, user: User, params: Mapping[str, str]) -> dict:
    school = queries.fetch(db, user, queries.STUDENT_SCHOOL)
    sales = queries.fetch(db, user, queries.STUDENT_SALES)
    return {
        "title": "Student Dashboard",
        "school": school.data,
        "cards": [
            components.stat_card("Tickets", sales, lambda s: s.total_tickets),
            components.stat_card("Ticket Value", sales, lambda s: s.total_amount, money=True),
        ],
        "fundraisers": components.fundraiser_table(
            queries.fetch(db, user, queries.STUDENT_FUNDRAISERS),
            limit=DASHBOARD_LIMIT,
            view_all_link="/student/fundraisers",
        ),
        **_notifications(db, user),
    }


def student_fundraisers(db: Session, user: User, params: Mapping[str, str]) -> dict:
    info = queries.fetch(db, user, queries.USER_INFO)
    return {
        "title": "Fundraisers",
        "student_id": info.data.student.id if info.data is not None and info.data.student else None,
        "current": components.fundraiser_table(queries.fetch(db, user, queries.STUDENT_FUNDRAISERS)),
        "past": components.fundraiser_table(
            queries.fetch(db, user, queries.STUDENT_PAST_FUNDRAISERS),
            empty_message="No past fundraising events available in your school's history.",
        ),
    }


PAGE_BUILDERS: Dict[str, PageBuilder] = {
    "admin_dashboard": admin_dashboard,
    "admin_students": admin_students,
    "admin_schools": admin_schools,
    "school_dashboard": school_dashboard,
    "school_students": school_students,
    "school_fundraisers": school_fundraisers,
    "school_profile": school_profile,
    "student_dashboard": student_dashboard,
    "student_fundraisers": student_fundraisers,
}
