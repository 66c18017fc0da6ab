"""
List components shared by the dashboard pages.

Each component turns a QueryState into a TableView that a template renders
without further logic:
  - loading: the query has not produced data yet
  - error:   the query failed (generic message, details are in the logs)
  - empty:   the query succeeded with no rows (explicit message)
  - rows:    ordered rows, truncated to the optional limit
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Sequence

from schoolraise.config import settings
from schoolraise.presentation.query_cache import QueryState, QueryStatus

LOADING = "loading"
ERROR = "error"
EMPTY = "empty"
ROWS = "rows"

DATE_FORMAT = "%b %d, %Y"


@dataclass
class TableView:
    kind: str
    columns: Sequence[str] = ()
    rows: list[dict] = field(default_factory=list)
    message: str = ""
    total: int = 0
    view_all_link: Optional[str] = None


def format_date(value: Optional[datetime]) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def format_currency(cents: Optional[int]) -> str:
    """Integer cents to a display amount, e.g. 1000 -> "R10.00"."""
    return f"{settings.CURRENCY_SYMBOL}{(cents or 0) / 100:,.2f}"


def _matches(search: Optional[str], *values: Optional[str]) -> bool:
    needle = (search or "").strip().lower()
    return not needle or any(needle in (v or "").lower() for v in values)


def _table(
    state: QueryState,
    columns: Sequence[str],
    to_row: Callable[[Any], dict],
    empty_message: str,
    error_message: str,
    limit: Optional[int] = None,
    keep: Callable[[Any], bool] = lambda item: True,
    no_match_message: Optional[str] = None,
    view_all_link: Optional[str] = None,
) -> TableView:
    if state.status == QueryStatus.PENDING:
        return TableView(kind=LOADING, columns=columns, message="Loading...")
    if state.status == QueryStatus.ERROR:
        return TableView(kind=ERROR, columns=columns, message=error_message)

    items: Iterable[Any] = state.data or []
    items = list(items)
    if not items:
        return TableView(kind=EMPTY, columns=columns, message=empty_message)

    matching = [item for item in items if keep(item)]
    if not matching:
        return TableView(kind=EMPTY, columns=columns, message=no_match_message or empty_message)

    shown = matching[:limit] if limit else matching
    return TableView(
        kind=ROWS,
        columns=columns,
        rows=[to_row(item) for item in shown],
        total=len(matching),
        view_all_link=view_all_link if limit and len(matching) > limit else None,
    )


def school_table(
    state: QueryState, limit: Optional[int] = None, search: Optional[str] = None
) -> TableView:
    """Schools with their student count (data: list[SchoolWithStudentCount])."""
    return _table(
        state,
        columns=("Name", "Admin", "Address", "Students", "Created"),
        to_row=lambda item: {
            "id": item.school.id,
            "name": item.school.name,
            "admin_name": item.school.admin_name,
            "address": item.school.address or "No address provided",
            "students": item.student_count,
            "created": format_date(item.school.created_at),
        },
        empty_message="No schools found",
        error_message="Failed to get schools",
        limit=limit,
        keep=lambda item: _matches(search, item.school.name, item.school.admin_name, item.school.address),
        no_match_message="No schools match your search",
        view_all_link="/admin/schools",
    )


def student_table(
    state: QueryState,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    show_school: bool = False,
    view_all_link: Optional[str] = None,
) -> TableView:
    """Students (data: list[StudentResponse]); search is case-insensitive over username and email."""
    columns = ("Username", "Email", "School", "Joined") if show_school else ("Username", "Email", "Joined")

    def to_row(item) -> dict:
        row = {
            "id": item.id,
            "username": item.user.username,
            "email": item.user.email,
            "joined": format_date(item.created_at),
        }
        if show_school:
            row["school"] = item.school.name if item.school else ""
        return row

    return _table(
        state,
        columns=columns,
        to_row=to_row,
        empty_message="No students found",
        error_message="Failed to get students",
        limit=limit,
        keep=lambda item: _matches(search, item.user.username, item.user.email),
        no_match_message="No students match your search",
        view_all_link=view_all_link,
    )


def fundraiser_table(
    state: QueryState,
    limit: Optional[int] = None,
    empty_message: str = "No fundraising events found",
    view_all_link: Optional[str] = None,
) -> TableView:
    """Fundraisers (FundraiserResponse or StudentFundraiserResponse items)."""
    return _table(
        state,
        columns=("Name", "Location", "Date", "Price", "Status"),
        to_row=lambda item: {
            "id": item.id,
            "name": item.name,
            "location": item.location,
            "date": format_date(item.event_date),
            "price": format_currency(item.price),
            "status": "Active" if item.is_active else "Inactive",
            "joined": getattr(item, "joined", False),
        },
        empty_message=empty_message,
        error_message="Failed to get fundraisers",
        limit=limit,
        view_all_link=view_all_link,
    )


def notification_list(state: QueryState, limit: Optional[int] = None) -> TableView:
    return _table(
        state,
        columns=("Title", "Message", "Date"),
        to_row=lambda item: {
            "id": item.id,
            "title": item.title,
            "message": item.message,
            "type": item.type,
            "read": item.read,
            "date": format_date(item.created_at),
        },
        empty_message="No notifications",
        error_message="Failed to get notifications",
        limit=limit,
    )


@dataclass
class StatCard:
    label: str
    value: str
    loading: bool = False


def stat_card(label: str, state: QueryState, pick: Callable[[Any], Any], money: bool = False) -> StatCard:
    """One dashboard figure; shows "..." while loading and "-" on error."""
    if state.status == QueryStatus.PENDING:
        return StatCard(label=label, value="...", loading=True)
    if state.status == QueryStatus.ERROR or state.data is None:
        return StatCard(label=label, value="-")
    value = pick(state.data)
    return StatCard(label=label, value=format_currency(value) if money else str(value))
