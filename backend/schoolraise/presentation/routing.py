"""
Role-gated page routing.

Every dashboard page is declared once in PAGE_ROUTES with the roles allowed to
see it and where to send everyone else. decide() is the single place that
turns (path, user) into render / redirect / not-found.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from schoolraise.models.user import User, UserRole

AUTH_PATH = "/auth"


@dataclass(frozen=True)
class PageRoute:
    path: str
    page: str
    allowed_roles: frozenset
    fallback: str

    def permits(self, user: User) -> bool:
        return user.role in {role.value for role in self.allowed_roles}


def _route(path: str, page: str, role: UserRole, fallback: str) -> PageRoute:
    return PageRoute(path=path, page=page, allowed_roles=frozenset({role}), fallback=fallback)


PAGE_ROUTES: tuple[PageRoute, ...] = (
    _route("/", "admin_dashboard", UserRole.ADMIN, "/school"),
    _route("/admin/students", "admin_students", UserRole.ADMIN, "/"),
    _route("/admin/schools", "admin_schools", UserRole.ADMIN, "/"),
    _route("/school", "school_dashboard", UserRole.SCHOOL, "/student"),
    _route("/school/students", "school_students", UserRole.SCHOOL, "/school"),
    _route("/school/fundraisers", "school_fundraisers", UserRole.SCHOOL, "/school"),
    _route("/school/profile", "school_profile", UserRole.SCHOOL, "/school"),
    _route("/student", "student_dashboard", UserRole.STUDENT, "/"),
    _route("/student/fundraisers", "student_fundraisers", UserRole.STUDENT, "/student"),
)

_ROUTES_BY_PATH = {route.path: route for route in PAGE_ROUTES}

HOME_BY_ROLE = {
    UserRole.ADMIN.value: "/",
    UserRole.SCHOOL.value: "/school",
    UserRole.STUDENT.value: "/student",
}


class Action(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AccessDecision:
    action: Action
    route: Optional[PageRoute] = None
    location: Optional[str] = None


def normalize(path: str) -> str:
    path = "/" + path.strip("/")
    return path


def find_route(path: str) -> Optional[PageRoute]:
    return _ROUTES_BY_PATH.get(normalize(path))


def decide(path: str, user: Optional[User]) -> AccessDecision:
    """
    Unknown path -> NOT_FOUND; no session -> redirect to /auth;
    wrong role -> redirect to the route's fallback; otherwise RENDER.
    """
    route = find_route(path)
    if route is None:
        return AccessDecision(action=Action.NOT_FOUND)
    if user is None:
        return AccessDecision(action=Action.REDIRECT, route=route, location=AUTH_PATH)
    if not route.permits(user):
        return AccessDecision(action=Action.REDIRECT, route=route, location=route.fallback)
    return AccessDecision(action=Action.RENDER, route=route)


def home_for(user: User) -> str:
    return HOME_BY_ROLE.get(user.role, AUTH_PATH)
