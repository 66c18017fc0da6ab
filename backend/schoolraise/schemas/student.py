"""
Pydantic schemas for students.
"""

from datetime import datetime
from typing import Optional

from schoolraise.models.user import UserRole
from schoolraise.schemas.common import CamelModel
from schoolraise.schemas.school import SchoolSummary, SchoolWithStudentCount


class StudentUserInfo(CamelModel):
    id: int
    email: str
    username: str
    role: UserRole
    created_at: datetime


class StudentResponse(CamelModel):
    """A student row with its user account and, for admin listings, its school."""
    id: int
    school_id: int
    user_id: int
    created_at: datetime
    user: StudentUserInfo
    school: Optional[SchoolSummary] = None


class StudentWithSchool(CamelModel):
    id: int
    school_id: int
    user_id: int
    created_at: datetime
    school: Optional[SchoolSummary] = None


class UserInfoResponse(CamelModel):
    """GET /api/user/info: the current user plus the record attached to its role."""
    id: int
    email: str
    username: str
    role: UserRole
    created_at: datetime
    school: Optional[SchoolWithStudentCount] = None
    student: Optional[StudentWithSchool] = None


class DashboardStats(CamelModel):
    total_schools: int
    total_students: int
