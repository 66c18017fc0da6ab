"""
Pydantic schemas for schools.
"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from schoolraise.schemas.common import CamelModel, min_length


class SchoolUpdate(CamelModel):
    """Fields a school account may edit on its own profile (PUT /api/school/update)."""
    name: Optional[str] = None
    admin_name: Optional[str] = None
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_long_enough(cls, v: Optional[str]) -> Optional[str]:
        return min_length(v, 2, "School name") if v is not None else v

    @field_validator("admin_name")
    @classmethod
    def admin_name_long_enough(cls, v: Optional[str]) -> Optional[str]:
        return min_length(v, 2, "Admin name") if v is not None else v


class SchoolResponse(CamelModel):
    id: int
    name: str
    admin_name: str
    address: Optional[str] = None
    user_id: int
    created_at: datetime


class SchoolWithStudentCount(CamelModel):
    school: SchoolResponse
    student_count: int


class SchoolSummary(CamelModel):
    """Name-only reference to a school, embedded in student rows."""
    id: int
    name: str
    address: Optional[str] = None
