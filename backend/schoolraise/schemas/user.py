"""
Pydantic schemas for accounts: registration, login and the current user.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, field_validator, model_validator

from schoolraise.models.user import UserRole
from schoolraise.schemas.common import CamelModel, min_length


class RegisterRequest(CamelModel):
    """Registration payload (POST /api/register). Extra fields depend on the role."""
    email: EmailStr
    username: str
    password: str
    role: UserRole

    # role=school
    name: Optional[str] = None
    admin_name: Optional[str] = None
    address: Optional[str] = None

    # role=student
    school_id: Optional[int] = None

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: str) -> str:
        return min_length(v, 3, "Username")

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters.")
        return v

    @model_validator(mode="after")
    def role_specific_fields(self) -> "RegisterRequest":
        if self.role == UserRole.ADMIN:
            raise ValueError("Admin accounts cannot be self-registered.")
        if self.role == UserRole.SCHOOL:
            self.name = min_length(self.name or "", 2, "School name")
            self.admin_name = min_length(self.admin_name or "", 2, "Admin name")
        elif self.role == UserRole.STUDENT:
            if self.school_id is None or self.school_id < 1:
                raise ValueError("Please select a school.")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    """Public view of a user; the password hash is never serialized."""
    id: int
    email: str
    username: str
    role: UserRole
    created_at: datetime
