"""
Pydantic schemas for fundraisers.

Prices are integer cents; a missing price falls back to the default ticket price.
"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from schoolraise.schemas.common import CamelModel, min_length


class FundraiserCreate(CamelModel):
    name: str
    location: str
    event_date: datetime
    price: Optional[int] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_long_enough(cls, v: str) -> str:
        return min_length(v, 2, "Fundraiser name")

    @field_validator("location")
    @classmethod
    def location_long_enough(cls, v: str) -> str:
        return min_length(v, 2, "Location")

    @field_validator("price")
    @classmethod
    def price_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Price must be a positive amount in cents.")
        return v


class FundraiserUpdate(CamelModel):
    """Partial update: only the provided fields change."""
    name: Optional[str] = None
    location: Optional[str] = None
    event_date: Optional[datetime] = None
    price: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("name", "location")
    @classmethod
    def not_too_short(cls, v: Optional[str]) -> Optional[str]:
        return min_length(v, 2, "Field") if v is not None else v

    @field_validator("price")
    @classmethod
    def price_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Price must be a positive amount in cents.")
        return v


class FundraiserResponse(CamelModel):
    id: int
    name: str
    location: str
    school_id: int
    is_active: bool
    event_date: datetime
    price: int
    created_at: datetime


class StudentFundraiserResponse(FundraiserResponse):
    """A fundraiser as seen by a student: whether they already joined it."""
    joined: bool = False
    joined_at: Optional[datetime] = None
