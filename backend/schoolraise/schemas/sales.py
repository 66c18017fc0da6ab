"""
Pydantic schemas for the ticket-sales summaries.

Amounts are integer cents. One ticket is one student/fundraiser enrollment.
"""

from typing import List

from schoolraise.schemas.common import CamelModel


class SalesSummary(CamelModel):
    total_tickets: int = 0
    total_amount: int = 0
    student_count: int = 0


class StudentSalesSummary(CamelModel):
    total_tickets: int = 0
    total_amount: int = 0


class SchoolSalesRow(SalesSummary):
    school_id: int
    school_name: str


class PlatformSalesSummary(CamelModel):
    total_tickets: int = 0
    total_amount: int = 0
    school_count: int = 0
    student_count: int = 0
    schools: List[SchoolSalesRow] = []
