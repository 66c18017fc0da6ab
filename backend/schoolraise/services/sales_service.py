"""
Ticket-sales aggregation.

A ticket is one student_fundraisers row. Amounts are the sum of the joined
fundraisers' prices in cents, so with the default price every ticket counts
for DEFAULT_TICKET_PRICE_CENTS.

All summaries return zeros rather than failing when nothing has been sold.
"""

import logging

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from schoolraise.models.fundraiser import Fundraiser, StudentFundraiser
from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.schemas.sales import (
    PlatformSalesSummary,
    SalesSummary,
    SchoolSalesRow,
    StudentSalesSummary,
)

logger = logging.getLogger(__name__)


def school_sales_summary(db: Session, school_id: int) -> SalesSummary:
    """
    Tickets sold by the students of one school.

    - total_tickets: enrollments whose student belongs to the school
    - total_amount: sum of the enrolled fundraisers' prices
    - student_count: distinct students of the school with at least one ticket
    """
    total_tickets, total_amount, student_count = db.execute(
        select(
            func.count(StudentFundraiser.id),
            func.coalesce(func.sum(Fundraiser.price), 0),
            func.count(distinct(StudentFundraiser.student_id)),
        )
        .select_from(StudentFundraiser)
        .join(Student, Student.id == StudentFundraiser.student_id)
        .join(Fundraiser, Fundraiser.id == StudentFundraiser.fundraiser_id)
        .where(Student.school_id == school_id)
    ).one()

    return SalesSummary(
        total_tickets=int(total_tickets or 0),
        total_amount=int(total_amount or 0),
        student_count=int(student_count or 0),
    )


def student_sales_summary(db: Session, student_id: int) -> StudentSalesSummary:
    """Tickets and amount for a single student."""
    total_tickets, total_amount = db.execute(
        select(
            func.count(StudentFundraiser.id),
            func.coalesce(func.sum(Fundraiser.price), 0),
        )
        .select_from(StudentFundraiser)
        .join(Fundraiser, Fundraiser.id == StudentFundraiser.fundraiser_id)
        .where(StudentFundraiser.student_id == student_id)
    ).one()

    return StudentSalesSummary(
        total_tickets=int(total_tickets or 0),
        total_amount=int(total_amount or 0),
    )


def platform_sales_summary(db: Session) -> PlatformSalesSummary:
    """
    Admin dashboard totals with a per-school breakdown.
    Schools without sales are listed with zeros; school_count only counts
    schools that sold at least one ticket.
    """
    rows = db.execute(
        select(
            School.id,
            School.name,
            func.count(StudentFundraiser.id),
            func.coalesce(func.sum(Fundraiser.price), 0),
            func.count(distinct(StudentFundraiser.student_id)),
        )
        .select_from(School)
        .outerjoin(Student, Student.school_id == School.id)
        .outerjoin(StudentFundraiser, StudentFundraiser.student_id == Student.id)
        .outerjoin(Fundraiser, Fundraiser.id == StudentFundraiser.fundraiser_id)
        .group_by(School.id, School.name)
        .order_by(School.name, School.id)
    ).all()

    schools = [
        SchoolSalesRow(
            school_id=school_id,
            school_name=name,
            total_tickets=int(tickets or 0),
            total_amount=int(amount or 0),
            student_count=int(students or 0),
        )
        for school_id, name, tickets, amount, students in rows
    ]

    summary = PlatformSalesSummary(
        total_tickets=sum(s.total_tickets for s in schools),
        total_amount=sum(s.total_amount for s in schools),
        school_count=sum(1 for s in schools if s.total_tickets > 0),
        student_count=sum(s.student_count for s in schools),
        schools=schools,
    )
    logger.debug(
        "Platform sales: %d tickets, %d cents across %d schools",
        summary.total_tickets, summary.total_amount, summary.school_count,
    )
    return summary
