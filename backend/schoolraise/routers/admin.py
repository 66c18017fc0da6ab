"""
Router for the admin dashboard (admin role only).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schoolraise.database import get_db
from schoolraise.dependencies import require_role
from schoolraise.models.user import UserRole
from schoolraise.schemas.sales import PlatformSalesSummary
from schoolraise.schemas.school import SchoolWithStudentCount
from schoolraise.schemas.student import StudentResponse
from schoolraise.services import sales_service, school_service, student_service

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)


@router.get("/schools", response_model=List[SchoolWithStudentCount], summary="Every school with its student count")
def list_schools(db: Session = Depends(get_db)):
    return school_service.get_all_schools_with_student_count(db)


@router.get("/students", response_model=List[StudentResponse], summary="Every student with their school")
def list_students(db: Session = Depends(get_db)):
    return student_service.get_all_students(db)


@router.get("/sales-summary", response_model=PlatformSalesSummary, summary="Ticket sales across all schools")
def sales_summary(db: Session = Depends(get_db)):
    """Totals for the platform plus one row per school, schools without sales included."""
    return sales_service.platform_sales_summary(db)
