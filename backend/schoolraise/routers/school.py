"""
Router for school accounts: their students, fundraisers, profile and sales.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolraise.database import get_db
from schoolraise.dependencies import get_current_school
from schoolraise.models.school import School
from schoolraise.presentation import queries
from schoolraise.schemas.fundraiser import FundraiserCreate, FundraiserResponse
from schoolraise.schemas.sales import SalesSummary
from schoolraise.schemas.school import SchoolResponse, SchoolUpdate
from schoolraise.schemas.student import StudentResponse
from schoolraise.services import fundraiser_service, sales_service, school_service, student_service

router = APIRouter(prefix="/api/school", tags=["School"])


@router.get("/students", response_model=List[StudentResponse], summary="Students of my school")
def list_students(school: School = Depends(get_current_school), db: Session = Depends(get_db)):
    return student_service.get_students_by_school(db, school.id)


@router.get("/fundraisers", response_model=List[FundraiserResponse], summary="Fundraisers of my school")
def list_fundraisers(school: School = Depends(get_current_school), db: Session = Depends(get_db)):
    return fundraiser_service.get_school_fundraisers(db, school.id)


@router.post("/fundraisers", response_model=FundraiserResponse, status_code=201, summary="Create a fundraiser")
def create_fundraiser(
    data: FundraiserCreate,
    school: School = Depends(get_current_school),
    db: Session = Depends(get_db),
):
    """Creates a fundraiser for the current school. Without a price the default ticket price applies."""
    fundraiser = fundraiser_service.create_fundraiser(db, school.id, data)
    queries.invalidate(queries.AFTER_FUNDRAISER_WRITE)
    return fundraiser


@router.put("/update", response_model=SchoolResponse, summary="Update my school profile")
def update_school(
    data: SchoolUpdate,
    school: School = Depends(get_current_school),
    db: Session = Depends(get_db),
):
    result = school_service.update_school(db, school.id, data)
    if result is None:
        raise HTTPException(status_code=404, detail="School not found")
    queries.invalidate(queries.AFTER_SCHOOL_UPDATE)
    return result


@router.get("/sales-summary", response_model=SalesSummary, summary="Ticket sales of my school")
def sales_summary(school: School = Depends(get_current_school), db: Session = Depends(get_db)):
    return sales_service.school_sales_summary(db, school.id)
