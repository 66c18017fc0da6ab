"""
Router for student accounts: their school, fundraisers and tickets.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolraise.database import get_db
from schoolraise.dependencies import get_current_student
from schoolraise.models.student import Student
from schoolraise.presentation import queries
from schoolraise.schemas.fundraiser import StudentFundraiserResponse
from schoolraise.schemas.sales import StudentSalesSummary
from schoolraise.schemas.school import SchoolSummary
from schoolraise.services import fundraiser_service, sales_service, school_service

router = APIRouter(prefix="/api/student", tags=["Student"])


@router.get("/school", response_model=SchoolSummary, summary="My school")
def my_school(student: Student = Depends(get_current_student), db: Session = Depends(get_db)):
    school = school_service.get_school(db, student.school_id)
    if school is None:
        raise HTTPException(status_code=404, detail="School not found")
    return school


@router.get("/fundraisers", response_model=List[StudentFundraiserResponse], summary="Open fundraisers")
def current_fundraisers(student: Student = Depends(get_current_student), db: Session = Depends(get_db)):
    """Active, upcoming fundraisers of my school, flagged with whether I joined them."""
    return fundraiser_service.get_student_fundraisers(db, student)


@router.get("/past-fundraisers", response_model=List[StudentFundraiserResponse], summary="Past fundraisers")
def past_fundraisers(student: Student = Depends(get_current_student), db: Session = Depends(get_db)):
    return fundraiser_service.get_student_fundraisers(db, student, past=True)


@router.post("/fundraisers/{fundraiser_id}/join", status_code=201, summary="Join a fundraiser")
def join_fundraiser(
    fundraiser_id: int,
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    """
    Enrolls the student (one ticket).
    404 when the fundraiser does not exist, 409 when already joined, 400 otherwise.
    """
    try:
        enrollment = fundraiser_service.join_fundraiser(db, student, fundraiser_id)
    except ValueError as e:
        message = str(e)
        if "not found" in message:
            raise HTTPException(status_code=404, detail=message)
        if "already joined" in message:
            raise HTTPException(status_code=409, detail=message)
        raise HTTPException(status_code=400, detail=message)

    queries.invalidate(queries.AFTER_JOIN)
    return {
        "id": enrollment.id,
        "studentId": enrollment.student_id,
        "fundraiserId": enrollment.fundraiser_id,
        "joinedAt": enrollment.joined_at,
    }


@router.get("/sales-summary", response_model=StudentSalesSummary, summary="My tickets")
def sales_summary(student: Student = Depends(get_current_student), db: Session = Depends(get_db)):
    return sales_service.student_sales_summary(db, student.id)
