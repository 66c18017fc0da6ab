"""
Public school lookups used by the registration form and the public fundraiser page.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolraise.database import get_db
from schoolraise.schemas.school import SchoolSummary
from schoolraise.services import school_service

router = APIRouter(prefix="/api/schools", tags=["Schools"])


@router.get("/list", response_model=List[SchoolSummary], summary="Schools available at registration")
def list_schools(db: Session = Depends(get_db)):
    return school_service.get_all_schools(db)


@router.get("/{school_id}", response_model=SchoolSummary, summary="Public school details")
def get_school(school_id: int, db: Session = Depends(get_db)):
    school = school_service.get_school(db, school_id)
    if school is None:
        raise HTTPException(status_code=404, detail="School not found")
    return school
