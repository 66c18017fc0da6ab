"""
Router for single fundraisers: public details, edition and share QR code.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from schoolraise.database import get_db
from schoolraise.dependencies import get_current_user
from schoolraise.models.user import User, UserRole
from schoolraise.presentation import queries
from schoolraise.schemas.fundraiser import FundraiserResponse, FundraiserUpdate
from schoolraise.services import fundraiser_service, school_service

router = APIRouter(prefix="/api/fundraisers", tags=["Fundraisers"])


@router.get("/{fundraiser_id}", response_model=FundraiserResponse, summary="Fundraiser details")
def get_fundraiser(fundraiser_id: int, db: Session = Depends(get_db)):
    fundraiser = fundraiser_service.get_fundraiser(db, fundraiser_id)
    if fundraiser is None:
        raise HTTPException(status_code=404, detail="Fundraiser not found")
    return fundraiser


@router.put("/{fundraiser_id}", response_model=FundraiserResponse, summary="Edit a fundraiser")
def update_fundraiser(
    fundraiser_id: int,
    data: FundraiserUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """A school may edit its own fundraisers; an admin may edit any of them."""
    if user.role == UserRole.SCHOOL.value:
        school = school_service.get_school_by_user_id(db, user.id)
        if school is None:
            raise HTTPException(status_code=404, detail="School not found")
        school_id: Optional[int] = school.id
    elif user.role == UserRole.ADMIN.value:
        school_id = None
    else:
        raise HTTPException(status_code=403, detail="Forbidden")

    try:
        fundraiser = fundraiser_service.update_fundraiser(db, fundraiser_id, data, school_id=school_id)
    except ValueError as e:
        raise HTTPException(status_code=403, detail=str(e))
    if fundraiser is None:
        raise HTTPException(status_code=404, detail="Fundraiser not found")

    queries.invalidate(queries.AFTER_FUNDRAISER_WRITE)
    return fundraiser


@router.get("/{fundraiser_id}/qr", summary="Share QR code (PNG)")
def fundraiser_qr(fundraiser_id: int, ref: Optional[int] = None, db: Session = Depends(get_db)):
    """QR code pointing to the public page of the fundraiser, with the referring student when given."""
    if fundraiser_service.get_fundraiser(db, fundraiser_id) is None:
        raise HTTPException(status_code=404, detail="Fundraiser not found")
    png = fundraiser_service.generate_qr_image(fundraiser_service.share_url(fundraiser_id, ref))
    return Response(content=png, media_type="image/png")
