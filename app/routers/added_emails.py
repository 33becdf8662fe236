from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.constants import ADDED_EMAIL_CREATE_RATE_LIMIT
from app.core.rate_limit import limiter
from app.database import get_db
from app.schemas import (
    AddedEmailCreate,
    AddedEmailUpdate,
    AddedEmailResponse,
    MessageResponse,
)
from app.services.added_email import AddedEmailService, get_added_email_service
from app.utils.auth import Principal, get_current_principal

router = APIRouter()


@router.get("/added-emails", response_model=List[AddedEmailResponse])
async def list_added_emails(
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    created_by: Optional[UUID] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AddedEmailService = Depends(get_added_email_service),
):
    """List added emails, newest first"""
    return service.list_emails(
        db, principal, limit=limit, offset=offset, created_by=created_by
    )


@router.get("/added-emails/by-email/{email}", response_model=AddedEmailResponse)
async def get_added_email_by_address(
    email: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AddedEmailService = Depends(get_added_email_service),
):
    return service.get_by_address(db, principal, email.strip())


@router.get("/added-emails/{email_id}", response_model=AddedEmailResponse)
async def get_added_email(
    email_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AddedEmailService = Depends(get_added_email_service),
):
    return service.get_email(db, principal, email_id)


@router.post(
    "/added-emails",
    response_model=AddedEmailResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(ADDED_EMAIL_CREATE_RATE_LIMIT)
async def create_added_email(
    request: Request,
    data: AddedEmailCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AddedEmailService = Depends(get_added_email_service),
):
    """Add an email. The caller is recorded as its owner unless created_by is given."""
    return service.create_email(db, principal, data.model_dump(exclude_unset=True))


@router.patch("/added-emails/{email_id}", response_model=AddedEmailResponse)
async def update_added_email(
    email_id: int,
    changes: AddedEmailUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AddedEmailService = Depends(get_added_email_service),
):
    """Update an email the caller added"""
    return service.update_email(
        db, principal, email_id, changes.model_dump(exclude_unset=True)
    )


@router.delete("/added-emails/{email_id}", response_model=MessageResponse)
async def delete_added_email(
    email_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: AddedEmailService = Depends(get_added_email_service),
):
    """Delete an email the caller added"""
    service.delete_email(db, principal, email_id)
    return {"message": "Email entry deleted successfully"}
