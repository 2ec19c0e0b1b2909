"""
app/api/routers/accounts.py

Account management endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_account_id
from app.api.errors import to_http_exception
from app.services.account_service import AccountService, get_account_service
from db.session import get_db
from ledger.errors import LedgerError

router = APIRouter(prefix="/accounts", tags=["accounts"])


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class AccountCreateRequest(BaseModel):
    name: str
    email: str
    company: str | None = None


class AccountResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    company: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_account(
    body: AccountCreateRequest,
    db: Session = Depends(get_db),
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """
    Create a new account record.

    Raises HTTP 422 if the email is malformed or already registered.
    """
    try:
        account = service.create_account(db=db, name=body.name, email=body.email, company=body.company)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return AccountResponse.model_validate(account)


@router.get("/me", response_model=AccountResponse)
def get_current_account(
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = service.get_account(db=db, account_id=account_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return AccountResponse.model_validate(account)
