"""
app/services/account_service.py

Account registration and lookup. Credentials and sessions are handled
outside the ledger.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from app.services.transactions import ledger_transaction
from db.models.account import Account
from db.repositories.account_repository import AccountRepository
from ledger import suppliers as supplier_rules
from ledger.errors import FieldValidationError

logger = logging.getLogger(__name__)

MAX_ACCOUNT_TEXT_LENGTH = 255


def _clean(field: str, value: str | None, *, required: bool) -> str | None:
    if value is None or not value.strip():
        if required:
            raise FieldValidationError(field, f"{field} is required.")
        return None
    cleaned = value.strip()
    if len(cleaned) > MAX_ACCOUNT_TEXT_LENGTH:
        raise FieldValidationError(field, f"{field} must be at most {MAX_ACCOUNT_TEXT_LENGTH} characters.")
    return cleaned


class AccountService:
    def create_account(
        self,
        *,
        db: Session,
        name: str,
        email: str,
        company: str | None = None,
    ) -> Account:
        cleaned_name = _clean("name", name, required=True)
        cleaned_email = supplier_rules.clean_email(email)
        if cleaned_email is None:
            raise FieldValidationError("email", "email is required.")

        with ledger_transaction(db):
            repository = AccountRepository(db)
            if repository.find_by_email(cleaned_email) is not None:
                raise FieldValidationError("email", "An account with this email already exists.")
            account = Account(
                name=cleaned_name,
                email=cleaned_email,
                company=_clean("company", company, required=False),
                is_active=True,
            )
            db.add(account)
            db.flush()

        logger.info("Account created id=%s", account.id)
        return account

    def get_account(self, *, db: Session, account_id: uuid.UUID) -> Account:
        return AccountRepository(db).ensure_account_exists(account_id, active_only=False)

    def set_active(self, *, db: Session, account_id: uuid.UUID, active: bool) -> Account:
        with ledger_transaction(db):
            account = AccountRepository(db).ensure_account_exists(account_id, active_only=False)
            account.is_active = active

        logger.info("Account active flag set id=%s active=%s", account_id, active)
        return account


def get_account_service() -> AccountService:
    return AccountService()
