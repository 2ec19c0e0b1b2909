"""
Account repository for tenant lookups.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.account import Account
from ledger.errors import NotFoundError


class AccountRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def ensure_account_exists(self, account_id: uuid.UUID, *, active_only: bool = True) -> Account:
        account = self._session.get(Account, account_id)
        if account is None or (active_only and not account.is_active):
            raise NotFoundError("account", account_id)
        return account

    def find_by_email(self, email: str) -> Account | None:
        stmt = select(Account).where(Account.email == email.strip().lower())
        return self._session.scalars(stmt).first()

    def list_accounts(self, *, limit: int = 100) -> list[Account]:
        stmt = select(Account).order_by(Account.created_at.desc()).limit(limit)
        return list(self._session.scalars(stmt).all())
