"""
app/api/dependencies.py

Shared FastAPI dependencies for request scoping.
"""

from __future__ import annotations

import uuid

from fastapi import Header, HTTPException, status

ACCOUNT_HEADER = "X-Account-Id"


def get_current_account_id(
    x_account_id: str | None = Header(default=None, alias=ACCOUNT_HEADER),
) -> uuid.UUID:
    """
    Resolve the calling account from the request header.

    Authentication happens upstream; this only checks that a well-formed
    account id was forwarded.
    """

    if not x_account_id or not x_account_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {ACCOUNT_HEADER} header.",
        )
    try:
        return uuid.UUID(x_account_id.strip())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid {ACCOUNT_HEADER} header.",
        ) from exc
