"""
Container health check for the ledger API.

Exits 0 when the HTTP health endpoint answers and, with --database, when
the configured database accepts a trivial query.
"""

from __future__ import annotations

import argparse
import os
from urllib.error import URLError
from urllib.request import urlopen


def _check_http(url: str, timeout: float) -> bool:
    try:
        with urlopen(url, timeout=timeout) as response:
            return 200 <= response.status < 400
    except (URLError, TimeoutError, ValueError):
        return False


def _check_database() -> bool:
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import SessionLocal

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError):
        return False
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Health check for the CBAM ledger API.")
    parser.add_argument(
        "--url",
        default=f"http://127.0.0.1:{os.getenv('PORT', '8000')}{os.getenv('HEALTHCHECK_PATH', '/health')}",
    )
    parser.add_argument("--timeout", type=float, default=2.0)
    parser.add_argument("--database", action="store_true", help="Also check database connectivity.")
    args = parser.parse_args(argv)

    if not _check_http(args.url, args.timeout):
        return 1
    if args.database and not _check_database():
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
