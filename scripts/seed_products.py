"""
Load CBAM product reference data from a JSON file.

The file holds a list of objects with cn_code, name, sector,
carbon_intensity and optional description / is_active. Existing products
are matched by CN code and updated in place.

Usage:
    python -m scripts.seed_products scripts/data/cbam_products.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from app.services.product_service import get_product_service
from db.session import SessionLocal
from ledger.errors import LedgerError

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).resolve().parent / "data" / "cbam_products.json"


def load_records(path: Path) -> list[dict]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON list of products.")
    return payload


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed CBAM products from a JSON file.")
    parser.add_argument("path", nargs="?", type=Path, default=DEFAULT_DATA_FILE)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        records = load_records(args.path)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read product file %s: %s", args.path, exc)
        return 2

    with SessionLocal() as db:
        try:
            result = get_product_service().seed_products(db=db, records=records)
        except LedgerError as exc:
            logger.error("Product seed rejected: %s", exc)
            return 1

    logger.info("Seed complete created=%d updated=%d", result.created, result.updated)
    return 0


if __name__ == "__main__":
    sys.exit(main())
