"""Transaction fingerprinting for duplicate detection.

A fingerprint is a SHA-256 hex digest over a normalized string of
``date|amount|category|type``:

- date reduced to the calendar day (``YYYY-MM-DD``)
- amount with exactly two decimals, rounded half-up
- category name trimmed and lowercased
- type taken verbatim (``income`` / ``expense``)

Amounts that round to the same cent collide on purpose.
"""

import hashlib
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from cashflow.domain.entities import TransactionType

CENT = Decimal("0.01")


def normalize_category(name: str) -> str:
    """Normalize a category name for fingerprinting."""
    return name.strip().lower()


def format_amount(amount: Union[Decimal, int, float]) -> str:
    """Format an amount with exactly two decimal places."""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def fingerprint(
    txn_date: Union[date, datetime],
    amount: Union[Decimal, int, float],
    category_name: str,
    txn_type: Union[TransactionType, str],
) -> str:
    """Generate a stable transaction fingerprint.

    Args:
        txn_date: Transaction date; any time component is discarded
        amount: Transaction amount
        category_name: Category name (normalized before hashing)
        txn_type: Transaction type

    Returns:
        SHA-256 hex digest string
    """
    if isinstance(txn_date, datetime):
        txn_date = txn_date.date()
    type_value = txn_type.value if isinstance(txn_type, TransactionType) else txn_type
    parts = (
        f"{txn_date.isoformat()}|{format_amount(amount)}|"
        f"{normalize_category(category_name)}|{type_value}"
    )
    return hashlib.sha256(parts.encode("utf-8")).hexdigest()
