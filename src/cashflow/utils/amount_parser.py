"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional

NON_NUMERIC = re.compile(r"[^\d.\-]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount string into a positive Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "€ 1500"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be a positive number (got '{amount_str}')")
    return amount


def parse_cell_amount(raw: str) -> Optional[Decimal]:
    """Parse a spreadsheet text cell as a number.

    Everything except digits, ``.`` and ``-`` is stripped first, so
    ``"$1,500"`` reads as 1500. Returns None when nothing parseable is left.
    """
    cleaned = NON_NUMERIC.sub("", raw)
    if not cleaned:
        return None
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None
