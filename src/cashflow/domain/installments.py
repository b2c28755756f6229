"""Installment plans: one user action spread over several months."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from cashflow.domain.errors import (
    ValidationError,
    invalid_installment_count,
    non_positive_amount,
)
from cashflow.domain.fingerprint import CENT
from cashflow.utils.date_parser import add_months


@dataclass(frozen=True)
class InstallmentPlanItem:
    """One scheduled installment."""

    number: int
    date: date
    amount: Decimal


def plan_installments(
    start: date,
    amount: Decimal,
    total_installments: int,
    equal_split: bool = True,
) -> list[InstallmentPlanItem]:
    """Schedule monthly installments starting at ``start``.

    With ``equal_split`` the amount is divided into cent-rounded shares, the
    last one taking the remainder; otherwise every installment carries the
    full amount.

    Raises:
        ValidationError: If the amount or any share is not positive, or fewer
            than two installments are requested
    """
    if amount <= 0:
        raise ValidationError(non_positive_amount(amount))
    if total_installments < 2:
        raise ValidationError(invalid_installment_count(total_installments))

    amounts = [amount] * total_installments
    if equal_split:
        share = (amount / total_installments).quantize(CENT, rounding=ROUND_HALF_UP)
        # The last share absorbs the rounding remainder
        amounts = [share] * (total_installments - 1)
        amounts.append(amount - share * (total_installments - 1))
    if min(amounts) <= 0:
        raise ValidationError(non_positive_amount(min(amounts)))

    return [
        InstallmentPlanItem(
            number=index + 1,
            date=add_months(start, index),
            amount=installment_amount,
        )
        for index, installment_amount in enumerate(amounts)
    ]


def installment_label(base: str, number: int, total: int) -> str:
    """Description suffix marking the installment position, e.g. ``Laptop (2/6)``."""
    return f"{base} ({number}/{total})".strip()
