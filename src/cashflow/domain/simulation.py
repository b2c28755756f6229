"""What-if simulation layered over real transactions."""

from dataclasses import replace
from datetime import datetime, UTC
from decimal import Decimal
from typing import Iterable, Sequence

from cashflow.domain.entities import (
    Origin,
    PaymentStatus,
    SimulationVariable,
    SimulationVariableType,
    Transaction,
    TransactionStatus,
    TransactionType,
)

NEW_TRANSACTION_TYPES = {
    SimulationVariableType.NEW_EXPENSE: TransactionType.EXPENSE,
    SimulationVariableType.NEW_INCOME: TransactionType.INCOME,
}


def simulated_transaction(variable: SimulationVariable, transaction_id: int) -> Transaction:
    """Build the projected transaction a new-income/new-expense variable adds."""
    now = datetime.now(UTC)
    return Transaction(
        id=transaction_id,
        date=variable.date,
        amount=variable.amount or Decimal("0"),
        type=NEW_TRANSACTION_TYPES[variable.type],
        status=TransactionStatus.PROJECTED,
        payment_status=PaymentStatus.PENDING,
        origin=Origin.BUSINESS,
        category_id=variable.category_id,
        description=variable.name,
        created_at=now,
        updated_at=now,
    )


def apply_overlay(
    base: Iterable[Transaction], variables: Sequence[SimulationVariable]
) -> tuple[Transaction, ...]:
    """Apply active simulation variables to a copy of the base transactions.

    Variables apply in order. Added transactions get negative IDs (-1, -2, ...)
    so they never clash with persisted ones. The base collection is not
    modified.
    """
    transactions = list(base)
    next_id = -1

    for variable in variables:
        if not variable.active:
            continue

        if variable.type in NEW_TRANSACTION_TYPES:
            transactions.append(simulated_transaction(variable, next_id))
            next_id -= 1
        elif variable.type == SimulationVariableType.MODIFY_AMOUNT:
            if variable.amount is None:
                continue
            transactions = [
                replace(txn, amount=variable.amount)
                if txn.id == variable.target_transaction_id
                else txn
                for txn in transactions
            ]
        elif variable.type == SimulationVariableType.TOGGLE_ACTIVE:
            transactions = [
                txn for txn in transactions if txn.id != variable.target_transaction_id
            ]

    return tuple(transactions)
