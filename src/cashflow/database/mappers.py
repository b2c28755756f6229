"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum values and installment
columns only need to be understood here.
"""

from typing import Optional

from cashflow.domain import entities as domain
from cashflow.database.models import (
    Category as ORMCategory,
    Transaction as ORMTransaction,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
        level=domain.CategoryLevel(orm_category.level),
        sublevel=(
            domain.PersonalSublevel(orm_category.sublevel)
            if orm_category.sublevel
            else None
        ),
        color=orm_category.color,
        is_fixed=bool(orm_category.is_fixed),
        created_at=orm_category.created_at,
    )


def installment_to_domain(orm_transaction: ORMTransaction) -> Optional[domain.InstallmentInfo]:
    """Rebuild installment metadata from the flattened columns."""
    if orm_transaction.installment_total is None:
        return None
    return domain.InstallmentInfo(
        total_installments=orm_transaction.installment_total,
        current_installment=orm_transaction.installment_current,
        installment_amount=orm_transaction.installment_amount,
        is_equal_installments=bool(orm_transaction.installment_equal),
        parent_transaction_id=orm_transaction.installment_parent_id,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        type=domain.TransactionType(orm_transaction.type),
        status=domain.TransactionStatus(orm_transaction.status),
        payment_status=domain.PaymentStatus(orm_transaction.payment_status),
        origin=domain.Origin(orm_transaction.origin),
        category_id=orm_transaction.category_id,
        description=orm_transaction.description,
        installment=installment_to_domain(orm_transaction),
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def installment_to_columns(info: Optional[domain.InstallmentInfo]) -> dict:
    """Flatten installment metadata into model column values."""
    if info is None:
        return {
            "installment_total": None,
            "installment_current": None,
            "installment_amount": None,
            "installment_equal": None,
            "installment_parent_id": None,
        }
    return {
        "installment_total": info.total_installments,
        "installment_current": info.current_installment,
        "installment_amount": info.installment_amount,
        "installment_equal": info.is_equal_installments,
        "installment_parent_id": info.parent_transaction_id,
    }
