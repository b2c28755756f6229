"""Transaction domain service."""

import logging
from dataclasses import replace
from typing import Optional
from datetime import date
from decimal import Decimal
from cashflow.database.base import Database
from cashflow.domain.entities import (
    InstallmentInfo,
    Origin,
    PaymentStatus,
    Transaction as TransactionEntity,
    TransactionStatus,
    TransactionType,
)
from cashflow.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    non_positive_amount,
    transaction_not_found,
)
from cashflow.domain.installments import installment_label, plan_installments
from cashflow.utils.date_parser import shift_year, year_bounds

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

    def create_transaction(
        self,
        date: date,
        amount: Decimal,
        transaction_type: TransactionType,
        status: TransactionStatus = TransactionStatus.REAL,
        payment_status: PaymentStatus = PaymentStatus.CONFIRMED,
        origin: Origin = Origin.BUSINESS,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        installment: Optional[InstallmentInfo] = None,
    ) -> int:
        """Create a transaction.

        Args:
            date: Transaction date
            amount: Positive amount; the type carries the sign
            transaction_type: Income or expense
            status: Real or projected
            payment_status: Confirmed or pending, independent of status
            origin: Business or personal ledger
            category_id: Optional category ID
            description: Optional description
            installment: Optional installment metadata

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the category doesn't exist
        """
        if amount <= 0:
            raise ValidationError(non_positive_amount(amount))
        self._require_category(category_id)

        return self.db.create_transaction(
            date=date,
            amount=amount,
            transaction_type=transaction_type,
            status=status,
            payment_status=payment_status,
            origin=origin,
            category_id=category_id,
            description=description,
            installment=installment,
        )

    def create_installments(
        self,
        start_date: date,
        total_amount: Decimal,
        total_installments: int,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        equal_split: bool = True,
        status: TransactionStatus = TransactionStatus.PROJECTED,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        origin: Origin = Origin.BUSINESS,
        category_id: Optional[int] = None,
        description: str = "",
    ) -> list[int]:
        """Create one transaction per month for an installment plan.

        The first installment keeps ``payment_status``; the following ones are
        pending. Every installment links to the first as its parent.

        Returns:
            IDs of the created transactions, in installment order
        """
        self._require_category(category_id)
        if not description and category_id is not None:
            description = self.db.get_category(category_id).name

        plan = plan_installments(start_date, total_amount, total_installments, equal_split)
        ids: list[int] = []
        parent_id: Optional[int] = None

        for item in plan:
            info = InstallmentInfo(
                total_installments=total_installments,
                current_installment=item.number,
                installment_amount=item.amount,
                is_equal_installments=equal_split,
                parent_transaction_id=parent_id,
            )
            txn_id = self.db.create_transaction(
                date=item.date,
                amount=item.amount,
                transaction_type=transaction_type,
                status=status,
                payment_status=payment_status if item.number == 1 else PaymentStatus.PENDING,
                origin=origin,
                category_id=category_id,
                description=installment_label(description, item.number, total_installments),
                installment=info,
            )
            if parent_id is None:
                # The first installment is its own parent
                parent_id = txn_id
                self.db.update_transaction(
                    txn_id, installment=replace(info, parent_transaction_id=txn_id)
                )
            ids.append(txn_id)

        logger.info(
            "Created %d installments starting %s (parent %s)",
            len(ids),
            start_date,
            parent_id,
        )
        return ids

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        year: Optional[int] = None,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
    ) -> list[TransactionEntity]:
        """List transactions, optionally restricted to a calendar year."""
        start_date = end_date = None
        if year is not None:
            start_date, end_date = year_bounds(year)
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            uncategorized=uncategorized,
        )

    def update_transaction(self, transaction_id: int, **fields) -> None:
        """Update transaction fields in place.

        Args:
            transaction_id: Transaction ID to update
            **fields: Fields to change (``category_id=None`` clears the category)

        Raises:
            NotFoundError: If transaction or category doesn't exist
            ValidationError: If a new amount is not positive
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if "amount" in fields and fields["amount"] <= 0:
            raise ValidationError(non_positive_amount(fields["amount"]))
        if "category_id" in fields:
            self._require_category(fields["category_id"])

        self.db.update_transaction(transaction_id, **fields)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)

    def copy_year(self, from_year: int, to_year: int) -> list[int]:
        """Copy a year's transactions into another year as projections.

        Copies are projected and pending, and drop installment metadata.

        Returns:
            IDs of the created transactions
        """
        created = []
        for txn in self.list_transactions(year=from_year):
            created.append(
                self.db.create_transaction(
                    date=shift_year(txn.date, to_year),
                    amount=txn.amount,
                    transaction_type=txn.type,
                    status=TransactionStatus.PROJECTED,
                    payment_status=PaymentStatus.PENDING,
                    origin=txn.origin,
                    category_id=txn.category_id,
                    description=txn.description,
                )
            )
        logger.info("Copied %d transactions from %d to %d", len(created), from_year, to_year)
        return created
