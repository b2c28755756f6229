"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from cashflow.domain.entities import (
    Category,
    CategoryLevel,
    InstallmentInfo,
    Origin,
    PaymentStatus,
    PersonalSublevel,
    Transaction,
    TransactionStatus,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for cashflow."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        category_type: TransactionType,
        level: CategoryLevel = CategoryLevel.EMPRESA,
        sublevel: Optional[PersonalSublevel] = None,
        color: Optional[str] = None,
        is_fixed: bool = False,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(
        self, name: str, category_type: TransactionType
    ) -> Optional[Category]:
        """Get category by case-insensitive name within a type."""
        pass

    @abstractmethod
    def list_categories(
        self, category_type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List categories, optionally filtered by type."""
        pass

    @abstractmethod
    def update_category(self, category_id: int, **fields) -> None:
        """Update category fields in place."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> int:
        """Delete a category and clear it from its transactions.

        Returns:
            Number of transactions left uncategorized
        """
        pass

    # Transaction operations
    @abstractmethod
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
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **fields) -> None:
        """Update transaction fields in place.

        ``category_id=None`` clears the category.
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters."""
        pass

    @abstractmethod
    def count_category_transactions(self, category_id: int) -> int:
        """Count transactions linked to a category."""
        pass
