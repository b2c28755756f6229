"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from cashflow.domain import entities
from cashflow.domain.errors import NotFoundError, ValidationError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_category_returns_domain_model(self, temp_db):
        """Test that get_category returns a domain Category entity."""
        category_id = temp_db.create_category(
            name="Supermercado",
            category_type=entities.TransactionType.EXPENSE,
            level=entities.CategoryLevel.PERSONAL,
            sublevel=entities.PersonalSublevel.CASA,
            color="#ff0000",
            is_fixed=True,
        )

        category = temp_db.get_category(category_id)

        assert isinstance(category, entities.Category)
        assert category.name == "Supermercado"
        assert category.type == entities.TransactionType.EXPENSE
        assert category.level == entities.CategoryLevel.PERSONAL
        assert category.sublevel == entities.PersonalSublevel.CASA
        assert category.color == "#ff0000"
        assert category.is_fixed is True
        assert isinstance(category.created_at, datetime)

    def test_get_category_by_name_is_case_insensitive(self, temp_db):
        """Test name lookup ignores case and is scoped to the type."""
        temp_db.create_category(name="Ventas", category_type=entities.TransactionType.INCOME)

        assert temp_db.get_category_by_name("  VENTAS ", entities.TransactionType.INCOME) is not None
        assert temp_db.get_category_by_name("ventas", entities.TransactionType.EXPENSE) is None

    def test_list_categories_filters_by_type(self, temp_db):
        """Test list_categories() with and without a type."""
        temp_db.create_category(name="Ventas", category_type=entities.TransactionType.INCOME)
        temp_db.create_category(name="Oficina", category_type=entities.TransactionType.EXPENSE)

        assert len(temp_db.list_categories()) == 2
        expenses = temp_db.list_categories(entities.TransactionType.EXPENSE)
        assert [c.name for c in expenses] == ["Oficina"]

    def test_transaction_round_trip(self, temp_db):
        """Test a transaction with installment metadata comes back intact."""
        info = entities.InstallmentInfo(
            total_installments=3,
            current_installment=2,
            installment_amount=Decimal("33.33"),
            parent_transaction_id=7,
        )
        txn_id = temp_db.create_transaction(
            date=date(2024, 2, 1),
            amount=Decimal("33.33"),
            transaction_type=entities.TransactionType.EXPENSE,
            status=entities.TransactionStatus.PROJECTED,
            payment_status=entities.PaymentStatus.PENDING,
            origin=entities.Origin.PERSONAL,
            description="Laptop (2/3)",
            installment=info,
        )

        txn = temp_db.get_transaction(txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.amount == Decimal("33.33")
        assert txn.status == entities.TransactionStatus.PROJECTED
        assert txn.payment_status == entities.PaymentStatus.PENDING
        assert txn.origin == entities.Origin.PERSONAL
        assert txn.installment == info
        assert txn.category_id is None

    def test_update_transaction(self, temp_db):
        """Test fields are updated in place and enums are stored by value."""
        txn_id = temp_db.create_transaction(
            date=date(2024, 2, 1),
            amount=Decimal("10"),
            transaction_type=entities.TransactionType.EXPENSE,
        )
        temp_db.update_transaction(
            txn_id,
            amount=Decimal("12.5"),
            status=entities.TransactionStatus.PROJECTED,
        )

        txn = temp_db.get_transaction(txn_id)
        assert txn.amount == Decimal("12.5")
        assert txn.status == entities.TransactionStatus.PROJECTED

    def test_update_unknown_field(self, temp_db):
        """Test unknown fields are rejected."""
        txn_id = temp_db.create_transaction(
            date=date(2024, 2, 1),
            amount=Decimal("10"),
            transaction_type=entities.TransactionType.EXPENSE,
        )
        with pytest.raises(ValidationError):
            temp_db.update_transaction(txn_id, ledger_id=1)

    def test_missing_rows_raise_not_found(self, temp_db):
        """Test updates and deletes of missing rows."""
        with pytest.raises(NotFoundError):
            temp_db.update_transaction(999, amount=Decimal("1"))
        with pytest.raises(NotFoundError):
            temp_db.delete_transaction(999)
        with pytest.raises(NotFoundError):
            temp_db.delete_category(999)

    def test_delete_category_clears_references(self, temp_db):
        """Test deleting a category keeps its transactions uncategorized."""
        cat_id = temp_db.create_category(name="Oficina", category_type=entities.TransactionType.EXPENSE)
        for day in (1, 2, 3):
            temp_db.create_transaction(
                date=date(2024, 1, day),
                amount=Decimal("10"),
                transaction_type=entities.TransactionType.EXPENSE,
                category_id=cat_id,
            )

        assert temp_db.count_category_transactions(cat_id) == 3
        assert temp_db.delete_category(cat_id) == 3
        assert temp_db.get_category(cat_id) is None

        remaining = temp_db.list_transactions()
        assert len(remaining) == 3
        assert all(t.category_id is None for t in remaining)

    def test_list_transactions_filters(self, temp_db):
        """Test date range, category and uncategorized filters."""
        cat_id = temp_db.create_category(name="Oficina", category_type=entities.TransactionType.EXPENSE)
        temp_db.create_transaction(
            date=date(2023, 12, 31), amount=Decimal("1"),
            transaction_type=entities.TransactionType.EXPENSE, category_id=cat_id,
        )
        temp_db.create_transaction(
            date=date(2024, 1, 1), amount=Decimal("2"),
            transaction_type=entities.TransactionType.EXPENSE,
        )

        in_2024 = temp_db.list_transactions(start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
        assert [t.amount for t in in_2024] == [Decimal("2")]
        assert len(temp_db.list_transactions(category_id=cat_id)) == 1
        assert len(temp_db.list_transactions(uncategorized=True)) == 1
