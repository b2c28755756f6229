"""Tests for import reconciliation against existing transactions."""

from datetime import date
from decimal import Decimal

from cashflow.domain.entities import Category, ImportedRow, TransactionType
from cashflow.domain.fingerprint import fingerprint
from cashflow.domain.reconciliation import (
    existing_fingerprints,
    reconcile,
    rows_to_commit,
    summarize,
)
from cashflow.domain.sheet_parser import parse_matrix

EXPENSE = TransactionType.EXPENSE


def imported(day, amount, name, txn_type=EXPENSE):
    amount = Decimal(str(amount))
    return ImportedRow(
        fingerprint=fingerprint(day, amount, name, txn_type),
        date=day,
        amount=amount,
        category_name=name,
        type=txn_type,
        description=name,
    )


def test_existing_fingerprints_use_category_names(txn, categories):
    """Test persisted transactions are fingerprinted with their category name."""
    transactions = [
        txn(1, date(2024, 1, 1), 300, category_id=2),
        txn(2, date(2024, 1, 1), 50),
    ]
    hashes = existing_fingerprints(transactions, categories)
    assert fingerprint(date(2024, 1, 1), Decimal("300"), "oficina", EXPENSE) in hashes
    assert fingerprint(date(2024, 1, 1), Decimal("50"), "", EXPENSE) in hashes


def test_existing_fingerprints_restricted_to_years(txn, categories):
    """Test only the requested years are fingerprinted."""
    transactions = [
        txn(1, date(2023, 1, 1), 300, category_id=2),
        txn(2, date(2024, 1, 1), 300, category_id=2),
    ]
    assert len(existing_fingerprints(transactions, categories, {2024})) == 1


def test_reconcile_flags_known_rows():
    """Test rows already in the snapshot are flagged."""
    rows = [imported(date(2024, 1, 1), 300, "Oficina"), imported(date(2024, 2, 1), 300, "Oficina")]
    existing = {rows[0].fingerprint}
    flagged = reconcile(rows, existing)
    assert [r.is_duplicate for r in flagged] == [True, False]
    # inputs are left untouched
    assert not rows[0].is_duplicate


def test_reconcile_keeps_batch_repeats_by_default():
    """Test repeated rows within one batch are not flagged unless asked."""
    rows = [imported(date(2024, 1, 1), 300, "Oficina"), imported(date(2024, 1, 1), 300, "OFICINA")]
    assert [r.is_duplicate for r in reconcile(rows, set())] == [False, False]
    assert [r.is_duplicate for r in reconcile(rows, set(), within_batch=True)] == [False, True]


def test_reimport_is_all_duplicates(txn, cashflow_sheet_rows):
    """Test importing the same sheet twice flags every row the second time."""
    first = parse_matrix(cashflow_sheet_rows)
    # Persist the first import as transactions with matching categories
    names = list(dict.fromkeys(r.category_name for r in first.rows))
    cats = [
        Category(id=i, name=name, type=next(r.type for r in first.rows if r.category_name == name))
        for i, name in enumerate(names, start=1)
    ]
    by_name = {cat.name: cat.id for cat in cats}
    stored = [
        txn(i, r.date, r.amount, r.type, category_id=by_name[r.category_name])
        for i, r in enumerate(first.rows, start=1)
    ]

    second = parse_matrix(cashflow_sheet_rows)
    flagged = reconcile(second.rows, existing_fingerprints(stored, cats))
    assert all(r.is_duplicate for r in flagged)
    assert rows_to_commit(flagged) == []
    assert summarize(flagged).potential_duplicates == len(flagged)


def test_summarize():
    """Test stats are recomputed from reconciled rows."""
    rows = reconcile(
        [imported(date(2024, 1, 1), 10, "A"), imported(date(2024, 1, 1), 5, "B")],
        {fingerprint(date(2024, 1, 1), Decimal("5"), "b", EXPENSE)},
    )
    stats = summarize(rows)
    assert stats.total_rows == 2
    assert stats.new_categories == ("A", "B")
    assert stats.potential_duplicates == 1
    assert stats.estimated_total_amount == Decimal("15")
    assert [r.category_name for r in rows_to_commit(rows)] == ["A"]
