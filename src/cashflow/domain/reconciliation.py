"""Duplicate detection of imported rows against persisted transactions."""

from dataclasses import replace
from decimal import Decimal
from typing import AbstractSet, Iterable, Optional, Sequence

from cashflow.domain.classification import CategoryLookup, index_categories
from cashflow.domain.entities import ImportedRow, ImportStats, Transaction
from cashflow.domain.fingerprint import fingerprint


def existing_fingerprints(
    transactions: Iterable[Transaction],
    categories: CategoryLookup,
    years: Optional[AbstractSet[int]] = None,
) -> set[str]:
    """Fingerprint persisted transactions for comparison with an import.

    The category part of the fingerprint is the linked category's name, or an
    empty string when the transaction has no resolvable category.

    Args:
        transactions: Persisted transactions
        categories: Categories used to resolve names
        years: Only fingerprint transactions in these years (all when None)
    """
    index = index_categories(categories)
    hashes = set()
    for txn in transactions:
        if years is not None and txn.date.year not in years:
            continue
        category = index.get(txn.category_id) if txn.category_id is not None else None
        name = category.name if category is not None else ""
        hashes.add(fingerprint(txn.date, txn.amount, name, txn.type))
    return hashes


def reconcile(
    rows: Sequence[ImportedRow],
    existing: AbstractSet[str],
    within_batch: bool = False,
) -> list[ImportedRow]:
    """Flag rows whose fingerprint is already known.

    ``existing`` is a single snapshot of persisted fingerprints. With
    ``within_batch`` set, a row repeating an earlier row of the same batch is
    flagged as well; otherwise only the snapshot is consulted.
    """
    seen: set[str] = set()
    flagged = []
    for row in rows:
        is_duplicate = row.fingerprint in existing
        if within_batch:
            is_duplicate = is_duplicate or row.fingerprint in seen
            seen.add(row.fingerprint)
        flagged.append(replace(row, is_duplicate=is_duplicate))
    return flagged


def summarize(rows: Sequence[ImportedRow]) -> ImportStats:
    """Recompute import stats for a (possibly reconciled) set of rows."""
    new_categories = dict.fromkeys(row.category_name for row in rows)
    return ImportStats(
        total_rows=len(rows),
        new_categories=tuple(new_categories),
        potential_duplicates=sum(1 for row in rows if row.is_duplicate),
        estimated_total_amount=sum((row.amount for row in rows), Decimal("0")),
    )


def rows_to_commit(rows: Iterable[ImportedRow]) -> list[ImportedRow]:
    """Rows that would be persisted: everything not flagged as duplicate."""
    return [row for row in rows if not row.is_duplicate]
