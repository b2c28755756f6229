"""Spreadsheet import domain service."""

import logging
from datetime import date
from typing import Any, Optional, Sequence

from cashflow.database.base import Database
from cashflow.domain.entities import (
    CategoryLevel,
    ImportedRow,
    ParseResult,
    TransactionType,
)
from cashflow.domain.reconciliation import (
    existing_fingerprints,
    reconcile,
    rows_to_commit,
    summarize,
)
from cashflow.domain.sheet_parser import parse_buffer

logger = logging.getLogger(__name__)


class ImportService:
    """Service for importing monthly cash-flow spreadsheets."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db

    def preview(
        self,
        buffer: bytes,
        today: Optional[date] = None,
        within_batch: bool = False,
    ) -> ParseResult:
        """Parse a spreadsheet and flag rows already present in the store.

        Persisted fingerprints are read once for the years the parsed rows
        cover, so the result reflects a single snapshot of the store.

        Args:
            buffer: Raw .xlsx or delimited text content
            today: Reference date for the default year
            within_batch: Also flag rows repeating earlier rows of the file

        Returns:
            ParseResult with reconciled rows and recomputed stats
        """
        result = parse_buffer(buffer, today=today)
        if not result.success:
            return result

        years = {row.date.year for row in result.rows}
        existing = existing_fingerprints(
            self.db.list_transactions(), self.db.list_categories(), years
        )
        rows = reconcile(result.rows, existing, within_batch=within_batch)
        stats = summarize(rows)
        logger.info(
            "Import preview: %d rows, %d potential duplicates",
            stats.total_rows,
            stats.potential_duplicates,
        )
        return ParseResult(
            success=True,
            rows=tuple(rows),
            stats=stats,
            year=result.year,
            errors=result.errors,
        )

    def commit(self, rows: Sequence[ImportedRow]) -> dict[str, Any]:
        """Persist previewed rows that are not flagged as duplicates.

        Categories are matched by case-insensitive name within the row's type;
        missing ones are created at the company level.

        Returns:
            Dict with import statistics:
            - imported: number of transactions created
            - skipped: number of rows skipped as duplicates
            - categories_created: names of the categories created
        """
        to_persist = rows_to_commit(rows)
        category_ids: dict[tuple[str, TransactionType], int] = {}
        created_categories: list[str] = []

        for row in to_persist:
            key = (row.category_name.strip().lower(), row.type)
            if key in category_ids:
                continue
            category = self.db.get_category_by_name(row.category_name, row.type)
            if category is None:
                category_ids[key] = self.db.create_category(
                    name=row.category_name.strip(),
                    category_type=row.type,
                    level=CategoryLevel.EMPRESA,
                )
                created_categories.append(row.category_name.strip())
                logger.debug("Created category %r for import", row.category_name)
            else:
                category_ids[key] = category.id

        for row in to_persist:
            self.db.create_transaction(
                date=row.date,
                amount=row.amount,
                transaction_type=row.type,
                status=row.status,
                origin=row.origin,
                category_id=category_ids[(row.category_name.strip().lower(), row.type)],
                description=row.description or row.category_name,
            )

        stats = {
            "imported": len(to_persist),
            "skipped": len(rows) - len(to_persist),
            "categories_created": created_categories,
        }
        logger.info(
            "Imported %d transactions, skipped %d, created %d categories",
            stats["imported"],
            stats["skipped"],
            len(created_categories),
        )
        return stats
