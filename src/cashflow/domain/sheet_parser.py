"""Spreadsheet parsing into candidate import rows.

Sheet layout assumptions:

- A header row within the first 20 rows holds month names (Spanish or
  English, full or 3-letter, e.g. ``Enero``, ``ENE``, ``Jan.``, ``March``).
  Each month name maps its column to that month.
- The category column is the header cell matching one of
  ``CATEGORY_HEADERS``; column 0 otherwise.
- Without a month header, a sheet at least 13 columns wide is read with the
  standard layout: header row 0, columns 1-12 are January-December.
- Any ``20xx`` text in the scanned header window sets the working year,
  which otherwise defaults to the current year.
- Section rows switch the type of every following row: a category (or
  first) cell containing ``INGRESO`` switches to income, ``GASTO`` or
  ``EGRESO`` to expense. Rows start out as expenses.
"""

import csv
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from cashflow.domain.entities import (
    ImportedRow,
    ImportStats,
    Origin,
    ParseResult,
    TransactionStatus,
    TransactionType,
)
from cashflow.domain.fingerprint import fingerprint
from cashflow.utils.amount_parser import parse_cell_amount

logger = logging.getLogger(__name__)

HEADER_SEARCH_ROWS = 20
STANDARD_LAYOUT_WIDTH = 13
YEAR_PATTERN = re.compile(r"20\d{2}")

MONTHS: dict[str, int] = {
    # Spanish
    "ene": 1, "feb": 2, "mar": 3, "abr": 4, "may": 5, "jun": 6,
    "jul": 7, "ago": 8, "sep": 9, "oct": 10, "nov": 11, "dic": 12,
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4, "mayo": 5, "junio": 6,
    "julio": 7, "agosto": 8, "septiembre": 9, "setiembre": 9, "octubre": 10,
    "noviembre": 11, "diciembre": 12,
    # English
    "jan": 1, "apr": 4, "aug": 8, "dec": 12, "sept": 9,
    "january": 1, "february": 2, "march": 3, "april": 4, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
}

CATEGORY_HEADERS = frozenset(
    {
        "categoria",
        "categoría",
        "categorias",
        "categorías",
        "category",
        "categories",
        "concepto",
        "descripcion",
        "descripción",
        "description",
        "detalle",
        "item",
        "nombre",
        "name",
    }
)

INCOME_MARKERS = ("INGRESO",)
EXPENSE_MARKERS = ("GASTO", "EGRESO")
TOTAL_LABELS = frozenset({"TOTAL", "TOTALES"})


class SheetReadError(Exception):
    """The buffer could not be read as a spreadsheet."""


class CellKind(str, Enum):
    """Tag of a spreadsheet cell value."""

    EMPTY = "empty"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class Cell:
    """Tagged spreadsheet cell: Empty, Number or Text."""

    kind: CellKind
    value: Union[None, Decimal, str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Cell":
        """Convert a loosely-typed reader value into a tagged cell."""
        if isinstance(raw, Cell):
            return raw
        if raw is None:
            return EMPTY_CELL
        if isinstance(raw, bool):
            return cls(CellKind.TEXT, str(raw))
        if isinstance(raw, (int, float, Decimal)):
            number = Decimal(str(raw))
            return cls(CellKind.NUMBER, number) if number.is_finite() else EMPTY_CELL
        if isinstance(raw, (datetime, date)):
            return cls(CellKind.TEXT, raw.isoformat())
        text = str(raw)
        if not text.strip():
            return EMPTY_CELL
        return cls(CellKind.TEXT, text)

    @property
    def text(self) -> str:
        if self.kind == CellKind.EMPTY:
            return ""
        return str(self.value)

    def amount(self) -> Optional[Decimal]:
        """Numeric value of the cell, or None when it has none."""
        if self.kind == CellKind.NUMBER:
            return self.value
        if self.kind == CellKind.TEXT:
            return parse_cell_amount(self.value)
        return None


EMPTY_CELL = Cell(CellKind.EMPTY)


def to_cells(matrix: Iterable[Sequence[Any]]) -> list[list[Cell]]:
    """Convert a raw row/column matrix into tagged cells."""
    return [[Cell.from_raw(value) for value in (row or ())] for row in matrix]


def cell_at(row: Sequence[Cell], column: int) -> Cell:
    return row[column] if column < len(row) else EMPTY_CELL


def month_from_header(text: str) -> Optional[int]:
    """Map a header label to a month number, or None."""
    words = text.strip().lower().split()
    if not words:
        return None
    return MONTHS.get(words[0].rstrip("."))


def find_header(
    rows: Sequence[Sequence[Cell]], default_year: int
) -> tuple[Optional[int], dict[int, int], int]:
    """Locate the month header row.

    Returns:
        Tuple of (header row index or None, month -> column, working year)
    """
    year = default_year
    for row_index, row in enumerate(rows[:HEADER_SEARCH_ROWS]):
        month_columns: dict[int, int] = {}
        for column, cell in enumerate(row):
            if cell.kind != CellKind.TEXT:
                continue
            month = month_from_header(cell.value)
            if month is not None and month not in month_columns:
                month_columns[month] = column
            match = YEAR_PATTERN.search(cell.value)
            if match:
                year = int(match.group())
        if month_columns:
            return row_index, month_columns, year
    return None, {}, year


def find_category_column(header: Sequence[Cell], month_columns: dict[int, int]) -> int:
    """Column holding category names: first synonym match, else 0."""
    taken = set(month_columns.values())
    for column, cell in enumerate(header):
        if column in taken or cell.kind != CellKind.TEXT:
            continue
        if cell.value.strip().lower() in CATEGORY_HEADERS:
            return column
    return 0


def section_type(labels: Iterable[str]) -> Optional[TransactionType]:
    """Type a section marker switches to, or None for a regular row."""
    for label in labels:
        if any(marker in label for marker in INCOME_MARKERS):
            return TransactionType.INCOME
        if any(marker in label for marker in EXPENSE_MARKERS):
            return TransactionType.EXPENSE
    return None


def parse_matrix(
    matrix: Iterable[Sequence[Any]],
    today: Optional[date] = None,
    default_year: Optional[int] = None,
) -> ParseResult:
    """Parse a row/column matrix into candidate import rows.

    Args:
        matrix: Rows of raw cell values (or Cell instances)
        today: Reference date for the default year
        default_year: Year to use when the header window names none

    Returns:
        ParseResult; ``success`` is False when no usable layout is found
    """
    rows = to_cells(matrix)
    fallback_year = default_year or (today or date.today()).year
    header_index, month_columns, year = find_header(rows, fallback_year)

    if header_index is None:
        if not any(len(row) >= STANDARD_LAYOUT_WIDTH for row in rows):
            logger.info("No month header found in the first %d rows", HEADER_SEARCH_ROWS)
            return ParseResult(
                success=False,
                year=year,
                errors=(
                    "Could not detect the header row with month names "
                    "(Ene, Feb, Mar... / Jan, Feb, Mar...)",
                ),
            )
        logger.info("No month header found; using the standard column layout")
        header_index = 0
        month_columns = {month: month for month in range(1, 13)}

    category_column = find_category_column(rows[header_index], month_columns)
    current_type = TransactionType.EXPENSE
    parsed: list[ImportedRow] = []
    new_categories: dict[str, None] = {}

    for row in rows[header_index + 1:]:
        first = cell_at(row, 0).text.strip()
        category_name = cell_at(row, category_column).text.strip()
        has_data = any(
            cell_at(row, column).kind != CellKind.EMPTY
            for column in month_columns.values()
        )
        if not has_data and not first and not category_name:
            continue

        switch = section_type((category_name.upper(), first.upper()))
        if switch is not None:
            current_type = switch
            continue

        if not category_name or category_name.upper() in TOTAL_LABELS:
            continue

        for month, column in sorted(month_columns.items()):
            amount = cell_at(row, column).amount()
            if amount is None or amount == 0:
                continue
            if current_type == TransactionType.INCOME and amount <= 0:
                continue
            amount = abs(amount)

            row_date = date(year, month, 1)
            parsed.append(
                ImportedRow(
                    fingerprint=fingerprint(row_date, amount, category_name, current_type),
                    date=row_date,
                    amount=amount,
                    category_name=category_name,
                    type=current_type,
                    description=category_name,
                    status=TransactionStatus.REAL,
                    origin=Origin.BUSINESS,
                )
            )
            new_categories[category_name] = None

    logger.info("Parsed %d candidate rows for %d", len(parsed), year)
    return ParseResult(
        success=True,
        rows=tuple(parsed),
        stats=ImportStats(
            total_rows=len(parsed),
            new_categories=tuple(new_categories),
            potential_duplicates=0,
            estimated_total_amount=sum((r.amount for r in parsed), Decimal("0")),
        ),
        year=year,
    )


def pick_sheet(sheet_names: Sequence[str]) -> Optional[str]:
    """Prefer a ``FLUJO`` sheet with a year, then any ``FLUJO`` sheet, then the first."""
    for name in sheet_names:
        if "FLUJO" in name.upper() and YEAR_PATTERN.search(name):
            return name
    for name in sheet_names:
        if "FLUJO" in name.upper():
            return name
    return sheet_names[0] if sheet_names else None


def read_workbook(buffer: bytes) -> tuple[list[list[Any]], Optional[int]]:
    """Read the preferred worksheet of an .xlsx buffer.

    Returns:
        Tuple of (raw matrix, year named by the sheet title or None)
    """
    try:
        workbook = load_workbook(io.BytesIO(buffer), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as e:
        raise SheetReadError(f"Could not open workbook: {e}")

    try:
        sheet_name = pick_sheet(workbook.sheetnames)
        if sheet_name is None:
            raise SheetReadError("Workbook has no worksheets")
        sheet = workbook[sheet_name]
        matrix = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    match = YEAR_PATTERN.search(sheet_name)
    return matrix, int(match.group()) if match else None


def read_delimited(buffer: bytes) -> list[list[str]]:
    """Read a delimited text sheet (CSV, semicolon or tab separated)."""
    try:
        text = buffer.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise SheetReadError("Unsupported file format: expected .xlsx or delimited text")
    if not text.strip():
        raise SheetReadError("File is empty")

    sample = text[:1024]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
        delimiter = dialect.delimiter
    except csv.Error:
        delimiter = ","

    try:
        return [row for row in csv.reader(io.StringIO(text), delimiter=delimiter)]
    except csv.Error as e:
        raise SheetReadError(f"Could not read delimited text: {e}")


def parse_buffer(buffer: bytes, today: Optional[date] = None) -> ParseResult:
    """Parse a spreadsheet buffer (.xlsx or delimited text) into import rows.

    Read failures are reported through the result, never raised.
    """
    try:
        if buffer[:2] == b"PK":
            matrix, sheet_year = read_workbook(buffer)
        else:
            matrix, sheet_year = read_delimited(buffer), None
    except SheetReadError as e:
        logger.warning("Spreadsheet import failed: %s", e)
        return ParseResult(success=False, errors=(str(e),))

    return parse_matrix(matrix, today=today, default_year=sheet_year)
