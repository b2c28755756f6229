"""Shared pytest fixtures for cashflow tests."""

import io
import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest
from openpyxl import Workbook

from cashflow.database.factories import create_sqlite_database
from cashflow.domain.category import CategoryService
from cashflow.domain.dashboard import DashboardService
from cashflow.domain.entities import (
    Category,
    CategoryLevel,
    PersonalSublevel,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from cashflow.domain.sheet_import import ImportService
from cashflow.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def dashboard_service(temp_db):
    """Create a DashboardService with a temporary database."""
    return DashboardService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db)


@pytest.fixture
def sample_categories(category_service):
    """Create a small company/personal category set and return IDs by name."""
    return {
        "Ventas": category_service.create_category("Ventas", TransactionType.INCOME),
        "Cliente ACME": category_service.create_category(
            "Cliente ACME", TransactionType.INCOME
        ),
        "Oficina": category_service.create_category(
            "Oficina", TransactionType.EXPENSE, is_fixed=True
        ),
        "Supermercado": category_service.create_category(
            "Supermercado",
            TransactionType.EXPENSE,
            level=CategoryLevel.PERSONAL,
            sublevel=PersonalSublevel.CASA,
        ),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def categories():
    """In-memory categories for engine tests (no database)."""
    return [
        Category(id=1, name="Ventas", type=TransactionType.INCOME),
        Category(id=2, name="Oficina", type=TransactionType.EXPENSE, color="#123456"),
        Category(
            id=3,
            name="Supermercado",
            type=TransactionType.EXPENSE,
            level=CategoryLevel.PERSONAL,
            sublevel=PersonalSublevel.CASA,
        ),
        Category(
            id=4,
            name="Vacaciones",
            type=TransactionType.EXPENSE,
            level=CategoryLevel.PERSONAL,
            sublevel=PersonalSublevel.VIAJES,
            color="#abcdef",
        ),
    ]


def make_txn(
    txn_id,
    day,
    amount,
    txn_type=TransactionType.EXPENSE,
    status=TransactionStatus.REAL,
    **fields,
):
    """Build an in-memory transaction with a Decimal amount."""
    return Transaction(
        id=txn_id,
        date=day,
        amount=Decimal(str(amount)),
        type=txn_type,
        status=status,
        **fields,
    )


@pytest.fixture
def txn():
    """Factory fixture for in-memory transactions."""
    return make_txn


def build_xlsx(rows, sheet_title="Sheet1", extra_sheets=()):
    """Build an .xlsx workbook in memory and return its bytes."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title
    for row in rows:
        sheet.append(list(row))
    for title, extra_rows in extra_sheets:
        extra = workbook.create_sheet(title)
        for row in extra_rows:
            extra.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes():
    """Factory fixture building .xlsx bytes from rows."""
    return build_xlsx


@pytest.fixture
def cashflow_sheet_rows():
    """A typical monthly cash-flow sheet with a title row and two sections."""
    months = ["Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"]
    return [
        ["FLUJO DE CAJA 2024"],
        [],
        ["Concepto"] + months,
        ["INGRESOS"],
        ["Cliente ACME", 1500, 1500, None, None, None, None, None, None, None, None, None, None],
        ["Consultoría", None, "$2,000", None, None, None, None, None, None, None, None, None, None],
        ["TOTAL", 1500, 3500],
        ["GASTOS"],
        ["Oficina", 300, 300, -300, None, None, None, None, None, None, None, None, None],
        ["Software", 0, None, 45.5, None, None, None, None, None, None, None, None, None],
    ]


@pytest.fixture
def today_mid_2024():
    """Fixed reference date for metric tests."""
    return date(2024, 6, 15)
