"""Tests for spreadsheet parsing."""

from datetime import date
from decimal import Decimal

import pytest

from cashflow.domain.entities import TransactionType
from cashflow.domain.fingerprint import fingerprint
from cashflow.domain.sheet_parser import (
    Cell,
    CellKind,
    find_category_column,
    month_from_header,
    parse_buffer,
    parse_matrix,
    pick_sheet,
    read_delimited,
    section_type,
    to_cells,
)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


class TestCells:
    """Tests for tagged cells."""

    def test_from_raw(self):
        """Test raw reader values become tagged cells."""
        assert Cell.from_raw(None).kind == CellKind.EMPTY
        assert Cell.from_raw("   ").kind == CellKind.EMPTY
        assert Cell.from_raw(12.5) == Cell(CellKind.NUMBER, Decimal("12.5"))
        assert Cell.from_raw("Oficina") == Cell(CellKind.TEXT, "Oficina")

    def test_text_amounts(self):
        """Test text cells are stripped to digits, dot and minus."""
        assert Cell.from_raw("$1,500").amount() == Decimal("1500")
        assert Cell.from_raw("-300.50 €").amount() == Decimal("-300.50")
        assert Cell.from_raw("n/a").amount() is None
        assert Cell.from_raw(None).amount() is None


class TestHeaderDetection:
    """Tests for month header and category column detection."""

    @pytest.mark.parametrize(
        "label,month",
        [
            ("Ene", 1),
            ("ENERO", 1),
            ("Jan.", 1),
            ("Sept", 9),
            ("Setiembre", 9),
            ("Dic 2024", 12),
            ("December", 12),
        ],
    )
    def test_month_from_header(self, label, month):
        """Test Spanish and English month labels."""
        assert month_from_header(label) == month

    @pytest.mark.parametrize("label", ["Marketing", "Total", "", "Mayor"])
    def test_non_month_labels(self, label):
        """Test labels that only start like a month are not months."""
        assert month_from_header(label) is None

    def test_category_column_synonym(self):
        """Test the category column is found by header synonym."""
        header = to_cells([["", "Concepto", "Ene", "Feb"]])[0]
        assert find_category_column(header, {1: 2, 2: 3}) == 1

    def test_category_column_defaults_to_first(self):
        """Test column 0 is used without a synonym."""
        header = to_cells([["", "Ene", "Feb"]])[0]
        assert find_category_column(header, {1: 1, 2: 2}) == 0

    def test_section_type(self):
        """Test section markers."""
        assert section_type(["INGRESOS OPERATIVOS", ""]) == INCOME
        assert section_type(["", "EGRESOS"]) == EXPENSE
        assert section_type(["GASTOS FIJOS"]) == EXPENSE
        assert section_type(["OFICINA", "OFICINA"]) is None


class TestParseMatrix:
    """Tests for parse_matrix()."""

    def test_parses_sections_and_months(self, cashflow_sheet_rows):
        """Test a typical sheet produces typed, dated rows."""
        result = parse_matrix(cashflow_sheet_rows, today=date(2030, 1, 1))

        assert result.success
        assert result.year == 2024
        rows = [(r.date, r.category_name, r.type, r.amount) for r in result.rows]
        assert rows == [
            (date(2024, 1, 1), "Cliente ACME", INCOME, Decimal("1500")),
            (date(2024, 2, 1), "Cliente ACME", INCOME, Decimal("1500")),
            (date(2024, 2, 1), "Consultoría", INCOME, Decimal("2000")),
            (date(2024, 1, 1), "Oficina", EXPENSE, Decimal("300")),
            (date(2024, 2, 1), "Oficina", EXPENSE, Decimal("300")),
            (date(2024, 3, 1), "Oficina", EXPENSE, Decimal("300")),
            (date(2024, 3, 1), "Software", EXPENSE, Decimal("45.5")),
        ]

    def test_stats(self, cashflow_sheet_rows):
        """Test parse statistics."""
        stats = parse_matrix(cashflow_sheet_rows).stats
        assert stats.total_rows == 7
        assert stats.new_categories == ("Cliente ACME", "Consultoría", "Oficina", "Software")
        assert stats.potential_duplicates == 0
        assert stats.estimated_total_amount == Decimal("5945.5")

    def test_rows_carry_fingerprints(self, cashflow_sheet_rows):
        """Test every row is fingerprinted from its own figures."""
        for row in parse_matrix(cashflow_sheet_rows).rows:
            assert row.fingerprint == fingerprint(row.date, row.amount, row.category_name, row.type)
            assert row.description == row.category_name
            assert not row.is_duplicate

    def test_rows_default_to_expense(self):
        """Test rows before any section marker are expenses."""
        result = parse_matrix([["Item", "Jan", "Feb"], ["Rent", 800, 800]], today=date(2024, 5, 1))
        assert [r.type for r in result.rows] == [EXPENSE, EXPENSE]
        assert result.year == 2024

    def test_non_positive_income_is_dropped(self):
        """Test income cells at or below zero are skipped."""
        result = parse_matrix(
            [["", "Ene", "Feb", "Mar"], ["INGRESOS"], ["Ventas", -100, 0, 50]],
            today=date(2024, 1, 1),
        )
        assert [(r.date.month, r.amount) for r in result.rows] == [(3, Decimal("50"))]

    def test_default_year_is_used_without_year_text(self):
        """Test the sheet-level default year applies when the header names none."""
        result = parse_matrix([["", "Ene"], ["Renta", 10]], default_year=2022)
        assert result.rows[0].date == date(2022, 1, 1)

    def test_standard_layout_fallback(self):
        """Test a 13-column sheet without month names uses columns 1-12."""
        matrix = [["Cuenta"] + [f"M{i}" for i in range(1, 13)], ["Renta"] + [100] * 12]
        result = parse_matrix(matrix, today=date(2023, 7, 1))
        assert result.success
        assert [r.date for r in result.rows] == [date(2023, m, 1) for m in range(1, 13)]

    def test_missing_header_is_an_error(self):
        """Test a narrow sheet without month names fails without raising."""
        result = parse_matrix([["foo", "bar"], ["baz", 1]])
        assert not result.success
        assert result.rows == ()
        assert "header row" in result.errors[0]


class TestBuffers:
    """Tests for reading raw buffers."""

    def test_parse_xlsx(self, xlsx_bytes, cashflow_sheet_rows):
        """Test an .xlsx workbook is parsed like the matrix."""
        result = parse_buffer(xlsx_bytes(cashflow_sheet_rows))
        assert result.success
        assert result.stats.total_rows == 7

    def test_flujo_sheet_is_preferred(self, xlsx_bytes, cashflow_sheet_rows):
        """Test the FLUJO sheet wins and its title year is the default year."""
        rows = [row for row in cashflow_sheet_rows if row != ["FLUJO DE CAJA 2024"]]
        buffer = xlsx_bytes(
            [["nothing here"]],
            sheet_title="Notas",
            extra_sheets=[("FLUJO 2021", rows)],
        )
        result = parse_buffer(buffer, today=date(2030, 1, 1))
        assert result.success
        assert result.year == 2021
        assert result.rows[0].date == date(2021, 1, 1)

    def test_parse_csv(self):
        """Test delimited text with semicolons."""
        text = "Concepto;Ene;Feb\nINGRESOS;;\nVentas;100;200\n"
        result = parse_buffer(text.encode("utf-8"), today=date(2024, 1, 1))
        assert result.success
        assert [(r.type, r.amount) for r in result.rows] == [
            (INCOME, Decimal("100")),
            (INCOME, Decimal("200")),
        ]

    def test_garbage_buffer_reports_error(self):
        """Test an unreadable buffer yields success=False and no rows."""
        result = parse_buffer(b"PK\x03\x04 definitely not a zip")
        assert not result.success
        assert result.rows == ()
        assert result.errors

    def test_binary_buffer_reports_error(self):
        """Test non-text, non-workbook content is rejected."""
        result = parse_buffer(b"\xff\xfe\x00\x81\x82")
        assert not result.success

    def test_empty_buffer_reports_error(self):
        """Test an empty buffer is rejected."""
        result = parse_buffer(b"")
        assert not result.success

    def test_read_delimited_comma(self):
        """Test comma separated text."""
        assert read_delimited(b"a,b\n1,2\n") == [["a", "b"], ["1", "2"]]


def test_pick_sheet():
    """Test sheet preference order."""
    assert pick_sheet(["Resumen", "Flujo", "FLUJO 2024"]) == "FLUJO 2024"
    assert pick_sheet(["Resumen", "Flujo caja"]) == "Flujo caja"
    assert pick_sheet(["Resumen", "Otra"]) == "Resumen"
    assert pick_sheet([]) is None
