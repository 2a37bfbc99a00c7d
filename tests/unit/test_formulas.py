"""
Unit Tests for Formula Templating

Tests for sheet naming and cross-sheet SUM construction.
"""
import pytest

from budget_engine.formulas import (
    EXCEL_MAX_ROW,
    column_range,
    month_sheet_name,
    quote_sheet,
    sheet_ref,
    sum_across_months,
    sum_column_across_months,
    sum_range,
    year_sheet_name,
)
from budget_engine.models import FormulaDialect


class TestSheetNames:
    """Tests for sheet naming."""

    @pytest.mark.parametrize("month", range(1, 13))
    def test_month_sheet_name_unpadded(self, month):
        assert month_sheet_name(2024, month) == f"2024.{month}"

    def test_no_zero_padding(self):
        assert month_sheet_name(2024, 1) == "2024.1"
        assert month_sheet_name(2024, 9) == "2024.9"
        assert month_sheet_name(2024, 12) == "2024.12"

    def test_year_sheet_name(self):
        assert year_sheet_name(2031) == "2031"

    def test_quote_sheet(self):
        assert quote_sheet("2024.3") == "'2024.3'"
        assert quote_sheet("Bob's") == "'Bob''s'"

    def test_sheet_ref(self):
        assert sheet_ref("2024", "C2") == "'2024'!C2"


class TestSumAcrossMonths:
    """Tests for sum_across_months."""

    def test_exact_text(self):
        expected = "SUM(" + ",".join(f"'2024.{m}'!B2" for m in range(1, 13)) + ")"
        assert sum_across_months(2024, "B", 2) == expected

    @pytest.mark.parametrize("year,column,row", [(2024, "B", 2), (1999, "F", 3), (2050, "H", 17)])
    def test_twelve_references(self, year, column, row):
        formula = sum_across_months(year, column, row)
        assert formula.startswith("SUM(") and formula.endswith(")")
        refs = formula[len("SUM("):-1].split(",")
        assert len(refs) == 12
        assert refs == [f"'{year}.{m}'!{column}{row}" for m in range(1, 13)]

    def test_no_equals_prefix(self):
        assert not sum_across_months(2024, "B", 2).startswith("=")

    def test_deterministic(self):
        assert sum_across_months(2024, "H", 3) == sum_across_months(2024, "H", 3)

    def test_no_validation_garbage_in(self):
        # Malformed input still yields a plausible-looking string.
        formula = sum_across_months(-5, "ZZ", 0)
        assert "'-5.1'!ZZ0" in formula
        assert formula.count(",") == 11


class TestRanges:
    """Tests for range builders."""

    def test_open_range_sheets(self):
        assert column_range("B", 2) == "B2:B"
        assert sum_range("B", 2) == "SUM(B2:B)"

    def test_open_range_excel(self):
        assert column_range("B", 2, dialect=FormulaDialect.EXCEL) == f"B2:B{EXCEL_MAX_ROW}"

    def test_closed_range_ignores_dialect(self):
        assert column_range("C", 2, 5) == "C2:C5"
        assert column_range("C", 2, 5, FormulaDialect.EXCEL) == "C2:C5"

    def test_sum_column_across_months(self):
        formula = sum_column_across_months(2024, "F", 3)
        refs = formula[len("SUM("):-1].split(",")
        assert refs[0] == "'2024.1'!F3:F"
        assert refs[-1] == "'2024.12'!F3:F"
        assert len(refs) == 12
