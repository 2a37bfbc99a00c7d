"""
Budget Template Sheet Layouts

Builds the cell layout of the index, year and month sheets.

Row conventions shared by year and month sheets:
    row 1          column headers
    row i + 2      category i (0-based)
Month sheets also carry two income tables (titles on row 1, headers on
row 2, inputs from row 3) and a summary block placed below the categories.
"""
from __future__ import annotations

import logging

from budget_engine.formulas import (
    sheet_ref,
    sum_across_months,
    sum_column_across_months,
    sum_range,
    year_sheet_name,
    month_sheet_name,
)
from budget_engine.models import (
    CellRole,
    CellSpec,
    CellValue,
    IncomeRowsMode,
    IndexTotalsMode,
    SheetKind,
    SheetSpec,
    TemplateConfig,
)


logger = logging.getLogger(__name__)

FIRST_CATEGORY_ROW = 2
FIRST_INCOME_ROW = 3

# Year sheet cells read by the index sheet.
YEAR_TOTAL_EXPENSES_CELL = "C2"
YEAR_TOTAL_INCOME_CELL = "F2"

INDEX_HEADERS = ["Year", "Total Expenses", "Total Income"]
YEAR_HEADERS = [
    "Category",
    "Amount",
    "Total Expenses",
    "Freelance Income",
    "Company Income",
    "Total Income",
]


def category_row(index: int) -> int:
    """Row holding category `index` (0-based) on year and month sheets."""
    return index + FIRST_CATEGORY_ROW


def month_summary_header_row(categories: list[str]) -> int:
    return len(categories) + 4


def month_summary_value_row(categories: list[str]) -> int:
    return month_summary_header_row(categories) + 1


class _SheetBuilder:
    """Collects cell writes for one sheet, keyed by reference."""

    def __init__(self) -> None:
        self._cells: dict[str, CellSpec] = {}
        self._merges: list[str] = []

    def put(self, ref: str, value: CellValue, role: CellRole = CellRole.LABEL) -> None:
        self._cells[ref] = CellSpec(ref=ref, value=value, role=role)

    def formula(self, ref: str, expression: str, role: CellRole = CellRole.FORMULA) -> None:
        self.put(ref, f"={expression}", role)

    def headers(self, row: int, columns: str, labels: list[str]) -> None:
        for col, label in zip(columns, labels):
            self.put(f"{col}{row}", label, CellRole.HEADER)

    def merge(self, span: str) -> None:
        self._merges.append(span)

    def build(self, name: str, kind: SheetKind, widths: dict[str, float], **extra) -> SheetSpec:
        return SheetSpec(
            name=name,
            kind=kind,
            cells=tuple(self._cells.values()),
            merges=tuple(self._merges),
            column_widths=widths,
            **extra,
        )


# ============================================================================
# INDEX SHEET
# ============================================================================

def build_index_sheet(config: TemplateConfig) -> SheetSpec:
    """
    Index sheet: one row per year plus a grand total row.

    In FIXED mode every year row reads the start year's totals. That only
    holds for a single-year template; PER_YEAR points each row at its own
    year sheet.
    """
    sb = _SheetBuilder()
    sb.headers(1, "ABC", INDEX_HEADERS)

    years = config.years
    for offset, year in enumerate(years):
        row = 2 + offset
        source_year = year if config.index_totals == IndexTotalsMode.PER_YEAR else config.start_year
        source = year_sheet_name(source_year)
        sb.put(f"A{row}", year, CellRole.LABEL)
        sb.formula(f"B{row}", sheet_ref(source, YEAR_TOTAL_EXPENSES_CELL))
        sb.formula(f"C{row}", sheet_ref(source, YEAR_TOTAL_INCOME_CELL))

    last = 1 + len(years)
    total_row = last + 1
    sb.put(f"A{total_row}", "Total", CellRole.TOTAL)
    sb.formula(f"B{total_row}", sum_range("B", 2, last), CellRole.TOTAL)
    sb.formula(f"C{total_row}", sum_range("C", 2, last), CellRole.TOTAL)

    logger.debug("Built index sheet %r with %d year rows", config.index_sheet_name, len(years))
    return sb.build(
        config.index_sheet_name,
        SheetKind.INDEX,
        {"A": 10, "B": 18, "C": 18},
    )


# ============================================================================
# YEAR SHEET
# ============================================================================

def _income_formula(config: TemplateConfig, year: int, column: str) -> str:
    if config.income_rows == IncomeRowsMode.FULL_COLUMN:
        return sum_column_across_months(year, column, FIRST_INCOME_ROW, config.dialect)
    # Only the first income row of each month is captured.
    return sum_across_months(year, column, FIRST_INCOME_ROW)


def build_year_sheet(config: TemplateConfig, year: int) -> SheetSpec:
    """Year sheet: per-category annual totals rolled up from the month sheets."""
    sb = _SheetBuilder()
    sb.headers(1, "ABCDEF", YEAR_HEADERS)

    for idx, category in enumerate(config.categories):
        row = category_row(idx)
        sb.put(f"A{row}", category, CellRole.LABEL)
        sb.formula(f"B{row}", sum_across_months(year, "B", row))

    sb.formula("C2", sum_range("B", FIRST_CATEGORY_ROW, dialect=config.dialect), CellRole.TOTAL)
    sb.formula("D2", _income_formula(config, year, "F"))
    sb.formula("E2", _income_formula(config, year, "H"))
    sb.formula("F2", "D2+E2", CellRole.TOTAL)

    logger.debug("Built year sheet %s", year)
    return sb.build(
        year_sheet_name(year),
        SheetKind.YEAR,
        {"A": 22, "B": 14, "C": 16, "D": 18, "E": 18, "F": 16},
        year=year,
    )


# ============================================================================
# MONTH SHEET
# ============================================================================

def build_month_sheet(config: TemplateConfig, year: int, month: int) -> SheetSpec:
    """Month sheet: raw category amounts, two income tables and a summary block."""
    sb = _SheetBuilder()
    dialect = config.dialect

    sb.headers(1, "ABC", ["Category", "Amount", "Total Expenses"])
    for idx, category in enumerate(config.categories):
        row = category_row(idx)
        sb.put(f"A{row}", category, CellRole.LABEL)
        sb.put(f"B{row}", None, CellRole.INPUT)
    sb.formula("C2", sum_range("B", FIRST_CATEGORY_ROW, dialect=dialect), CellRole.TOTAL)

    sb.put("E1", "Freelance Income", CellRole.TITLE)
    sb.merge("E1:F1")
    sb.headers(2, "EF", ["Source", "Amount"])
    sb.put("G1", "Company Income", CellRole.TITLE)
    sb.merge("G1:H1")
    sb.headers(2, "GH", ["Company", "Amount"])

    header_row = month_summary_header_row(config.categories)
    value_row = month_summary_value_row(config.categories)
    sb.headers(header_row, "CD", ["Total Income", "Total Expenses"])
    sb.formula(
        f"C{value_row}",
        f"{sum_range('F', FIRST_INCOME_ROW, dialect=dialect)}+{sum_range('H', FIRST_INCOME_ROW, dialect=dialect)}",
        CellRole.TOTAL,
    )
    sb.formula(f"D{value_row}", sum_range("B", FIRST_CATEGORY_ROW, dialect=dialect), CellRole.TOTAL)

    return sb.build(
        month_sheet_name(year, month),
        SheetKind.MONTH,
        {"A": 22, "B": 14, "C": 16, "D": 16, "E": 22, "F": 14, "G": 22, "H": 14},
        year=year,
        month=month,
    )
