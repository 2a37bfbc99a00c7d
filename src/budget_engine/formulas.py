"""
Budget Template Formula Templating

Pure string builders for sheet names, cell references and the
cross-sheet SUM formulas that roll month sheets up into year sheets.
None of these functions validate their inputs.
"""
from __future__ import annotations

from budget_engine.models import MONTHS, FormulaDialect


# Last row of an .xlsx worksheet, used to close open-ended ranges.
EXCEL_MAX_ROW = 1048576


def year_sheet_name(year: int) -> str:
    return f"{year}"


def month_sheet_name(year: int, month: int) -> str:
    """Month sheets are named "{year}.{month}" with an unpadded month."""
    return f"{year}.{month}"


def quote_sheet(name: str) -> str:
    """Quote a sheet name for use in a reference; embedded quotes are doubled."""
    escaped = name.replace("'", "''")
    return f"'{escaped}'"


def sheet_ref(sheet: str, cell: str) -> str:
    return f"{quote_sheet(sheet)}!{cell}"


def sum_across_months(year: int, column: str, row: int) -> str:
    """
    Sum one cell over the twelve month sheets of a year.

    Example:
        sum_across_months(2024, "B", 2)
        -> "SUM('2024.1'!B2,'2024.2'!B2,...,'2024.12'!B2)"

    Returns the expression without a leading "=".
    """
    refs = [sheet_ref(month_sheet_name(year, m), f"{column}{row}") for m in MONTHS]
    return f"SUM({','.join(refs)})"


def column_range(
    column: str,
    start_row: int,
    end_row: int | None = None,
    dialect: FormulaDialect = FormulaDialect.SHEETS,
) -> str:
    """
    Range over one column.

    With no end_row the range is open-ended ("B2:B") in the sheets dialect
    and runs to the last worksheet row in the excel dialect.
    """
    if end_row is None and dialect == FormulaDialect.EXCEL:
        end_row = EXCEL_MAX_ROW
    end = f"{column}{end_row}" if end_row is not None else column
    return f"{column}{start_row}:{end}"


def sum_range(
    column: str,
    start_row: int,
    end_row: int | None = None,
    dialect: FormulaDialect = FormulaDialect.SHEETS,
) -> str:
    return f"SUM({column_range(column, start_row, end_row, dialect)})"


def sum_column_across_months(
    year: int,
    column: str,
    start_row: int,
    dialect: FormulaDialect = FormulaDialect.SHEETS,
) -> str:
    """Sum a whole column, from start_row down, over the month sheets of a year."""
    span = column_range(column, start_row, dialect=dialect)
    refs = [sheet_ref(month_sheet_name(year, m), span) for m in MONTHS]
    return f"SUM({','.join(refs)})"
