"""
Budget Template Writers

Apply a WorkbookSpec to an .xlsx workbook, or dump it as CSV tables.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from budget_engine.models import CellRole, FormulaDialect, SheetKind, SheetSpec, WorkbookSpec
from budget_io.xlsx_layout import SheetLayout


logger = logging.getLogger(__name__)

CURRENCY_FORMAT = "#,##0.00"
INDEX_TAB_COLOR = "2E75B6"
YEAR_TAB_COLOR = "70AD47"

_thin_border = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
_header_font = Font(bold=True, color="FFFFFF")
_header_fill = PatternFill(start_color="2E75B6", end_color="2E75B6", fill_type="solid")
_title_font = Font(bold=True, size=12, color="1F4E78")
_total_font = Font(bold=True)
_formula_font = Font(italic=True, color="595959")
_input_fill = PatternFill(start_color="FFF9E6", end_color="FFF9E6", fill_type="solid")


def _style_cell(cell, role: CellRole) -> None:
    if role == CellRole.HEADER:
        cell.font = _header_font
        cell.fill = _header_fill
        cell.border = _thin_border
        cell.alignment = Alignment(horizontal="center")
    elif role == CellRole.TITLE:
        cell.font = _title_font
        cell.alignment = Alignment(horizontal="center")
    elif role == CellRole.TOTAL:
        cell.font = _total_font
        cell.border = _thin_border
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.number_format = CURRENCY_FORMAT
    elif role == CellRole.FORMULA:
        cell.font = _formula_font
        cell.border = _thin_border
        cell.number_format = CURRENCY_FORMAT
    elif role == CellRole.INPUT:
        cell.fill = _input_fill
        cell.border = _thin_border
        cell.number_format = CURRENCY_FORMAT
    else:
        cell.border = _thin_border


def _write_sheet(ws, sheet: SheetSpec, layout: SheetLayout) -> None:
    for spec in sheet.cells:
        cell = ws[spec.ref]
        if spec.value is not None:
            cell.value = spec.value
        _style_cell(cell, spec.role)

    for span in sheet.merges:
        ws.merge_cells(span)

    for column, width in sheet.column_widths.items():
        ws.column_dimensions[column].width = width

    if sheet.kind != SheetKind.INDEX:
        ws.freeze_panes = layout.freeze_cell
    if sheet.kind == SheetKind.INDEX:
        ws.sheet_properties.tabColor = INDEX_TAB_COLOR
    elif sheet.kind == SheetKind.YEAR:
        ws.sheet_properties.tabColor = YEAR_TAB_COLOR


def write_workbook(workbook: WorkbookSpec, wb: Workbook) -> None:
    """Create one worksheet per SheetSpec, in descriptor order."""
    layout = SheetLayout()
    for sheet in workbook.sheets:
        ws = wb.create_sheet(title=sheet.name)
        _write_sheet(ws, sheet, layout)
        logger.debug("Wrote sheet %r (%d cells)", sheet.name, len(sheet.cells))


def export_xlsx(workbook: WorkbookSpec, path: str | Path) -> Path:
    """
    Export a workbook descriptor to an Excel file.

    Args:
        workbook: Descriptor built by the template engine
        path: Output file path

    Returns:
        The written path
    """
    path = Path(path)
    if path.suffix.lower() != ".xlsx":
        raise ValueError(f"Output must be an .xlsx file, got {path.name!r}")
    path.parent.mkdir(parents=True, exist_ok=True)

    if workbook.config.dialect == FormulaDialect.SHEETS:
        logger.warning(
            "Writing open-ended ranges such as B2:B to %s; Excel rejects them, "
            "use the excel dialect for files opened in Excel",
            path.name,
        )

    wb = Workbook()
    wb.remove(wb.active)
    write_workbook(workbook, wb)
    wb.save(path)
    logger.info("Saved %s (%d sheets)", path, len(workbook.sheets))
    return path


def _create_sheet_table(sheet: SheetSpec) -> pd.DataFrame:
    """Create a cell listing for one sheet, in row-major order."""
    layout = SheetLayout()
    ordered = sorted(sheet.cells, key=lambda c: tuple(reversed(layout.split(c.ref))))
    rows = [
        {"Cell": c.ref, "Role": c.role.value, "Value": "" if c.value is None else c.value}
        for c in ordered
    ]
    return pd.DataFrame(rows, columns=["Cell", "Role", "Value"])


def format_tables(workbook: WorkbookSpec) -> dict[str, pd.DataFrame]:
    """
    Convert a workbook descriptor to one DataFrame per sheet.

    Returns:
        Dict mapping sheet name to DataFrame
    """
    return {sheet.name: _create_sheet_table(sheet) for sheet in workbook.sheets}


def export_csv(workbook: WorkbookSpec, output_dir: str | Path) -> list[Path]:
    """
    Export the cell listing of every sheet to CSV files (one per sheet).

    Args:
        workbook: Descriptor built by the template engine
        output_dir: Directory to write CSV files

    Returns:
        List of created file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tables = format_tables(workbook)
    created_files = []

    for sheet_name, df in tables.items():
        file_path = output_dir / f"{sheet_name}.csv"
        df.to_csv(file_path, index=False)
        created_files.append(file_path)

    logger.info("Exported %d CSV files to %s", len(created_files), output_dir)
    return created_files
