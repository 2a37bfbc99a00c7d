"""Audit a written workbook against the descriptor it was built from."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from openpyxl import load_workbook

from budget_engine.models import WorkbookSpec


@dataclass(frozen=True)
class WorkbookAudit:
    """Problems found in a written workbook, as "sheet!cell" strings."""
    missing_sheets: tuple[str, ...] = ()
    missing_formulas: tuple[str, ...] = ()
    mismatched_formulas: tuple[str, ...] = ()
    unexpected_formulas: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not (
            self.missing_sheets
            or self.missing_formulas
            or self.mismatched_formulas
            or self.unexpected_formulas
        )


def load_workbook_formulas(path: str | Path):
    return load_workbook(path, data_only=False)


def _is_formula(value) -> bool:
    return isinstance(value, str) and value.startswith("=")


def _present_sheets(wb, workbook: WorkbookSpec):
    return [sheet for sheet in workbook.sheets if sheet.name in wb.sheetnames]


def find_missing_sheets(wb, workbook: WorkbookSpec) -> list[str]:
    return [name for name in workbook.sheet_names if name not in wb.sheetnames]


def find_missing_formulas(wb, workbook: WorkbookSpec) -> list[str]:
    """Descriptor formula cells that hold no formula in the file."""
    missing: list[str] = []
    for sheet in _present_sheets(wb, workbook):
        ws = wb[sheet.name]
        for ref in sheet.formulas():
            if not _is_formula(ws[ref].value):
                missing.append(f"{sheet.name}!{ref}")
    return missing


def find_formula_mismatches(wb, workbook: WorkbookSpec) -> list[str]:
    """Formula cells whose text differs from the descriptor."""
    mismatches: list[str] = []
    for sheet in _present_sheets(wb, workbook):
        ws = wb[sheet.name]
        for ref, formula in sheet.formulas().items():
            value = ws[ref].value
            if _is_formula(value) and value != formula:
                mismatches.append(f"{sheet.name}!{ref}")
    return mismatches


def find_unexpected_formulas(wb, workbook: WorkbookSpec) -> list[str]:
    """Label, header and input cells that were written as formulas."""
    unexpected: list[str] = []
    for sheet in _present_sheets(wb, workbook):
        ws = wb[sheet.name]
        for spec in sheet.cells:
            if not spec.is_formula and _is_formula(ws[spec.ref].value):
                unexpected.append(f"{sheet.name}!{spec.ref}")
    return unexpected


def audit_workbook(wb, workbook: WorkbookSpec) -> WorkbookAudit:
    return WorkbookAudit(
        missing_sheets=tuple(find_missing_sheets(wb, workbook)),
        missing_formulas=tuple(find_missing_formulas(wb, workbook)),
        mismatched_formulas=tuple(find_formula_mismatches(wb, workbook)),
        unexpected_formulas=tuple(find_unexpected_formulas(wb, workbook)),
    )
