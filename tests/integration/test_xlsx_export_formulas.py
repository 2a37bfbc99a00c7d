import logging
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from budget_engine.engine import build_workbook
from budget_engine.models import FormulaDialect, TemplateConfig
from budget_io.writers import export_csv, export_xlsx, format_tables
from budget_io.xlsx_validation import (
    audit_workbook,
    find_formula_mismatches,
    find_missing_formulas,
    find_missing_sheets,
    find_unexpected_formulas,
    load_workbook_formulas,
)


@pytest.fixture
def workbook():
    return build_workbook(TemplateConfig(start_year=2024, categories=["Housing", "Food"]))


def test_export_xlsx_formulas(tmp_path: Path, workbook) -> None:
    out_path = tmp_path / "nested" / "budget.xlsx"

    export_xlsx(workbook, out_path)

    wb = load_workbook(out_path, data_only=False)
    assert wb.sheetnames == ["Index", "2024"] + [f"2024.{m}" for m in range(1, 13)]

    year = wb["2024"]
    expected = "=SUM(" + ",".join(f"'2024.{m}'!B2" for m in range(1, 13)) + ")"
    assert year["A2"].value == "Housing"
    assert year["B2"].value == expected
    assert year["C2"].value == "=SUM(B2:B)"

    index = wb["Index"]
    assert index["B2"].value == "='2024'!C2"
    assert index["A3"].value == "Total"

    month = wb["2024.12"]
    assert month["C2"].value == "=SUM(B2:B)"
    assert month["C7"].value == "=SUM(F3:F)+SUM(H3:H)"
    assert month["B2"].value is None
    assert "E1:F1" in {str(r) for r in month.merged_cells.ranges}
    assert month.freeze_panes == "A2"
    assert wb["2024"].freeze_panes == "A2"
    assert wb["Index"].freeze_panes is None


def test_written_workbook_passes_audit(tmp_path: Path, workbook) -> None:
    out_path = export_xlsx(workbook, tmp_path / "budget.xlsx")
    wb = load_workbook_formulas(out_path)

    audit = audit_workbook(wb, workbook)
    assert audit.ok
    assert audit.missing_formulas == ()


def test_audit_reports_tampered_cells(tmp_path: Path, workbook) -> None:
    out_path = export_xlsx(workbook, tmp_path / "budget.xlsx")
    wb = load_workbook_formulas(out_path)
    wb["2024"]["C2"] = 0
    wb["2024"]["D2"] = "=SUM(F3:F)"
    wb["2024.1"]["A2"] = "=1+1"
    wb.remove(wb["2024.12"])

    assert find_missing_formulas(wb, workbook) == ["2024!C2"]
    assert find_formula_mismatches(wb, workbook) == ["2024!D2"]
    assert find_unexpected_formulas(wb, workbook) == ["2024.1!A2"]
    assert find_missing_sheets(wb, workbook) == ["2024.12"]
    assert not audit_workbook(wb, workbook).ok


def test_sheets_dialect_export_warns(tmp_path: Path, workbook, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="budget_io.writers"):
        export_xlsx(workbook, tmp_path / "budget.xlsx")
    assert any("open-ended ranges" in r.getMessage() for r in caplog.records)


def test_excel_dialect_export_does_not_warn(tmp_path: Path, caplog) -> None:
    config = TemplateConfig(start_year=2024, categories=["Housing"], dialect=FormulaDialect.EXCEL)
    with caplog.at_level(logging.WARNING, logger="budget_io.writers"):
        export_xlsx(build_workbook(config), tmp_path / "budget.xlsx")
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_export_rejects_other_suffix(tmp_path: Path, workbook) -> None:
    with pytest.raises(ValueError):
        export_xlsx(workbook, tmp_path / "budget.ods")


def test_regeneration_is_byte_identical_in_formulas(tmp_path: Path) -> None:
    config = TemplateConfig(start_year=2023, end_year=2024, categories=["Housing", "Food"])
    first = export_xlsx(build_workbook(config), tmp_path / "a.xlsx")
    second = export_xlsx(build_workbook(config), tmp_path / "b.xlsx")

    wb_a = load_workbook(first, data_only=False)
    wb_b = load_workbook(second, data_only=False)
    assert wb_a.sheetnames == wb_b.sheetnames
    for name in wb_a.sheetnames:
        values_a = [[c.value for c in row] for row in wb_a[name].iter_rows()]
        values_b = [[c.value for c in row] for row in wb_b[name].iter_rows()]
        assert values_a == values_b


def test_format_tables(workbook) -> None:
    tables = format_tables(workbook)
    assert list(tables) == workbook.sheet_names

    year = tables["2024"]
    assert list(year.columns) == ["Cell", "Role", "Value"]
    assert year.iloc[0]["Cell"] == "A1"
    row = year[year["Cell"] == "C2"].iloc[0]
    assert row["Value"] == "=SUM(B2:B)"
    assert row["Role"] == "total"


def test_export_csv(tmp_path: Path, workbook) -> None:
    files = export_csv(workbook, tmp_path / "csv")

    assert len(files) == len(workbook.sheets)
    assert (tmp_path / "csv" / "2024.3.csv") in files

    df = pd.read_csv(tmp_path / "csv" / "Index.csv")
    assert list(df["Cell"])[:3] == ["A1", "B1", "C1"]
