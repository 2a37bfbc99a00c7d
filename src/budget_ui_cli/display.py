"""
Budget Template CLI Display

Rich table formatting for terminal output.
"""
from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from budget_engine.models import SheetKind, SheetSpec, TemplateConfig, WorkbookSpec


console = Console()


def display_header(title: str) -> None:
    """Display a section header."""
    console.print()
    console.print(Panel(Text(title, style="bold white"), style="blue"))


def display_config_summary(config: TemplateConfig) -> None:
    """Display configuration summary."""
    display_header("Template Configuration")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Parameter", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Years", f"{config.start_year}-{config.end_year}")
    table.add_row("Categories", str(len(config.categories)))
    table.add_row("Index Sheet", config.index_sheet_name)
    table.add_row("Formula Dialect", config.dialect.value)
    table.add_row("Index Totals", config.index_totals.value)
    table.add_row("Income Rows", config.income_rows.value)

    console.print(table)


def display_sheet_plan(workbook: WorkbookSpec) -> None:
    """Display one row per generated sheet."""
    display_header("Sheet Plan")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Sheet")
    table.add_column("Kind", justify="center")
    table.add_column("Cells", justify="right")
    table.add_column("Formulas", justify="right")
    table.add_column("Last Row", justify="right")

    for idx, sheet in enumerate(workbook.sheets, start=1):
        table.add_row(
            str(idx),
            sheet.name,
            sheet.kind.value,
            str(len(sheet.cells)),
            str(len(sheet.formulas())),
            str(sheet.max_row),
        )

    console.print(table)
    console.print(
        f"[dim]{len(workbook.sheets)} sheets, {workbook.formula_count} formulas[/dim]"
    )


def display_sheet_formulas(sheet: SheetSpec) -> None:
    """Display every formula cell of one sheet."""
    display_header(f"Formulas: {sheet.name}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Cell", justify="center")
    table.add_column("Formula", overflow="fold")

    for ref, formula in sheet.formulas().items():
        table.add_row(ref, formula)

    console.print(table)


def display_all(workbook: WorkbookSpec) -> None:
    """Display configuration, sheet plan and the formulas of the first year."""
    display_config_summary(workbook.config)
    display_sheet_plan(workbook)
    display_sheet_formulas(workbook.sheets_of_kind(SheetKind.INDEX)[0])
    years = workbook.sheets_of_kind(SheetKind.YEAR)
    if years:
        display_sheet_formulas(years[0])
