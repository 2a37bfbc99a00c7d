"""
Budget Template CLI Application

Typer-based command-line interface for the expense/income template generator.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from budget_engine.engine import TemplateEngine
from budget_engine.formulas import sum_across_months
from budget_engine.models import FormulaDialect, TemplateConfig
from budget_io.readers import dump_config_yaml, read_config_file
from budget_io.writers import export_csv, export_xlsx
from budget_ui_cli.display import display_all, display_config_summary, display_sheet_plan


app = typer.Typer(
    name="budget",
    help="Expense and income tracking spreadsheet template generator",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    _configure_logging(verbose)


def _resolve_input_file(input_file: Optional[Path], input_option: Optional[Path]) -> Optional[Path]:
    """Resolve config file from positional arg or --input option."""
    resolved = input_option or input_file
    if resolved is None:
        return None
    if not resolved.exists():
        raise typer.BadParameter(f"Config file not found: {resolved}")
    if not resolved.is_file():
        raise typer.BadParameter(f"Config path is not a file: {resolved}")
    return resolved


def _load_config(
    input_file: Optional[Path],
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    dialect: Optional[FormulaDialect] = None,
) -> TemplateConfig:
    """Load a config file (or the defaults) and apply command-line overrides."""
    if input_file is not None:
        console.print(f"[dim]Reading config file: {input_file}[/dim]")
        config = read_config_file(input_file)
    else:
        config = TemplateConfig()

    overrides = {}
    if start_year is not None:
        overrides["start_year"] = start_year
        if end_year is None and config.end_year < start_year:
            overrides["end_year"] = start_year
    if end_year is not None:
        overrides["end_year"] = end_year
    if dialect is not None:
        overrides["dialect"] = dialect
    if not overrides:
        return config
    return TemplateConfig.model_validate({**config.model_dump(), **overrides})


@app.command()
def init(
    output_file: Path = typer.Option(
        Path("budget_template.yaml"),
        "--output", "-o",
        help="Output file path",
    ),
) -> None:
    """
    Generate a starter configuration YAML file.

    Contains the default year range and category list, ready to edit.
    """
    try:
        path = dump_config_yaml(TemplateConfig(), output_file)
        console.print(f"[green]✓ Created config: {path}[/green]")
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def validate(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to config file (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to config file (YAML or JSON)",
    ),
) -> None:
    """
    Validate a config file without writing a workbook.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        if input_file is None:
            raise typer.BadParameter("Missing config file. Provide a positional INPUT_FILE or --input.")
        config = _load_config(input_file)

        # Creating the engine validates the config
        TemplateEngine(config)

        console.print("[green]✓ Config file is valid[/green]")
        console.print(f"\n  Years: {config.start_year}-{config.end_year}")
        console.print(f"  Categories: {', '.join(config.categories)}")
        console.print(f"  Dialect: {config.dialect.value}")

    except Exception as e:
        console.print(f"[red]Validation failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def generate(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to config file (YAML or JSON); defaults are used when omitted",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to config file (YAML or JSON)",
    ),
    output: Path = typer.Option(
        Path("budget_template.xlsx"),
        "--output", "-o",
        help="Output Excel file path",
    ),
    start_year: Optional[int] = typer.Option(
        None,
        "--start-year",
        help="Override the first year",
    ),
    end_year: Optional[int] = typer.Option(
        None,
        "--end-year",
        help="Override the last year",
    ),
    dialect: Optional[FormulaDialect] = typer.Option(
        None,
        "--dialect",
        help=(
            "Formula range syntax: sheets (default, open-ended ranges such as B2:B, "
            "which Excel rejects) or excel (ranges closed at the last row)"
        ),
    ),
    csv_dir: Optional[Path] = typer.Option(
        None,
        "--csv-dir",
        help="Directory to export per-sheet CSV cell listings",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress table output",
    ),
) -> None:
    """
    Build the template workbook and export it.

    Writes an Excel file with the index, year and month sheets and,
    optionally, a CSV listing of every cell.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        config = _load_config(input_file, start_year, end_year, dialect)

        console.print("[dim]Building template...[/dim]")
        workbook = TemplateEngine(config).run()

        if not quiet:
            display_all(workbook)

        console.print(f"\n[dim]Exporting to Excel: {output}[/dim]")
        export_xlsx(workbook, output)
        console.print(f"[green]✓ Exported {len(workbook.sheets)} sheets to {output}[/green]")

        if csv_dir:
            console.print(f"\n[dim]Exporting CSVs to: {csv_dir}[/dim]")
            files = export_csv(workbook, csv_dir)
            console.print(f"[green]✓ Exported {len(files)} CSV files[/green]")

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def plan(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to config file (YAML or JSON); defaults are used when omitted",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to config file (YAML or JSON)",
    ),
) -> None:
    """
    Show the sheets that would be generated, without writing anything.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        config = _load_config(input_file)
        workbook = TemplateEngine(config).run()
        display_config_summary(config)
        display_sheet_plan(workbook)

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def formula(
    year: int = typer.Argument(..., help="Year whose month sheets are summed"),
    column: str = typer.Argument(..., help="Column letter on the month sheets"),
    row: int = typer.Argument(..., help="Row number on the month sheets"),
) -> None:
    """
    Print the cross-month SUM formula for one cell.
    """
    console.print(f"={sum_across_months(year, column, row)}", soft_wrap=True, highlight=False)


if __name__ == "__main__":
    app()
