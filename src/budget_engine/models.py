"""
Budget Template Core Data Models

Pydantic models for the template configuration and the immutable
workbook descriptor produced by the engine.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_START_YEAR = 2024

DEFAULT_CATEGORIES = [
    "Housing",
    "Utilities",
    "Food",
    "Transportation",
    "Insurance",
    "Healthcare",
    "Entertainment",
    "Personal",
    "Education",
    "Savings",
    "Miscellaneous",
]

DEFAULT_INDEX_SHEET_NAME = "Index"

MONTHS = list(range(1, 13))


# ============================================================================
# ENUMS
# ============================================================================

class FormulaDialect(str, Enum):
    """Range syntax accepted by the target spreadsheet host."""
    SHEETS = "sheets"  # open-ended ranges such as B2:B
    EXCEL = "excel"    # open-ended ranges closed at the last worksheet row


class IndexTotalsMode(str, Enum):
    """Which year sheet each index row reads its totals from."""
    FIXED = "fixed"        # every row reads the start year's sheet
    PER_YEAR = "per_year"  # each row reads its own year's sheet


class IncomeRowsMode(str, Enum):
    """How the year sheet aggregates month-sheet income."""
    FIRST_ROW = "first_row"      # only row 3 of each income table
    FULL_COLUMN = "full_column"  # the whole income column from row 3 down


class SheetKind(str, Enum):
    """Kinds of sheet in the generated workbook."""
    INDEX = "index"
    YEAR = "year"
    MONTH = "month"


class CellRole(str, Enum):
    """Presentation role of a cell, used by writers for styling."""
    TITLE = "title"
    HEADER = "header"
    LABEL = "label"
    INPUT = "input"
    FORMULA = "formula"
    TOTAL = "total"


# ============================================================================
# INPUT MODELS
# ============================================================================

class TemplateConfig(BaseModel):
    """Template generation inputs."""
    start_year: int = Field(DEFAULT_START_YEAR, ge=1000, le=9999, description="First year sheet")
    end_year: Optional[int] = Field(None, ge=1000, le=9999, description="Last year sheet (defaults to start_year)")
    categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES),
        min_length=1,
        description="Expense categories, one row each on year and month sheets",
    )
    index_sheet_name: str = Field(DEFAULT_INDEX_SHEET_NAME, min_length=1)
    dialect: FormulaDialect = Field(FormulaDialect.SHEETS, description="Range syntax of the target host")
    index_totals: IndexTotalsMode = Field(IndexTotalsMode.FIXED)
    income_rows: IncomeRowsMode = Field(IncomeRowsMode.FIRST_ROW)

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v: list[str]) -> list[str]:
        cleaned = [c.strip() for c in v]
        if any(not c for c in cleaned):
            raise ValueError("Category names must not be empty")
        # Labels are written as cell values; a leading "=" would become a formula.
        formula_like = [c for c in cleaned if c.startswith("=")]
        if formula_like:
            raise ValueError(f"Category names must not start with '=': {formula_like}")
        if len(cleaned) != len(set(cleaned)):
            raise ValueError("Category names must be unique")
        return cleaned

    @field_validator("index_sheet_name")
    @classmethod
    def validate_index_sheet_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Index sheet name must not be blank")
        return v

    @model_validator(mode="after")
    def resolve_end_year(self) -> "TemplateConfig":
        if self.end_year is None:
            self.end_year = self.start_year
        if self.end_year < self.start_year:
            raise ValueError(
                f"end_year ({self.end_year}) must not be before start_year ({self.start_year})"
            )
        return self

    @property
    def years(self) -> list[int]:
        """All years covered by the template."""
        return list(range(self.start_year, self.end_year + 1))


# ============================================================================
# OUTPUT MODELS
# ============================================================================

CellValue = Union[str, int, float, None]


class CellSpec(BaseModel):
    """A single cell write."""
    model_config = ConfigDict(frozen=True)

    ref: str
    value: CellValue = None
    role: CellRole = CellRole.LABEL

    @property
    def is_formula(self) -> bool:
        return isinstance(self.value, str) and self.value.startswith("=")


class SheetSpec(BaseModel):
    """Layout of one sheet: its cells, merges and column widths."""
    model_config = ConfigDict(frozen=True)

    name: str
    kind: SheetKind
    year: Optional[int] = None
    month: Optional[int] = None
    cells: tuple[CellSpec, ...] = ()
    merges: tuple[str, ...] = ()
    column_widths: dict[str, float] = Field(default_factory=dict)

    def cell(self, ref: str) -> CellSpec:
        for c in self.cells:
            if c.ref == ref:
                return c
        raise KeyError(f"{self.name}!{ref} is not written")

    def value(self, ref: str) -> CellValue:
        return self.cell(ref).value

    def formulas(self) -> dict[str, str]:
        """Mapping of cell reference to formula text."""
        return {c.ref: c.value for c in self.cells if c.is_formula}

    @property
    def max_row(self) -> int:
        rows = [int("".join(ch for ch in c.ref if ch.isdigit())) for c in self.cells]
        return max(rows, default=0)


class WorkbookSpec(BaseModel):
    """Complete workbook descriptor."""
    model_config = ConfigDict(frozen=True)

    config: TemplateConfig
    sheets: tuple[SheetSpec, ...]

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    def sheet(self, name: str) -> SheetSpec:
        for s in self.sheets:
            if s.name == name:
                return s
        raise KeyError(f"No sheet named {name!r}")

    def sheets_of_kind(self, kind: SheetKind) -> list[SheetSpec]:
        return [s for s in self.sheets if s.kind == kind]

    @property
    def formula_count(self) -> int:
        return sum(len(s.formulas()) for s in self.sheets)
