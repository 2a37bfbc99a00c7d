"""
XLSX Sheet Layout

Cell addressing helpers shared by the xlsx writer and validation.
"""
from __future__ import annotations

from dataclasses import dataclass

from openpyxl.utils import get_column_letter
from openpyxl.utils.cell import coordinate_to_tuple


@dataclass(frozen=True)
class SheetLayout:
    """Header placement for a generated sheet."""
    header_row: int = 1
    first_col: int = 1

    @property
    def freeze_cell(self) -> str:
        """Top-left cell of the scrollable area below the header row."""
        return self.cell(self.first_col, self.header_row + 1)

    @staticmethod
    def cell(col: int, row: int) -> str:
        return f"{get_column_letter(col)}{row}"

    @staticmethod
    def split(ref: str) -> tuple[int, int]:
        """Return (col, row) for an A1 reference."""
        row, col = coordinate_to_tuple(ref)
        return col, row
