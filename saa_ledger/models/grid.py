"""
Cell-Grid Models

A cell grid is the format-neutral description of one spreadsheet sheet:
typed cells, number formats, merged regions and column widths.
Grids are built by saa_ledger.exports.grid and written by
saa_ledger.exports.xlsx.

All coordinates are 0-based; merge ranges are inclusive.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CellType(str, Enum):
    """Cell value type, using the workbook format's one-letter codes."""
    STRING = "s"
    NUMBER = "n"


class GridCell(BaseModel):
    """A typed cell. Numeric cells may carry a display format."""
    model_config = ConfigDict(frozen=True)

    value: Union[str, Decimal]
    cell_type: CellType = CellType.STRING
    number_format: Optional[str] = None
    bold: bool = False

    @model_validator(mode='after')
    def validate_type(self) -> 'GridCell':
        """Numeric cells hold Decimals, string cells hold text."""
        if self.cell_type == CellType.NUMBER and not isinstance(self.value, Decimal):
            raise ValueError("Numeric cells require a Decimal value")
        if self.cell_type == CellType.STRING and not isinstance(self.value, str):
            raise ValueError("String cells require a text value")
        return self

    @property
    def literal(self) -> str:
        """Text as it would appear without a number format."""
        if isinstance(self.value, Decimal):
            return format(self.value, "f")
        return self.value

    @classmethod
    def text(cls, value: str, bold: bool = False) -> 'GridCell':
        return cls(value=value, bold=bold)

    @classmethod
    def money(cls, value: Decimal, number_format: str) -> 'GridCell':
        return cls(value=value, cell_type=CellType.NUMBER, number_format=number_format)


class MergeRange(BaseModel):
    """Inclusive rectangle of merged cells."""
    model_config = ConfigDict(frozen=True)

    start_row: int = Field(ge=0)
    start_col: int = Field(ge=0)
    end_row: int = Field(ge=0)
    end_col: int = Field(ge=0)

    @model_validator(mode='after')
    def validate_bounds(self) -> 'MergeRange':
        if self.end_row < self.start_row or self.end_col < self.start_col:
            raise ValueError("Merge range end cannot be before start")
        return self


class SheetGrid(BaseModel):
    """One sheet: name, rows of optional cells, merges and column widths."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=31)
    rows: tuple[tuple[Optional[GridCell], ...], ...] = Field(default_factory=tuple)
    merges: tuple[MergeRange, ...] = Field(default_factory=tuple)
    column_widths: tuple[int, ...] = Field(default_factory=tuple)

    def cell(self, row: int, col: int) -> Optional[GridCell]:
        """Cell at a position, None when empty or out of range."""
        if row >= len(self.rows) or col >= len(self.rows[row]):
            return None
        return self.rows[row][col]
