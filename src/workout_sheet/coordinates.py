"""Cell addresses used to write edited values back to their origin cell.

Rows and columns are 1-based, matching the spreadsheet service.
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Coordinate:
    row: int
    col: int

    def __post_init__(self):
        if self.row < 1 or self.col < 1:
            raise ValueError(f"Coordinates are 1-based, got row={self.row} col={self.col}")

    @classmethod
    def from_zero_based(cls, row_index: int, col_index: int) -> "Coordinate":
        return cls(row=row_index + 1, col=col_index + 1)

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Coordinate"]:
        if not data:
            return None
        return cls(row=int(data["row"]), col=int(data["col"]))


@dataclass(frozen=True)
class CellUpdate:
    """One cell of a batch write: 1-based row/col and the value to store."""
    row: int
    col: int
    value: Any

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col, "value": self.value}


def column_to_letter(column: int) -> str:
    """Convert a 1-based column number to its letter (1 -> A, 27 -> AA)."""
    if column < 1:
        raise ValueError(f"Column must be >= 1, got {column}")
    letters = ""
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def cell_to_a1(row: int, col: int) -> str:
    return f"{column_to_letter(col)}{row}"
