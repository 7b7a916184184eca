"""Row classification for client workout sheets.

A workout sheet is positional: the role of a row (exercise header, week
block, data row) is inferred from which columns are populated. All of that
inference lives here so the rest of the parser works on tagged rows.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple

Row = Sequence[Any]

# Named column map (0-based)
COL_DAY = 0
COL_PRO_RE = 1
COL_WEEK = 2
COL_TITLE = 3
COL_NOTE = 3            # on the row after a header
COL_WEIGHT_INPUT = 4    # on week block rows, written back as column E
COL_SETS = 10           # on header rows
COL_TEMPO = 10          # on the row after a header
COL_REPS = 11
COL_STARTING_WEIGHT = 12
COL_LAST_WEIGHT = 12    # on the row after a header
COL_VIDEO = 13

# Data-row columns holding set values, in set order. Shared by the read path
# and the write-back coordinates.
SET_SLOT_COLUMNS: Tuple[int, ...] = (5, 6, 7, 8, 9, 13, 14, 15)
MAX_SET_SLOTS = len(SET_SLOT_COLUMNS)

WARMUP_DAYS = ("WU", "scamp")


class RowKind(str, Enum):
    HEADER = "header"
    WEEK_BLOCK = "week_block"
    DATA = "data"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class TaggedRow:
    index: int
    kind: RowKind
    row: Row


def cell(row: Optional[Row], index: int) -> Any:
    """Raw cell value, or None when the row is too short or the cell is blank."""
    if row is None or index >= len(row):
        return None
    value = row[index]
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def cell_text(row: Optional[Row], index: int) -> str:
    """Cell value as stripped text; blank and missing cells become ``""``."""
    value = cell(row, index)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def is_header(row: Optional[Row]) -> bool:
    """A header row has both proRe (col 1) and title (col 3) populated."""
    return bool(cell_text(row, COL_PRO_RE)) and bool(cell_text(row, COL_TITLE))


def week_label(row: Optional[Row]) -> Optional[str]:
    """Return the ``W<n>`` label of a week block row, else None."""
    value = cell(row, COL_WEEK)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value if value.startswith("W") else None


def day_of(row: Optional[Row]) -> str:
    return cell_text(row, COL_DAY)


def classify_row(row: Optional[Row]) -> RowKind:
    """Context-free classification. Data rows need context, see classify_sheet."""
    if is_header(row):
        return RowKind.HEADER
    if week_label(row) is not None:
        return RowKind.WEEK_BLOCK
    return RowKind.UNCLASSIFIED


def classify_sheet(rows: Sequence[Row]) -> List[TaggedRow]:
    """Tag every row, marking the row right after a week block as its data row."""
    tagged = []
    previous = None
    for index, row in enumerate(rows):
        kind = classify_row(row)
        if previous == RowKind.WEEK_BLOCK and kind != RowKind.HEADER:
            kind = RowKind.DATA
        tagged.append(TaggedRow(index, kind, row))
        previous = kind
    return tagged


def iter_header_rows(tagged: Sequence[TaggedRow]) -> Iterator[TaggedRow]:
    """Lazily yield the header rows of a classified sheet."""
    for tagged_row in tagged:
        if tagged_row.kind == RowKind.HEADER:
            yield tagged_row
