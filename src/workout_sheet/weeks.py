"""Week sub-block scanning beneath an exercise header."""
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .rows import RowKind, TaggedRow, day_of, week_label

logger = logging.getLogger(__name__)

MAX_LOOKAHEAD = 50


@dataclass(frozen=True)
class WeekBlock:
    """A ``W<n>`` row and the data row directly beneath it (0-based indexes)."""
    label: str
    row_index: int
    data_row_index: int


def scan_week_blocks_for_header(
    tagged: Sequence[TaggedRow], header_index: int, max_lookahead: int = MAX_LOOKAHEAD
) -> Tuple[List[WeekBlock], int]:
    """Collect the week blocks belonging to the header at ``header_index``.

    ``tagged`` is the output of classify_sheet. Scanning stops at the next
    header row, at a change of day value, or after ``max_lookahead`` rows.
    Returns the blocks and the index where scanning stopped, which is the
    next candidate for header detection.
    """
    blocks = []
    limit = min(len(tagged), header_index + 1 + max_lookahead)
    cursor = header_index + 1

    while cursor < limit:
        current = tagged[cursor]
        if current.kind == RowKind.HEADER:
            break
        if day_of(current.row) != day_of(tagged[cursor - 1].row):
            break
        if current.kind != RowKind.WEEK_BLOCK:
            cursor += 1
            continue

        label = week_label(current.row)
        data_index = cursor + 1
        if data_index >= len(tagged) or tagged[data_index].kind != RowKind.DATA:
            logger.debug("Week block %s at row %d has no data row", label, cursor + 1)
            break
        blocks.append(WeekBlock(label=label, row_index=cursor, data_row_index=data_index))
        cursor += 2

    return blocks, cursor
