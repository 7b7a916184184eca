"""Exercise templates and per-set records materialized from a workout sheet."""
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .coordinates import Coordinate
from .rows import (
    COL_DAY,
    COL_LAST_WEIGHT,
    COL_NOTE,
    COL_PRO_RE,
    COL_REPS,
    COL_SETS,
    COL_STARTING_WEIGHT,
    COL_TEMPO,
    COL_TITLE,
    COL_VIDEO,
    COL_WEIGHT_INPUT,
    MAX_SET_SLOTS,
    SET_SLOT_COLUMNS,
    Row,
    cell,
    cell_text,
)
from .weeks import WeekBlock

logger = logging.getLogger(__name__)

_PRO_RE_PATTERN = re.compile(r"^(\d+)\s*([A-Za-z]*)")


def parse_max_sets(raw: Any) -> int:
    """Parse the header's sets cell.

    A range such as ``3-5`` yields its upper bound (5). Blank or
    non-numeric values yield 0.
    """
    text = "" if raw is None else str(raw).strip()
    if not text:
        return 0
    if "-" in text:
        text = text.split("-")[-1].strip()
    try:
        return int(float(text))
    except ValueError:
        return 0


def split_pro_re(pro_re: str) -> Tuple[int, str]:
    """Split a circuit position like ``1A`` into ``(1, "A")``."""
    m = _PRO_RE_PATTERN.match(pro_re.strip())
    if not m:
        return 0, ""
    return int(m.group(1)), m.group(2).upper()


def previous_week_label(week: str) -> Optional[str]:
    """``W3`` -> ``W2``. Returns None for blank or non-numeric labels."""
    if not week or not week.startswith("W"):
        return None
    digits = week[1:].strip()
    if not digits.isdigit():
        return None
    return f"W{int(digits) - 1}"


@dataclass(frozen=True)
class ExerciseTemplate:
    day: str
    title: str
    pro_re: str
    pro_re_number: int
    pro_re_letter: str
    sets: str
    max_sets: int
    reps: str
    starting_weight: str
    video: str
    last_weight: str
    note: str
    tempo: str
    header_row_index: int   # 1-based

    @property
    def requires_input(self) -> bool:
        return self.max_sets > 0

    @classmethod
    def from_rows(cls, rows: Sequence[Row], header_index: int) -> "ExerciseTemplate":
        """Build the template for the header at 0-based ``header_index``.

        lastWeight, note and tempo come from the row right below the header.
        """
        header = rows[header_index]
        follower = rows[header_index + 1] if header_index + 1 < len(rows) else None
        pro_re = cell_text(header, COL_PRO_RE)
        number, letter = split_pro_re(pro_re)
        sets = cell_text(header, COL_SETS)
        return cls(
            day=cell_text(header, COL_DAY),
            title=cell_text(header, COL_TITLE),
            pro_re=pro_re,
            pro_re_number=number,
            pro_re_letter=letter,
            sets=sets,
            max_sets=parse_max_sets(sets),
            reps=cell_text(header, COL_REPS),
            starting_weight=cell_text(header, COL_STARTING_WEIGHT),
            video=cell_text(header, COL_VIDEO),
            last_weight=cell_text(follower, COL_LAST_WEIGHT),
            note=cell_text(follower, COL_NOTE),
            tempo=cell_text(follower, COL_TEMPO),
            header_row_index=header_index + 1,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "title": self.title,
            "proRe": self.pro_re,
            "proReNumber": self.pro_re_number,
            "proReLetter": self.pro_re_letter,
            "sets": self.sets,
            "maxSets": self.max_sets,
            "reps": self.reps,
            "startingWeight": self.starting_weight,
            "video": self.video,
            "lastWeight": self.last_weight,
            "note": self.note,
            "tempo": self.tempo,
            "requiresInput": self.requires_input,
            "headerRowIndex": self.header_row_index,
        }


@dataclass(frozen=True)
class SetCoordinates:
    reps: Optional[Coordinate] = None
    weight: Optional[Coordinate] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reps": self.reps.to_dict() if self.reps else None,
            "weight": self.weight.to_dict() if self.weight else None,
        }


@dataclass(frozen=True)
class SetRecord:
    """One (exercise, week, set number) unit with its write-back coordinates."""
    template: ExerciseTemplate
    week: str
    set_number: int
    set_value: Any = None
    set_reps: List[Any] = field(default_factory=list)
    last_reps: Any = None
    coordinates: SetCoordinates = field(default_factory=SetCoordinates)

    @property
    def day(self) -> str:
        return self.template.day

    @property
    def title(self) -> str:
        return self.template.title

    @property
    def header_row_index(self) -> int:
        return self.template.header_row_index

    @property
    def lookup_key(self) -> Tuple[str, str, str, int]:
        return (self.day, self.title, self.week, self.set_number)

    def to_dict(self) -> Dict[str, Any]:
        data = self.template.to_dict()
        data.update({
            "week": self.week,
            "setNumber": self.set_number,
            "setValue": self.set_value,
            "setReps": list(self.set_reps),
            "lastReps": self.last_reps,
            "coordinates": self.coordinates.to_dict(),
        })
        return data


def materialize_sets(
    template: ExerciseTemplate, blocks: Sequence[WeekBlock], rows: Sequence[Row]
) -> List[SetRecord]:
    """Emit the base (no-week) entries plus one record per set of each week block.

    ``last_reps`` is left unresolved; see resolve_last_reps.
    """
    records = [
        SetRecord(template=template, week="", set_number=n)
        for n in range(1, max(template.max_sets, 1) + 1)
    ]

    slot_count = template.max_sets
    if slot_count > MAX_SET_SLOTS:
        logger.warning(
            "%s (row %d) declares %d sets; only %d set slots exist, extra sets ignored",
            template.title, template.header_row_index, template.max_sets, MAX_SET_SLOTS,
        )
        slot_count = MAX_SET_SLOTS
    columns = SET_SLOT_COLUMNS[:slot_count]

    for block in blocks:
        data_row = rows[block.data_row_index]
        set_reps = [cell(data_row, col) for col in columns]
        for set_index, col in enumerate(columns):
            weight = None
            if set_index == 0:
                weight = Coordinate.from_zero_based(block.row_index, COL_WEIGHT_INPUT)
            records.append(SetRecord(
                template=template,
                week=block.label,
                set_number=set_index + 1,
                set_value=set_reps[set_index],
                set_reps=set_reps,
                coordinates=SetCoordinates(
                    reps=Coordinate.from_zero_based(block.data_row_index, col),
                    weight=weight,
                ),
            ))
    return records


def resolve_last_reps(records: Sequence[SetRecord]) -> List[SetRecord]:
    """Fill ``last_reps`` from the same day/title/set number one week earlier.

    Runs after every record exists so lookups do not depend on sheet order.
    """
    index: Dict[Tuple[str, str, str, int], Any] = {}
    for record in records:
        if record.week:
            index.setdefault(record.lookup_key, record.set_value)

    resolved = []
    for record in records:
        previous = previous_week_label(record.week)
        if previous is None:
            resolved.append(record)
            continue
        last = index.get((record.day, record.title, previous, record.set_number))
        resolved.append(replace(record, last_reps=last))
    return resolved
