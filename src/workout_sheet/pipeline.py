"""Fetch, parse, order and filter a client workout sheet."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .exercises import ExerciseTemplate, SetRecord, materialize_sets, resolve_last_reps
from .rows import WARMUP_DAYS, Row, classify_sheet, iter_header_rows
from .sheets import SheetsError
from .weeks import scan_week_blocks_for_header

logger = logging.getLogger(__name__)


@dataclass
class WorkoutSheet:
    """Every form of a parsed sheet the callers need.

    ``flattened_sets`` is the canonical traversal order; the other fields are
    the raw forms kept for the coach overview and debugging.
    """
    templates: List[ExerciseTemplate] = field(default_factory=list)
    all_sets: List[SetRecord] = field(default_factory=list)
    flattened_sets: List[SetRecord] = field(default_factory=list)
    exercises_grouped: List[SetRecord] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "WorkoutSheet":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.templates or self.all_sets or self.flattened_sets or self.exercises_grouped)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parsedData": [t.to_dict() for t in self.templates],
            "allSets": [r.to_dict() for r in self.all_sets],
            "flattenedSets": [r.to_dict() for r in self.flattened_sets],
            "exercisesGrouped": [r.to_dict() for r in self.exercises_grouped],
        }


def flatten_sets(records: Iterable[SetRecord]) -> List[SetRecord]:
    """Order by header row, then set number. Ties keep emission order."""
    return sorted(records, key=lambda r: (r.header_row_index, r.set_number))


def group_by_exercise_week(records: Iterable[SetRecord]) -> List[SetRecord]:
    """One record per (exercise, week): the first set, which carries ``set_reps``."""
    return [r for r in records if r.set_number == 1]


def filter_sets(records: Iterable[SetRecord], week: str, day: str) -> List[SetRecord]:
    """Select the sets for one workout session.

    Week-less warm-up rows are always kept; everything else must match both
    ``week`` and ``day``.
    """
    return [
        r for r in records
        if (r.week == "" and r.day in WARMUP_DAYS) or (r.week == week and r.day == day)
    ]


def session_labels(week: Any, day: Any) -> Tuple[str, str]:
    """Turn UI selections like ``("2", "1")`` into sheet labels ``("W2", "D1")``."""
    week = str(week).strip()
    day = str(day).strip()
    if not week.startswith("W"):
        week = f"W{week}"
    if not day.startswith("D") and day not in WARMUP_DAYS:
        day = f"D{day}"
    return week, day


def parse_workout_sheet(rows: Sequence[Row]) -> WorkoutSheet:
    """Parse raw sheet values into templates and ordered set records."""
    templates = []
    records = []
    tagged = classify_sheet(rows)
    for header in iter_header_rows(tagged):
        template = ExerciseTemplate.from_rows(rows, header.index)
        blocks, _ = scan_week_blocks_for_header(tagged, header.index)
        templates.append(template)
        records.extend(materialize_sets(template, blocks, rows))

    records = resolve_last_reps(records)
    flattened = flatten_sets(records)
    return WorkoutSheet(
        templates=templates,
        all_sets=records,
        flattened_sets=flattened,
        exercises_grouped=group_by_exercise_week(flattened),
    )


def load_workout_sheet(sheets_client, spreadsheet_id: str, worksheet: Optional[str] = None) -> WorkoutSheet:
    """Read a client's workout worksheet and parse it.

    Upstream failures are logged and produce an empty WorkoutSheet.
    """
    try:
        rows = sheets_client.read_sheet(spreadsheet_id, worksheet)
    except SheetsError as e:
        logger.error("Could not load workout sheet %s/%s: %s", spreadsheet_id, worksheet, e)
        return WorkoutSheet.empty()
    sheet = parse_workout_sheet(rows)
    if sheet.is_empty:
        logger.warning("No exercise headers found in %s/%s", spreadsheet_id, worksheet)
    return sheet
