"""Client roster and per-client notes, both stored in spreadsheets."""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .coordinates import CellUpdate
from .display import DAY_NAMES
from .rows import cell_text
from .sheets import SheetsError

logger = logging.getLogger(__name__)

# Roster columns before the per-workout history
COL_NAME = 0
COL_SPREADSHEET_ID = 1
COL_WORKSHEET = 2
FIRST_HISTORY_COL = 3

NOTES_RANGE = "A:B"


@dataclass
class Client:
    spreadsheet_id: str
    name: str
    worksheet_name: str
    spreadsheet_row: int            # 1-based roster row
    next_workout_col: int           # 1-based roster column for the next completion
    default_header: str = ""
    default_day: str = ""
    default_week: str = ""
    history: List[Dict[str, str]] = field(default_factory=list)

    @property
    def default_day_text(self) -> Optional[str]:
        return DAY_NAMES.get(self.default_day)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spreadsheetId": self.spreadsheet_id,
            "name": self.name,
            "worksheetName": self.worksheet_name,
            "spreadsheetRow": self.spreadsheet_row,
            "nextWorkoutCol": self.next_workout_col,
            "defaultHeader": self.default_header,
            "defaultDayNum": self.default_day,
            "defaultDayText": self.default_day_text,
            "defaultWeek": self.default_week,
            "data": list(self.history),
        }


def default_week_from_header(header: str) -> str:
    """``W3 - Strength`` -> ``3``."""
    if " - " not in header:
        return ""
    return header.split(" - ")[0].replace("W", "").strip()


def default_day_from_header(header: str) -> str:
    for num, name in DAY_NAMES.items():
        if name in header:
            return num
    return ""


def parse_client_list(rows: Sequence[Sequence[Any]]) -> Dict[str, Client]:
    """Build the roster keyed by each client's spreadsheet id.

    Row 0 holds the column headers. From column D onwards each header names a
    workout (``W<n> - <Day>``); the first blank cell in a client's row is the
    next workout to do.
    """
    if not rows:
        return {}
    header_row = rows[0]
    clients = {}

    for i, row in enumerate(rows[1:]):
        name = cell_text(row, COL_NAME)
        spreadsheet_id = cell_text(row, COL_SPREADSHEET_ID)
        worksheet = cell_text(row, COL_WORKSHEET)
        if not (name and spreadsheet_id and worksheet):
            continue

        history = []
        default_header = ""
        next_col = len(header_row) + 1
        for j in range(FIRST_HISTORY_COL, len(header_row)):
            value = cell_text(row, j)
            if not value:
                default_header = cell_text(header_row, j)
                next_col = j + 1
                break
            history.append({"header": cell_text(header_row, j), "value": value})

        clients[spreadsheet_id] = Client(
            spreadsheet_id=spreadsheet_id,
            name=name,
            worksheet_name=worksheet,
            spreadsheet_row=i + 2,
            next_workout_col=next_col,
            default_header=default_header,
            default_day=default_day_from_header(default_header),
            default_week=default_week_from_header(default_header),
            history=history,
        )
    return clients


def load_clients(sheets_client, config) -> Dict[str, Client]:
    rows = sheets_client.read_sheet(config.client_list_spreadsheet_id, config.client_list_worksheet)
    clients = parse_client_list(rows)
    logger.debug("Loaded %d clients from roster", len(clients))
    return clients


# ==================== Notes ====================


def parse_notes(rows: Sequence[Sequence[Any]]) -> List[Dict[str, str]]:
    """Skip the header row and any row missing a date or text."""
    notes = []
    for row in rows[1:]:
        note_date = cell_text(row, 0)
        text = cell_text(row, 1)
        if note_date and text:
            notes.append({"date": note_date, "text": text})
    return notes


def next_note_row(rows: Sequence[Sequence[Any]]) -> int:
    """1-based row just below the last row holding a date or text."""
    next_row = 1
    for i, row in enumerate(rows):
        if cell_text(row, 0) or cell_text(row, 1):
            next_row = i + 2
    if next_row == 1 and rows:
        next_row = len(rows) + 1
    return next_row


def format_note_date(d: date) -> str:
    """US short date without zero padding, e.g. ``3/7/2026``."""
    return f"{d.month}/{d.day}/{d.year}"


def _missing_worksheet(error: SheetsError) -> bool:
    return "Unable to parse range" in str(error)


def load_notes(sheets_client, spreadsheet_id: str, worksheet: str = "Notes") -> List[Dict[str, str]]:
    """Notes for a client. A client without a notes worksheet has no notes."""
    try:
        rows = sheets_client.read_sheet(spreadsheet_id, worksheet, NOTES_RANGE)
    except SheetsError as e:
        if _missing_worksheet(e):
            return []
        raise
    return parse_notes(rows)


def add_note(
    sheets_client, spreadsheet_id: str, text: str, worksheet: str = "Notes", today: Optional[date] = None
) -> Dict[str, Any]:
    """Append a dated note below the existing ones."""
    try:
        rows = sheets_client.read_sheet(spreadsheet_id, worksheet, NOTES_RANGE)
    except SheetsError as e:
        if not _missing_worksheet(e):
            raise
        rows = []
    row = next_note_row(rows)
    note_date = format_note_date(today or date.today())
    sheets_client.update_range(spreadsheet_id, worksheet, f"A{row}:B{row}", [[note_date, text]])
    return {"date": note_date, "text": text, "row": row}


def mark_workout_complete(sheets_client, config, client: Client, coach: str) -> CellUpdate:
    """Record the coach's name in the client's next workout column of the roster."""
    coach = (coach or "").strip()
    if not coach:
        raise ValueError("A coach must be selected to complete a workout")
    update = CellUpdate(client.spreadsheet_row, client.next_workout_col, coach)
    sheets_client.update_cells(
        config.client_list_spreadsheet_id, config.client_list_worksheet, [update]
    )
    logger.info("Marked workout %s complete for %s (coach %s)",
                client.default_header or client.next_workout_col, client.name, coach)
    return update
