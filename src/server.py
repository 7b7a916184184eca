"""
Rx Sheet Coach Server - FastAPI backend over Google Sheets
Client workout sessions, set write-back, workout completion and coach notes
"""
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Any, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from workout_sheet.clients import add_note, load_clients, load_notes, mark_workout_complete
from workout_sheet.config import AppConfig
from workout_sheet.coordinates import Coordinate
from workout_sheet.display import day_display_text, youtube_embed_url, youtube_thumbnail_url
from workout_sheet.exercises import SetCoordinates
from workout_sheet.pipeline import filter_sets, load_workout_sheet, session_labels
from workout_sheet.sheets import SheetsClient, SheetsError
from workout_sheet.writeback import build_set_updates

logger = logging.getLogger(__name__)


# Configuration
CONFIG = AppConfig.from_env()

# Built lazily so the app can be imported without credentials
SHEETS_CLIENT: Optional[SheetsClient] = None


def is_test_mode() -> bool:
    """Check if running in test mode via environment variable."""
    return os.environ.get("RX_TEST_MODE", "").lower() == "true"


def is_pytest_running() -> bool:
    """Check if running under pytest (tests supply their own sheets client)."""
    return "pytest" in sys.modules


def get_sheets_client() -> SheetsClient:
    global SHEETS_CLIENT
    if SHEETS_CLIENT is None:
        CONFIG.validate()
        SHEETS_CLIENT = SheetsClient(config=CONFIG)
    return SHEETS_CLIENT


@asynccontextmanager
async def lifespan(app):
    if not is_pytest_running():
        logging.basicConfig(
            level=logging.DEBUG if is_test_mode() else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        try:
            CONFIG.validate()
        except ValueError as e:
            logger.warning("%s; requests needing the spreadsheet will fail", e)
    yield


app = FastAPI(title="Rx Sheet Coach Server", lifespan=lifespan)

# CORS middleware - allow all origins for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Helpers ====================


def _get_clients():
    try:
        return load_clients(get_sheets_client(), CONFIG)
    except SheetsError as e:
        raise HTTPException(status_code=502, detail=str(e))


def _get_client(client_id: str):
    client = _get_clients().get(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail=f"Client not found: {client_id}")
    return client


def _session_labels_for(client, week: Optional[str], day: Optional[str]):
    """Requested week/day, falling back to the client's next workout, then 1/1."""
    week = week or client.default_week or "1"
    day = day or client.default_day or "1"
    return session_labels(week, day)


def _session_set_dict(record):
    """Set record as sent to the workout screen."""
    data = record.to_dict()
    data["weightInputEnabled"] = record.coordinates.weight is not None
    data["videoEmbedUrl"] = youtube_embed_url(record.template.video)
    data["videoThumbnailUrl"] = youtube_thumbnail_url(record.template.video)
    return data


# Pydantic models
class CoordinateModel(BaseModel):
    row: int = Field(ge=1)
    col: int = Field(ge=1)


class SetCoordinatesModel(BaseModel):
    reps: Optional[CoordinateModel] = None
    weight: Optional[CoordinateModel] = None


class SaveSetPayload(BaseModel):
    coordinates: SetCoordinatesModel
    reps: Optional[Union[str, int, float]] = None
    weight: Optional[Union[str, int, float]] = None


class NotePayload(BaseModel):
    text: str


class CompleteWorkoutPayload(BaseModel):
    coach: str


class WorkoutResponse(BaseModel):
    client: dict[str, Any]
    week: str
    day: str
    dayText: str
    sets: list[dict[str, Any]]
    debug: Optional[dict[str, Any]] = None


# API Endpoints
@app.get("/api/coaches")
def list_coaches():
    """Coaches who can sign off a completed workout."""
    return {"coaches": CONFIG.coaches}


@app.get("/api/clients")
def list_clients():
    """The client roster keyed by client spreadsheet id."""
    clients = _get_clients()
    return {"clients": {cid: c.to_dict() for cid, c in clients.items()}}


@app.get("/api/clients/{client_id}/workout", response_model=WorkoutResponse)
def client_workout(
    client_id: str,
    week: Optional[str] = Query(None),
    day: Optional[str] = Query(None),
    debug: bool = Query(False),
):
    """
    Sets for one workout session, in the order the client steps through them.
    Defaults to the client's next scheduled workout.
    """
    client = _get_client(client_id)
    week_label, day_label = _session_labels_for(client, week, day)

    sheet = load_workout_sheet(get_sheets_client(), client.spreadsheet_id, client.worksheet_name)
    session = filter_sets(sheet.flattened_sets, week_label, day_label)

    return WorkoutResponse(
        client=client.to_dict(),
        week=week_label,
        day=day_label,
        dayText=day_display_text(day_label[1:] if day_label.startswith("D") else day_label),
        sets=[_session_set_dict(r) for r in session],
        debug=sheet.to_dict() if debug else None,
    )


@app.get("/api/clients/{client_id}/summary")
def client_summary(
    client_id: str,
    week: Optional[str] = Query(None),
    day: Optional[str] = Query(None),
):
    """Coach overview: one entry per exercise and week with all of its set values."""
    client = _get_client(client_id)
    week_label, day_label = _session_labels_for(client, week, day)

    sheet = load_workout_sheet(get_sheets_client(), client.spreadsheet_id, client.worksheet_name)
    exercises = filter_sets(sheet.exercises_grouped, week_label, day_label)
    return {
        "client": client.to_dict(),
        "week": week_label,
        "day": day_label,
        "exercises": [r.to_dict() for r in exercises],
    }


@app.post("/api/clients/{client_id}/sets")
def save_set(client_id: str, payload: SaveSetPayload):
    """
    Write an edited set back to the client's sheet.
    Reps go to the set's own cell; weight only to the first set's week row.
    """
    client = _get_client(client_id)
    coordinates = SetCoordinates(
        reps=Coordinate(**payload.coordinates.reps.model_dump()) if payload.coordinates.reps else None,
        weight=Coordinate(**payload.coordinates.weight.model_dump()) if payload.coordinates.weight else None,
    )
    updates = build_set_updates(coordinates, payload.reps, payload.weight)
    if not updates:
        raise HTTPException(status_code=400, detail="Nothing to save")

    try:
        updated = get_sheets_client().update_cells(client.spreadsheet_id, client.worksheet_name, updates)
    except SheetsError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "success": True,
        "updatedCells": updated,
        "updates": [u.to_dict() for u in updates],
    }


@app.post("/api/clients/{client_id}/complete")
def complete_workout(client_id: str, payload: CompleteWorkoutPayload):
    """Mark the client's next workout as done by the given coach."""
    client = _get_client(client_id)
    try:
        update = mark_workout_complete(get_sheets_client(), CONFIG, client, payload.coach)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SheetsError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True, "update": update.to_dict()}


@app.get("/api/clients/{client_id}/notes")
def client_notes(client_id: str):
    """Coach notes for a client, oldest first."""
    client = _get_client(client_id)
    try:
        notes = load_notes(get_sheets_client(), client.spreadsheet_id, CONFIG.notes_worksheet)
    except SheetsError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"notes": notes}


@app.post("/api/clients/{client_id}/notes")
def add_client_note(client_id: str, payload: NotePayload):
    """Append a dated note to the client's notes worksheet."""
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Note text is required")
    client = _get_client(client_id)
    try:
        note = add_note(get_sheets_client(), client.spreadsheet_id, text, CONFIG.notes_worksheet)
    except SheetsError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True, "note": note}


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Rx Sheet Coach Server")
    parser.add_argument("--test", action="store_true", help="Run in testing mode (port 8003, debug logging)")
    parser.add_argument("--port", type=int, help="Override the port number")
    args = parser.parse_args()

    if args.test:
        os.environ["RX_TEST_MODE"] = "true"
        print("Starting in TEST MODE")
        print(f"  Port: {args.port or 8003}")

    port = args.port if args.port else (8003 if args.test else 8002)
    uvicorn.run(app, host="0.0.0.0", port=port)
