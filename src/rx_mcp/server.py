"""Rx Sheet Coach MCP Server implementation.

Gives an LLM coaching assistant access to client workout sheets through the
Model Context Protocol: read sessions and summaries, record sets, manage
notes and sign off completed workouts.
"""

import logging
from typing import Any, Dict, List, Optional, Union

try:
    from fastmcp import FastMCP
except ImportError:
    raise ImportError(
        "FastMCP is required for MCP server functionality. "
        "Install with: pip install fastmcp"
    )

from workout_sheet.clients import add_note, load_clients, load_notes, mark_workout_complete
from workout_sheet.config import AppConfig
from workout_sheet.coordinates import Coordinate
from workout_sheet.display import day_display_text
from workout_sheet.exercises import SetCoordinates
from workout_sheet.pipeline import filter_sets, load_workout_sheet, session_labels
from workout_sheet.sheets import SheetsClient
from workout_sheet.writeback import build_set_updates

logger = logging.getLogger(__name__)


class SheetManager:
    """Client lookups and sheet operations shared by the MCP tools."""

    def __init__(self, config: AppConfig, sheets_client: Optional[SheetsClient] = None):
        self.config = config
        self.sheets = sheets_client or SheetsClient(config=config)

    def clients(self) -> Dict[str, Any]:
        return load_clients(self.sheets, self.config)

    def find_client(self, client: str):
        """Look a client up by spreadsheet id or, failing that, by name."""
        clients = self.clients()
        if client in clients:
            return clients[client]
        wanted = client.strip().lower()
        for candidate in clients.values():
            if candidate.name.strip().lower() == wanted:
                return candidate
        raise ValueError(f"Unknown client: {client}")

    def session(self, client, week: Optional[str], day: Optional[str], grouped: bool = False):
        week_label, day_label = session_labels(
            week or client.default_week or "1", day or client.default_day or "1"
        )
        sheet = load_workout_sheet(self.sheets, client.spreadsheet_id, client.worksheet_name)
        source = sheet.exercises_grouped if grouped else sheet.flattened_sets
        return week_label, day_label, filter_sets(source, week_label, day_label)

    def record_set(self, client, coordinates: Dict[str, Any], reps=None, weight=None) -> List[Dict[str, Any]]:
        set_coordinates = SetCoordinates(
            reps=Coordinate.from_dict(coordinates.get("reps")),
            weight=Coordinate.from_dict(coordinates.get("weight")),
        )
        updates = build_set_updates(set_coordinates, reps, weight)
        if not updates:
            raise ValueError("Nothing to save: provide reps (and weight for set 1)")
        self.sheets.update_cells(client.spreadsheet_id, client.worksheet_name, updates)
        return [u.to_dict() for u in updates]


def _session_payload(client, week_label, day_label, records) -> Dict[str, Any]:
    return {
        "client": client.name,
        "week": week_label,
        "day": day_label,
        "day_text": day_display_text(day_label[1:] if day_label.startswith("D") else day_label),
        "sets": [r.to_dict() for r in records],
    }


def create_mcp_server(
    config: Optional[AppConfig] = None, sheets_client: Optional[SheetsClient] = None
) -> FastMCP:
    """Create and configure the Rx Sheet Coach MCP server."""
    if config is None:
        config = AppConfig.from_env()
    if sheets_client is None:
        config.validate()

    manager = SheetManager(config, sheets_client)
    mcp = FastMCP("Rx Sheet Coach")

    @mcp.tool()
    def list_clients() -> List[Dict[str, Any]]:
        """WHEN TO USE: When you need to know which clients exist or what they do next.

        Returns:
            Roster entries with spreadsheet id, name, next workout and history
        """
        try:
            return [c.to_dict() for c in manager.clients().values()]
        except Exception as e:
            raise ValueError(f"Failed to list clients: {str(e)}")

    @mcp.tool()
    def get_client_workout(
        client: str,
        week: Optional[str] = None,
        day: Optional[str] = None
    ) -> Dict[str, Any]:
        """WHEN TO USE: When walking a client through a session set by set.

        Args:
            client: Client spreadsheet id or name
            week: Week number (e.g. "2"); defaults to the client's next workout
            day: Day number ("1" Strength, "2" Power, "3" Endurance)

        Returns:
            Ordered set records, each with write-back coordinates and last week's reps
        """
        try:
            target = manager.find_client(client)
            week_label, day_label, records = manager.session(target, week, day)
            return _session_payload(target, week_label, day_label, records)
        except Exception as e:
            raise ValueError(f"Failed to get client workout: {str(e)}")

    @mcp.tool()
    def get_workout_summary(
        client: str,
        week: Optional[str] = None,
        day: Optional[str] = None
    ) -> Dict[str, Any]:
        """WHEN TO USE: When reviewing what a client did in a session.

        One entry per exercise with all of that week's set values in ``setReps``.
        """
        try:
            target = manager.find_client(client)
            week_label, day_label, records = manager.session(target, week, day, grouped=True)
            return _session_payload(target, week_label, day_label, records)
        except Exception as e:
            raise ValueError(f"Failed to get workout summary: {str(e)}")

    @mcp.tool()
    def record_set(
        client: str,
        coordinates: Dict[str, Any],
        reps: Optional[Union[str, int, float]] = None,
        weight: Optional[Union[str, int, float]] = None
    ) -> Dict[str, Any]:
        """WHEN TO USE: When the client reports reps (and weight) for a set.

        Args:
            client: Client spreadsheet id or name
            coordinates: The ``coordinates`` object of the set record
            reps: Reps completed
            weight: Weight used; only stored for set 1 of an exercise

        Returns:
            The cells written
        """
        try:
            target = manager.find_client(client)
            updates = manager.record_set(target, coordinates, reps, weight)
            return {"success": True, "updates": updates}
        except Exception as e:
            raise ValueError(f"Failed to record set: {str(e)}")

    @mcp.tool()
    def get_client_notes(client: str) -> List[Dict[str, str]]:
        """WHEN TO USE: Before planning or reviewing, to read the coaches' notes."""
        try:
            target = manager.find_client(client)
            return load_notes(manager.sheets, target.spreadsheet_id, config.notes_worksheet)
        except Exception as e:
            raise ValueError(f"Failed to get notes: {str(e)}")

    @mcp.tool()
    def add_client_note(client: str, text: str) -> Dict[str, Any]:
        """WHEN TO USE: To leave a dated note for the other coaches."""
        if not text.strip():
            raise ValueError("Note text is required")
        try:
            target = manager.find_client(client)
            note = add_note(manager.sheets, target.spreadsheet_id, text.strip(), config.notes_worksheet)
            return {"success": True, "note": note}
        except Exception as e:
            raise ValueError(f"Failed to add note: {str(e)}")

    @mcp.tool()
    def mark_workout_done(client: str, coach: str) -> Dict[str, Any]:
        """WHEN TO USE: When a client has finished their scheduled workout.

        Records the coach's name against the client's next workout in the roster.
        """
        try:
            target = manager.find_client(client)
            update = mark_workout_complete(manager.sheets, config, target, coach)
            return {"success": True, "update": update.to_dict(), "workout": target.default_header}
        except Exception as e:
            raise ValueError(f"Failed to mark workout complete: {str(e)}")

    return mcp


def main():
    """Main entry point for the Rx Sheet Coach MCP server."""
    try:
        mcp = create_mcp_server()
        mcp.run()
    except Exception as e:
        print(f"Failed to start MCP server: {e}")
        raise


if __name__ == "__main__":
    main()
