"""Google Sheets API wrapper used as the backing datastore."""
import logging
from typing import Any, Iterable, List, Optional

import httplib2
from google.auth.exceptions import TransportError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .coordinates import CellUpdate, cell_to_a1

logger = logging.getLogger(__name__)

# Errors meaning the spreadsheet service rejected the call or could not be reached
UPSTREAM_ERRORS = (HttpError, TransportError, httplib2.HttpLib2Error, OSError)


class SheetsError(Exception):
    """Raised when the spreadsheet service rejects a request or cannot be reached."""


def quote_worksheet(name: str) -> str:
    """Quote a worksheet title for use in A1 ranges."""
    return "'" + name.replace("'", "''") + "'"


def sheet_range(worksheet: str, cells: Optional[str] = None) -> str:
    if cells:
        return f"{quote_worksheet(worksheet)}!{cells}"
    return quote_worksheet(worksheet)


class SheetsClient:
    """Client for reading and writing spreadsheet cells."""

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

    def __init__(self, service=None, config=None):
        if service is None:
            credentials = Credentials.from_service_account_info(
                config.service_account_info(), scopes=self.SCOPES
            )
            service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        self.service = service
        self.sheet = service.spreadsheets()

    def get_metadata(self, spreadsheet_id: str) -> dict:
        """Spreadsheet properties, including the list of worksheets."""
        try:
            return self.sheet.get(spreadsheetId=spreadsheet_id).execute()
        except UPSTREAM_ERRORS as e:
            raise SheetsError(f"Failed to get sheet metadata: {e}") from e

    def first_worksheet(self, spreadsheet_id: str) -> str:
        meta = self.get_metadata(spreadsheet_id)
        sheets = meta.get("sheets", [])
        if not sheets:
            raise SheetsError(f"Spreadsheet {spreadsheet_id} has no worksheets")
        return sheets[0]["properties"]["title"]

    def read_sheet(
        self, spreadsheet_id: str, worksheet: Optional[str] = None, cells: Optional[str] = None
    ) -> List[List[Any]]:
        """Return the formatted values of a worksheet (or a range of it) as rows.

        Defaults to the first worksheet when none is given.
        """
        if not worksheet:
            worksheet = self.first_worksheet(spreadsheet_id)
        try:
            result = self.sheet.values().get(
                spreadsheetId=spreadsheet_id,
                range=sheet_range(worksheet, cells),
                valueRenderOption="FORMATTED_VALUE",
            ).execute()
        except UPSTREAM_ERRORS as e:
            raise SheetsError(f"Failed to get sheet data: {e}") from e
        return result.get("values", [])

    def update_cells(self, spreadsheet_id: str, worksheet: str, updates: Iterable[CellUpdate]) -> int:
        """Write each update to its own cell in one batch. Returns cells updated."""
        data = [
            {"range": sheet_range(worksheet, cell_to_a1(u.row, u.col)), "values": [[u.value]]}
            for u in updates
        ]
        if not data:
            return 0
        try:
            result = self.sheet.values().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body={"valueInputOption": "USER_ENTERED", "data": data},
            ).execute()
        except UPSTREAM_ERRORS as e:
            raise SheetsError(f"Failed to update sheet cells: {e}") from e
        updated = result.get("totalUpdatedCells", len(data))
        logger.info("Updated %d cells in %s/%s", updated, spreadsheet_id, worksheet)
        return updated

    def update_range(self, spreadsheet_id: str, worksheet: str, cells: str, values: List[List[Any]]) -> int:
        """Write a 2D block of values into an A1 range such as ``A5:B5``."""
        try:
            result = self.sheet.values().update(
                spreadsheetId=spreadsheet_id,
                range=sheet_range(worksheet, cells),
                valueInputOption="USER_ENTERED",
                body={"values": values},
            ).execute()
        except UPSTREAM_ERRORS as e:
            raise SheetsError(f"Failed to update sheet range: {e}") from e
        return result.get("updatedCells", 0)
