"""Application configuration loaded from the environment."""
import json
import os
from dataclasses import dataclass, field
from typing import List, Optional


def parse_coaches(raw: Optional[str]) -> List[str]:
    """Coaches are stored either as a JSON list or comma separated."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw.split(",")
    if not isinstance(value, list):
        value = [value]
    return [str(c).strip() for c in value if str(c).strip()]


@dataclass
class AppConfig:
    client_list_spreadsheet_id: str = ""
    client_list_worksheet: str = "Clients"
    notes_worksheet: str = "Notes"
    service_account_email: str = ""
    private_key: str = ""
    coaches: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            client_list_spreadsheet_id=os.environ.get("RX_CLIENT_LIST_SPREADSHEET_ID", ""),
            client_list_worksheet=os.environ.get("RX_CLIENT_LIST_WORKSHEET", "Clients"),
            notes_worksheet=os.environ.get("RX_NOTES_WORKSHEET", "Notes"),
            service_account_email=os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
            # Keys pasted into env files carry escaped newlines
            private_key=os.environ.get("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n"),
            coaches=parse_coaches(os.environ.get("RX_COACHES")),
        )

    def validate(self):
        missing = []
        if not self.client_list_spreadsheet_id:
            missing.append("RX_CLIENT_LIST_SPREADSHEET_ID")
        if not self.service_account_email:
            missing.append("GOOGLE_SERVICE_ACCOUNT_EMAIL")
        if not self.private_key:
            missing.append("GOOGLE_PRIVATE_KEY")
        if missing:
            raise ValueError(f"Missing configuration: {', '.join(missing)}")

    def service_account_info(self) -> dict:
        return {
            "type": "service_account",
            "client_email": self.service_account_email,
            "private_key": self.private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
