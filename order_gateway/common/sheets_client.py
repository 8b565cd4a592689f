import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence, Set

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from .config import Settings

_logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"
VALUE_INPUT_OPTION = "USER_ENTERED"

Rows = List[List[str]]


class MissingCredentialsError(RuntimeError):
    pass


class SheetsClient:
    """Async facade over the Google Sheets v4 values/spreadsheets API.

    The google client is blocking and its HTTP transport is not thread-safe,
    so every call builds its own service object and runs in a worker thread.
    """

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsClient":
        if not settings.has_sheets_credentials():
            raise MissingCredentialsError("Missing required Google Sheets credentials")
        info = {
            "type": "service_account",
            "project_id": settings.GOOGLE_SHEETS_PROJECT_ID or None,
            "private_key": settings.private_key(),
            "client_email": settings.GOOGLE_SHEETS_CLIENT_EMAIL,
            "token_uri": TOKEN_URI,
            "universe_domain": "googleapis.com",
        }
        creds = Credentials.from_service_account_info(info, scopes=SCOPES)
        _logger.info("Google Sheets client ready | client_email=%s", settings.GOOGLE_SHEETS_CLIENT_EMAIL)
        return cls(creds)

    def _spreadsheets(self):
        return build("sheets", "v4", credentials=self._credentials, cache_discovery=False).spreadsheets()

    async def _execute(self, make_request: Callable[[Any], Any]) -> dict:
        def run():
            return make_request(self._spreadsheets()).execute()

        return await asyncio.to_thread(run)

    async def get_values(self, spreadsheet_id: str, range_name: str) -> Rows:
        result = await self._execute(
            lambda s: s.values().get(spreadsheetId=spreadsheet_id, range=range_name)
        )
        return result.get("values", [])

    async def append_values(self, spreadsheet_id: str, range_name: str, rows: Sequence[Sequence[str]]) -> None:
        await self._execute(
            lambda s: s.values().append(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": [list(r) for r in rows]},
            )
        )

    async def update_values(self, spreadsheet_id: str, range_name: str, rows: Sequence[Sequence[str]]) -> None:
        await self._execute(
            lambda s: s.values().update(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": [list(r) for r in rows]},
            )
        )

    async def clear_values(self, spreadsheet_id: str, range_name: str) -> None:
        await self._execute(
            lambda s: s.values().clear(spreadsheetId=spreadsheet_id, range=range_name, body={})
        )

    async def get_sheet_titles(self, spreadsheet_id: str) -> Set[str]:
        result = await self._execute(
            lambda s: s.get(spreadsheetId=spreadsheet_id, fields="sheets.properties.title")
        )
        return {sheet["properties"]["title"] for sheet in result.get("sheets", [])}

    async def create_sheet(self, spreadsheet_id: str, title: str) -> None:
        body = {"requests": [{"addSheet": {"properties": {"title": title}}}]}
        await self._execute(lambda s: s.batchUpdate(spreadsheetId=spreadsheet_id, body=body))

    async def get_spreadsheet_title(self, spreadsheet_id: str) -> Optional[str]:
        result = await self._execute(
            lambda s: s.get(spreadsheetId=spreadsheet_id, fields="properties.title")
        )
        return result.get("properties", {}).get("title")
