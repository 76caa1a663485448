"""
Google Sheets Client
Reads the ticket export range with a service account (read-only scope)
"""

import asyncio
from typing import Any, Optional

import structlog
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from shared.errors import SecondarySourceError

logger = structlog.get_logger()

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class SheetsClient:
    """
    Client for the Sheets v4 values API.

    The googleapiclient service is synchronous, so fetch_rows() runs it in a
    worker thread to keep the event loop free for the Eventbrite requests.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_info: Optional[dict[str, Any]] = None,
        cell_range: str = "Tickets!A:L",
        service: Any = None,
    ):
        """
        Args:
            spreadsheet_id: Id of the spreadsheet holding the export
            credentials_info: Decoded service-account JSON
            cell_range: A1 range to read, header row included
            service: Prebuilt Sheets service (skips credential handling)
        """
        self.spreadsheet_id = spreadsheet_id
        self.cell_range = cell_range
        self._credentials_info = credentials_info
        self._service = service

    def _get_service(self) -> Any:
        if self._service is None:
            if not self._credentials_info:
                raise SecondarySourceError("Google service account not configured")
            try:
                credentials = service_account.Credentials.from_service_account_info(
                    self._credentials_info, scopes=SCOPES
                )
            except (GoogleAuthError, ValueError, KeyError) as e:
                raise SecondarySourceError(f"Invalid service account credentials: {e}") from e
            self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return self._service

    def get_rows(self) -> list[list[Any]]:
        """
        Read the configured range.

        Returns:
            Raw rows (lists of cell values), header row included

        Raises:
            SecondarySourceError: If the API call fails
        """
        service = self._get_service()
        try:
            response = (
                service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=self.cell_range)
                .execute()
            )
        except (HttpError, GoogleAuthError, OSError) as e:
            raise SecondarySourceError(f"Google Sheets request failed: {e}") from e

        if not isinstance(response, dict):
            raise SecondarySourceError("Google Sheets returned an unexpected payload")
        rows = response.get("values") or []
        logger.info("Fetched sheet rows", range=self.cell_range, rows=len(rows))
        return rows

    async def fetch_rows(self) -> list[list[Any]]:
        """Async wrapper around get_rows()"""
        return await asyncio.to_thread(self.get_rows)
