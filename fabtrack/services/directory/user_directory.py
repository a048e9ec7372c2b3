"""
Read-only client directory backed by a Google Sheet.

Layout: first row is a header; column B holds the client name and column C
the client email. Rows without an email are ignored.
"""

import time
from typing import Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from starlette.concurrency import run_in_threadpool

from fabtrack.core.exceptions import BackingServiceFailure
from fabtrack.schemas.clients.client_schemas import DirectoryClient
from fabtrack.services.directory.google_sheets import build_sheets_service
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)

NAME_COLUMN = 1
EMAIL_COLUMN = 2


def parse_directory_rows(rows: List[List[str]]) -> List[DirectoryClient]:
    clients: List[DirectoryClient] = []
    seen = set()

    for row in rows[1:]:
        email = (row[EMAIL_COLUMN] if len(row) > EMAIL_COLUMN else "").strip()
        if not email or email.lower() in seen:
            continue
        seen.add(email.lower())
        name = (row[NAME_COLUMN] if len(row) > NAME_COLUMN else "").strip()
        clients.append(DirectoryClient(name=name or email.split("@")[0], email=email))

    return clients


class UserDirectory:
    def __init__(
        self,
        spreadsheet_id: Optional[str],
        sheet_range: str = "Sheet1",
        cache_seconds: int = 60,
        service=None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self.cache_seconds = cache_seconds
        self._service_client = service
        self._clients: Optional[List[DirectoryClient]] = None
        self._loaded_at = 0.0

    def _service(self):
        if self._service_client is None:
            self._service_client = build_sheets_service()
        return self._service_client

    def _fetch_rows(self) -> List[List[str]]:
        if not self.spreadsheet_id:
            raise BackingServiceFailure("User directory", "User directory is not configured")

        try:
            result = (
                self._service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=self.sheet_range)
                .execute()
            )
        except (HttpError, GoogleAuthError, OSError, RuntimeError) as e:
            logger.error(f"Failed to read client directory {self.spreadsheet_id}: {str(e)}")
            raise BackingServiceFailure("User directory") from e

        return result.get("values", [])

    async def list_clients(self, refresh: bool = False) -> List[DirectoryClient]:
        fresh = time.monotonic() - self._loaded_at < self.cache_seconds
        if self._clients is not None and fresh and not refresh:
            return self._clients

        rows = await run_in_threadpool(self._fetch_rows)
        self._clients = parse_directory_rows(rows)
        self._loaded_at = time.monotonic()

        logger.debug("Client directory loaded", extra={"clients": len(self._clients)})
        return self._clients

    async def find_client(self, email: str) -> Optional[DirectoryClient]:
        wanted = email.strip().lower()
        for client in await self.list_clients():
            if client.email.lower() == wanted:
                return client
        return None

    async def client_names(self) -> Dict[str, str]:
        return {c.email.lower(): c.name for c in await self.list_clients()}

    def invalidate(self) -> None:
        self._clients = None
        self._loaded_at = 0.0
