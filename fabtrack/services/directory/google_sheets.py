"""
Google Sheets client construction.

Credentials come from a service account key file (``GCP_CREDENTIALS``), which
allows reading and appending. A plain API key (``GOOGLE_API_KEY``) is enough
for reading a shared directory sheet.
"""

import os

from google.oauth2 import service_account
from googleapiclient.discovery import build

from fabtrack.core.config import GCP_CREDENTIALS, GOOGLE_API_KEY
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _get_credentials():
    if not os.path.exists(GCP_CREDENTIALS):
        raise RuntimeError(
            f"Google service account key file not found: {GCP_CREDENTIALS}"
        )

    creds = service_account.Credentials.from_service_account_file(
        GCP_CREDENTIALS, scopes=SCOPES
    )
    logger.info(f"Google API credentials loaded from {GCP_CREDENTIALS}")
    return creds


def can_write() -> bool:
    return bool(GCP_CREDENTIALS)


def build_sheets_service():
    """
    Create a Sheets v4 service client.

    Raises:
        RuntimeError: If no credentials are configured or loading them fails
    """
    try:
        if GCP_CREDENTIALS:
            return build(
                "sheets", "v4", credentials=_get_credentials(), cache_discovery=False
            )
        if GOOGLE_API_KEY:
            return build("sheets", "v4", developerKey=GOOGLE_API_KEY, cache_discovery=False)
    except Exception as e:
        raise RuntimeError(f"Failed to create sheets v4 service: {str(e)}") from e

    raise RuntimeError("Neither GCP_CREDENTIALS nor GOOGLE_API_KEY is set")
