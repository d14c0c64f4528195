"""Google Sheets access and row parsing for contact imports."""

import logging
import re
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.config import get_settings
from outreach.schemas.sheets import ColumnMapping
from outreach.services.settings_store import GOOGLE_TOKENS_KEY, get_json_setting

settings = get_settings()
logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# First data row in the sheet (row 1 is the header, rows are 1-indexed)
FIRST_DATA_ROW = 2


class SheetsError(Exception):
    """Google Sheets could not be read."""


class GoogleNotConnectedError(SheetsError):
    """No stored OAuth tokens."""


class EmptySheetError(SheetsError):
    """Sheet has no usable rows."""


async def get_google_credentials(db: AsyncSession) -> Credentials:
    """Build credentials from the tokens stored in the settings table."""
    tokens = await get_json_setting(db, GOOGLE_TOKENS_KEY)
    if not tokens or not tokens.get("access_token"):
        raise GoogleNotConnectedError("Google account not connected. Please re-authenticate.")

    return Credentials(
        token=tokens["access_token"],
        refresh_token=tokens.get("refresh_token"),
        token_uri="https://oauth2.googleapis.com/token",
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
    )


async def get_sheets_service(db: AsyncSession):
    """Create Google Sheets API service."""
    credentials = await get_google_credentials(db)
    return build("sheets", "v4", credentials=credentials)


async def read_sheet(db: AsyncSession, spreadsheet_id: str, range_: str) -> list[list[Any]]:
    """Read raw cell values for ``range_``."""
    service = await get_sheets_service(db)
    try:
        response = (
            service.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=range_)
            .execute()
        )
    except HttpError as e:
        logger.error(f"Error reading sheet {spreadsheet_id}: {e}")
        raise SheetsError(
            "Failed to read Google Sheet. Check spreadsheet ID and permissions."
        ) from e

    return response.get("values", [])


async def get_spreadsheet_metadata(db: AsyncSession, spreadsheet_id: str) -> dict:
    """Spreadsheet title and per-sheet properties."""
    service = await get_sheets_service(db)
    try:
        response = service.spreadsheets().get(spreadsheetId=spreadsheet_id).execute()
    except HttpError as e:
        logger.error(f"Error getting spreadsheet metadata for {spreadsheet_id}: {e}")
        raise SheetsError(
            "Failed to get spreadsheet info. Check spreadsheet ID and permissions."
        ) from e

    sheets = []
    for sheet in response.get("sheets", []):
        properties = sheet.get("properties", {})
        grid = properties.get("gridProperties", {})
        sheets.append({
            "id": properties.get("sheetId"),
            "title": properties.get("title"),
            "index": properties.get("index"),
            "row_count": grid.get("rowCount"),
            "column_count": grid.get("columnCount"),
        })

    return {
        "title": response.get("properties", {}).get("title"),
        "sheets": sheets,
    }


def _cell(row: list[Any], index: int | None) -> str | None:
    if index is None or index >= len(row) or not row[index]:
        return None
    return str(row[index]).strip()


def parse_sheet_data(rows: list[list[Any]], column_mapping: ColumnMapping) -> list[dict[str, Any]]:
    """
    Turn sheet rows into candidate contacts.

    The first row is treated as a header. Rows without a name or a
    well-formed email are dropped.
    """
    contacts = []

    for offset, row in enumerate(rows[1:]):
        if not row or all(not cell for cell in row):
            continue

        contact: dict[str, Any] = {"sheets_row_id": offset + FIRST_DATA_ROW}
        for field_name, index in column_mapping.model_dump().items():
            value = _cell(row, index)
            if value:
                contact[field_name] = value

        if contact.get("email"):
            contact["email"] = contact["email"].lower()

        if not contact.get("name") or not contact.get("email"):
            continue
        if not EMAIL_PATTERN.match(contact["email"]):
            continue

        contacts.append(contact)

    return contacts
