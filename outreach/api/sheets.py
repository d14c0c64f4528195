"""Google Sheets import API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.core.contact_importer import import_from_sheet
from outreach.api.contacts import to_match_response
from outreach.services.google_sheets import (
    EmptySheetError,
    GoogleNotConnectedError,
    SheetsError,
    get_spreadsheet_metadata,
)
from outreach.services.settings_store import SHEETS_CONFIG_KEY, get_json_setting
from outreach.schemas.contact import CandidateContact, PendingImport
from outreach.schemas.sheets import (
    SheetsConfig,
    SheetsConfigResponse,
    SheetsSyncRequest,
    SheetsSyncResponse,
    SpreadsheetMetadata,
)

router = APIRouter()


def raise_for_sheets_error(error: SheetsError) -> None:
    """Map a Sheets failure to the matching HTTP error."""
    if isinstance(error, GoogleNotConnectedError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(error))
    if isinstance(error, EmptySheetError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


@router.post("/sync", response_model=SheetsSyncResponse)
async def sync_contacts(
    request: SheetsSyncRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SheetsSyncResponse:
    """
    Import contacts from a spreadsheet with duplicate detection.

    Rows with no likely duplicate are inserted. The rest are returned with
    their matches so they can be resolved through the dedupe endpoint.
    """
    try:
        result = await import_from_sheet(db, request)
    except SheetsError as e:
        raise_for_sheets_error(e)

    return SheetsSyncResponse(
        imported=result.imported,
        duplicates_found=len(result.duplicates),
        duplicates=[
            PendingImport(
                new_contact=CandidateContact.model_validate(pending.new_contact),
                matches=[to_match_response(m) for m in pending.matches],
            )
            for pending in result.duplicates
        ],
        total_processed=result.total_processed,
    )


@router.get("/config", response_model=SheetsConfigResponse)
async def get_sheets_config(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SheetsConfigResponse:
    """Get the saved spreadsheet configuration."""
    raw_config = await get_json_setting(db, SHEETS_CONFIG_KEY)
    if not raw_config:
        return SheetsConfigResponse(config=None)
    return SheetsConfigResponse(config=SheetsConfig.model_validate(raw_config))


@router.get("/{spreadsheet_id}/metadata", response_model=SpreadsheetMetadata)
async def get_metadata(
    spreadsheet_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SpreadsheetMetadata:
    """Get spreadsheet title and sheet names."""
    try:
        metadata = await get_spreadsheet_metadata(db, spreadsheet_id)
    except SheetsError as e:
        raise_for_sheets_error(e)

    return SpreadsheetMetadata.model_validate(metadata)
