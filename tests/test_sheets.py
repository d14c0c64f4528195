"""Test Google Sheets import endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.contact import Contact
from outreach.services.google_sheets import SheetsError
from outreach.services.settings_store import SHEETS_CONFIG_KEY, get_json_setting


def sync_request(column_mapping: dict) -> dict:
    return {
        "spreadsheet_id": "sheet-123",
        "sheet_name": "Leads",
        "column_mapping": column_mapping,
    }


@pytest.mark.asyncio
async def test_sync_imports_and_holds_duplicates(
    client: AsyncClient,
    db_session: AsyncSession,
    sample_sheet_rows,
    sample_column_mapping,
):
    """New rows are inserted and likely duplicates are returned for review."""
    db_session.add(Contact(name="Bob Stone", email="bob@stone.dev"))
    await db_session.commit()

    with patch(
        "outreach.core.contact_importer.read_sheet",
        new=AsyncMock(return_value=sample_sheet_rows),
    ) as read_sheet:
        response = await client.post(
            "/api/v1/sheets/sync", json=sync_request(sample_column_mapping)
        )

    assert response.status_code == 200
    read_sheet.assert_awaited_once()
    assert read_sheet.await_args.args[1:] == ("sheet-123", "Leads!A:Z")

    data = response.json()
    assert data["success"] is True
    assert data["total_processed"] == 2
    assert data["imported"] == 1
    assert data["duplicates_found"] == 1
    pending = data["duplicates"][0]
    assert pending["new_contact"]["email"] == "bob@stone.dev"
    assert pending["new_contact"]["sheets_row_id"] == 3
    assert pending["matches"][0]["confidence"] == 100
    assert pending["matches"][0]["reasons"] == ["Exact email match"]

    result = await db_session.execute(select(Contact).where(Contact.email == "alice@partner.io"))
    alice = result.scalar_one()
    assert alice.name == "Alice Lee"
    assert alice.sheets_row_id == 2
    assert alice.notes == "Booth 12"


@pytest.mark.asyncio
async def test_sync_catches_duplicates_within_sheet(client: AsyncClient, sample_column_mapping):
    """A row repeated in the same sheet is held after the first copy is inserted."""
    rows = [
        ["Name", "Email"],
        ["Alice Lee", "alice@partner.io"],
        ["Alice Lee", "ALICE@partner.io"],
    ]

    with patch(
        "outreach.core.contact_importer.read_sheet",
        new=AsyncMock(return_value=rows),
    ):
        response = await client.post(
            "/api/v1/sheets/sync", json=sync_request(sample_column_mapping)
        )

    data = response.json()
    assert data["imported"] == 1
    assert data["duplicates_found"] == 1


@pytest.mark.asyncio
async def test_sync_saves_config(
    client: AsyncClient,
    db_session: AsyncSession,
    sample_sheet_rows,
    sample_column_mapping,
):
    """A successful import remembers the sheet for the scheduled sync."""
    response = await client.get("/api/v1/sheets/config")
    assert response.json() == {"config": None}

    with patch(
        "outreach.core.contact_importer.read_sheet",
        new=AsyncMock(return_value=sample_sheet_rows),
    ):
        await client.post("/api/v1/sheets/sync", json=sync_request(sample_column_mapping))

    response = await client.get("/api/v1/sheets/config")
    config = response.json()["config"]
    assert config["spreadsheet_id"] == "sheet-123"
    assert config["sheet_name"] == "Leads"
    assert config["column_mapping"]["email"] == 1

    stored = await get_json_setting(db_session, SHEETS_CONFIG_KEY)
    assert stored["sheet_name"] == "Leads"


@pytest.mark.asyncio
async def test_sync_empty_sheet(client: AsyncClient, sample_column_mapping):
    with patch(
        "outreach.core.contact_importer.read_sheet",
        new=AsyncMock(return_value=[]),
    ):
        response = await client.post(
            "/api/v1/sheets/sync", json=sync_request(sample_column_mapping)
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "No data found in spreadsheet"


@pytest.mark.asyncio
async def test_sync_no_valid_rows(client: AsyncClient, sample_column_mapping):
    rows = [["Name", "Email"], ["No Email", ""], ["Bad", "nope"]]

    with patch(
        "outreach.core.contact_importer.read_sheet",
        new=AsyncMock(return_value=rows),
    ):
        response = await client.post(
            "/api/v1/sheets/sync", json=sync_request(sample_column_mapping)
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "No valid contacts found in spreadsheet"


@pytest.mark.asyncio
async def test_sync_google_not_connected(client: AsyncClient, sample_column_mapping):
    """Without stored tokens the import is rejected as unauthorized."""
    response = await client.post(
        "/api/v1/sheets/sync", json=sync_request(sample_column_mapping)
    )

    assert response.status_code == 401
    assert "not connected" in response.json()["detail"]


@pytest.mark.asyncio
async def test_sync_read_failure(client: AsyncClient, sample_column_mapping):
    with patch(
        "outreach.core.contact_importer.read_sheet",
        new=AsyncMock(side_effect=SheetsError("Failed to read Google Sheet.")),
    ):
        response = await client.post(
            "/api/v1/sheets/sync", json=sync_request(sample_column_mapping)
        )

    assert response.status_code == 500


@pytest.mark.asyncio
async def test_sync_rejects_negative_column(client: AsyncClient):
    response = await client.post(
        "/api/v1/sheets/sync", json=sync_request({"name": -1, "email": 1})
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_spreadsheet_metadata(client: AsyncClient):
    metadata = {
        "title": "Leads",
        "sheets": [
            {"id": 0, "title": "Sheet1", "index": 0, "row_count": 100, "column_count": 26},
        ],
    }

    with patch(
        "outreach.api.sheets.get_spreadsheet_metadata",
        new=AsyncMock(return_value=metadata),
    ):
        response = await client.get("/api/v1/sheets/sheet-123/metadata")

    assert response.status_code == 200
    assert response.json() == metadata


@pytest.mark.asyncio
async def test_spreadsheet_metadata_not_connected(client: AsyncClient):
    response = await client.get("/api/v1/sheets/sheet-123/metadata")
    assert response.status_code == 401
