"""Google Sheets import schemas."""

from pydantic import BaseModel, Field

from outreach.schemas.contact import PendingImport


class ColumnMapping(BaseModel):
    """Zero-based column index for each contact field."""

    name: int | None = Field(None, ge=0)
    email: int | None = Field(None, ge=0)
    company: int | None = Field(None, ge=0)
    phone: int | None = Field(None, ge=0)
    website: int | None = Field(None, ge=0)
    notes: int | None = Field(None, ge=0)


class SheetsConfig(BaseModel):
    """Saved spreadsheet location used by the scheduled sync."""

    spreadsheet_id: str
    sheet_name: str
    column_mapping: ColumnMapping


class SheetsSyncRequest(SheetsConfig):
    """Schema for an interactive import."""


class SheetsSyncResponse(BaseModel):
    """Outcome of an interactive import."""

    success: bool = True
    imported: int
    duplicates_found: int
    duplicates: list[PendingImport]
    total_processed: int


class SheetsConfigResponse(BaseModel):
    config: SheetsConfig | None = None


class SheetInfo(BaseModel):
    id: int | None = None
    title: str | None = None
    index: int | None = None
    row_count: int | None = None
    column_count: int | None = None


class SpreadsheetMetadata(BaseModel):
    """Spreadsheet title and tabs."""

    title: str | None = None
    sheets: list[SheetInfo] = Field(default_factory=list)
