"""Pydantic schemas for API validation."""

from outreach.schemas.contact import (
    ContactCreate,
    ContactUpdate,
    ContactResponse,
    ContactListResponse,
    CandidateContact,
    DuplicateMatchResponse,
    DuplicateCheckResponse,
    DedupeResolution,
    DedupeResolutionResponse,
    BulkStatusUpdate,
    BulkStatusUpdateResponse,
)
from outreach.schemas.sheets import (
    ColumnMapping,
    SheetsConfig,
    SheetsSyncRequest,
    SheetsSyncResponse,
)
from outreach.schemas.emails import EmailScanResponse, FlaggedEmailResponse
from outreach.schemas.calendar import CalendarSyncResponse, CalendarEventResponse
from outreach.schemas.blocklist import BlocklistCreate, BlocklistEntryResponse
from outreach.schemas.daily_queue import DailyQueueResponse, QueueItemResponse
from outreach.schemas.automation import AutomationLogResponse, JobRunResponse
from outreach.schemas.dashboard import DashboardStats

__all__ = [
    "ContactCreate",
    "ContactUpdate",
    "ContactResponse",
    "ContactListResponse",
    "CandidateContact",
    "DuplicateMatchResponse",
    "DuplicateCheckResponse",
    "DedupeResolution",
    "DedupeResolutionResponse",
    "BulkStatusUpdate",
    "BulkStatusUpdateResponse",
    "ColumnMapping",
    "SheetsConfig",
    "SheetsSyncRequest",
    "SheetsSyncResponse",
    "EmailScanResponse",
    "FlaggedEmailResponse",
    "CalendarSyncResponse",
    "CalendarEventResponse",
    "BlocklistCreate",
    "BlocklistEntryResponse",
    "DailyQueueResponse",
    "QueueItemResponse",
    "AutomationLogResponse",
    "JobRunResponse",
    "DashboardStats",
]
