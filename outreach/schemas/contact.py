"""Contact and dedupe schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from outreach.models.contact import ContactStatus, ContactPriority


class ContactBase(BaseModel):
    """Base contact schema."""

    name: str
    email: EmailStr | None = None
    company: str | None = None
    phone: str | None = None
    website: str | None = None
    status: ContactStatus = ContactStatus.NEW
    priority: ContactPriority = ContactPriority.MEDIUM
    notes: str | None = None
    tags: list[str] | None = None
    first_contact_date: datetime | None = None
    last_contact_date: datetime | None = None
    next_followup_date: datetime | None = None
    sheets_row_id: int | None = None


class ContactCreate(ContactBase):
    """Schema for creating a contact."""


class ContactUpdate(BaseModel):
    """Schema for updating a contact."""

    name: str | None = None
    email: EmailStr | None = None
    company: str | None = None
    phone: str | None = None
    website: str | None = None
    status: ContactStatus | None = None
    priority: ContactPriority | None = None
    notes: str | None = None
    tags: list[str] | None = None
    first_contact_date: datetime | None = None
    last_contact_date: datetime | None = None
    next_followup_date: datetime | None = None

    @field_validator("name", "status", "priority")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        # Omitted fields are not validated, so this only sees values sent as null
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(f"{info.field_name} cannot be empty")
        return value


class ContactResponse(ContactBase):
    """Schema for contact response."""

    id: int
    email: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ContactListResponse(BaseModel):
    """Schema for contact list."""

    contacts: list[ContactResponse]
    total: int


class CandidateContact(BaseModel):
    """Partial contact checked for duplicates or supplied for a merge."""

    name: str | None = None
    email: str | None = None
    company: str | None = None
    phone: str | None = None
    website: str | None = None
    status: ContactStatus | None = None
    priority: ContactPriority | None = None
    notes: str | None = None
    tags: list[str] | None = None
    first_contact_date: datetime | None = None
    last_contact_date: datetime | None = None
    next_followup_date: datetime | None = None
    sheets_row_id: int | None = None


class DuplicateMatchResponse(BaseModel):
    """An existing contact flagged as a likely duplicate."""

    id: int
    name: str | None = None
    email: str | None = None
    company: str | None = None
    confidence: int
    reasons: list[str]


class DedupeStatsResponse(BaseModel):
    """Confidence buckets for a match list."""

    total_matches: int
    high_confidence: int
    medium_confidence: int
    low_confidence: int


class DuplicateCheckResponse(BaseModel):
    """Matches for a single candidate."""

    matches: list[DuplicateMatchResponse]
    stats: DedupeStatsResponse


class DuplicateGroup(BaseModel):
    """A stored contact and the later contacts that duplicate it."""

    contact: ContactResponse
    matches: list[DuplicateMatchResponse]


class DuplicateScanResponse(BaseModel):
    """Result of scanning all stored contacts for duplicates."""

    duplicates: list[DuplicateGroup]
    stats: DedupeStatsResponse


class DedupeResolution(BaseModel):
    """Reviewer decision for an imported row that matched existing contacts."""

    action: str  # "merge", "create" or "skip"
    new_contact: CandidateContact
    existing_contact_id: int | None = None


class DedupeResolutionResponse(BaseModel):
    """Outcome of a dedupe resolution."""

    success: bool = True
    action: str
    contact: Optional[ContactResponse] = None


class PendingImport(BaseModel):
    """An imported row held back for review."""

    new_contact: CandidateContact
    matches: list[DuplicateMatchResponse] = Field(default_factory=list)


class BulkStatusUpdate(BaseModel):
    """Pasted list of names or emails and the status to set on them."""

    identifiers: list[str] | None = None
    status: ContactStatus | None = None
    next_followup_date: datetime | None = None


class MatchedContact(BaseModel):
    id: int
    name: str
    email: str | None = None


class BulkStatusUpdateResponse(BaseModel):
    """Outcome of a bulk status update."""

    success: bool = True
    updated: int
    searched: int
    matched_contacts: list[MatchedContact] = Field(default_factory=list)
    message: str | None = None
