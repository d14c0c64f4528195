"""Email classification and flagged email schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class EmailClassifyRequest(BaseModel):
    """Incoming email to evaluate."""

    from_email: str
    subject: str = ""
    body: str = ""


class EmailClassifyResponse(BaseModel):
    """Flagging decision and derived signals for an email."""

    should_flag: bool
    reason: str
    priority: str
    contact_id: int | None = None
    priority_score: int
    requires_action: bool
    action_items: list[str]


class NewlyFlaggedEmail(BaseModel):
    subject: str
    from_email: str
    reason: str


class EmailScanResponse(BaseModel):
    """Outcome of an inbox scan."""

    success: bool = True
    scanned: int
    flagged: int
    newly_flagged: list[NewlyFlaggedEmail] = Field(default_factory=list)


class FlaggedEmailResponse(BaseModel):
    """Schema for a flagged email."""

    id: int
    gmail_message_id: str
    from_email: str
    subject: str | None = None
    snippet: str | None = None
    contact_id: int | None = None
    contact_name: str | None = None
    contact_company: str | None = None
    reason: str | None = None
    priority: str | None = None
    is_read: bool
    action_required: bool
    received_at: datetime

    class Config:
        from_attributes = True


class FlaggedEmailListResponse(BaseModel):
    emails: list[FlaggedEmailResponse]
    total: int


class FlaggedEmailUpdate(BaseModel):
    """Triage state changes for a flagged email."""

    is_read: bool | None = None
    action_required: bool | None = None
