"""Blocklist schemas."""

from datetime import datetime

from pydantic import BaseModel


class BlocklistCreate(BaseModel):
    """One name or a pasted list of names to block."""

    names: str | list[str] | None = None
    reason: str | None = None


class BlocklistEntryResponse(BaseModel):
    id: int
    name: str
    reason: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class BlocklistResponse(BaseModel):
    blocklist: list[BlocklistEntryResponse]


class BlocklistAddResponse(BaseModel):
    success: bool = True
    added: int
    blocklist: list[BlocklistEntryResponse]
