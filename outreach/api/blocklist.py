"""Blocklist API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.models.blocklist import BlocklistEntry
from outreach.schemas.blocklist import (
    BlocklistAddResponse,
    BlocklistCreate,
    BlocklistEntryResponse,
    BlocklistResponse,
)

router = APIRouter()


@router.get("", response_model=BlocklistResponse)
async def list_blocklist(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BlocklistResponse:
    """List blocked names, newest first."""
    result = await db.execute(
        select(BlocklistEntry).order_by(BlocklistEntry.created_at.desc(), BlocklistEntry.id.desc())
    )
    return BlocklistResponse(
        blocklist=[BlocklistEntryResponse.model_validate(e) for e in result.scalars().all()]
    )


@router.post("", response_model=BlocklistAddResponse, status_code=201)
async def add_to_blocklist(
    request: BlocklistCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BlocklistAddResponse:
    """Block one name or a list of names."""
    names = request.names if isinstance(request.names, list) else [request.names or ""]
    names = [n.strip() for n in names if n and n.strip()]
    if not names:
        raise HTTPException(status_code=400, detail="No names provided")

    entries = [BlocklistEntry(name=name, reason=request.reason or None) for name in names]
    db.add_all(entries)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Some names are already in the blocklist")

    for entry in entries:
        await db.refresh(entry)

    return BlocklistAddResponse(
        added=len(entries),
        blocklist=[BlocklistEntryResponse.model_validate(e) for e in entries],
    )


@router.delete("")
async def remove_from_blocklist(
    db: Annotated[AsyncSession, Depends(get_db)],
    entry_id: int | None = Query(None, alias="id"),
) -> dict:
    """Unblock a name by entry id."""
    if entry_id is None:
        raise HTTPException(status_code=400, detail="ID required")

    result = await db.execute(select(BlocklistEntry).where(BlocklistEntry.id == entry_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Blocklist entry not found")

    await db.delete(entry)
    await db.commit()

    return {"success": True}
