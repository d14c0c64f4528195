"""Contact management and duplicate resolution API endpoints."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.models.contact import Contact, ContactStatus, ContactPriority
from outreach.core.contact_importer import ContactImporter, ContactNotFoundError
from outreach.core.dedupe import DuplicateMatch, find_duplicates, get_dedupe_stats
from outreach.core.followup_tracker import followup_date_for_status
from outreach.schemas.contact import (
    BulkStatusUpdate,
    BulkStatusUpdateResponse,
    CandidateContact,
    MatchedContact,
    ContactCreate,
    ContactUpdate,
    ContactResponse,
    ContactListResponse,
    DuplicateMatchResponse,
    DedupeStatsResponse,
    DuplicateCheckResponse,
    DuplicateGroup,
    DuplicateScanResponse,
    DedupeResolution,
    DedupeResolutionResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)

DUPLICATE_CONTACT_DETAIL = "A contact with this email already exists"


def to_match_response(match: DuplicateMatch) -> DuplicateMatchResponse:
    """Flatten a DuplicateMatch for the API."""
    existing = match.existing_contact
    return DuplicateMatchResponse(
        id=existing["id"],
        name=existing.get("name"),
        email=existing.get("email"),
        company=existing.get("company"),
        confidence=match.confidence,
        reasons=match.reasons,
    )


def to_stats_response(matches: list[DuplicateMatch]) -> DedupeStatsResponse:
    stats = get_dedupe_stats(matches)
    return DedupeStatsResponse(
        total_matches=stats.total_matches,
        high_confidence=stats.high_confidence,
        medium_confidence=stats.medium_confidence,
        low_confidence=stats.low_confidence,
    )


def integrity_http_error(error: IntegrityError) -> HTTPException:
    """409 for a unique email clash, 400 for any other rejected write."""
    if "unique" in str(error.orig).lower():
        return HTTPException(status_code=409, detail=DUPLICATE_CONTACT_DETAIL)
    logger.error(f"Contact write rejected by the database: {error.orig}")
    return HTTPException(status_code=400, detail="Contact is missing required fields")


async def get_contact_or_404(db: AsyncSession, contact_id: int) -> Contact:
    result = await db.execute(select(Contact).where(Contact.id == contact_id))
    contact = result.scalar_one_or_none()
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    db: Annotated[AsyncSession, Depends(get_db)],
    status: ContactStatus | None = None,
    priority: ContactPriority | None = None,
    search: str | None = None,
) -> ContactListResponse:
    """List contacts with filtering, newest first."""
    query = select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc())

    if status:
        query = query.where(Contact.status == status)
    if priority:
        query = query.where(Contact.priority == priority)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Contact.name).like(pattern),
                func.lower(Contact.email).like(pattern),
                func.lower(Contact.company).like(pattern),
            )
        )

    result = await db.execute(query)
    contacts = result.scalars().all()

    return ContactListResponse(
        contacts=[ContactResponse.model_validate(c) for c in contacts],
        total=len(contacts),
    )


@router.post("", response_model=ContactResponse, status_code=201)
async def create_contact(
    contact_data: ContactCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContactResponse:
    """Create a new contact."""
    contact = Contact(**contact_data.model_dump())
    db.add(contact)

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise integrity_http_error(e)

    await db.refresh(contact)
    return ContactResponse.model_validate(contact)


# =============================================================================
# DEDUPE ENDPOINTS (must come before parametric routes)
# =============================================================================

@router.post("/check-duplicates", response_model=DuplicateCheckResponse)
async def check_duplicates(
    candidate: CandidateContact,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DuplicateCheckResponse:
    """Find stored contacts that likely duplicate a candidate."""
    result = await db.execute(select(Contact).order_by(Contact.id))
    existing = [c.to_dict() for c in result.scalars().all()]

    matches = find_duplicates(candidate.model_dump(exclude_none=True), existing)

    return DuplicateCheckResponse(
        matches=[to_match_response(m) for m in matches],
        stats=to_stats_response(matches),
    )


@router.get("/duplicates", response_model=DuplicateScanResponse)
async def scan_duplicates(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DuplicateScanResponse:
    """
    Scan all stored contacts for likely duplicates.

    Each contact is compared with the contacts stored after it, so every
    pair is reported once, under the older contact.
    """
    result = await db.execute(select(Contact).order_by(Contact.id))
    contacts = result.scalars().all()
    records = [c.to_dict() for c in contacts]

    groups = []
    all_matches: list[DuplicateMatch] = []
    for i, contact in enumerate(contacts):
        matches = find_duplicates(records[i], records[i + 1:])
        if matches:
            groups.append(DuplicateGroup(
                contact=ContactResponse.model_validate(contact),
                matches=[to_match_response(m) for m in matches],
            ))
            all_matches.extend(matches)

    return DuplicateScanResponse(duplicates=groups, stats=to_stats_response(all_matches))


@router.post("/dedupe", response_model=DedupeResolutionResponse)
async def resolve_duplicate(
    resolution: DedupeResolution,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DedupeResolutionResponse:
    """Merge, create or skip an imported row that matched existing contacts."""
    if resolution.action not in ("merge", "create", "skip"):
        raise HTTPException(
            status_code=400,
            detail="Invalid action. Must be merge, create, or skip",
        )
    if resolution.action == "merge" and resolution.existing_contact_id is None:
        raise HTTPException(status_code=400, detail="Existing contact ID required for merge")
    if resolution.action == "create" and not (resolution.new_contact.name or "").strip():
        raise HTTPException(status_code=400, detail="Name is required to create a contact")

    importer = ContactImporter(db)
    try:
        contact = await importer.resolve_duplicate(
            resolution.action,
            resolution.new_contact.model_dump(),
            resolution.existing_contact_id,
        )
    except ContactNotFoundError:
        raise HTTPException(status_code=404, detail="Existing contact not found")
    except IntegrityError as e:
        await db.rollback()
        raise integrity_http_error(e)

    past_tense = {"merge": "merged", "create": "created", "skip": "skipped"}
    return DedupeResolutionResponse(
        action=past_tense[resolution.action],
        contact=ContactResponse.model_validate(contact) if contact else None,
    )


# =============================================================================
# BULK ENDPOINTS
# =============================================================================

def normalize_identifier(identifier: str) -> str:
    """Trim, drop a leading @ handle marker and lowercase."""
    identifier = str(identifier).strip()
    if identifier.startswith("@"):
        identifier = identifier[1:]
    return identifier.lower()


@router.post("/bulk-update", response_model=BulkStatusUpdateResponse)
async def bulk_update_status(
    request: BulkStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BulkStatusUpdateResponse:
    """
    Set the status of every contact whose name or email is in a pasted list.

    Matching is case-insensitive. Matched contacts also get today's
    ``last_contact_date``.
    """
    if not request.identifiers:
        raise HTTPException(status_code=400, detail="Identifiers array is required")
    if not request.status:
        raise HTTPException(status_code=400, detail="Status is required")

    identifiers = [normalize_identifier(i) for i in request.identifiers]
    identifiers = [i for i in identifiers if i]
    if not identifiers:
        raise HTTPException(status_code=400, detail="No valid identifiers provided")

    result = await db.execute(
        select(Contact)
        .where(
            or_(
                func.lower(Contact.name).in_(identifiers),
                func.lower(Contact.email).in_(identifiers),
            )
        )
        .order_by(Contact.id)
    )
    contacts = result.scalars().all()

    if not contacts:
        return BulkStatusUpdateResponse(
            updated=0,
            searched=len(identifiers),
            message="No matching contacts found",
        )

    now = datetime.utcnow()
    for contact in contacts:
        contact.status = request.status
        contact.last_contact_date = now
        if request.next_followup_date is not None:
            contact.next_followup_date = request.next_followup_date

    await db.commit()
    logger.info(f"Bulk status update set {len(contacts)} contacts to {request.status.value}")

    return BulkStatusUpdateResponse(
        updated=len(contacts),
        searched=len(identifiers),
        matched_contacts=[
            MatchedContact(id=c.id, name=c.name, email=c.email) for c in contacts
        ],
    )


# =============================================================================
# STANDARD CONTACT ENDPOINTS
# =============================================================================

@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContactResponse:
    """Get a specific contact by ID."""
    contact = await get_contact_or_404(db, contact_id)
    return ContactResponse.model_validate(contact)


@router.patch("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: int,
    update_data: ContactUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContactResponse:
    """
    Update a contact.

    Moving a contact to interested or responded schedules a follow-up;
    moving it to accepted or declined clears any follow-up.
    """
    contact = await get_contact_or_404(db, contact_id)

    update_dict = update_data.model_dump(exclude_unset=True)
    if update_dict.get("status"):
        update_dict["next_followup_date"] = followup_date_for_status(
            update_dict["status"],
            update_dict.get("next_followup_date", contact.next_followup_date),
        )

    for field, value in update_dict.items():
        setattr(contact, field, value)

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise integrity_http_error(e)

    await db.refresh(contact)
    return ContactResponse.model_validate(contact)


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Delete a contact."""
    contact = await get_contact_or_404(db, contact_id)

    await db.delete(contact)
    await db.commit()

    return {"message": "Contact deleted successfully"}
