"""Email flagging API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.services.gmail import GmailError
from outreach.services.google_sheets import GoogleNotConnectedError
from outreach.models.contact import Contact
from outreach.models.flagged_email import FlaggedEmail
from outreach.core.email_flagging import (
    calculate_email_priority,
    extract_action_items,
    requires_action,
    should_flag_email,
)
from outreach.core.email_scanner import scan_inbox
from outreach.schemas.emails import (
    EmailClassifyRequest,
    EmailClassifyResponse,
    EmailScanResponse,
    FlaggedEmailListResponse,
    FlaggedEmailResponse,
    FlaggedEmailUpdate,
    NewlyFlaggedEmail,
)

router = APIRouter()


def to_email_response(email: FlaggedEmail, contact: Contact | None) -> FlaggedEmailResponse:
    response = FlaggedEmailResponse.model_validate(email)
    if contact:
        response.contact_name = contact.name
        response.contact_company = contact.company
    return response


async def get_flagged_email_or_404(db: AsyncSession, email_id: int) -> FlaggedEmail:
    result = await db.execute(select(FlaggedEmail).where(FlaggedEmail.id == email_id))
    email = result.scalar_one_or_none()
    if not email:
        raise HTTPException(status_code=404, detail="Flagged email not found")
    return email


@router.post("/classify", response_model=EmailClassifyResponse)
async def classify_email(
    email: EmailClassifyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmailClassifyResponse:
    """Decide whether an incoming email should be flagged for follow-up."""
    result = await db.execute(select(Contact).order_by(Contact.id))
    contacts = [c.to_dict() for c in result.scalars().all()]

    decision = should_flag_email(email.from_email, email.subject, email.body, contacts)

    return EmailClassifyResponse(
        should_flag=decision.should_flag,
        reason=decision.reason,
        priority=decision.priority,
        contact_id=decision.contact_id,
        priority_score=calculate_email_priority(
            email.from_email, email.subject, email.body, contacts
        ),
        requires_action=requires_action(email.subject, email.body),
        action_items=extract_action_items(email.subject, email.body),
    )


@router.post("/scan", response_model=EmailScanResponse)
async def scan_emails(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmailScanResponse:
    """Scan recent inbox messages and flag the ones that concern contacts."""
    try:
        result = await scan_inbox(db)
    except GoogleNotConnectedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except GmailError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return EmailScanResponse(
        scanned=result.scanned,
        flagged=result.flagged,
        newly_flagged=[
            NewlyFlaggedEmail(subject=m.subject, from_email=m.from_email, reason=m.reason)
            for m in result.newly_flagged
        ],
    )


@router.get("", response_model=FlaggedEmailListResponse)
async def list_flagged_emails(
    db: Annotated[AsyncSession, Depends(get_db)],
    is_read: bool | None = None,
    action_required: bool | None = None,
) -> FlaggedEmailListResponse:
    """List flagged emails, newest first, with the linked contact's name."""
    query = (
        select(FlaggedEmail, Contact)
        .outerjoin(Contact, Contact.id == FlaggedEmail.contact_id)
        .order_by(FlaggedEmail.received_at.desc(), FlaggedEmail.id.desc())
    )
    if is_read is not None:
        query = query.where(FlaggedEmail.is_read == is_read)
    if action_required is not None:
        query = query.where(FlaggedEmail.action_required == action_required)

    result = await db.execute(query)
    emails = [to_email_response(email, contact) for email, contact in result.all()]

    return FlaggedEmailListResponse(emails=emails, total=len(emails))


@router.patch("/{email_id}", response_model=FlaggedEmailResponse)
async def update_flagged_email(
    email_id: int,
    update_data: FlaggedEmailUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FlaggedEmailResponse:
    """Mark a flagged email read or unread, or toggle its action flag."""
    email = await get_flagged_email_or_404(db, email_id)

    for field, value in update_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(email, field, value)

    await db.commit()
    await db.refresh(email)
    return FlaggedEmailResponse.model_validate(email)


@router.delete("/{email_id}")
async def delete_flagged_email(
    email_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Remove an email from the flagged list."""
    email = await get_flagged_email_or_404(db, email_id)

    await db.delete(email)
    await db.commit()

    return {"success": True}
