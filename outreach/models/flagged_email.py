"""Inbox messages flagged as needing attention."""

from datetime import datetime

from sqlalchemy import String, DateTime, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from outreach.services.database import Base


class FlaggedEmail(Base):
    """A Gmail message kept because it came from or concerns a contact."""

    __tablename__ = "flagged_emails"

    id: Mapped[int] = mapped_column(primary_key=True)
    gmail_message_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Sender and preview
    from_email: Mapped[str] = mapped_column(String(255))
    subject: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    snippet: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Link to the matching contact, when the sender is known
    contact_id: Mapped[int | None] = mapped_column(
        ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Why it was flagged
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Triage state
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    action_required: Mapped[bool] = mapped_column(Boolean, default=False)

    received_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_flagged_emails_received", "received_at"),
    )
