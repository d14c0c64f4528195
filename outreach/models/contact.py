"""Contact model for outreach tracking."""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, String, DateTime, Text, Integer, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column

from outreach.services.database import Base


class ContactStatus(str, Enum):
    """Outreach pipeline stage."""

    NEW = "new"
    CONTACTED = "contacted"
    RESPONDED = "responded"
    INTERESTED = "interested"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ContactPriority(str, Enum):
    """Contact priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Columns that the dedupe engine reads and merge_contacts writes
MERGEABLE_FIELDS = (
    "name",
    "email",
    "company",
    "phone",
    "website",
    "status",
    "priority",
    "notes",
    "tags",
    "first_contact_date",
    "last_contact_date",
    "next_followup_date",
    "sheets_row_id",
)


class Contact(Base):
    """Affiliate or partner contact."""

    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True, nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Classification
    status: Mapped[ContactStatus] = mapped_column(
        SQLEnum(ContactStatus, values_callable=lambda x: [e.value for e in x]),
        default=ContactStatus.NEW,
        index=True,
    )
    priority: Mapped[ContactPriority] = mapped_column(
        SQLEnum(ContactPriority, values_callable=lambda x: [e.value for e in x]),
        default=ContactPriority.MEDIUM,
    )

    # Free text
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    # Outreach dates
    first_contact_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    last_contact_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    next_followup_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Import provenance
    sheets_row_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("ix_contacts_followup_status", "next_followup_date", "status"),
    )

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view used by the dedupe engine."""
        data: dict[str, Any] = {"id": self.id}
        for field in MERGEABLE_FIELDS:
            data[field] = getattr(self, field)
        return data

    def apply(self, values: dict[str, Any]) -> None:
        """Copy merged field values onto this row."""
        for field, value in values.items():
            if field in MERGEABLE_FIELDS:
                setattr(self, field, value)
