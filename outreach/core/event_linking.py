"""Link calendar events to contacts and score their relevance."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

ContactData = Mapping[str, Any]

AFFILIATE_KEYWORDS = (
    "partnership",
    "sponsor",
    "affiliate",
    "bitcoin conference",
    "btc conference",
    "booth",
    "exhibition",
    "speaking",
    "panel",
)

IMPORTANT_KEYWORDS = ("partnership", "sponsor", "bitcoin conference")

SOON_WINDOW_HOURS = 24
LARGE_MEETING_ATTENDEES = 3


@dataclass
class EventRelation:
    """Why an event is (or is not) relevant to outreach."""

    is_related: bool
    reason: str
    related_contacts: list[ContactData] = field(default_factory=list)


def link_event_to_contacts(
    attendee_emails: Sequence[str],
    contacts: Sequence[ContactData],
) -> list[ContactData]:
    """Contacts attending an event, in attendee order, each at most once."""
    linked: list[ContactData] = []
    seen_ids: set[Any] = set()

    for email in attendee_emails:
        email_lower = email.lower()
        match = next(
            (c for c in contacts if c.get("email") and c["email"].lower() == email_lower),
            None,
        )
        if match and match.get("id") not in seen_ids:
            linked.append(match)
            seen_ids.add(match.get("id"))

    return linked


def is_affiliate_related(
    summary: str,
    description: str,
    attendee_emails: Sequence[str],
    contacts: Sequence[ContactData],
) -> EventRelation:
    linked = link_event_to_contacts(attendee_emails, contacts)
    if linked:
        plural = "s" if len(linked) > 1 else ""
        names = ", ".join(str(c.get("name")) for c in linked)
        return EventRelation(
            is_related=True,
            reason=f"Meeting with {len(linked)} contact{plural}: {names}",
            related_contacts=linked,
        )

    summary_lower = summary.lower()
    description_lower = description.lower()
    found_keywords = [
        keyword for keyword in AFFILIATE_KEYWORDS
        if keyword in summary_lower or keyword in description_lower
    ]
    if found_keywords:
        return EventRelation(
            is_related=True,
            reason=f"Contains keywords: {', '.join(found_keywords)}",
        )

    return EventRelation(is_related=False, reason="No matching criteria")


def calculate_event_priority(
    summary: str,
    description: str,
    attendee_emails: Sequence[str],
    contacts: Sequence[ContactData],
    start_time: datetime,
    now: datetime | None = None,
) -> int:
    """Priority score from 0 to 100."""
    score = 0

    linked = link_event_to_contacts(attendee_emails, contacts)
    if linked:
        score += 40
        if any(getattr(c.get("priority"), "value", c.get("priority")) == "high" for c in linked):
            score += 20

    text = f"{summary} {description}".lower()
    if any(keyword in text for keyword in IMPORTANT_KEYWORDS):
        score += 20

    if now is None:
        now = datetime.now(timezone.utc)
    if start_time.tzinfo is None:
        start_time = start_time.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    hours_until = (start_time - now).total_seconds() / 3600
    if 0 < hours_until <= SOON_WINDOW_HOURS:
        score += 10

    if len(attendee_emails) >= LARGE_MEETING_ATTENDEES:
        score += 10

    return min(score, 100)
