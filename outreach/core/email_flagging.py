"""Keyword and sender based flagging for incoming outreach emails."""

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from outreach.core.dedupe import get_email_domain

ContactData = Mapping[str, Any]

# Keywords that mark an email as affiliate-related
FLAGGING_KEYWORDS = (
    "partnership",
    "sponsor",
    "sponsorship",
    "affiliate",
    "interested",
    "meeting",
    "call",
    "discuss",
    "collaboration",
    "opportunity",
    "proposal",
    "bitcoin conference",
    "btc conference",
    "booth",
    "exhibition",
    "speaking",
    "panel",
)

HIGH_VALUE_KEYWORDS = ("partnership", "sponsor", "interested")

URGENT_KEYWORDS = (
    "urgent",
    "asap",
    "deadline",
    "today",
    "immediately",
    "time-sensitive",
    "respond by",
    "final",
    "last chance",
)

CONFERENCE_KEYWORDS = ("bitcoin conference", "btc conference")

# (trigger phrases, action item)
ACTION_ITEM_TRIGGERS = (
    (("schedule", "meeting"), "Schedule meeting"),
    (("call", "phone"), "Return call"),
    (("proposal", "quote"), "Review proposal"),
    (("contract", "agreement"), "Review contract"),
    (("question", "clarif"), "Answer questions"),
    (("interested", "learn more"), "Follow up with information"),
)

MAX_REASON_KEYWORDS = 3


@dataclass
class FlagDecision:
    """Whether an email should be surfaced, and why."""

    should_flag: bool
    reason: str
    priority: str  # "high", "medium", "low"
    contact_id: Any = None


def _priority_value(contact: ContactData) -> str | None:
    priority = contact.get("priority")
    return getattr(priority, "value", priority)


def find_contact_by_email(email: str, contacts: Sequence[ContactData]) -> ContactData | None:
    """First contact whose address equals ``email`` ignoring case."""
    email_lower = email.lower()
    for contact in contacts:
        if contact.get("email") and contact["email"].lower() == email_lower:
            return contact
    return None


def should_flag_email(
    from_email: str,
    subject: str,
    body: str,
    contacts: Sequence[ContactData],
) -> FlagDecision:
    """
    Decide whether an email needs attention.

    Checks in order: sender is a known contact, subject/body mention a
    flagging keyword, sender shares a domain with a known contact.
    """
    subject_lower = subject.lower()
    body_lower = body.lower()

    matching_contact = find_contact_by_email(from_email, contacts)
    if matching_contact:
        return FlagDecision(
            should_flag=True,
            reason=f"Email from known contact: {matching_contact.get('name')}",
            priority="high" if _priority_value(matching_contact) == "high" else "medium",
            contact_id=matching_contact.get("id"),
        )

    found_keywords = [
        keyword for keyword in FLAGGING_KEYWORDS
        if keyword in subject_lower or keyword in body_lower
    ]
    if found_keywords:
        priority = "high" if any(k in HIGH_VALUE_KEYWORDS for k in found_keywords) else "medium"
        return FlagDecision(
            should_flag=True,
            reason=f"Contains keywords: {', '.join(found_keywords[:MAX_REASON_KEYWORDS])}",
            priority=priority,
        )

    email_domain = get_email_domain(from_email)
    if email_domain:
        for contact in contacts:
            if contact.get("email") and get_email_domain(contact["email"]) == email_domain:
                company = contact.get("company") or "unknown company"
                return FlagDecision(
                    should_flag=True,
                    reason=f"Same domain as contact: {contact.get('name')} ({company})",
                    priority="low",
                    contact_id=contact.get("id"),
                )

    return FlagDecision(should_flag=False, reason="No matching criteria", priority="low")


def extract_action_items(subject: str, body: str) -> list[str]:
    """Suggested next actions based on phrases in the email."""
    text = f"{subject} {body}".lower()
    return [
        action for triggers, action in ACTION_ITEM_TRIGGERS
        if any(trigger in text for trigger in triggers)
    ]


def requires_action(subject: str, body: str) -> bool:
    """True when the email uses time-pressure language."""
    text = f"{subject} {body}".lower()
    return any(keyword in text for keyword in URGENT_KEYWORDS)


def calculate_email_priority(
    from_email: str,
    subject: str,
    body: str,
    contacts: Sequence[ContactData],
) -> int:
    """Priority score from 0 to 100."""
    score = 0

    matching_contact = find_contact_by_email(from_email, contacts)
    if matching_contact:
        score += 30
        if _priority_value(matching_contact) == "high":
            score += 20

    if requires_action(subject, body):
        score += 20

    text = f"{subject} {body}".lower()
    found_high_value = [k for k in HIGH_VALUE_KEYWORDS if k in text]
    score += min(len(found_high_value) * 10, 30)

    subject_lower = subject.lower()
    if any(keyword in subject_lower for keyword in CONFERENCE_KEYWORDS):
        score += 10

    return min(score, 100)
