"""Duplicate contact detection and record merging.

Contacts are passed around as plain mappings (``Contact.to_dict()`` for stored
rows, parsed sheet rows or request bodies for candidates) so the matcher and
merge stay pure and can run against any partial record.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

ContactData = Mapping[str, Any]

# Minimum confidence for a pair to be reported
MATCH_THRESHOLD = 70

EXACT_EMAIL_CONFIDENCE = 100
PHONE_CONFIDENCE = 90
NAME_BASE_CONFIDENCE = 85
NAME_DISTANCE_PENALTY = 5
NAME_MAX_DISTANCE = 2
DOMAIN_COMPANY_CONFIDENCE = 80
COMPANY_MAX_DISTANCE = 3

HIGH_CONFIDENCE = 90
MEDIUM_CONFIDENCE = 75

NOTES_DIVIDER = "\n\n---\n\n"

COMPANY_SUFFIX_PATTERN = re.compile(r"\b(inc|llc|ltd|corp|corporation|company|co)\b\.?")
NON_DIGIT_PATTERN = re.compile(r"\D")


@dataclass
class DuplicateMatch:
    """An existing contact that likely refers to the same person as a candidate."""

    existing_contact: ContactData
    confidence: int
    reasons: list[str] = field(default_factory=list)


@dataclass
class RuleHit:
    """Confidence contributed by a single matching rule."""

    confidence: int
    reason: str


@dataclass
class DedupeStats:
    """Confidence buckets for a list of matches."""

    total_matches: int
    high_confidence: int
    medium_confidence: int
    low_confidence: int


def levenshtein_distance(str1: str, str2: str) -> int:
    """Minimum single-character edits to turn ``str1`` into ``str2``."""
    if not str1:
        return len(str2)
    if not str2:
        return len(str1)

    previous = list(range(len(str2) + 1))
    for i, char1 in enumerate(str1, start=1):
        current = [i]
        for j, char2 in enumerate(str2, start=1):
            cost = 0 if char1 == char2 else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current

    return previous[-1]


def normalize_phone(phone: str | None) -> str:
    """Strip everything but digits."""
    if not phone:
        return ""
    return NON_DIGIT_PATTERN.sub("", phone)


def get_email_domain(email: str | None) -> str:
    """Lowercased domain part of an address, or empty string."""
    if not email:
        return ""
    parts = email.split("@")
    return parts[1].lower() if len(parts) > 1 else ""


def normalize_company_name(company: str | None) -> str:
    """Lowercase and drop legal suffixes like Inc. or LLC."""
    if not company:
        return ""
    return COMPANY_SUFFIX_PATTERN.sub("", company.lower()).strip()


# =============================================================================
# MATCHING RULES
# =============================================================================

def exact_email_rule(candidate: ContactData, existing: ContactData) -> RuleHit | None:
    """Same address ignoring case. Certain match."""
    new_email = candidate.get("email")
    existing_email = existing.get("email")
    if new_email and existing_email and new_email.lower() == existing_email.lower():
        return RuleHit(EXACT_EMAIL_CONFIDENCE, "Exact email match")
    return None


def phone_rule(candidate: ContactData, existing: ContactData) -> RuleHit | None:
    new_phone = normalize_phone(candidate.get("phone"))
    existing_phone = normalize_phone(existing.get("phone"))
    if new_phone and existing_phone and new_phone == existing_phone:
        return RuleHit(PHONE_CONFIDENCE, "Phone number match")
    return None


def name_rule(candidate: ContactData, existing: ContactData) -> RuleHit | None:
    new_name = candidate.get("name")
    existing_name = existing.get("name")
    if not new_name or not existing_name:
        return None

    distance = levenshtein_distance(new_name.lower(), existing_name.lower())
    if distance > NAME_MAX_DISTANCE:
        return None
    return RuleHit(
        NAME_BASE_CONFIDENCE - distance * NAME_DISTANCE_PENALTY,
        f"Similar name (edit distance: {distance})",
    )


def domain_company_rule(candidate: ContactData, existing: ContactData) -> RuleHit | None:
    if not (candidate.get("email") and existing.get("email")):
        return None
    if not (candidate.get("company") and existing.get("company")):
        return None

    new_domain = get_email_domain(candidate["email"])
    existing_domain = get_email_domain(existing["email"])
    if not new_domain or new_domain != existing_domain:
        return None

    new_company = normalize_company_name(candidate["company"])
    existing_company = normalize_company_name(existing["company"])
    if not new_company or not existing_company:
        return None

    if levenshtein_distance(new_company, existing_company) > COMPANY_MAX_DISTANCE:
        return None
    return RuleHit(DOMAIN_COMPANY_CONFIDENCE, "Same email domain and similar company name")


MatchRule = Callable[[ContactData, ContactData], RuleHit | None]

# Evaluated in order when the exact email rule does not fire
MATCH_RULES: tuple[MatchRule, ...] = (
    phone_rule,
    name_rule,
    domain_company_rule,
)


def score_pair(
    candidate: ContactData,
    existing: ContactData,
    rules: Sequence[MatchRule] = MATCH_RULES,
) -> tuple[int, list[str]]:
    """Fold the rule list into (max confidence, triggered reasons)."""
    exact = exact_email_rule(candidate, existing)
    if exact:
        return exact.confidence, [exact.reason]

    confidence = 0
    reasons: list[str] = []
    for rule in rules:
        hit = rule(candidate, existing)
        if hit:
            reasons.append(hit.reason)
            confidence = max(confidence, hit.confidence)

    return confidence, reasons


def find_duplicates(
    candidate: ContactData,
    existing_contacts: Sequence[ContactData],
) -> list[DuplicateMatch]:
    """
    Find existing contacts that likely duplicate a candidate.

    Returns matches with confidence >= 70, highest confidence first. Equal
    confidences keep the order of ``existing_contacts``.
    """
    matches: list[DuplicateMatch] = []

    for existing in existing_contacts:
        confidence, reasons = score_pair(candidate, existing)
        if confidence >= MATCH_THRESHOLD and reasons:
            matches.append(DuplicateMatch(existing, confidence, reasons))

    return sorted(matches, key=lambda m: m.confidence, reverse=True)


def merge_contacts(existing: ContactData, new_data: ContactData) -> dict[str, Any]:
    """
    Combine an existing contact with newer partial data.

    Fresh operational data (status, contact dates, notes) wins, but the
    existing first_contact_date is kept since it is assumed to be earlier.
    """
    existing_notes = existing.get("notes")
    new_notes = new_data.get("notes")
    if new_notes:
        notes = f"{existing_notes}{NOTES_DIVIDER}{new_notes}" if existing_notes else new_notes
    else:
        notes = existing_notes

    tags = list(dict.fromkeys([*(existing.get("tags") or []), *(new_data.get("tags") or [])]))

    def newer(field_name: str) -> Any:
        return new_data.get(field_name) or existing.get(field_name)

    return {
        "id": existing.get("id"),
        "name": newer("name"),
        "email": newer("email"),
        "company": newer("company"),
        "phone": newer("phone"),
        "website": newer("website"),
        "status": newer("status"),
        "priority": newer("priority"),
        "notes": notes,
        "tags": tags,
        "first_contact_date": existing.get("first_contact_date") or new_data.get("first_contact_date"),
        "last_contact_date": newer("last_contact_date"),
        "next_followup_date": newer("next_followup_date"),
        "sheets_row_id": newer("sheets_row_id"),
    }


def get_dedupe_stats(matches: Sequence[DuplicateMatch]) -> DedupeStats:
    """
    Bucket matches by confidence.

    The low bucket (< 75) only ever holds [70, 75) because the matcher drops
    anything under 70.
    """
    return DedupeStats(
        total_matches=len(matches),
        high_confidence=sum(1 for m in matches if m.confidence >= HIGH_CONFIDENCE),
        medium_confidence=sum(
            1 for m in matches if MEDIUM_CONFIDENCE <= m.confidence < HIGH_CONFIDENCE
        ),
        low_confidence=sum(1 for m in matches if m.confidence < MEDIUM_CONFIDENCE),
    )
