"""
Unit tests for email flagging.
"""

from outreach.core.email_flagging import (
    calculate_email_priority,
    extract_action_items,
    find_contact_by_email,
    requires_action,
    should_flag_email,
)
from outreach.models.contact import ContactPriority


CONTACTS = [
    {"id": 1, "name": "Jon Smith", "email": "jon@acme.com", "company": "Acme", "priority": "high"},
    {"id": 2, "name": "Ann Roe", "email": "ann@roe.io", "company": None, "priority": ContactPriority.MEDIUM},
]


class TestShouldFlagEmail:
    """Test the flagging decision order."""

    def test_known_contact(self):
        decision = should_flag_email("JON@acme.com", "Hello", "Just checking in", CONTACTS)

        assert decision.should_flag is True
        assert decision.reason == "Email from known contact: Jon Smith"
        assert decision.priority == "high"
        assert decision.contact_id == 1

    def test_known_contact_enum_priority(self):
        decision = should_flag_email("ann@roe.io", "Hi", "", CONTACTS)
        assert decision.priority == "medium"
        assert decision.contact_id == 2

    def test_high_value_keyword(self):
        decision = should_flag_email(
            "stranger@else.org", "Sponsorship question", "We are interested", CONTACTS
        )
        assert decision.should_flag is True
        assert decision.priority == "high"
        assert decision.reason.startswith("Contains keywords: sponsor")
        assert decision.contact_id is None

    def test_keyword_reason_lists_at_most_three(self):
        decision = should_flag_email(
            "stranger@else.org",
            "Booth and panel",
            "speaking at the exhibition",
            CONTACTS,
        )
        assert decision.priority == "medium"
        assert decision.reason == "Contains keywords: booth, exhibition, speaking"

    def test_same_domain(self):
        decision = should_flag_email("sales@acme.com", "Hi", "Hello there", CONTACTS)

        assert decision.should_flag is True
        assert decision.priority == "low"
        assert decision.reason == "Same domain as contact: Jon Smith (Acme)"
        assert decision.contact_id == 1

    def test_no_match(self):
        decision = should_flag_email("x@nowhere.net", "Newsletter", "Weekly digest", CONTACTS)
        assert decision.should_flag is False
        assert decision.reason == "No matching criteria"


class TestHelpers:
    def test_find_contact_by_email(self):
        assert find_contact_by_email("ANN@ROE.IO", CONTACTS)["id"] == 2
        assert find_contact_by_email("nobody@roe.io", CONTACTS) is None

    def test_extract_action_items(self):
        items = extract_action_items(
            "Proposal follow-up", "Can we schedule a call? I have a question."
        )
        assert items == [
            "Schedule meeting",
            "Return call",
            "Review proposal",
            "Answer questions",
        ]

    def test_extract_action_items_none(self):
        assert extract_action_items("Thanks", "Great to see you") == []

    def test_requires_action(self):
        assert requires_action("Deadline Friday", "") is True
        assert requires_action("Hello", "Respond by Monday please") is True
        assert requires_action("Hello", "No rush") is False


class TestEmailPriority:
    def test_high_priority_contact_with_urgency(self):
        score = calculate_email_priority(
            "jon@acme.com",
            "Urgent: Bitcoin Conference partnership",
            "We are interested in a sponsor package",
            CONTACTS,
        )
        # 30 + 20 contact, 20 urgent, 30 keywords, 10 conference = 110 capped
        assert score == 100

    def test_unknown_sender(self):
        assert calculate_email_priority("x@nowhere.net", "Hi", "Hello", CONTACTS) == 0

    def test_keyword_only(self):
        score = calculate_email_priority("x@nowhere.net", "Partnership", "", CONTACTS)
        assert score == 10
