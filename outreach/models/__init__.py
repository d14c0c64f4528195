"""Database models."""

from outreach.models.contact import Contact, ContactStatus, ContactPriority
from outreach.models.automation_log import AutomationLog, JobStatus
from outreach.models.setting import Setting
from outreach.models.flagged_email import FlaggedEmail
from outreach.models.calendar_event import CalendarEvent
from outreach.models.blocklist import BlocklistEntry
from outreach.models.daily_queue import DailyQueueItem, QueueState

__all__ = [
    "Contact",
    "ContactStatus",
    "ContactPriority",
    "AutomationLog",
    "JobStatus",
    "Setting",
    "FlaggedEmail",
    "CalendarEvent",
    "BlocklistEntry",
    "DailyQueueItem",
    "QueueState",
]
