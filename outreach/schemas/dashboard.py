"""Dashboard schemas."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Outreach pipeline summary."""

    total_contacts: int
    status_counts: dict[str, int]
    active_outreach: int
    response_rate: int
    followups_due: int
