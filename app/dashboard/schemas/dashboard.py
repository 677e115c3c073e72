"""Dashboard response schemas."""

from pydantic import BaseModel, Field

from app.core.datetime_utils import UTCDatetime


class CategoryCountResponse(BaseModel):
    category: str
    count: int

    class Config:
        from_attributes = True


class AgentStatsResponse(BaseModel):
    agent: str
    count: int = Field(description="Tickets assigned in the window")
    resolved: int = Field(description="Of those, tickets currently resolved")

    class Config:
        from_attributes = True


class DashboardResponse(BaseModel):
    """Ticket statistics over the last ``window_days`` days."""

    window_days: int
    window_start: UTCDatetime
    generated_at: UTCDatetime
    total_tickets: int
    open_tickets: int
    pending_tickets: int
    resolved_tickets: int
    closed_tickets: int
    urgent_tickets: int = Field(description="Urgent priority, any status")
    avg_resolution_time_hours: float
    avg_first_response_time_hours: float
    resolution_rate: float = Field(description="resolved / (open + pending + resolved) * 100")
    tickets_by_category: list[CategoryCountResponse]
    tickets_by_agent: list[AgentStatsResponse]
