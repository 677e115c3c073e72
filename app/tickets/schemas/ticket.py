from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.constants import DESCRIPTION_MAX_LENGTH, SUBJECT_MAX_LENGTH
from app.tickets.models.ticket import TicketPriority, TicketStatus


class TicketCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=SUBJECT_MAX_LENGTH)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    priority: TicketPriority = TicketPriority.MEDIUM
    category_id: UUID | None = None
    # Honoured only for managers filing on behalf of someone else
    created_by: UUID | None = None


class TicketUpdate(BaseModel):
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    category_id: UUID | None = None
    assigned_to: UUID | None = None


class UserSummary(BaseModel):
    id: UUID
    full_name: str | None = None
    avatar_url: str | None = None

    class Config:
        from_attributes = True


class CategorySummary(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class TicketListItem(BaseModel):
    id: UUID
    subject: str
    status: TicketStatus
    priority: TicketPriority
    category: CategorySummary | None = None
    created_by: UserSummary | None = None
    assigned_to: UserSummary | None = None
    sla_due_at: datetime | None = None
    sla_breached: bool = False
    created_at: datetime
    updated_at: datetime


class TicketDetailResponse(TicketListItem):
    description: str
