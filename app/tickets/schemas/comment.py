from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.constants import COMMENT_MAX_LENGTH
from app.tickets.schemas.ticket import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)
    internal_note: bool = False


class CommentResponse(BaseModel):
    id: UUID
    ticket_id: UUID
    content: str
    internal_note: bool
    author: UserSummary | None = None
    created_at: datetime

    class Config:
        from_attributes = True
