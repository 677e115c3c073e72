from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.constants import COMMENT_MAX_LENGTH, SUBJECT_MAX_LENGTH


class CannedResponseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=SUBJECT_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)


class CannedResponseUpdate(BaseModel):
    title: str | None = Field(None, max_length=SUBJECT_MAX_LENGTH)
    content: str | None = Field(None, max_length=COMMENT_MAX_LENGTH)


class CannedResponseResponse(BaseModel):
    id: UUID
    title: str
    content: str
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
