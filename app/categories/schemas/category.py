from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.constants import CATEGORY_NAME_MAX_LENGTH


class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=CATEGORY_NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=1000)


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, max_length=CATEGORY_NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=1000)


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
