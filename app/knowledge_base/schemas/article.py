from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.constants import ARTICLE_MAX_LENGTH, SUBJECT_MAX_LENGTH
from app.knowledge_base.models.article import ArticleStatus
from app.tickets.schemas.ticket import CategorySummary, UserSummary


class ArticleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=SUBJECT_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=ARTICLE_MAX_LENGTH)
    category_id: UUID | None = None
    status: ArticleStatus = ArticleStatus.DRAFT


class ArticleUpdate(BaseModel):
    title: str | None = Field(None, max_length=SUBJECT_MAX_LENGTH)
    content: str | None = Field(None, max_length=ARTICLE_MAX_LENGTH)
    category_id: UUID | None = None
    status: ArticleStatus | None = None


class ArticleResponse(BaseModel):
    id: UUID
    title: str
    content: str
    status: ArticleStatus
    category: CategorySummary | None = None
    author: UserSummary | None = None
    approver: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
