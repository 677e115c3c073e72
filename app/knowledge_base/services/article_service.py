import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.access.filters import scope_articles
from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.categories.services.category_service import CategoryRepository
from app.core.exceptions import NotFoundError, ValidationError
from app.core.repository import BaseRepository
from app.knowledge_base.models.article import Article, ArticleStatus
from app.knowledge_base.schemas.article import ArticleCreate, ArticleUpdate

logger = logging.getLogger(__name__)


class ArticleService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo: BaseRepository[Article] = BaseRepository(db, Article, resource="article")
        self.categories = CategoryRepository(db)

    def list_articles(
        self,
        ctx: SessionContext,
        status_filter: str | None = None,
        category_id: UUID | None = None,
        search: str | None = None,
    ) -> list[Article]:
        authorize(ctx, Operation.READ, Resource.ARTICLE)
        query = scope_articles(self.db.query(Article), ctx)

        # Clients only ever see published articles; a status filter narrows further
        if status_filter:
            query = query.filter(Article.status == status_filter)
        if category_id:
            query = query.filter(Article.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Article.title.ilike(pattern), Article.content.ilike(pattern)))

        articles: list[Article] = query.order_by(Article.created_at.desc()).all()
        return articles

    def get_article(self, ctx: SessionContext, article_id: UUID) -> Article:
        article: Article | None = (
            scope_articles(self.db.query(Article), ctx).filter(Article.id == article_id).first()
        )
        if not article:
            raise NotFoundError("Article not found", resource="article")
        authorize(ctx, Operation.READ, Resource.ARTICLE, article)
        return article

    def create_article(self, ctx: SessionContext, data: ArticleCreate) -> Article:
        authorize(ctx, Operation.CREATE, Resource.ARTICLE)
        title = data.title.strip()
        content = data.content.strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        if not content:
            raise ValidationError("Content is required", field="content")
        if data.category_id is not None:
            self.categories.get_or_404(data.category_id)

        published = data.status == ArticleStatus.PUBLISHED
        article = self.repo.create(
            title=title,
            content=content,
            category_id=data.category_id,
            status=data.status.value,
            author_id=ctx.user_id,
            approver_id=ctx.user_id if published else None,
        )
        logger.info(
            "article_created",
            extra={"article_id": str(article.id), "status": article.status},
        )
        return article

    def update_article(
        self, ctx: SessionContext, article_id: UUID, data: ArticleUpdate
    ) -> Article:
        """Apply a partial update; publishing records the actor as approver."""
        authorize(ctx, Operation.UPDATE, Resource.ARTICLE)
        article = self.get_article(ctx, article_id)
        changes = data.model_dump(exclude_unset=True)

        for field in ("title", "content"):
            if field in changes:
                changes[field] = (changes[field] or "").strip()
                if not changes[field]:
                    raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)

        if changes.get("category_id") is not None:
            self.categories.get_or_404(changes["category_id"])

        if "status" in changes:
            new_status = changes["status"]
            if new_status is None:
                raise ValidationError("Status cannot be empty", field="status")
            if new_status == ArticleStatus.PUBLISHED and article.status != new_status.value:
                changes["approver_id"] = ctx.user_id
            changes["status"] = new_status.value

        article = self.repo.update(article, **changes)
        logger.info(
            "article_updated",
            extra={"article_id": str(article.id), "fields": sorted(changes)},
        )
        return article

    def delete_article(self, ctx: SessionContext, article_id: UUID) -> None:
        authorize(ctx, Operation.DELETE, Resource.ARTICLE)
        article = self.get_article(ctx, article_id)
        self.repo.delete(article)
        logger.info("article_deleted", extra={"article_id": str(article_id)})
