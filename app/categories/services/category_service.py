import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.categories.models.category import Category
from app.categories.schemas.category import CategoryCreate, CategoryUpdate
from app.core.exceptions import ValidationError
from app.core.repository import BaseRepository
from app.knowledge_base.models.article import Article
from app.tickets.models.ticket import Ticket

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: Session) -> None:
        super().__init__(db, Category, resource="category")

    def list_by_name(self) -> list[Category]:
        return self.db.query(Category).order_by(Category.name).all()


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Category name is required", field="name")
    return cleaned


class CategoryService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = CategoryRepository(db)

    def list_categories(self, ctx: SessionContext) -> list[Category]:
        authorize(ctx, Operation.READ, Resource.CATEGORY)
        return self.repo.list_by_name()

    def get_category(self, ctx: SessionContext, category_id: UUID) -> Category:
        authorize(ctx, Operation.READ, Resource.CATEGORY)
        return self.repo.get_or_404(category_id)

    def create_category(self, ctx: SessionContext, data: CategoryCreate) -> Category:
        authorize(ctx, Operation.CREATE, Resource.CATEGORY)
        category = self.repo.create(
            name=_clean_name(data.name),
            description=(data.description or "").strip() or None,
        )
        logger.info("category_created", extra={"category_id": str(category.id)})
        return category

    def update_category(
        self, ctx: SessionContext, category_id: UUID, data: CategoryUpdate
    ) -> Category:
        authorize(ctx, Operation.UPDATE, Resource.CATEGORY)
        category = self.repo.get_or_404(category_id)
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"])
        return self.repo.update(category, **changes)

    def delete_category(self, ctx: SessionContext, category_id: UUID) -> None:
        """Delete a category; its tickets and articles become uncategorized."""
        authorize(ctx, Operation.DELETE, Resource.CATEGORY)
        category = self.repo.get_or_404(category_id)
        self.db.query(Ticket).filter(Ticket.category_id == category_id).update(
            {Ticket.category_id: None}, synchronize_session="fetch"
        )
        self.db.query(Article).filter(Article.category_id == category_id).update(
            {Article.category_id: None}, synchronize_session="fetch"
        )
        self.repo.delete(category)
        logger.info("category_deleted", extra={"category_id": str(category_id)})
