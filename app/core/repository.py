"""Base repository pattern implementation.

Domain repositories inherit from ``BaseRepository`` and add their own
finders. Commits happen here so services only decide *what* to write.
"""

from typing import Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Generic repository with common CRUD operations.

    Example:
        ```python
        class CategoryRepository(BaseRepository[Category]):
            def __init__(self, db: Session):
                super().__init__(db, Category, resource="category")

            def list_by_name(self) -> list[Category]:
                return self.db.query(self.model).order_by(self.model.name).all()
        ```
    """

    def __init__(self, db: Session, model: type[ModelType], resource: str = "resource"):
        """Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy session.
            model: The model class this repository operates on.
            resource: Name used in NotFound errors.
        """
        self.db = db
        self.model = model
        self.resource = resource

    def get_by_id(self, entity_id: UUID) -> ModelType | None:
        """Get a single entity by ID, or None."""
        result = self.db.query(self.model).filter(self.model.id == entity_id).first()  # type: ignore[attr-defined]
        return cast(ModelType | None, result)

    def get_or_404(self, entity_id: UUID) -> ModelType:
        """Get a single entity by ID or raise NotFoundError."""
        instance = self.get_by_id(entity_id)
        if instance is None:
            label = self.resource.replace("_", " ").capitalize()
            raise NotFoundError(f"{label} not found", resource=self.resource)
        return instance

    def create(self, **kwargs: Any) -> ModelType:
        """Create, commit and refresh a new entity."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Set the given attributes on an entity and commit.

        Unknown attribute names are ignored.
        """
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def delete(self, instance: ModelType) -> None:
        self.db.delete(instance)
        self.db.commit()
