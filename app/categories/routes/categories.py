from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import CurrentSession
from app.categories.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.categories.services.category_service import CategoryService
from app.db.session import get_db

router = APIRouter()


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(ctx: CurrentSession, db: Session = Depends(get_db)) -> list[CategoryResponse]:
    service = CategoryService(db)
    return [CategoryResponse.model_validate(c) for c in service.list_categories(ctx)]


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    data: CategoryCreate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> CategoryResponse:
    category = CategoryService(db).create_category(ctx, data)
    return CategoryResponse.model_validate(category)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> CategoryResponse:
    category = CategoryService(db).update_category(ctx, category_id, data)
    return CategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> None:
    CategoryService(db).delete_category(ctx, category_id)
