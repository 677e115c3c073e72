from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import CurrentSession
from app.auth.models.user import UserRole
from app.auth.schemas.user import UserCreate, UserResponse, UserRoleUpdate
from app.auth.services.user_service import UserService
from app.db.session import get_db

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
def list_users(
    ctx: CurrentSession,
    role: UserRole | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
) -> list[UserResponse]:
    users = UserService(db).list_users(ctx, role=role, search=search)
    return [UserResponse.model_validate(u) for u in users]


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    data: UserCreate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(UserService(db).create_user(ctx, data))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(UserService(db).get_user(ctx, user_id))


@router.patch("/users/{user_id}/role", response_model=UserResponse)
def change_user_role(
    user_id: UUID,
    data: UserRoleUpdate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(UserService(db).change_role(ctx, user_id, data.role))
