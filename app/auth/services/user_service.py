import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.access.filters import scope_users
from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.auth.models.user import User, UserRole
from app.auth.schemas.user import UserCreate
from app.core import security
from app.core.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        user: User | None = self.db.query(User).filter(User.email == email.lower()).first()
        return user

    def register(
        self, email: str, password: str, full_name: str | None, role: UserRole = UserRole.CLIENT
    ) -> User:
        """Create an account. Emails are unique, compared case-insensitively."""
        if self.get_by_email(email):
            raise ConflictError("A user with this email already exists", resource="user")

        user = User(
            email=email.lower(),
            hashed_password=security.get_password_hash(password),
            full_name=(full_name or "").strip() or None,
            role=role.value,
            is_active=True,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_registered", extra={"user_id": str(user.id), "role": user.role})
        return user

    def create_user(self, ctx: SessionContext, data: UserCreate) -> User:
        authorize(ctx, Operation.CREATE, Resource.USER)
        return self.register(data.email, data.password, data.full_name, data.role)

    def list_users(
        self,
        ctx: SessionContext,
        role: UserRole | None = None,
        search: str | None = None,
    ) -> list[User]:
        authorize(ctx, Operation.READ, Resource.USER)
        query = scope_users(self.db.query(User), ctx)
        if role:
            query = query.filter(User.role == role.value)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
        users: list[User] = query.order_by(User.full_name, User.email).all()
        return users

    def get_user(self, ctx: SessionContext, user_id: UUID) -> User:
        user: User | None = scope_users(self.db.query(User), ctx).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found", resource="user")
        authorize(ctx, Operation.READ, Resource.USER, user)
        return user

    def change_role(self, ctx: SessionContext, user_id: UUID, role: UserRole) -> User:
        authorize(ctx, Operation.UPDATE, Resource.USER)
        user = self.get_user(ctx, user_id)
        previous = user.role
        user.role = role.value
        self.db.commit()
        self.db.refresh(user)
        logger.info(
            "user_role_changed",
            extra={
                "user_id": str(user.id),
                "actor_id": str(ctx.user_id),
                "from": previous,
                "to": user.role,
            },
        )
        return user
