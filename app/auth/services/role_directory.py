import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.auth.context import SessionContext
from app.auth.models.user import User, UserRole
from app.core.exceptions import AuthenticationRequiredError

logger = logging.getLogger(__name__)


class RoleDirectory:
    """Resolves a user id to its role and profile fields."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: UUID) -> User:
        user: User | None = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise AuthenticationRequiredError("User not found")
        if not user.is_active:
            logger.info("inactive_user_rejected", extra={"user_id": str(user_id)})
            raise AuthenticationRequiredError("Account is inactive")
        return user

    @staticmethod
    def context_for(user: User) -> SessionContext:
        return SessionContext(
            user_id=user.id,
            role=UserRole(user.role),
            email=user.email,
            full_name=user.full_name,
        )
