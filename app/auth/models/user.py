import enum
import uuid
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base


class UserRole(str, enum.Enum):
    CLIENT = "client"
    AGENT = "agent"
    MANAGER = "manager"


STAFF_ROLES = frozenset({UserRole.AGENT.value, UserRole.MANAGER.value})


class User(Base):
    """
    Helpdesk user.

    Attributes:
        id: Unique UUID primary key, stable once created
        email: Unique login email
        hashed_password: Argon2 hashed password
        full_name: Display name shown on tickets and comments
        role: Exactly one of "client", "agent", "manager"
        avatar_url: Optional avatar image URL
        is_active: Inactive users cannot authenticate
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[str] = mapped_column(String(20), default=UserRole.CLIENT.value)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
