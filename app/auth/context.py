from dataclasses import dataclass
from uuid import UUID

from app.auth.models.user import UserRole


@dataclass(frozen=True)
class SessionContext:
    """The authenticated actor for one request.

    Built once per request by the role directory and passed explicitly to
    services; nothing about the current user is kept in module state.
    """

    user_id: UUID
    role: UserRole
    email: str
    full_name: str | None = None

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.AGENT, UserRole.MANAGER)

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER
