import logging
from collections.abc import Callable
from typing import Any

from app.client.api import HelpdeskApiClient
from app.core.exceptions import AuthenticationRequiredError

logger = logging.getLogger(__name__)

Subscriber = Callable[["ClientSession"], None]


class ClientSession:
    """Who is signed in on this client.

    Holds the current user's profile and tells subscribers whenever it
    changes (login, registration, logout, a restored or expired session).
    Views receive the session explicitly instead of reading a global.
    """

    def __init__(self, api: HelpdeskApiClient) -> None:
        self.api = api
        self.user: dict[str, Any] | None = None
        self._subscribers: list[Subscriber] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> str | None:
        return self.user["role"] if self.user else None

    @property
    def is_staff(self) -> bool:
        return self.role in ("agent", "manager")

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _set_user(self, user: dict[str, Any] | None) -> None:
        changed = user != self.user
        self.user = user
        if changed:
            for callback in list(self._subscribers):
                callback(self)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        result = await self.api.login(email, password)
        self._set_user(result["user"])
        return result["user"]

    async def register(
        self, email: str, password: str, full_name: str | None = None
    ) -> dict[str, Any]:
        result = await self.api.register(email, password, full_name)
        self._set_user(result["user"])
        return result["user"]

    async def logout(self) -> None:
        try:
            await self.api.logout()
        except AuthenticationRequiredError:
            logger.info("logout_without_session")
        self._set_user(None)

    async def restore(self) -> dict[str, Any] | None:
        """Pick up an existing session, refreshing the access token once if needed."""
        try:
            user = await self.api.me()
        except AuthenticationRequiredError:
            try:
                await self.api.refresh()
                user = await self.api.me()
            except AuthenticationRequiredError:
                user = None
        self._set_user(user)
        return user
