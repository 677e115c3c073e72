"""Data-loading state for the client screens.

Each view moves through ``LoadState``: idle -> loading -> loaded | error.
A failed initial load puts the view in ``error``; a failed mutation keeps
whatever data the view already had and only adds a notification. Nothing
is retried automatically.
"""

import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from app.client.api import HelpdeskApiClient
from app.client.session import ClientSession
from app.core.exceptions import AppError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class ViewModel(Generic[T]):
    """Base for a screen that loads data from the API."""

    load_error_message = "Failed to load data"

    def __init__(self, session: ClientSession) -> None:
        self.session = session
        self.state = LoadState.IDLE
        self.data: T | None = None
        self.error: AppError | None = None
        self.notifications: list[Notification] = []

    @property
    def api(self) -> HelpdeskApiClient:
        return self.session.api

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def drain_notifications(self) -> list[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    async def _fetch(self) -> T:
        raise NotImplementedError

    def _on_load_failed(self, exc: AppError) -> None:
        self.notify("error", self.load_error_message)

    async def load(self) -> None:
        self.state = LoadState.LOADING
        self.error = None
        try:
            data = await self._fetch()
        except AppError as exc:
            logger.warning(
                "view_load_failed",
                extra={"view": type(self).__name__, "code": exc.error_code},
            )
            self.state = LoadState.ERROR
            self.error = exc
            self._on_load_failed(exc)
            return
        self.data = data
        self.state = LoadState.LOADED

    async def _mutate(
        self,
        action: Callable[[], Awaitable[Any]],
        success_message: str,
        failure_message: str,
    ) -> tuple[bool, Any]:
        """Run a write; on failure leave ``data`` untouched and notify.

        Returns ``(succeeded, result)``.
        """
        try:
            result = await action()
        except AppError as exc:
            logger.warning(
                "view_mutation_failed",
                extra={"view": type(self).__name__, "code": exc.error_code},
            )
            self.notify("error", failure_message)
            return False, None
        self.notify("success", success_message)
        return True, result


class TicketListView(ViewModel[dict[str, Any]]):
    """Paginated, filterable ticket list."""

    load_error_message = "Failed to load tickets"

    def __init__(self, session: ClientSession, **filters: Any) -> None:
        super().__init__(session)
        self.filters: dict[str, Any] = dict(filters)
        self.page = 1

    async def _fetch(self) -> dict[str, Any]:
        result: dict[str, Any] = await self.api.list_tickets(page=self.page, **self.filters)
        return result

    async def set_filter(self, name: str, value: Any) -> None:
        if value in (None, "", "all"):
            self.filters.pop(name, None)
        else:
            self.filters[name] = value
        self.page = 1
        await self.load()

    async def go_to_page(self, page: int) -> None:
        self.page = max(page, 1)
        await self.load()

    @property
    def tickets(self) -> list[dict[str, Any]]:
        return self.data["items"] if self.data else []


class TicketDetailView(ViewModel[dict[str, Any]]):
    """One ticket with its comments.

    When the ticket cannot be loaded the view asks to be sent back to the
    ticket list through ``redirect_to``.
    """

    load_error_message = "Failed to load ticket"

    def __init__(self, session: ClientSession, ticket_id: str) -> None:
        super().__init__(session)
        self.ticket_id = ticket_id
        self.redirect_to: str | None = None

    async def _fetch(self) -> dict[str, Any]:
        ticket = await self.api.get_ticket(self.ticket_id)
        comments = await self.api.list_comments(self.ticket_id)
        return {"ticket": ticket, "comments": comments}

    def _on_load_failed(self, exc: AppError) -> None:
        super()._on_load_failed(exc)
        self.redirect_to = "/tickets"

    @property
    def ticket(self) -> dict[str, Any] | None:
        return self.data["ticket"] if self.data else None

    @property
    def comments(self) -> list[dict[str, Any]]:
        return self.data["comments"] if self.data else []

    async def update_status(self, status: str) -> None:
        ok, updated = await self._mutate(
            lambda: self.api.update_ticket(self.ticket_id, status=status),
            "Status updated successfully",
            "Failed to update status",
        )
        if ok and self.data is not None:
            self.data = {**self.data, "ticket": updated}

    async def assign(self, user_id: str | None) -> None:
        ok, updated = await self._mutate(
            lambda: self.api.update_ticket(self.ticket_id, assigned_to=user_id),
            "Ticket assigned",
            "Failed to assign ticket",
        )
        if ok and self.data is not None:
            self.data = {**self.data, "ticket": updated}

    async def add_comment(self, content: str, internal_note: bool = False) -> None:
        if not content.strip():
            return
        ok, created = await self._mutate(
            lambda: self.api.add_comment(self.ticket_id, content, internal_note),
            "Comment added successfully",
            "Failed to add comment",
        )
        if ok and self.data is not None:
            self.data = {**self.data, "comments": [*self.data["comments"], created]}


class DashboardView(ViewModel[dict[str, Any]]):
    load_error_message = "Failed to load dashboard"

    def __init__(self, session: ClientSession, days: int = 7) -> None:
        super().__init__(session)
        self.days = days

    async def _fetch(self) -> dict[str, Any]:
        result: dict[str, Any] = await self.api.dashboard(self.days)
        return result

    async def set_window(self, days: int) -> None:
        self.days = days
        await self.load()


class KnowledgeBaseView(ViewModel[list[dict[str, Any]]]):
    """Article list with free-text search; staff may also filter by status."""

    load_error_message = "Failed to load articles"

    def __init__(self, session: ClientSession) -> None:
        super().__init__(session)
        self.search = ""
        self.status: str | None = None

    async def _fetch(self) -> list[dict[str, Any]]:
        status = self.status if self.session.is_staff else None
        result: list[dict[str, Any]] = await self.api.list_articles(
            search=self.search or None, status=status
        )
        return result

    async def set_search(self, query: str) -> None:
        self.search = query.strip()
        await self.load()

    async def set_status(self, status: str | None) -> None:
        self.status = status
        await self.load()

    async def delete_article(self, article_id: str) -> None:
        ok, _ = await self._mutate(
            lambda: self.api.delete_article(article_id),
            "Article deleted",
            "Failed to delete article",
        )
        if ok and self.data:
            self.data = [a for a in self.data if a["id"] != article_id]


class ArticleDetailView(ViewModel[dict[str, Any]]):
    """A single article; on a failed load the view asks to return to the list."""

    load_error_message = "Failed to load article"

    def __init__(self, session: ClientSession, article_id: str) -> None:
        super().__init__(session)
        self.article_id = article_id
        self.redirect_to: str | None = None

    async def _fetch(self) -> dict[str, Any]:
        result: dict[str, Any] = await self.api.get_article(self.article_id)
        return result

    def _on_load_failed(self, exc: AppError) -> None:
        super()._on_load_failed(exc)
        self.redirect_to = "/knowledge-base"


class ArticleEditorView(ViewModel[dict[str, Any]]):
    """Create or edit an article.

    ``data`` holds the category choices and, when editing, the article being
    edited. A successful save sets ``redirect_to`` back to the article list.
    """

    load_error_message = "Failed to load article"

    def __init__(self, session: ClientSession, article_id: str | None = None) -> None:
        super().__init__(session)
        self.article_id = article_id
        self.redirect_to: str | None = None

    @property
    def is_new(self) -> bool:
        return self.article_id is None

    async def _fetch(self) -> dict[str, Any]:
        categories = await self.api.list_categories()
        article = None if self.is_new else await self.api.get_article(self.article_id)
        return {"categories": categories, "article": article}

    async def save(
        self,
        title: str,
        content: str,
        category_id: str | None = None,
        status: str = "draft",
    ) -> bool:
        fields = {
            "title": title,
            "content": content,
            "category_id": category_id or None,
            "status": status,
        }
        if self.is_new:
            ok, saved = await self._mutate(
                lambda: self.api.create_article(**fields),
                "Article created successfully",
                "Failed to create article",
            )
        else:
            ok, saved = await self._mutate(
                lambda: self.api.update_article(self.article_id, **fields),
                "Article updated successfully",
                "Failed to update article",
            )
        if ok:
            if saved:
                self.article_id = saved["id"]
            self.redirect_to = "/knowledge-base"
        return ok


class SettingsView(ViewModel[list[dict[str, Any]]]):
    """Tabbed settings screen: categories, users and SLA targets."""

    TABS = ("categories", "users", "sla")

    def __init__(self, session: ClientSession, tab: str = "categories") -> None:
        super().__init__(session)
        if tab not in self.TABS:
            raise ValueError(f"Unknown settings tab '{tab}'")
        self.tab = tab

    def _on_load_failed(self, exc: AppError) -> None:
        self.notify("error", f"Failed to load {self.tab}")

    async def _fetch(self) -> list[dict[str, Any]]:
        if self.tab == "categories":
            result: list[dict[str, Any]] = await self.api.list_categories()
        elif self.tab == "users":
            result = await self.api.list_users()
        else:
            result = await self.api.get_sla()
        return result

    async def switch_tab(self, tab: str) -> None:
        if tab not in self.TABS:
            raise ValueError(f"Unknown settings tab '{tab}'")
        self.tab = tab
        self.data = None
        await self.load()

    async def add_category(self, name: str, description: str | None = None) -> bool:
        ok, _ = await self._mutate(
            lambda: self.api.create_category(name, description or None),
            "Category added successfully",
            "Failed to add category",
        )
        if ok and self.tab == "categories":
            # server owns the ordering
            await self.load()
        return ok

    async def delete_category(self, category_id: str) -> bool:
        ok, _ = await self._mutate(
            lambda: self.api.delete_category(category_id),
            "Category deleted successfully",
            "Failed to delete category",
        )
        if ok and self.tab == "categories" and self.data is not None:
            self.data = [c for c in self.data if c["id"] != category_id]
        return ok

    async def change_role(self, user_id: str, role: str) -> bool:
        ok, updated = await self._mutate(
            lambda: self.api.change_user_role(user_id, role),
            "User role updated successfully",
            "Failed to update user role",
        )
        if ok and self.tab == "users" and self.data is not None:
            self.data = [updated if u["id"] == user_id else u for u in self.data]
        return ok

    async def update_sla(
        self,
        priority: str,
        response_time_hours: int | None = None,
        resolution_time_hours: int | None = None,
    ) -> bool:
        hours: dict[str, int] = {}
        if response_time_hours is not None:
            hours["response_time_hours"] = response_time_hours
        if resolution_time_hours is not None:
            hours["resolution_time_hours"] = resolution_time_hours
        ok, updated = await self._mutate(
            lambda: self.api.update_sla(priority, **hours),
            "SLA updated successfully",
            "Failed to update SLA",
        )
        if ok and self.tab == "sla" and self.data is not None:
            self.data = [updated if t["priority"] == priority else t for t in self.data]
        return ok
