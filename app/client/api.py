"""Async HTTP client for the helpdesk API.

Error envelopes returned by the server are turned back into the exception
classes of ``app.core.exceptions`` so callers handle the same taxonomy on
both sides of the wire. Transport failures surface as
``TransientStoreError``. Nothing is retried.
"""

import logging
from typing import Any
from uuid import UUID

import httpx

from app.core.exceptions import ERROR_CODES, AppError, RateLimitError, TransientStoreError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def error_from_response(response: httpx.Response) -> AppError:
    """Rebuild the server-side exception described by an error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        # slowapi and proxies answer with a bare string or no body at all
        error = {"message": error} if isinstance(error, str) else {}
    message = error.get("message") or response.reason_phrase or "Request failed"

    error_class = ERROR_CODES.get(error.get("code") or "")
    if error_class is None and response.status_code == 429:
        error_class = RateLimitError
    if error_class is None:
        return AppError(message, status_code=response.status_code)
    exc = error_class(message)
    exc.details = error.get("details") or {}
    return exc


class HelpdeskApiClient:
    """One coroutine per API endpoint; returns decoded JSON.

    Authentication rides on the httpOnly cookies the server sets at login,
    kept in the underlying ``httpx.AsyncClient`` cookie jar.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            transport=transport,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "HelpdeskApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if "params" in kwargs:
            kwargs["params"] = {k: v for k, v in kwargs["params"].items() if v is not None}
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("api_transport_error", extra={"path": path, "error": str(exc)})
            raise TransientStoreError(f"Could not reach the helpdesk API: {exc}") from exc

        if response.is_error:
            raise error_from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def register(self, email: str, password: str, full_name: str | None = None) -> Any:
        payload = {"email": email, "password": password, "full_name": full_name}
        return await self._request("POST", "/auth/register", json=payload)

    async def login(self, email: str, password: str) -> Any:
        return await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )

    async def refresh(self) -> Any:
        return await self._request("POST", "/auth/refresh")

    async def logout(self) -> Any:
        result = await self._request("POST", "/auth/logout")
        self._http.cookies.clear()
        return result

    async def me(self) -> Any:
        return await self._request("GET", "/auth/me")

    # Users

    async def list_users(self, role: str | None = None, search: str | None = None) -> Any:
        return await self._request("GET", "/users", params={"role": role, "search": search})

    async def get_user(self, user_id: UUID | str) -> Any:
        return await self._request("GET", f"/users/{user_id}")

    async def create_user(self, **fields: Any) -> Any:
        return await self._request("POST", "/users", json=fields)

    async def change_user_role(self, user_id: UUID | str, role: str) -> Any:
        return await self._request("PATCH", f"/users/{user_id}/role", json={"role": role})

    # Tickets

    async def list_tickets(self, **filters: Any) -> Any:
        return await self._request("GET", "/tickets", params=filters)

    async def get_ticket(self, ticket_id: UUID | str) -> Any:
        return await self._request("GET", f"/tickets/{ticket_id}")

    async def create_ticket(self, **fields: Any) -> Any:
        return await self._request("POST", "/tickets", json=_jsonable(fields))

    async def update_ticket(self, ticket_id: UUID | str, **changes: Any) -> Any:
        return await self._request("PATCH", f"/tickets/{ticket_id}", json=_jsonable(changes))

    async def delete_ticket(self, ticket_id: UUID | str) -> None:
        await self._request("DELETE", f"/tickets/{ticket_id}")

    async def list_comments(self, ticket_id: UUID | str) -> Any:
        return await self._request("GET", f"/tickets/{ticket_id}/comments")

    async def add_comment(
        self, ticket_id: UUID | str, content: str, internal_note: bool = False
    ) -> Any:
        return await self._request(
            "POST",
            f"/tickets/{ticket_id}/comments",
            json={"content": content, "internal_note": internal_note},
        )

    # Knowledge base

    async def list_articles(self, **filters: Any) -> Any:
        return await self._request("GET", "/articles", params=filters)

    async def get_article(self, article_id: UUID | str) -> Any:
        return await self._request("GET", f"/articles/{article_id}")

    async def create_article(self, **fields: Any) -> Any:
        return await self._request("POST", "/articles", json=_jsonable(fields))

    async def update_article(self, article_id: UUID | str, **changes: Any) -> Any:
        return await self._request("PATCH", f"/articles/{article_id}", json=_jsonable(changes))

    async def delete_article(self, article_id: UUID | str) -> None:
        await self._request("DELETE", f"/articles/{article_id}")

    # Settings

    async def list_categories(self) -> Any:
        return await self._request("GET", "/categories")

    async def create_category(self, name: str, description: str | None = None) -> Any:
        return await self._request(
            "POST", "/categories", json={"name": name, "description": description}
        )

    async def update_category(self, category_id: UUID | str, **changes: Any) -> Any:
        return await self._request("PATCH", f"/categories/{category_id}", json=changes)

    async def delete_category(self, category_id: UUID | str) -> None:
        await self._request("DELETE", f"/categories/{category_id}")

    async def list_canned_responses(self) -> Any:
        return await self._request("GET", "/canned-responses")

    async def create_canned_response(self, title: str, content: str) -> Any:
        return await self._request(
            "POST", "/canned-responses", json={"title": title, "content": content}
        )

    async def update_canned_response(self, response_id: UUID | str, **changes: Any) -> Any:
        return await self._request("PATCH", f"/canned-responses/{response_id}", json=changes)

    async def delete_canned_response(self, response_id: UUID | str) -> None:
        await self._request("DELETE", f"/canned-responses/{response_id}")

    async def get_sla(self) -> Any:
        return await self._request("GET", "/settings/sla")

    async def update_sla(self, priority: str, **hours: int) -> Any:
        return await self._request("PUT", f"/settings/sla/{priority}", json=hours)

    # Dashboard

    async def dashboard(self, days: int = 7) -> Any:
        return await self._request("GET", "/dashboard", params={"days": days})


def _jsonable(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: str(v) if isinstance(v, UUID) else v for k, v in fields.items()}
