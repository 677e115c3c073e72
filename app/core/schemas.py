"""Core schema definitions for standardized API responses.

List endpoints return a ``Page`` (items plus pagination metadata); errors
are rendered as ``ErrorResponse`` by the handlers in ``app.core.exceptions``.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    total: int = Field(..., description="Total number of items")
    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, le=100, description="Items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def from_query(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        """Create pagination meta from query parameters.

        Args:
            total: Total number of items.
            page: Current page number (1-indexed).
            limit: Items per page.
        """
        pages = (total + limit - 1) // limit if limit > 0 else 0
        return cls(total=total, page=page, limit=limit, pages=pages)


class Page(BaseModel, Generic[T]):
    """Paginated list response with metadata."""

    items: list[T]
    meta: PaginationMeta


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(None, description="Additional error context")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    error: ErrorDetail


def paginated(items: list[T], total: int, page: int, limit: int) -> Page[T]:
    return Page[T](items=items, meta=PaginationMeta.from_query(total, page, limit))
