"""Row-level access rules for the helpdesk.

``allow(ctx, op, resource, record)`` answers whether the actor in ``ctx``
may perform ``op`` on ``resource`` (optionally a concrete ``record``).
Rules are plain functions keyed by ``(resource, operation)`` so they can be
tested without a database. A call without a record asks whether the
operation is possible at all for the role; list endpoints then narrow the
rows with the predicates in ``app.access.filters``.

Combinations missing from the table are denied.
"""

import enum
import logging
from collections.abc import Callable
from typing import Any

from app.auth.context import SessionContext
from app.core.config import settings
from app.core.exceptions import AuthorizationDeniedError

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Resource(str, enum.Enum):
    USER = "user"
    TICKET = "ticket"
    COMMENT = "comment"
    ARTICLE = "article"
    CATEGORY = "category"
    CANNED_RESPONSE = "canned_response"
    SLA_CONFIG = "sla_config"


Rule = Callable[[SessionContext, Any, Any], bool]

PUBLISHED = "published"


def _anyone(ctx: SessionContext, record: Any, parent: Any) -> bool:
    return True


def _staff(ctx: SessionContext, record: Any, parent: Any) -> bool:
    return ctx.is_staff


def _manager(ctx: SessionContext, record: Any, parent: Any) -> bool:
    return ctx.is_manager


def _read_user(ctx: SessionContext, user: Any, parent: Any) -> bool:
    if ctx.is_staff or user is None:
        return True
    return bool(user.id == ctx.user_id)


def _read_ticket(ctx: SessionContext, ticket: Any, parent: Any) -> bool:
    if ctx.is_staff or ticket is None:
        return True
    return bool(ticket.created_by == ctx.user_id)


def _create_ticket(ctx: SessionContext, ticket: Any, parent: Any) -> bool:
    if ctx.is_manager:
        return True
    if not ctx.is_client:
        return False
    return ticket is None or ticket.created_by == ctx.user_id


def _comment_ticket(record: Any, parent: Any) -> Any:
    return parent if parent is not None else getattr(record, "ticket", None)


def _read_comment(ctx: SessionContext, comment: Any, parent: Any) -> bool:
    if comment is None:
        return True
    if ctx.is_staff:
        return True
    # Clients never see internal notes, whatever their relation to the ticket
    if comment.internal_note:
        return False
    ticket = _comment_ticket(comment, parent)
    if ticket is None:
        return False
    return ctx.user_id in (ticket.created_by, ticket.assigned_to)


def _create_comment(ctx: SessionContext, comment: Any, parent: Any) -> bool:
    if ctx.is_staff:
        return True
    if not settings.CLIENT_COMMENTS_ENABLED:
        return False
    if comment is None:
        return True
    if getattr(comment, "internal_note", False):
        return False
    ticket = _comment_ticket(comment, parent)
    return ticket is not None and ticket.created_by == ctx.user_id


def _read_article(ctx: SessionContext, article: Any, parent: Any) -> bool:
    if ctx.is_staff or article is None:
        return True
    return bool(article.status == PUBLISHED)


RULES: dict[tuple[Resource, Operation], Rule] = {
    (Resource.USER, Operation.READ): _read_user,
    (Resource.USER, Operation.CREATE): _manager,
    (Resource.USER, Operation.UPDATE): _manager,
    (Resource.USER, Operation.DELETE): _manager,
    (Resource.TICKET, Operation.READ): _read_ticket,
    (Resource.TICKET, Operation.CREATE): _create_ticket,
    (Resource.TICKET, Operation.UPDATE): _staff,
    (Resource.TICKET, Operation.DELETE): _manager,
    (Resource.COMMENT, Operation.READ): _read_comment,
    (Resource.COMMENT, Operation.CREATE): _create_comment,
    (Resource.ARTICLE, Operation.READ): _read_article,
    (Resource.ARTICLE, Operation.CREATE): _staff,
    (Resource.ARTICLE, Operation.UPDATE): _staff,
    (Resource.ARTICLE, Operation.DELETE): _staff,
    (Resource.CATEGORY, Operation.READ): _anyone,
    (Resource.CATEGORY, Operation.CREATE): _manager,
    (Resource.CATEGORY, Operation.UPDATE): _manager,
    (Resource.CATEGORY, Operation.DELETE): _manager,
    (Resource.CANNED_RESPONSE, Operation.READ): _staff,
    (Resource.CANNED_RESPONSE, Operation.CREATE): _staff,
    (Resource.CANNED_RESPONSE, Operation.UPDATE): _staff,
    (Resource.CANNED_RESPONSE, Operation.DELETE): _staff,
    (Resource.SLA_CONFIG, Operation.READ): _staff,
    (Resource.SLA_CONFIG, Operation.UPDATE): _manager,
}


def allow(
    ctx: SessionContext,
    op: Operation,
    resource: Resource,
    record: Any = None,
    *,
    parent: Any = None,
) -> bool:
    """Return True when ``ctx`` may perform ``op`` on ``resource``.

    Args:
        ctx: The acting session.
        op: Operation being attempted.
        resource: Resource type.
        record: The concrete row (or draft of it), if any.
        parent: Owning row for child resources, e.g. the ticket of a comment.
    """
    rule = RULES.get((resource, op))
    if rule is None:
        return False
    return rule(ctx, record, parent)


def authorize(
    ctx: SessionContext,
    op: Operation,
    resource: Resource,
    record: Any = None,
    *,
    parent: Any = None,
) -> None:
    """Raise AuthorizationDeniedError unless ``allow`` grants the operation."""
    if allow(ctx, op, resource, record, parent=parent):
        return
    logger.warning(
        "access_denied",
        extra={
            "user_id": str(ctx.user_id),
            "role": ctx.role.value,
            "resource": resource.value,
            "operation": op.value,
        },
    )
    raise AuthorizationDeniedError(
        f"Role '{ctx.role.value}' may not {op.value} {resource.value.replace('_', ' ')}",
        resource=resource.value,
        operation=op.value,
    )
