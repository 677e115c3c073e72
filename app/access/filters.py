"""Query scoping that mirrors the read rules in ``app.access.policy``.

Every list query goes through one of these before it reaches the database,
so rows outside the actor's visibility are never loaded.
"""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Query

from app.access.policy import PUBLISHED
from app.auth.context import SessionContext
from app.auth.models.user import User
from app.knowledge_base.models.article import Article
from app.tickets.models.comment import TicketComment
from app.tickets.models.ticket import Ticket


def scope_users(query: Query[Any], ctx: SessionContext) -> Query[Any]:
    if ctx.is_staff:
        return query
    return query.filter(User.id == ctx.user_id)


def scope_tickets(query: Query[Any], ctx: SessionContext) -> Query[Any]:
    if ctx.is_staff:
        return query
    return query.filter(Ticket.created_by == ctx.user_id)


def scope_comments(query: Query[Any], ctx: SessionContext) -> Query[Any]:
    """Limit a TicketComment query to what the actor may read.

    Clients get comments on tickets they created or are assigned to, and
    never a row with ``internal_note`` set.
    """
    if ctx.is_staff:
        return query
    return (
        query.join(Ticket, Ticket.id == TicketComment.ticket_id)
        .filter(TicketComment.internal_note.is_(False))
        .filter(or_(Ticket.created_by == ctx.user_id, Ticket.assigned_to == ctx.user_id))
    )


def scope_articles(query: Query[Any], ctx: SessionContext) -> Query[Any]:
    if ctx.is_staff:
        return query
    return query.filter(Article.status == PUBLISHED)
