import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.access.filters import scope_comments
from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.core.exceptions import ValidationError
from app.tickets.models.comment import TicketComment
from app.tickets.schemas.comment import CommentCreate
from app.tickets.services.ticket_service import TicketService

logger = logging.getLogger(__name__)


class CommentService:
    """Comments on tickets. Comments are append-only."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.tickets = TicketService(db)

    def list_comments(self, ctx: SessionContext, ticket_id: UUID) -> list[TicketComment]:
        ticket = self.tickets.get_ticket(ctx, ticket_id)
        query = self.db.query(TicketComment).filter(TicketComment.ticket_id == ticket.id)
        comments: list[TicketComment] = (
            scope_comments(query, ctx).order_by(TicketComment.created_at.asc()).all()
        )
        return comments

    def add_comment(
        self, ctx: SessionContext, ticket_id: UUID, data: CommentCreate
    ) -> TicketComment:
        ticket = self.tickets.get_ticket(ctx, ticket_id)
        authorize(ctx, Operation.CREATE, Resource.COMMENT, data, parent=ticket)

        content = data.content.strip()
        if not content:
            raise ValidationError("Comment cannot be empty", field="content")

        comment = TicketComment(
            ticket_id=ticket.id,
            content=content,
            internal_note=data.internal_note,
            created_by=ctx.user_id,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info(
            "comment_added",
            extra={
                "ticket_id": str(ticket.id),
                "comment_id": str(comment.id),
                "internal_note": comment.internal_note,
            },
        )
        return comment
