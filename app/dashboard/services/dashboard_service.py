"""Dashboard statistics service."""

import logging
from dataclasses import asdict
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.access.filters import scope_tickets
from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.core.constants import DASHBOARD_MAX_WINDOW_DAYS
from app.core.datetime_utils import utcnow
from app.core.exceptions import ValidationError
from app.dashboard.aggregator import TicketSnapshot, aggregate_tickets
from app.dashboard.schemas.dashboard import DashboardResponse
from app.tickets.models.comment import TicketComment
from app.tickets.models.ticket import Ticket

logger = logging.getLogger(__name__)


class DashboardService:
    """Loads the visible ticket window and reduces it to statistics.

    Figures are recomputed on every call; nothing is cached.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_stats(self, ctx: SessionContext, days: int) -> DashboardResponse:
        """Statistics over tickets created in the last ``days`` days.

        Args:
            ctx: Acting session. Clients get figures over their own tickets.
            days: Window length, 1 to 365.

        Returns:
            DashboardResponse with counts, averages and breakdowns.
        """
        if not 1 <= days <= DASHBOARD_MAX_WINDOW_DAYS:
            raise ValidationError(
                f"days must be between 1 and {DASHBOARD_MAX_WINDOW_DAYS}", field="days"
            )
        authorize(ctx, Operation.READ, Resource.TICKET)

        now = utcnow()
        window_start = now - timedelta(days=days)
        tickets: list[Ticket] = (
            scope_tickets(self.db.query(Ticket), ctx)
            .filter(Ticket.created_at >= window_start)
            .all()
        )
        first_responses = self._first_response_times([t.id for t in tickets])

        snapshots = [
            TicketSnapshot(
                status=t.status,
                priority=t.priority,
                created_at=t.created_at,
                updated_at=t.updated_at,
                category_name=t.category.name if t.category else None,
                assignee_name=self._display_name(t.assignee),
                first_response_at=first_responses.get(t.id),
            )
            for t in tickets
        ]
        stats = aggregate_tickets(snapshots)
        logger.info(
            "dashboard_computed",
            extra={"user_id": str(ctx.user_id), "days": days, "tickets": stats.total_tickets},
        )
        return DashboardResponse(
            **asdict(stats),
            window_days=days,
            window_start=window_start,
            generated_at=now,
        )

    def _first_response_times(self, ticket_ids: list[UUID]) -> dict[UUID, datetime]:
        """Earliest public comment per ticket written by someone other than its creator."""
        if not ticket_ids:
            return {}
        rows = (
            self.db.query(TicketComment.ticket_id, func.min(TicketComment.created_at))
            .join(Ticket, Ticket.id == TicketComment.ticket_id)
            .filter(TicketComment.ticket_id.in_(ticket_ids))
            .filter(TicketComment.internal_note.is_(False))
            .filter(TicketComment.created_by != Ticket.created_by)
            .group_by(TicketComment.ticket_id)
            .all()
        )
        return {ticket_id: first_at for ticket_id, first_at in rows}

    @staticmethod
    def _display_name(user: object | None) -> str | None:
        if user is None:
            return None
        return getattr(user, "full_name", None) or getattr(user, "email", None)
