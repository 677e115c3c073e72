import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.access.filters import scope_tickets
from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.auth.models.user import User
from app.categories.models.category import Category
from app.core.datetime_utils import utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.core.schemas import Page, paginated
from app.sla.registry import SlaRegistry
from app.tickets.models.ticket import FINISHED_STATUSES, Ticket, TicketStatus
from app.tickets.schemas.ticket import (
    CategorySummary,
    TicketCreate,
    TicketDetailResponse,
    TicketListItem,
    TicketUpdate,
    UserSummary,
)

logger = logging.getLogger(__name__)


class TicketService:
    def __init__(self, db: Session, sla: SlaRegistry | None = None) -> None:
        self.db = db
        self.sla = sla or SlaRegistry.with_defaults()

    def create_ticket(self, ctx: SessionContext, data: TicketCreate) -> Ticket:
        subject = data.subject.strip()
        description = data.description.strip()
        if not subject:
            raise ValidationError("Subject is required", field="subject")
        if not description:
            raise ValidationError("Description is required", field="description")

        created_by = ctx.user_id
        if ctx.is_manager and data.created_by is not None:
            self._get_user_or_404(data.created_by)
            created_by = data.created_by

        if data.category_id is not None:
            self._get_category_or_404(data.category_id)

        now = utcnow()
        ticket = Ticket(
            subject=subject,
            description=description,
            status=TicketStatus.OPEN.value,
            priority=data.priority.value,
            category_id=data.category_id,
            created_by=created_by,
            sla_due_at=self.sla.due_at(data.priority, now),
            created_at=now,
            updated_at=now,
        )
        authorize(ctx, Operation.CREATE, Resource.TICKET, ticket)

        self.db.add(ticket)
        self.db.commit()
        self.db.refresh(ticket)
        logger.info(
            "ticket_created",
            extra={"ticket_id": str(ticket.id), "created_by": str(created_by)},
        )
        return ticket

    def list_tickets(
        self,
        ctx: SessionContext,
        status_filter: str | None = None,
        priority: str | None = None,
        category_id: UUID | None = None,
        assigned_to: UUID | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[TicketListItem]:
        authorize(ctx, Operation.READ, Resource.TICKET)
        query = scope_tickets(self.db.query(Ticket), ctx)

        if status_filter:
            query = query.filter(Ticket.status == status_filter)
        if priority:
            query = query.filter(Ticket.priority == priority)
        if category_id:
            query = query.filter(Ticket.category_id == category_id)
        if assigned_to:
            query = query.filter(Ticket.assigned_to == assigned_to)
        if search:
            query = query.filter(Ticket.subject.ilike(f"%{search}%"))

        total = query.count()
        tickets = (
            query.order_by(Ticket.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return paginated([self.build_list_item(t) for t in tickets], total, page, limit)

    def get_ticket(self, ctx: SessionContext, ticket_id: UUID) -> Ticket:
        """Load a ticket the actor can see; invisible tickets are reported as missing."""
        ticket: Ticket | None = (
            scope_tickets(self.db.query(Ticket), ctx).filter(Ticket.id == ticket_id).first()
        )
        if not ticket:
            raise NotFoundError("Ticket not found", resource="ticket")
        authorize(ctx, Operation.READ, Resource.TICKET, ticket)
        return ticket

    def update_ticket(self, ctx: SessionContext, ticket_id: UUID, data: TicketUpdate) -> Ticket:
        """Apply a partial update. Concurrent writers: last write wins."""
        authorize(ctx, Operation.UPDATE, Resource.TICKET)
        ticket = self.get_ticket(ctx, ticket_id)
        authorize(ctx, Operation.UPDATE, Resource.TICKET, ticket)

        changes = data.model_dump(exclude_unset=True)
        for field in ("status", "priority"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)

        if "status" in changes:
            ticket.status = changes["status"].value
        if "priority" in changes:
            ticket.priority = changes["priority"].value
            ticket.sla_due_at = self.sla.due_at(ticket.priority, ticket.created_at)
        if "category_id" in changes:
            if changes["category_id"] is not None:
                self._get_category_or_404(changes["category_id"])
            ticket.category_id = changes["category_id"]
        if "assigned_to" in changes:
            assignee_id = changes["assigned_to"]
            if assignee_id is not None:
                assignee = self._get_user_or_404(assignee_id)
                if not assignee.is_staff:
                    raise ValidationError(
                        "Tickets can only be assigned to agents or managers",
                        field="assigned_to",
                    )
            ticket.assigned_to = assignee_id

        self.db.commit()
        self.db.refresh(ticket)
        logger.info(
            "ticket_updated",
            extra={
                "ticket_id": str(ticket.id),
                "actor_id": str(ctx.user_id),
                "fields": sorted(changes),
            },
        )
        return ticket

    def delete_ticket(self, ctx: SessionContext, ticket_id: UUID) -> None:
        authorize(ctx, Operation.DELETE, Resource.TICKET)
        ticket = self.get_ticket(ctx, ticket_id)
        self.db.delete(ticket)
        self.db.commit()
        logger.info("ticket_deleted", extra={"ticket_id": str(ticket_id)})

    def _get_user_or_404(self, user_id: UUID) -> User:
        user: User | None = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found", resource="user")
        return user

    def _get_category_or_404(self, category_id: UUID) -> Category:
        category: Category | None = (
            self.db.query(Category).filter(Category.id == category_id).first()
        )
        if not category:
            raise NotFoundError("Category not found", resource="category")
        return category

    @staticmethod
    def is_sla_breached(ticket: Ticket) -> bool:
        if ticket.sla_due_at is None or ticket.status in FINISHED_STATUSES:
            return False
        return utcnow() > ticket.sla_due_at

    def build_list_item(self, ticket: Ticket) -> TicketListItem:
        return TicketListItem(**self._common_fields(ticket))

    def build_detail_response(self, ticket: Ticket) -> TicketDetailResponse:
        return TicketDetailResponse(**self._common_fields(ticket), description=ticket.description)

    def _common_fields(self, ticket: Ticket) -> dict:
        return {
            "id": ticket.id,
            "subject": ticket.subject,
            "status": ticket.status,
            "priority": ticket.priority,
            "category": (
                CategorySummary.model_validate(ticket.category) if ticket.category else None
            ),
            "created_by": UserSummary.model_validate(ticket.creator) if ticket.creator else None,
            "assigned_to": (
                UserSummary.model_validate(ticket.assignee) if ticket.assignee else None
            ),
            "sla_due_at": ticket.sla_due_at,
            "sla_breached": self.is_sla_breached(ticket),
            "created_at": ticket.created_at,
            "updated_at": ticket.updated_at,
        }
