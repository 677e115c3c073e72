from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.dependencies import CurrentSession
from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.schemas import Page
from app.db.session import get_db
from app.sla.dependencies import get_sla_registry
from app.sla.registry import SlaRegistry
from app.tickets.models.ticket import TicketPriority, TicketStatus
from app.tickets.schemas.comment import CommentCreate, CommentResponse
from app.tickets.schemas.ticket import (
    TicketCreate,
    TicketDetailResponse,
    TicketListItem,
    TicketUpdate,
)
from app.tickets.services.comment_service import CommentService
from app.tickets.services.ticket_service import TicketService

router = APIRouter()


@router.post("/tickets", response_model=TicketDetailResponse, status_code=201)
def create_ticket(
    data: TicketCreate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
    sla: SlaRegistry = Depends(get_sla_registry),
) -> TicketDetailResponse:
    service = TicketService(db, sla)
    ticket = service.create_ticket(ctx, data)
    return service.build_detail_response(ticket)


@router.get("/tickets", response_model=Page[TicketListItem])
def list_tickets(
    ctx: CurrentSession,
    status: TicketStatus | None = None,
    priority: TicketPriority | None = None,
    category_id: UUID | None = None,
    assigned_to: UUID | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> Page[TicketListItem]:
    service = TicketService(db)
    return service.list_tickets(
        ctx,
        status_filter=status.value if status else None,
        priority=priority.value if priority else None,
        category_id=category_id,
        assigned_to=assigned_to,
        search=search,
        page=page,
        limit=limit,
    )


@router.get("/tickets/{ticket_id}", response_model=TicketDetailResponse)
def get_ticket(
    ticket_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> TicketDetailResponse:
    service = TicketService(db)
    return service.build_detail_response(service.get_ticket(ctx, ticket_id))


@router.patch("/tickets/{ticket_id}", response_model=TicketDetailResponse)
def update_ticket(
    ticket_id: UUID,
    data: TicketUpdate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
    sla: SlaRegistry = Depends(get_sla_registry),
) -> TicketDetailResponse:
    service = TicketService(db, sla)
    ticket = service.update_ticket(ctx, ticket_id, data)
    return service.build_detail_response(ticket)


@router.delete("/tickets/{ticket_id}", status_code=204)
def delete_ticket(
    ticket_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> None:
    TicketService(db).delete_ticket(ctx, ticket_id)


@router.get("/tickets/{ticket_id}/comments", response_model=list[CommentResponse])
def list_comments(
    ticket_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> list[CommentResponse]:
    comments = CommentService(db).list_comments(ctx, ticket_id)
    return [CommentResponse.model_validate(c) for c in comments]


@router.post(
    "/tickets/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=201,
)
def add_comment(
    ticket_id: UUID,
    data: CommentCreate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> CommentResponse:
    comment = CommentService(db).add_comment(ctx, ticket_id, data)
    return CommentResponse.model_validate(comment)
