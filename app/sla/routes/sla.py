from fastapi import APIRouter, Depends

from app.access.policy import Operation, Resource, authorize
from app.auth.dependencies import CurrentSession
from app.sla.dependencies import get_sla_registry
from app.sla.registry import SlaRegistry
from app.sla.schemas.sla import SlaTargetResponse, SlaTargetUpdate
from app.tickets.models.ticket import TicketPriority

router = APIRouter()


@router.get("/sla", response_model=list[SlaTargetResponse])
def list_sla_targets(
    ctx: CurrentSession,
    registry: SlaRegistry = Depends(get_sla_registry),
) -> list[SlaTargetResponse]:
    authorize(ctx, Operation.READ, Resource.SLA_CONFIG)
    return [SlaTargetResponse.model_validate(t) for t in registry.all()]


@router.put("/sla/{priority}", response_model=SlaTargetResponse)
def update_sla_target(
    priority: TicketPriority,
    data: SlaTargetUpdate,
    ctx: CurrentSession,
    registry: SlaRegistry = Depends(get_sla_registry),
) -> SlaTargetResponse:
    authorize(ctx, Operation.UPDATE, Resource.SLA_CONFIG)
    target = registry.update(
        priority,
        response_time_hours=data.response_time_hours,
        resolution_time_hours=data.resolution_time_hours,
    )
    return SlaTargetResponse.model_validate(target)
