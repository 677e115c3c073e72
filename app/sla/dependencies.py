from fastapi import Request

from app.sla.registry import SlaRegistry


def get_sla_registry(request: Request) -> SlaRegistry:
    registry: SlaRegistry | None = getattr(request.app.state, "sla_registry", None)
    if registry is None:
        registry = SlaRegistry.with_defaults()
        request.app.state.sla_registry = registry
    return registry
