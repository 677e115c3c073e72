"""In-memory SLA targets, one per ticket priority.

The targets are process-local configuration, not persisted. They are used
to stamp ``sla_due_at`` on tickets; nothing escalates automatically when a
ticket runs past its due time.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from app.core.constants import DEFAULT_SLA_HOURS
from app.core.exceptions import NotFoundError, ValidationError
from app.tickets.models.ticket import TicketPriority

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlaTarget:
    priority: TicketPriority
    response_time_hours: int
    resolution_time_hours: int


class SlaRegistry:
    def __init__(self, targets: dict[TicketPriority, SlaTarget]) -> None:
        missing = set(TicketPriority) - set(targets)
        if missing:
            raise ValueError(f"Missing SLA targets for: {sorted(p.value for p in missing)}")
        self._targets = dict(targets)
        self._lock = threading.Lock()

    @classmethod
    def with_defaults(cls) -> "SlaRegistry":
        return cls(
            {
                TicketPriority(priority): SlaTarget(TicketPriority(priority), response, resolution)
                for priority, (response, resolution) in DEFAULT_SLA_HOURS.items()
            }
        )

    def all(self) -> list[SlaTarget]:
        """Targets ordered from most to least urgent."""
        order = [
            TicketPriority.URGENT,
            TicketPriority.HIGH,
            TicketPriority.MEDIUM,
            TicketPriority.LOW,
        ]
        return [self._targets[p] for p in order]

    def get(self, priority: TicketPriority | str) -> SlaTarget:
        try:
            return self._targets[TicketPriority(priority)]
        except ValueError as exc:
            raise NotFoundError(f"Unknown priority '{priority}'", resource="sla_config") from exc

    def update(
        self,
        priority: TicketPriority | str,
        response_time_hours: int | None = None,
        resolution_time_hours: int | None = None,
    ) -> SlaTarget:
        with self._lock:
            current = self.get(priority)
            updated = replace(
                current,
                response_time_hours=(
                    current.response_time_hours
                    if response_time_hours is None
                    else response_time_hours
                ),
                resolution_time_hours=(
                    current.resolution_time_hours
                    if resolution_time_hours is None
                    else resolution_time_hours
                ),
            )
            if updated.response_time_hours <= 0 or updated.resolution_time_hours <= 0:
                raise ValidationError("SLA hours must be positive", field="hours")
            self._targets[updated.priority] = updated
        logger.info(
            "sla_target_updated",
            extra={
                "priority": updated.priority.value,
                "response_time_hours": updated.response_time_hours,
                "resolution_time_hours": updated.resolution_time_hours,
            },
        )
        return updated

    def due_at(self, priority: TicketPriority | str, created_at: datetime) -> datetime:
        return created_at + timedelta(hours=self.get(priority).resolution_time_hours)
