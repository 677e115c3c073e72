"""Pure reduction of a ticket window into dashboard statistics.

Nothing here touches the database: the service layer loads the visible
tickets for the window, turns them into ``TicketSnapshot`` values and hands
them to ``aggregate_tickets``. Keeping the arithmetic separate lets the
numbers be checked directly against hand-built inputs.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from app.core.constants import UNCATEGORIZED_LABEL
from app.core.datetime_utils import hours_between

OPEN = "open"
PENDING = "pending"
RESOLVED = "resolved"
CLOSED = "closed"
URGENT = "urgent"


@dataclass(frozen=True)
class TicketSnapshot:
    """The fields of one ticket the dashboard needs.

    Attributes:
        status: Ticket status value.
        priority: Ticket priority value.
        created_at: Creation time.
        updated_at: Last modification time; for resolved tickets this is
            taken as the resolution time.
        category_name: Category name, or None when uncategorized.
        assignee_name: Display name of the assignee, or None when unassigned.
        first_response_at: Time of the first public reply from someone other
            than the ticket's creator, if any.
    """

    status: str
    priority: str
    created_at: datetime
    updated_at: datetime
    category_name: str | None = None
    assignee_name: str | None = None
    first_response_at: datetime | None = None


@dataclass(frozen=True)
class AgentStats:
    agent: str
    count: int
    resolved: int


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int


@dataclass
class DashboardStats:
    total_tickets: int = 0
    open_tickets: int = 0
    pending_tickets: int = 0
    resolved_tickets: int = 0
    closed_tickets: int = 0
    urgent_tickets: int = 0
    avg_resolution_time_hours: float = 0.0
    avg_first_response_time_hours: float = 0.0
    resolution_rate: float = 0.0
    tickets_by_category: list[CategoryCount] = field(default_factory=list)
    tickets_by_agent: list[AgentStats] = field(default_factory=list)


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def aggregate_tickets(tickets: Iterable[TicketSnapshot]) -> DashboardStats:
    """Reduce tickets to dashboard statistics.

    Urgent counts every urgent ticket whatever its status. The resolution
    rate is resolved / (open + pending + resolved) as a percentage, so closed
    tickets are left out of it. Both averages are 0 when there is nothing
    to average. Categories and agents are ordered by count, then name.
    """
    stats = DashboardStats()
    by_category: dict[str, int] = {}
    by_agent: dict[str, list[int]] = {}
    resolution_hours: list[float] = []
    response_hours: list[float] = []

    for ticket in tickets:
        stats.total_tickets += 1
        if ticket.status == OPEN:
            stats.open_tickets += 1
        elif ticket.status == PENDING:
            stats.pending_tickets += 1
        elif ticket.status == RESOLVED:
            stats.resolved_tickets += 1
            resolution_hours.append(hours_between(ticket.created_at, ticket.updated_at))
        elif ticket.status == CLOSED:
            stats.closed_tickets += 1

        if ticket.priority == URGENT:
            stats.urgent_tickets += 1

        category = ticket.category_name or UNCATEGORIZED_LABEL
        by_category[category] = by_category.get(category, 0) + 1

        if ticket.assignee_name is not None:
            counts = by_agent.setdefault(ticket.assignee_name, [0, 0])
            counts[0] += 1
            if ticket.status == RESOLVED:
                counts[1] += 1

        if ticket.first_response_at is not None:
            response_hours.append(hours_between(ticket.created_at, ticket.first_response_at))

    stats.avg_resolution_time_hours = _mean(resolution_hours)
    stats.avg_first_response_time_hours = _mean(response_hours)

    active = stats.open_tickets + stats.pending_tickets + stats.resolved_tickets
    if active:
        stats.resolution_rate = round(stats.resolved_tickets / active * 100, 2)

    stats.tickets_by_category = [
        CategoryCount(category=name, count=count)
        for name, count in sorted(by_category.items(), key=lambda item: (-item[1], item[0]))
    ]
    stats.tickets_by_agent = [
        AgentStats(agent=name, count=count, resolved=resolved)
        for name, (count, resolved) in sorted(
            by_agent.items(), key=lambda item: (-item[1][0], item[0])
        )
    ]
    return stats
