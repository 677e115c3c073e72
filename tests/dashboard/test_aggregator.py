from datetime import datetime, timedelta

from app.dashboard.aggregator import (
    AgentStats,
    CategoryCount,
    TicketSnapshot,
    aggregate_tickets,
)

T0 = datetime(2026, 3, 2, 9, 0, 0)


def _snap(status="open", priority="medium", **kwargs) -> TicketSnapshot:
    kwargs.setdefault("created_at", T0)
    kwargs.setdefault("updated_at", kwargs["created_at"])
    return TicketSnapshot(status=status, priority=priority, **kwargs)


class TestAggregateTickets:
    def test_should_return_zeros_for_empty_window(self):
        stats = aggregate_tickets([])

        assert stats.total_tickets == 0
        assert stats.resolution_rate == 0.0
        assert stats.avg_resolution_time_hours == 0.0
        assert stats.avg_first_response_time_hours == 0.0
        assert stats.tickets_by_category == []
        assert stats.tickets_by_agent == []

    def test_should_average_one_hour_for_ticket_resolved_after_one_hour(self):
        stats = aggregate_tickets(
            [_snap("resolved", updated_at=T0 + timedelta(seconds=3600))]
        )

        assert stats.avg_resolution_time_hours == 1.0
        assert stats.resolution_rate == 100.0

    def test_should_report_zero_rate_and_average_without_resolved_tickets(self):
        stats = aggregate_tickets([_snap("open"), _snap("pending")])

        assert stats.resolved_tickets == 0
        assert stats.resolution_rate == 0.0
        assert stats.avg_resolution_time_hours == 0.0

    def test_should_count_statuses(self):
        stats = aggregate_tickets(
            [_snap("open"), _snap("open"), _snap("pending"), _snap("resolved"), _snap("closed")]
        )

        assert stats.total_tickets == 5
        assert stats.open_tickets == 2
        assert stats.pending_tickets == 1
        assert stats.resolved_tickets == 1
        assert stats.closed_tickets == 1

    def test_should_leave_closed_tickets_out_of_resolution_rate(self):
        stats = aggregate_tickets(
            [_snap("open"), _snap("resolved"), _snap("resolved"), _snap("closed")]
        )

        assert stats.resolution_rate == 66.67

    def test_should_count_urgent_regardless_of_status(self):
        stats = aggregate_tickets(
            [
                _snap("open", "urgent"),
                _snap("resolved", "urgent"),
                _snap("closed", "urgent"),
                _snap("open", "high"),
            ]
        )

        assert stats.urgent_tickets == 3

    def test_should_group_by_category_and_sum_to_total(self):
        tickets = [_snap(category_name="A")] * 3 + [_snap(category_name="B")]

        stats = aggregate_tickets(tickets)

        assert stats.tickets_by_category == [
            CategoryCount(category="A", count=3),
            CategoryCount(category="B", count=1),
        ]
        assert sum(c.count for c in stats.tickets_by_category) == stats.total_tickets

    def test_should_label_missing_category_uncategorized(self):
        stats = aggregate_tickets([_snap(), _snap(category_name="Billing")])

        names = {c.category: c.count for c in stats.tickets_by_category}
        assert names == {"Uncategorized": 1, "Billing": 1}

    def test_should_tally_agents_and_skip_unassigned(self):
        stats = aggregate_tickets(
            [
                _snap("resolved", assignee_name="Bob"),
                _snap("open", assignee_name="Bob"),
                _snap("resolved", assignee_name="Ann"),
                _snap("open"),
            ]
        )

        assert stats.tickets_by_agent == [
            AgentStats(agent="Bob", count=2, resolved=1),
            AgentStats(agent="Ann", count=1, resolved=1),
        ]

    def test_should_order_ties_by_name(self):
        stats = aggregate_tickets(
            [_snap(category_name="Zeta"), _snap(category_name="Alpha")]
        )

        assert [c.category for c in stats.tickets_by_category] == ["Alpha", "Zeta"]

    def test_should_average_first_response_over_answered_tickets(self):
        stats = aggregate_tickets(
            [
                _snap(first_response_at=T0 + timedelta(hours=2)),
                _snap(first_response_at=T0 + timedelta(hours=4)),
                _snap(),
            ]
        )

        assert stats.avg_first_response_time_hours == 3.0

    def test_should_round_resolution_average(self):
        stats = aggregate_tickets(
            [
                _snap("resolved", updated_at=T0 + timedelta(minutes=20)),
                _snap("resolved", updated_at=T0 + timedelta(minutes=30)),
                _snap("resolved", updated_at=T0 + timedelta(minutes=30)),
            ]
        )

        assert stats.avg_resolution_time_hours == 0.44
