from datetime import datetime, timedelta

import pytest

from tests.utils.factories import (
    create_category_factory,
    create_comment_factory,
    create_ticket_factory,
)
from tests.utils.helpers import assert_error_envelope, set_access_token_cookie


class TestDashboardEndpoint:
    @pytest.mark.asyncio
    async def test_should_aggregate_window_for_staff(
        self, test_client, db_session, test_client_user, test_agent, test_manager_token
    ):
        billing = create_category_factory(db_session, name="Billing")
        now = datetime.utcnow()
        create_ticket_factory(
            db_session,
            test_client_user,
            status="resolved",
            priority="urgent",
            category=billing,
            assigned_to=test_agent,
            created_at=now - timedelta(hours=5),
            resolved_after=timedelta(hours=2),
        )
        create_ticket_factory(db_session, test_client_user, category=billing)
        create_ticket_factory(db_session, test_client_user, status="pending")
        # Outside the 7-day window
        create_ticket_factory(
            db_session, test_client_user, created_at=now - timedelta(days=10)
        )
        set_access_token_cookie(test_client, test_manager_token)

        response = await test_client.get("/api/v1/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["window_days"] == 7
        assert data["total_tickets"] == 3
        assert data["open_tickets"] == 1
        assert data["pending_tickets"] == 1
        assert data["resolved_tickets"] == 1
        assert data["urgent_tickets"] == 1
        assert data["avg_resolution_time_hours"] == 2.0
        assert data["resolution_rate"] == 33.33
        assert {c["category"]: c["count"] for c in data["tickets_by_category"]} == {
            "Billing": 2,
            "Uncategorized": 1,
        }
        assert data["tickets_by_agent"] == [
            {"agent": "Alice Agent", "count": 1, "resolved": 1}
        ]

    @pytest.mark.asyncio
    async def test_should_widen_window_with_days(
        self, test_client, db_session, test_client_user, test_agent_token
    ):
        create_ticket_factory(
            db_session, test_client_user, created_at=datetime.utcnow() - timedelta(days=20)
        )
        set_access_token_cookie(test_client, test_agent_token)

        week = (await test_client.get("/api/v1/dashboard", params={"days": 7})).json()
        month = (await test_client.get("/api/v1/dashboard", params={"days": 30})).json()

        assert week["total_tickets"] == 0
        assert month["total_tickets"] == 1

    @pytest.mark.asyncio
    async def test_should_scope_client_stats_to_own_tickets(
        self,
        test_client,
        db_session,
        test_client_user,
        test_other_client,
        test_client_token,
    ):
        create_ticket_factory(db_session, test_client_user)
        create_ticket_factory(db_session, test_other_client)
        create_ticket_factory(db_session, test_other_client)
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.get("/api/v1/dashboard")

        assert response.json()["total_tickets"] == 1

    @pytest.mark.asyncio
    async def test_should_measure_first_public_staff_response(
        self, test_client, db_session, test_client_user, test_agent, test_agent_token
    ):
        created = datetime.utcnow() - timedelta(hours=6)
        ticket = create_ticket_factory(db_session, test_client_user, created_at=created)
        create_comment_factory(
            db_session, ticket, test_client_user, created_at=created + timedelta(minutes=10)
        )
        create_comment_factory(
            db_session,
            ticket,
            test_agent,
            internal_note=True,
            created_at=created + timedelta(hours=1),
        )
        create_comment_factory(
            db_session, ticket, test_agent, created_at=created + timedelta(hours=3)
        )
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.get("/api/v1/dashboard")

        assert response.json()["avg_first_response_time_hours"] == 3.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, 366])
    async def test_should_reject_window_out_of_range(self, test_client, test_agent_token, days):
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.get("/api/v1/dashboard", params={"days": days})

        assert_error_envelope(response, 422, "VALIDATION_FAILED")

    @pytest.mark.asyncio
    async def test_should_return_401_when_not_authenticated(self, test_client):
        response = await test_client.get("/api/v1/dashboard")

        assert_error_envelope(response, 401, "AUTHENTICATION_REQUIRED")
