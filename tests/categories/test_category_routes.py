import pytest

from tests.utils.factories import (
    create_article_factory,
    create_category_factory,
    create_ticket_factory,
)
from tests.utils.helpers import assert_error_envelope, set_access_token_cookie


class TestCategoriesEndpoint:
    @pytest.mark.asyncio
    async def test_should_list_by_name_for_any_user(
        self, test_client, db_session, test_client_token
    ):
        create_category_factory(db_session, name="Software")
        create_category_factory(db_session, name="Billing")
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.get("/api/v1/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Billing", "Software"]

    @pytest.mark.asyncio
    async def test_should_create_for_manager(self, test_client, test_manager_token):
        set_access_token_cookie(test_client, test_manager_token)

        response = await test_client.post(
            "/api/v1/categories", json={"name": "  Access  ", "description": "Badges"}
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Access"

    @pytest.mark.asyncio
    async def test_should_reject_whitespace_name(self, test_client, test_manager_token):
        set_access_token_cookie(test_client, test_manager_token)

        response = await test_client.post("/api/v1/categories", json={"name": "   "})

        error = assert_error_envelope(response, 422, "VALIDATION_FAILED")
        assert error["details"]["field"] == "name"

    @pytest.mark.asyncio
    async def test_should_return_403_for_agent(self, test_client, test_agent_token):
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.post("/api/v1/categories", json={"name": "Nope"})

        assert_error_envelope(response, 403, "AUTHORIZATION_DENIED")

    @pytest.mark.asyncio
    async def test_should_rename(self, test_client, db_session, test_manager_token):
        category = create_category_factory(db_session, name="Hw")
        set_access_token_cookie(test_client, test_manager_token)

        response = await test_client.patch(
            f"/api/v1/categories/{category.id}", json={"name": "Hardware"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Hardware"

    @pytest.mark.asyncio
    async def test_should_uncategorize_tickets_and_articles_on_delete(
        self,
        test_client,
        db_session,
        test_client_user,
        test_agent,
        test_manager_token,
    ):
        category = create_category_factory(db_session, name="Legacy")
        ticket = create_ticket_factory(db_session, test_client_user, category=category)
        article = create_article_factory(db_session, test_agent, category=category)
        set_access_token_cookie(test_client, test_manager_token)

        response = await test_client.delete(f"/api/v1/categories/{category.id}")

        assert response.status_code == 204
        db_session.refresh(ticket)
        db_session.refresh(article)
        assert ticket.category_id is None
        assert article.category_id is None

        dashboard = await test_client.get("/api/v1/dashboard")
        assert dashboard.json()["tickets_by_category"] == [
            {"category": "Uncategorized", "count": 1}
        ]
