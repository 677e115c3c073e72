import pytest

from tests.utils.factories import create_article_factory, create_category_factory
from tests.utils.helpers import assert_error_envelope, set_access_token_cookie


class TestListArticlesEndpoint:
    @pytest.mark.asyncio
    async def test_should_show_clients_only_published(
        self, test_client, db_session, test_agent, test_client_token
    ):
        published = create_article_factory(db_session, test_agent, status="published")
        create_article_factory(db_session, test_agent, status="draft")
        create_article_factory(db_session, test_agent, status="pending_review")
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.get("/api/v1/articles")

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [str(published.id)]

    @pytest.mark.asyncio
    async def test_should_not_let_client_filter_into_drafts(
        self, test_client, db_session, test_agent, test_client_token
    ):
        create_article_factory(db_session, test_agent, status="draft")
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.get("/api/v1/articles", params={"status": "draft"})

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_should_let_staff_filter_by_status_and_search(
        self, test_client, db_session, test_agent, test_agent_token
    ):
        draft = create_article_factory(
            db_session, test_agent, title="Reset your password", status="draft"
        )
        create_article_factory(db_session, test_agent, title="Reset router", status="published")
        create_article_factory(db_session, test_agent, title="VPN setup", status="draft")
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.get(
            "/api/v1/articles", params={"status": "draft", "search": "RESET"}
        )

        assert [a["id"] for a in response.json()] == [str(draft.id)]

    @pytest.mark.asyncio
    async def test_should_search_content_too(
        self, test_client, db_session, test_agent, test_client_token
    ):
        match = create_article_factory(
            db_session, test_agent, title="Email", content="Configure the SMTP relay"
        )
        create_article_factory(db_session, test_agent, title="Printers", content="Toner")
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.get("/api/v1/articles", params={"search": "smtp"})

        assert [a["id"] for a in response.json()] == [str(match.id)]


class TestGetArticleEndpoint:
    @pytest.mark.asyncio
    async def test_should_return_404_for_draft_to_client(
        self, test_client, db_session, test_agent, test_client_token
    ):
        draft = create_article_factory(db_session, test_agent, status="draft")
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.get(f"/api/v1/articles/{draft.id}")

        assert_error_envelope(response, 404, "NOT_FOUND")


class TestWriteArticlesEndpoint:
    @pytest.mark.asyncio
    async def test_should_create_draft_authored_by_agent(
        self, test_client, db_session, test_agent, test_agent_token
    ):
        category = create_category_factory(db_session, name="Network")
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.post(
            "/api/v1/articles",
            json={"title": "Wi-Fi", "content": "Use WPA3", "category_id": str(category.id)},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["author"]["id"] == str(test_agent.id)
        assert data["approver"] is None
        assert data["category"]["name"] == "Network"

    @pytest.mark.asyncio
    async def test_should_return_403_when_client_creates(self, test_client, test_client_token):
        set_access_token_cookie(test_client, test_client_token)

        response = await test_client.post(
            "/api/v1/articles", json={"title": "Mine", "content": "Body"}
        )

        assert_error_envelope(response, 403, "AUTHORIZATION_DENIED")

    @pytest.mark.asyncio
    async def test_should_record_approver_on_publish(
        self, test_client, db_session, test_agent, test_manager, test_manager_token
    ):
        article = create_article_factory(db_session, test_agent, status="pending_review")
        set_access_token_cookie(test_client, test_manager_token)

        response = await test_client.patch(
            f"/api/v1/articles/{article.id}", json={"status": "published"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "published"
        assert data["approver"]["id"] == str(test_manager.id)

    @pytest.mark.asyncio
    async def test_should_allow_moving_back_to_draft(
        self, test_client, db_session, test_agent, test_agent_token
    ):
        article = create_article_factory(db_session, test_agent, status="published")
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.patch(
            f"/api/v1/articles/{article.id}", json={"status": "draft", "title": "  Revised  "}
        )

        assert response.json()["status"] == "draft"
        assert response.json()["title"] == "Revised"

    @pytest.mark.asyncio
    async def test_should_reject_blank_title_on_update(
        self, test_client, db_session, test_agent, test_agent_token
    ):
        article = create_article_factory(db_session, test_agent)
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.patch(f"/api/v1/articles/{article.id}", json={"title": " "})

        assert_error_envelope(response, 422, "VALIDATION_FAILED")

    @pytest.mark.asyncio
    async def test_should_delete_for_agent(
        self, test_client, db_session, test_agent, test_agent_token
    ):
        article = create_article_factory(db_session, test_agent)
        set_access_token_cookie(test_client, test_agent_token)

        response = await test_client.delete(f"/api/v1/articles/{article.id}")

        assert response.status_code == 204
        assert (await test_client.get(f"/api/v1/articles/{article.id}")).status_code == 404
