import json

import httpx
import pytest

from app.client.api import HelpdeskApiClient
from app.client.session import ClientSession
from app.client.views import (
    ArticleDetailView,
    ArticleEditorView,
    DashboardView,
    KnowledgeBaseView,
    LoadState,
    SettingsView,
    TicketDetailView,
    TicketListView,
)

TICKET = {"id": "t1", "subject": "VPN", "status": "open"}
COMMENTS = [{"id": "c1", "content": "Looking"}]


def _error(status: int, code: str) -> httpx.Response:
    return httpx.Response(
        status, json={"success": False, "error": {"code": code, "message": code, "details": None}}
    )


def make_session(handler, user=None) -> ClientSession:
    api = HelpdeskApiClient("http://helpdesk", transport=httpx.MockTransport(handler))
    session = ClientSession(api)
    session.user = user or {"id": "u1", "role": "agent"}
    return session


class TestTicketDetailView:
    @pytest.mark.asyncio
    async def test_should_load_ticket_and_comments(self):
        def handler(request):
            if request.url.path.endswith("/comments"):
                return httpx.Response(200, json=COMMENTS)
            return httpx.Response(200, json=TICKET)

        view = TicketDetailView(make_session(handler), "t1")
        assert view.state is LoadState.IDLE

        await view.load()

        assert view.state is LoadState.LOADED
        assert view.ticket == TICKET
        assert view.comments == COMMENTS
        assert view.redirect_to is None

    @pytest.mark.asyncio
    async def test_should_redirect_to_list_when_load_fails(self):
        view = TicketDetailView(make_session(lambda r: _error(404, "NOT_FOUND")), "t1")

        await view.load()

        assert view.state is LoadState.ERROR
        assert view.redirect_to == "/tickets"
        assert [n.message for n in view.drain_notifications()] == ["Failed to load ticket"]
        assert view.notifications == []

    @pytest.mark.asyncio
    async def test_should_keep_data_when_status_update_fails(self):
        def handler(request):
            if request.method == "PATCH":
                return _error(403, "AUTHORIZATION_DENIED")
            if request.url.path.endswith("/comments"):
                return httpx.Response(200, json=COMMENTS)
            return httpx.Response(200, json=TICKET)

        view = TicketDetailView(make_session(handler), "t1")
        await view.load()
        view.drain_notifications()

        await view.update_status("resolved")

        assert view.state is LoadState.LOADED
        assert view.ticket["status"] == "open"
        assert [(n.level, n.message) for n in view.notifications] == [
            ("error", "Failed to update status")
        ]

    @pytest.mark.asyncio
    async def test_should_apply_successful_updates(self):
        def handler(request):
            if request.method == "PATCH":
                return httpx.Response(200, json={**TICKET, "status": "resolved"})
            if request.method == "POST":
                return httpx.Response(201, json={"id": "c2", "content": "Done"})
            if request.url.path.endswith("/comments"):
                return httpx.Response(200, json=COMMENTS)
            return httpx.Response(200, json=TICKET)

        view = TicketDetailView(make_session(handler), "t1")
        await view.load()

        await view.update_status("resolved")
        await view.add_comment("Done")

        assert view.ticket["status"] == "resolved"
        assert [c["id"] for c in view.comments] == ["c1", "c2"]
        assert all(n.level == "success" for n in view.notifications)

    @pytest.mark.asyncio
    async def test_should_ignore_blank_comment(self):
        calls = []

        def handler(request):
            calls.append(request.method)
            if request.url.path.endswith("/comments"):
                return httpx.Response(200, json=COMMENTS)
            return httpx.Response(200, json=TICKET)

        view = TicketDetailView(make_session(handler), "t1")
        await view.load()

        await view.add_comment("   ")

        assert "POST" not in calls


class TestTicketListView:
    @pytest.mark.asyncio
    async def test_should_reset_page_when_filter_changes(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json={"items": [TICKET], "meta": {"total": 1}})

        view = TicketListView(make_session(handler))
        await view.go_to_page(3)

        await view.set_filter("status", "open")
        await view.set_filter("status", "all")

        assert seen[0]["page"] == "3"
        assert seen[1] == {"page": "1", "status": "open"}
        assert seen[2] == {"page": "1"}
        assert view.tickets == [TICKET]

    @pytest.mark.asyncio
    async def test_should_enter_error_state_on_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        view = TicketListView(make_session(handler))

        await view.load()

        assert view.state is LoadState.ERROR
        assert view.tickets == []
        assert view.error.error_code == "TRANSIENT_STORE_ERROR"


class TestDashboardView:
    @pytest.mark.asyncio
    async def test_should_reload_with_new_window(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["days"])
            return httpx.Response(200, json={"total_tickets": 0})

        view = DashboardView(make_session(handler))
        await view.load()
        await view.set_window(30)

        assert seen == ["7", "30"]
        assert view.state is LoadState.LOADED


class TestKnowledgeBaseView:
    @pytest.mark.asyncio
    async def test_should_not_send_status_filter_for_clients(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json=[])

        view = KnowledgeBaseView(make_session(handler, user={"id": "u2", "role": "client"}))
        view.status = "draft"

        await view.set_search("  vpn ")

        assert seen == [{"search": "vpn"}]

    @pytest.mark.asyncio
    async def test_should_drop_article_after_delete(self):
        def handler(request):
            if request.method == "DELETE":
                return httpx.Response(204)
            return httpx.Response(200, json=[{"id": "a1"}, {"id": "a2"}])

        view = KnowledgeBaseView(make_session(handler))
        await view.load()

        await view.delete_article("a1")

        assert view.data == [{"id": "a2"}]


class TestArticleDetailView:
    @pytest.mark.asyncio
    async def test_should_load_article(self):
        article = {"id": "a1", "title": "Reset VPN"}
        view = ArticleDetailView(make_session(lambda r: httpx.Response(200, json=article)), "a1")

        await view.load()

        assert view.state is LoadState.LOADED
        assert view.data == article
        assert view.redirect_to is None

    @pytest.mark.asyncio
    async def test_should_redirect_to_knowledge_base_when_load_fails(self):
        view = ArticleDetailView(make_session(lambda r: _error(404, "NOT_FOUND")), "a1")

        await view.load()

        assert view.state is LoadState.ERROR
        assert view.redirect_to == "/knowledge-base"
        assert [n.message for n in view.drain_notifications()] == ["Failed to load article"]


class TestArticleEditorView:
    @pytest.mark.asyncio
    async def test_should_create_article_and_return_to_list(self):
        sent = []

        def handler(request):
            if request.method == "POST":
                sent.append(json.loads(request.content))
                return httpx.Response(201, json={"id": "a9", "title": "New"})
            return httpx.Response(200, json=[{"id": "cat1", "name": "Network"}])

        view = ArticleEditorView(make_session(handler))
        await view.load()

        ok = await view.save("New", "Body", category_id="cat1")

        assert ok is True
        assert view.data["article"] is None
        assert sent == [
            {"title": "New", "content": "Body", "category_id": "cat1", "status": "draft"}
        ]
        assert view.article_id == "a9"
        assert view.redirect_to == "/knowledge-base"
        assert [n.message for n in view.drain_notifications()] == [
            "Article created successfully"
        ]

    @pytest.mark.asyncio
    async def test_should_stay_on_editor_when_update_fails(self):
        article = {"id": "a1", "title": "Old", "content": "Body", "status": "draft"}

        def handler(request):
            if request.method == "PATCH":
                return _error(403, "AUTHORIZATION_DENIED")
            if request.url.path.endswith("/categories"):
                return httpx.Response(200, json=[])
            return httpx.Response(200, json=article)

        view = ArticleEditorView(make_session(handler), "a1")
        await view.load()

        ok = await view.save("Changed", "Body", status="published")

        assert ok is False
        assert view.data["article"] == article
        assert view.redirect_to is None
        assert [n.message for n in view.drain_notifications()] == ["Failed to update article"]


class TestSettingsView:
    @pytest.mark.asyncio
    async def test_should_reload_categories_after_adding_one(self):
        categories = [{"id": "c1", "name": "Billing"}]

        def handler(request):
            if request.method == "POST":
                created = {"id": "c0", "name": json.loads(request.content)["name"]}
                categories.insert(0, created)
                return httpx.Response(201, json=created)
            return httpx.Response(200, json=list(categories))

        view = SettingsView(make_session(handler, user={"id": "m1", "role": "manager"}))
        await view.load()

        ok = await view.add_category("Access", "")

        assert ok is True
        assert [c["name"] for c in view.data] == ["Access", "Billing"]
        assert [n.message for n in view.drain_notifications()] == [
            "Category added successfully"
        ]

    @pytest.mark.asyncio
    async def test_should_keep_category_when_delete_fails(self):
        def handler(request):
            if request.method == "DELETE":
                return _error(403, "AUTHORIZATION_DENIED")
            return httpx.Response(200, json=[{"id": "c1", "name": "Billing"}])

        view = SettingsView(make_session(handler))
        await view.load()

        ok = await view.delete_category("c1")

        assert ok is False
        assert view.data == [{"id": "c1", "name": "Billing"}]
        assert [n.message for n in view.drain_notifications()] == ["Failed to delete category"]

    @pytest.mark.asyncio
    async def test_should_replace_user_after_role_change(self):
        users = [{"id": "u1", "role": "client"}, {"id": "u2", "role": "agent"}]

        def handler(request):
            if request.method == "PATCH":
                return httpx.Response(200, json={"id": "u1", "role": "agent"})
            return httpx.Response(200, json=users)

        view = SettingsView(make_session(handler), tab="users")
        await view.load()

        await view.change_role("u1", "agent")

        assert view.data == [{"id": "u1", "role": "agent"}, {"id": "u2", "role": "agent"}]
        assert [n.message for n in view.drain_notifications()] == [
            "User role updated successfully"
        ]

    @pytest.mark.asyncio
    async def test_should_send_only_changed_sla_hours(self):
        sent = []
        targets = [{"priority": "high", "response_time_hours": 4, "resolution_time_hours": 8}]

        def handler(request):
            if request.method == "PUT":
                sent.append(json.loads(request.content))
                return httpx.Response(
                    200,
                    json={"priority": "high", "response_time_hours": 4, "resolution_time_hours": 6},
                )
            return httpx.Response(200, json=targets)

        view = SettingsView(make_session(handler), tab="sla")
        await view.load()

        await view.update_sla("high", resolution_time_hours=6)

        assert sent == [{"resolution_time_hours": 6}]
        assert view.data[0]["resolution_time_hours"] == 6

    @pytest.mark.asyncio
    async def test_should_name_tab_in_load_failure(self):
        view = SettingsView(make_session(lambda r: _error(403, "AUTHORIZATION_DENIED")))

        await view.switch_tab("users")

        assert view.state is LoadState.ERROR
        assert [n.message for n in view.drain_notifications()] == ["Failed to load users"]
