"""
Tests for quotum/core/api - dashboard HTTP client

The requests session is mocked; these tests pin the request layout and
error normalization.

Run with: pytest tests/test_dashboard_client.py -v
"""

import json
from unittest.mock import Mock

import pytest
import requests

from quotum.core.api.base import APIError, AuthExpiredError
from quotum.core.api.dashboard import DashboardClient
from quotum.core.content_editor import select_image
from quotum.core.dto.content import ImageBlock, TextBlock


def _response(status_code=200, payload=None, text=None):
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    if payload is None and text is None:
        resp.content = b""
        resp.text = ""
        resp.json.side_effect = ValueError("no body")
    elif payload is not None:
        resp.text = json.dumps(payload)
        resp.content = resp.text.encode()
        resp.json.return_value = payload
    else:
        resp.text = text
        resp.content = text.encode()
        resp.json.side_effect = ValueError("not json")
    return resp


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    session.request.return_value = _response(payload={})
    return session


@pytest.fixture
def client(session):
    return DashboardClient(
        "https://dash.example.com/dashboard/",
        session=session,
        token_provider=lambda: "secret-token",
    )


def _sent(session):
    return session.request.call_args.kwargs


class TestRequests:
    def test_get_posts_sends_page_and_bearer(self, client, session):
        # ARRANGE
        session.request.return_value = _response(payload={"data": [], "current_page": 3})

        # ACT
        data = client.get_posts(page=3)

        # ASSERT
        sent = _sent(session)
        assert sent["method"] == "GET"
        assert sent["url"] == "https://dash.example.com/dashboard/posts"
        assert sent["params"] == {"page": 3}
        assert sent["headers"] == {"Authorization": "Bearer secret-token"}
        assert data == {"data": [], "current_page": 3}
        assert session.headers["Accept"] == "application/json"

    def test_no_token_no_auth_header(self, session):
        client = DashboardClient(session=session)
        client.get_coins()
        assert _sent(session)["headers"] == {}

    def test_get_coins_unwraps_data(self, client, session):
        session.request.return_value = _response(payload={"data": [{"id": 1, "name": "Bitcoin"}]})
        assert client.get_coins() == [{"id": 1, "name": "Bitcoin"}]

    def test_update_status_patches_json(self, client, session):
        client.update_status("7", "published")
        sent = _sent(session)
        assert sent["method"] == "PATCH"
        assert sent["url"].endswith("/posts/7/status")
        assert sent["json"] == {"status": "published"}

    def test_delete_no_content(self, client, session):
        session.request.return_value = _response(status_code=204)
        assert client.delete_post("7") is None
        assert _sent(session)["method"] == "DELETE"

    def test_get_post_unwraps_data(self, client, session):
        session.request.return_value = _response(payload={"data": {"id": 7, "title": "BTC"}})

        assert client.get_post("7") == {"id": 7, "title": "BTC"}
        assert _sent(session)["url"] == "https://dash.example.com/dashboard/posts/7"

    def test_get_post_accepts_bare_record(self, client, session):
        session.request.return_value = _response(payload={"id": 7, "title": "BTC"})
        assert client.get_post("7") == {"id": 7, "title": "BTC"}

    def test_get_coin_posts_hits_platform_route(self, client, session):
        session.request.return_value = _response(payload={"data": [], "total": 0, "per_page": 10})

        data = client.get_coin_posts("bitcoin", page=2)

        sent = _sent(session)
        assert sent["method"] == "GET"
        assert sent["url"] == "https://dash.example.com/dashboard/platform/coins/bitcoin/posts"
        assert sent["params"] == {"page": 2}
        assert data == {"data": [], "total": 0, "per_page": 10}


class TestMultipart:
    def test_create_post_layout(self, client, session, stager, image_file):
        """
        Test the create request carries content JSON and numbered uploads.
        """
        # ARRANGE
        blocks = (TextBlock("intro"), ImageBlock(), ImageBlock(url="https://cdn.example.com/kept.png"))
        blocks = select_image(blocks, 1, image_file, stager)

        # ACT
        client.create_post(title="Post", coin_id=None, status="draft", blocks=blocks)

        # ASSERT
        sent = _sent(session)
        assert sent["method"] == "POST"
        assert sent["url"].endswith("/posts")
        assert sent["data"]["title"] == "Post"
        assert sent["data"]["coin_id"] == ""
        assert sent["data"]["status"] == "draft"
        assert json.loads(sent["data"]["content"]) == [
            {"type": "text", "content": "intro"},
            {"type": "image", "index": 0},
            {"type": "image", "url": "https://cdn.example.com/kept.png"},
        ]
        assert sent["files"] == [("images[0]", ("chart.png", image_file.data, "image/png"))]
        assert "_method" not in sent["data"]

    def test_update_post_overrides_method(self, client, session):
        client.update_post("9", title="T", coin_id="1", status="published", blocks=())
        sent = _sent(session)
        assert sent["method"] == "POST"
        assert sent["url"].endswith("/posts/9")
        assert sent["data"]["_method"] == "PUT"
        assert sent["files"] == []


class TestErrors:
    def test_unauthorized_runs_hook_and_raises(self, session):
        # ARRANGE
        on_unauthorized = Mock()
        client = DashboardClient(session=session, token_provider=lambda: "t", on_unauthorized=on_unauthorized)
        session.request.return_value = _response(status_code=401, payload={"message": "Unauthenticated."})

        # ACT / ASSERT
        with pytest.raises(AuthExpiredError) as exc_info:
            client.get_posts()
        on_unauthorized.assert_called_once_with()
        assert exc_info.value.status_code == 401

    def test_server_error_keeps_payload(self, client, session):
        session.request.return_value = _response(status_code=422, payload={"error": "Title taken"})

        with pytest.raises(APIError) as exc_info:
            client.create_post(title="T", coin_id="1", status="draft", blocks=())

        assert exc_info.value.status_code == 422
        assert exc_info.value.server_message == "Title taken"

    def test_html_error_has_no_server_message(self, client, session):
        session.request.return_value = _response(status_code=500, text="<html>oops</html>")
        with pytest.raises(APIError) as exc_info:
            client.get_posts()
        assert exc_info.value.server_message is None

    def test_transport_error_becomes_api_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("offline")
        with pytest.raises(APIError):
            client.get_posts()

    def test_invalid_json_raises(self, client, session):
        session.request.return_value = _response(text="not json at all")
        with pytest.raises(APIError):
            client.get_post("7")
