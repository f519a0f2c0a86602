"""Tests for the /screenshotone routes.

The ScreenshotOne client dependency is overridden with an in-memory fake so
the tests run without network access or credentials.
"""

import logging
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.screenshotone import get_client
from app.services.dispatcher import RawResponse
from app.services.errors import NodeApiError

client = TestClient(app)

_PNG = RawResponse(200, {"content-type": "image/png"}, b"\x89PNG")
_TEXT = RawResponse(200, {"content-type": "text/plain"}, b"hello")


class FakeClient:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    async def send(self, request):
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counter before every test."""
    app.state.limiter._storage.reset()
    yield
    app.dependency_overrides.clear()


def _use(fake: FakeClient) -> FakeClient:
    app.dependency_overrides[get_client] = lambda: fake
    return fake


def _post(items, **kwargs):
    return client.post("/screenshotone/execute", json={"items": items, **kwargs})


# ---------------------------------------------------------------------------
# POST /screenshotone/execute
# ---------------------------------------------------------------------------

class TestExecute:
    def test_returns_paired_output_items(self):
        fake = _use(FakeClient(_PNG, _TEXT))
        resp = _post(
            [
                {"operation": "screenshot", "url": "https://example.com", "format": "png"},
                {"operation": "pdf", "source": "html", "html": "<p>Hi</p>"},
            ]
        )

        assert resp.status_code == 200
        items = resp.json()["items"]
        assert items[0]["pairedItem"] == {"item": 0}
        assert items[0]["json"]["type"] == "base64"
        assert items[1]["json"] == {"content_type": "text/plain", "type": "text", "response": "hello"}
        assert fake.requests[1].url.endswith("/take")
        assert fake.requests[1].params["format"] == "pdf"

    def test_short_video_hits_animate(self):
        fake = _use(FakeClient(_PNG))
        resp = _post(
            [{"operation": "short_video", "url": "https://example.com", "duration": 5, "scenario": "scroll"}]
        )

        assert resp.status_code == 200
        assert fake.requests[0].url.endswith("/animate")
        assert fake.requests[0].params["scenario"] == "scroll"

    def test_continue_on_fail_keeps_every_item(self):
        _use(FakeClient(_PNG, NodeApiError("Bad request"), _TEXT))
        items = [{"operation": "screenshot", "url": "https://example.com"}] * 3

        resp = _post(items, continue_on_fail=True)

        assert resp.status_code == 200
        out = resp.json()["items"]
        assert len(out) == 3
        assert out[1] == {"json": {"error": "Bad request"}, "pairedItem": {"item": 1}}
        assert out[2]["pairedItem"] == {"item": 2}

    def test_user_error_returns_400_with_item_index(self):
        fake = _use(FakeClient())
        resp = _post([{"operation": "screenshot", "source": "xml", "url": "https://example.com"}])

        assert resp.status_code == 400
        assert resp.json()["detail"] == {
            "message": 'The source "xml" is not supported',
            "item_index": 0,
        }
        assert fake.requests == []

    def test_user_error_abort_is_logged_at_error(self, caplog):
        _use(FakeClient())
        with caplog.at_level(logging.ERROR, logger="app.routers.screenshotone"):
            resp = _post([{"operation": "thumbnail", "url": "https://example.com"}])

        assert resp.status_code == 400
        records = [r for r in caplog.records if r.name == "app.routers.screenshotone"]
        assert records and all(r.levelno == logging.ERROR for r in records)

    def test_remote_client_error_status_is_forwarded(self):
        _use(FakeClient(_PNG, NodeApiError("Access key is invalid.", status_code=401)))
        items = [{"operation": "screenshot", "url": "https://example.com"}] * 2

        resp = _post(items)

        assert resp.status_code == 401
        assert resp.json()["detail"] == {"message": "Access key is invalid.", "item_index": 1}

    def test_transport_error_returns_502(self):
        _use(FakeClient(RuntimeError("socket closed")))
        resp = _post([{"operation": "screenshot", "url": "https://example.com"}])

        assert resp.status_code == 502
        assert resp.json()["detail"]["message"] == "socket closed"

    def test_empty_batch_rejected(self):
        _use(FakeClient())
        assert _post([]).status_code == 422

    def test_missing_credentials_returns_503(self):
        with patch("app.routers.screenshotone.settings.SCREENSHOTONE_ACCESS_KEY", ""):
            resp = _post([{"operation": "screenshot", "url": "https://example.com"}])

        assert resp.status_code == 503


# ---------------------------------------------------------------------------
# GET /screenshotone/operations
# ---------------------------------------------------------------------------

class TestOperations:
    def test_lists_every_operation(self):
        resp = client.get("/screenshotone/operations")

        assert resp.status_code == 200
        by_name = {op["name"]: op for op in resp.json()}
        assert set(by_name) == {"screenshot", "full_page", "pdf", "scrolling_screenshot", "short_video"}
        assert by_name["short_video"]["endpoint"] == "animate"
        assert by_name["pdf"]["endpoint"] == "take"
        assert "duration" in by_name["scrolling_screenshot"]["options"]


def test_health_check():
    assert client.get("/").status_code == 200
