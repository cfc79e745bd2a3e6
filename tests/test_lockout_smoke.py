from __future__ import annotations

import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import lockout_smoke
from login_guard import create_app
from login_guard.config import TestingConfig
from login_guard.extensions import db


class ClientResponse:
    """Adapts a Flask test response to the parts of requests.Response used."""

    def __init__(self, resp) -> None:
        self.status_code = resp.status_code
        self.headers = resp.headers
        self.text = resp.get_data(as_text=True)
        self._json = resp.get_json(silent=True)

    def json(self):
        if self._json is None:
            raise requests.JSONDecodeError("Expecting value", self.text, 0)
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


class ClientSession:
    def __init__(self, client) -> None:
        self.client = client

    def post(self, url, json=None):
        return ClientResponse(self.client.post(url, json=json))

    def get(self, url, params=None):
        return ClientResponse(self.client.get(url, query_string=params))


class HtmlErrorSession:
    """Every request answers with an HTML error page."""

    def __init__(self, status_code: int, signup_status: int = 201) -> None:
        self.status_code = status_code
        self.signup_status = signup_status

    def _page(self, status_code):
        resp = requests.Response()
        resp.status_code = status_code
        resp._content = b"<html><body>Internal Server Error</body></html>"
        resp.headers["Content-Type"] = "text/html"
        return resp

    def post(self, url, json=None):
        if url.endswith("/auth/signup"):
            return self._page(self.signup_status)
        return self._page(self.status_code)

    def get(self, url, params=None):
        return self._page(self.status_code)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def test_run_smoke_check_sees_lockout(app, monkeypatch, capsys):
    client = app.test_client()
    monkeypatch.setattr(lockout_smoke.requests, "Session", lambda: ClientSession(client))

    assert lockout_smoke.run_smoke_check("", attempts=6)
    out = capsys.readouterr().out
    assert "attempt 5: 429" in out
    assert "[PASS] Locked after attempt 5" in out


def test_run_smoke_check_reports_no_lockout(app, monkeypatch, capsys):
    client = app.test_client()
    monkeypatch.setattr(lockout_smoke.requests, "Session", lambda: ClientSession(client))

    assert not lockout_smoke.run_smoke_check("", attempts=3)
    assert "[FAIL] No lockout after 3" in capsys.readouterr().err


def test_run_smoke_check_fails_cleanly_on_html_error(monkeypatch, capsys):
    monkeypatch.setattr(lockout_smoke.requests, "Session", lambda: HtmlErrorSession(500))

    assert not lockout_smoke.run_smoke_check("http://server", attempts=6)
    assert "[FAIL] Unexpected status 500 on attempt 1." in capsys.readouterr().err


def test_main_reports_non_json_body(monkeypatch, capsys):
    monkeypatch.setattr(lockout_smoke.requests, "Session", lambda: HtmlErrorSession(401))
    monkeypatch.setattr(sys, "argv", ["lockout_smoke.py", "--base-url", "http://server"])

    assert lockout_smoke.main() == 1
    assert "[FAIL]" in capsys.readouterr().err


def test_main_reports_failed_signup(monkeypatch, capsys):
    monkeypatch.setattr(
        lockout_smoke.requests, "Session", lambda: HtmlErrorSession(401, signup_status=500)
    )
    monkeypatch.setattr(sys, "argv", ["lockout_smoke.py", "--base-url", "http://server"])

    assert lockout_smoke.main() == 1
    assert "Signup failed" in capsys.readouterr().err
