from __future__ import annotations

import json as jsonlib
from typing import Any, Optional

import pytest

from botpanel.sample_data import sample_bot, sample_store
from botpanel.services.api_client import APIClient

BASE_URL = "http://127.0.0.1:5000"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None,
                 text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else jsonlib.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Answers requests from a table keyed by (method, path)."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[dict] = []

    def add(self, method: str, path: str, payload: Any = None,
            status_code: int = 200, text: Optional[str] = None):
        self.routes[(method, path)] = FakeResponse(status_code, payload, text)

    def fail(self, method: str, path: str, error: Exception):
        self.routes[(method, path)] = error

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({
            "method": method,
            "path": path,
            "params": params,
            "json": json,
            "headers": headers,
            "timeout": timeout,
        })
        route = self.routes.get((method, path))
        if route is None:
            return FakeResponse(404, {"detail": "no route"})
        if isinstance(route, Exception):
            raise route
        return route

    @property
    def last(self) -> dict:
        return self.calls[-1]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return APIClient(BASE_URL, "025002", timeout=3, session=session)


@pytest.fixture
def bot():
    return sample_bot()


@pytest.fixture
def store():
    return sample_store()
