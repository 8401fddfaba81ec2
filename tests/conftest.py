from __future__ import annotations

import itertools
import json
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlsplit

import pytest
import requests

from hrms_portal.api.client import ApiClient
from hrms_portal.api.resources import HrmsApi
from hrms_portal.session.token_store import MemoryTokenStore

API_BASE = "http://api.test/api"


def make_response(status: int, body: Any = None, url: str = API_BASE) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp._content = b"" if body is None else json.dumps(body).encode()
    resp.headers["Content-Type"] = "application/json"
    return resp


@dataclass
class Call:
    method: str
    path: str
    json: Any
    params: Optional[dict]
    headers: dict


@dataclass
class FakeHttp:
    """Stands in for ``requests.Session``: canned answers per (method, path)."""

    headers: dict = field(default_factory=dict)
    cookies: requests.cookies.RequestsCookieJar = field(default_factory=requests.cookies.RequestsCookieJar)
    routes: dict = field(default_factory=dict)
    calls: list = field(default_factory=list)

    def on(self, method: str, path: str, status: int = 200, body: Any = None, error: Exception | None = None):
        self.routes[(method.upper(), path)] = (status, body, error)
        return self

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = urlsplit(url).path.removeprefix("/api")
        self.calls.append(Call(method, path, json, params, dict(headers or {})))
        route = self.routes.get((method, path))
        if route is None:
            return make_response(404, {"error": "Not found"}, url)
        status, body, error = route
        if error is not None:
            raise error
        return make_response(status, body, url)

    def paths(self) -> list[str]:
        return [f"{c.method} {c.path}" for c in self.calls]


class _Handle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Simulated clock. ``advance`` fires due timers in order.

    With ``defer=True`` the fetch runs at dispatch but its outcome waits in
    ``pending`` until ``complete`` is called, which lets tests reorder responses.
    """

    def __init__(self, defer: bool = False):
        self.now = 0.0
        self.defer = defer
        self.pending: list = []
        self._timers: list = []
        self._order = itertools.count()

    def call_later(self, delay, callback):
        handle = _Handle()
        self._timers.append((self.now + delay, next(self._order), callback, handle))
        return handle

    def dispatch(self, fetch, done):
        if self.defer:
            self.pending.append((done, *self._call(fetch)))
        else:
            done(*self._call(fetch))

    def complete(self, index: int = 0):
        done, result, error = self.pending.pop(index)
        done(result, error)

    def advance(self, seconds: float):
        target = self.now + seconds
        while True:
            due = sorted((t for t in self._timers if not t[3].cancelled and t[0] <= target), key=lambda t: (t[0], t[1]))
            if not due:
                break
            timer = due[0]
            self._timers.remove(timer)
            self.now = timer[0]
            timer[2]()
        self.now = target

    @property
    def active_timers(self) -> int:
        return sum(1 for t in self._timers if not t[3].cancelled)

    @staticmethod
    def _call(fetch):
        try:
            return fetch(), None
        except Exception as e:
            return None, e


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def tokens() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def client(http, tokens) -> ApiClient:
    return ApiClient(API_BASE, tokens, http=http)


@pytest.fixture
def api(client) -> HrmsApi:
    return HrmsApi.bind(client)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def deferred_scheduler() -> ManualScheduler:
    return ManualScheduler(defer=True)


@pytest.fixture
def users() -> dict:
    return {
        role: {"id": f"u-{role}", "name": f"{role.title()} User", "role": role, "email": f"{role}@corp.test"}
        for role in ("admin", "manager", "hr", "employee")
    }
