from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from .api.client import ApiClient
from .api.resources import HrmsApi
from .core.constants import CLOCK_TICK_SECONDS, DEFAULT_API_TIMEOUT, LIVE_POLL_SECONDS
from .routing.router import Router
from .session.service import SessionStore
from .session.token_store import FlaskSessionTokenStore, TokenStore


@dataclass(frozen=True)
class Container:
    tokens: TokenStore
    client: ApiClient
    api: HrmsApi
    router: Router

    live_poll_seconds: float = LIVE_POLL_SECONDS
    clock_tick_seconds: float = CLOCK_TICK_SECONDS

    def session_store(self) -> SessionStore:
        """A fresh store per application load; it shares the persisted token."""
        return SessionStore(self.api.auth, self.tokens)


def build_container(
    *,
    api_base_url: str,
    api_timeout: float = DEFAULT_API_TIMEOUT,
    tokens: Optional[TokenStore] = None,
    http: Optional[requests.Session] = None,
    live_poll_seconds: float = LIVE_POLL_SECONDS,
    clock_tick_seconds: float = CLOCK_TICK_SECONDS,
) -> Container:
    tokens = tokens or FlaskSessionTokenStore()
    client = ApiClient(api_base_url, tokens, timeout=api_timeout, http=http)

    return Container(
        tokens=tokens,
        client=client,
        api=HrmsApi.bind(client),
        router=Router(),
        live_poll_seconds=float(live_poll_seconds),
        clock_tick_seconds=float(clock_tick_seconds),
    )
