from __future__ import annotations

from typing import Optional, Protocol

from flask import has_request_context, session

from ..core.constants import TOKEN_STORAGE_KEY


class TokenStore(Protocol):
    """Persisted bearer token: the only durable client-side state.

    Absence of a token means logged out. ``clear`` must be idempotent since the
    401 handler and a logout may both clear it.
    """

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStore:
    """Process-local token, used by the CLI and in tests."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FlaskSessionTokenStore:
    """Token kept in the signed Flask session cookie under a fixed key."""

    def __init__(self, key: str = TOKEN_STORAGE_KEY):
        self._key = key

    def get(self) -> Optional[str]:
        if not has_request_context():
            return None
        return session.get(self._key)

    def set(self, token: str) -> None:
        # Survives browser restarts until logout or a 401 clears it.
        session.permanent = True
        session[self._key] = token

    def clear(self) -> None:
        if has_request_context():
            session.pop(self._key, None)
