from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..api.resources import AuthAPI
from ..common.validators import require_non_empty
from ..core.constants import LOGIN_FAILED_MESSAGE
from ..core.exceptions import ApiError, AuthenticationError, TransportError
from .model import Session, UserSummary
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class SessionStore:
    """Single source of truth for "who is logged in".

    Use case layer only: none of the operations navigate, the caller decides
    where to go next. The persisted token is the only durable side effect.
    """

    def __init__(self, auth: AuthAPI, tokens: TokenStore):
        self._auth = auth
        self._tokens = tokens
        self._bootstrapped = False
        self.state = Session(token=tokens.get(), loading=True)

    @property
    def user(self) -> Optional[UserSummary]:
        return self.state.user

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    def bootstrap(self) -> Optional[UserSummary]:
        """Resolve the persisted token into a user, once per store."""
        if self._bootstrapped:
            return self.state.user
        self._bootstrapped = True

        token = self._tokens.get()
        self.state.token = token
        if not token:
            self.state.user = None
            self.state.loading = False
            return None

        self.state.loading = True
        try:
            resp = self._auth.me()
            self.state.user = UserSummary.from_api(_as_mapping(resp.data))
        except (ApiError, TransportError, ValueError) as e:
            logger.info("Stored token rejected during bootstrap: %s", e)
            self._tokens.clear()
            self.state.token = None
            self.state.user = None
        finally:
            self.state.loading = False
        return self.state.user

    def login(self, email: str, password: str) -> UserSummary:
        email = require_non_empty(email, "Email")
        require_non_empty(password, "Password")

        self.state.error = None
        self.state.loading = True
        try:
            resp = self._auth.login(email, password)
            data = _as_mapping(resp.data)
            token = data.get("token")
            if not token:
                raise ValueError("login response carries no token")
            user = UserSummary.from_api(_as_mapping(data.get("user")))
        except (ApiError, TransportError) as e:
            self.state.error = e.message_or(LOGIN_FAILED_MESSAGE)
            raise AuthenticationError(self.state.error) from e
        except ValueError as e:
            logger.warning("Malformed login response: %s", e)
            self.state.error = LOGIN_FAILED_MESSAGE
            raise AuthenticationError(self.state.error) from e
        finally:
            self.state.loading = False

        self._tokens.set(token)
        self.state.token = token
        self.state.user = user
        logger.info("Logged in %s as %s", user.email, user.role)
        return user

    def logout(self) -> None:
        self._tokens.clear()
        self.state.token = None
        self.state.user = None
        self.state.error = None


def _as_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    return data
