from __future__ import annotations

import logging
from dataclasses import dataclass
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT
from ..core.exceptions import ApiError, TransportError
from ..core.signals import session_invalidated
from ..session.token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    data: Any
    status: int


def _clean_params(params: Optional[dict]) -> Optional[dict]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _decode(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


class ApiClient:
    """Uniform dispatch to the HRMS REST API.

    Every request carries the persisted bearer token (when there is one). A 401
    answer clears the token and sends ``session_invalidated``; the adapter never
    navigates by itself, whoever renders the UI subscribes to the signal.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        *,
        timeout: float = DEFAULT_API_TIMEOUT,
        http: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._tokens = token_store
        self._timeout = float(timeout)
        self._http = http or requests.Session()
        self._http.headers.update({"Content-Type": "application/json"})
        # One pool serves every signed-in user; the bearer header is the only credential.
        self._http.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def get(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("POST", path, json=json, params=params)

    def put(self, path: str, json: Any = None, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("PUT", path, json=json, params=params)

    def delete(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("DELETE", path, params=params)

    def request(self, method: str, path: str, *, json: Any = None, params: Optional[dict] = None) -> ApiResponse:
        try:
            resp = self._http.request(
                method,
                self._url(path),
                json=json,
                params=_clean_params(params),
                headers=self._auth_headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed without a response: %s", method, path, e)
            raise TransportError() from e

        data = _decode(resp)
        if resp.status_code == 401:
            self._invalidate(path)
        if not resp.ok:
            raise ApiError(resp.status_code, data)
        return ApiResponse(data=data, status=resp.status_code)

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _auth_headers(self) -> dict:
        # Read per request: the token may be cleared or replaced between calls.
        token = self._tokens.get()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _invalidate(self, path: str) -> None:
        self._tokens.clear()
        logger.info("Session invalidated by 401 on %s", path)
        session_invalidated.send(self, path=path)
