"""
HTTP plumbing for the dashboard API.

This module is UI-agnostic and DTO-agnostic: it returns plain dict/list
payloads. DTO creation belongs to managers.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.quotum.cloud/dashboard"
DEFAULT_TIMEOUT = 30

API_HEADERS = {
    "Accept": "application/json",
    "X-Requested-With": "XMLHttpRequest",
}


class APIError(RuntimeError):
    """Raised for dashboard HTTP / parsing errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)

    @property
    def server_message(self) -> Optional[str]:
        """``error`` or ``message`` field of a JSON error body, if any."""
        if isinstance(self.payload, dict):
            for key in ("error", "message"):
                value = self.payload.get(key)
                if isinstance(value, str) and value:
                    return value
        return None


class AuthExpiredError(APIError):
    """The bearer token was rejected (HTTP 401)."""


MultipartFiles = List[Tuple[str, Tuple[str, bytes, Optional[str]]]]


class BaseAPIClient:
    """
    Session, auth header and error normalization shared by API clients.

    ``token_provider`` returns the current bearer token (or None).
    ``on_unauthorized`` runs when the server answers 401, before
    AuthExpiredError is raised; the app uses it to drop the stored token.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: Optional[requests.Session] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(API_HEADERS)
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def _auth_headers(self) -> Dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[MultipartFiles] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"API Request: {method} {url}")
        if params:
            logger.debug(f"Request params: {params}")

        try:
            resp = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise APIError(f"dashboard request failed: {e}") from e

        if resp.status_code == 401:
            logger.warning("Dashboard rejected the API token (401)")
            if self._on_unauthorized:
                self._on_unauthorized()
            raise AuthExpiredError("session expired, please log in again", 401, self._safe_json(resp))

        if not resp.ok:
            payload = self._safe_json(resp)
            raise APIError(
                f"dashboard API error {resp.status_code}: {resp.text[:200]}",
                resp.status_code,
                payload,
            )

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise APIError(f"dashboard returned invalid JSON: {e}", resp.status_code) from e

    @staticmethod
    def _safe_json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return None

    def close(self) -> None:
        self.session.close()
