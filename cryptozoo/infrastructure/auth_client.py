"""Adapter for the hosted authentication service (GoTrue REST API).

Only account and token handling lives here; user profiles and roles are
rows in the record store's ``users`` table.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from cryptozoo.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    user: Dict[str, Any] = field(default_factory=dict)


class AuthClient:
    """Thin client over the auth service's sign-up, token and user endpoints."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0,
                 client: httpx.Client | None = None) -> None:
        self._base_url = f"{base_url.rstrip('/')}/auth/v1"
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)

    def _headers(self, access_token: str | None = None) -> Dict[str, str]:
        headers = {"apikey": self._api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _request(self, method: str, path: str, access_token: str | None = None,
                 **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(
                method, f"{self._base_url}{path}", headers=self._headers(access_token), **kwargs
            )
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable: {e}")
            raise AuthenticationError("Authentication service unavailable") from e

        if response.status_code >= 400:
            raise AuthenticationError(self._error_message(response))
        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"Authentication failed ({response.status_code})"
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
        return f"Authentication failed ({response.status_code})"

    @staticmethod
    def _session(body: Dict[str, Any]) -> AuthSession:
        if not body.get("access_token"):
            raise AuthenticationError("Authentication service returned no session")
        return AuthSession(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            user=body.get("user") or {},
        )

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        """Register an account; returns the user claims (id, email, created_at)."""
        body = self._request("POST", "/signup", json={"email": email, "password": password})
        # With email confirmation enabled the service answers with the bare user
        user = body.get("user") or body
        if not user.get("id"):
            raise AuthenticationError("Authentication service returned no user")
        return user

    def sign_in(self, email: str, password: str) -> AuthSession:
        body = self._request(
            "POST", "/token", params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return self._session(body)

    def refresh(self, refresh_token: str) -> AuthSession:
        body = self._request(
            "POST", "/token", params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return self._session(body)

    def get_user(self, access_token: str) -> Dict[str, Any]:
        """Exchange an access token for the user claims it was issued to."""
        user = self._request("GET", "/user", access_token=access_token)
        if not user.get("id"):
            raise AuthenticationError("Invalid session")
        return user

    def sign_out(self, access_token: str) -> None:
        self._request("POST", "/logout", access_token=access_token)

    def close(self) -> None:
        """Release the underlying connection pool."""
        self._client.close()
