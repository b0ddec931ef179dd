"""
HTTP client for the portal API.

The signed-in state lives in an explicit ``ClientSession`` handed to
``PortalClient``; nothing is kept in module globals.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class PortalAPIError(Exception):
    """Error response from the portal API."""

    def __init__(self, status_code: int, error: str, message: str):
        self.status_code = status_code
        self.error = error
        self.message = message
        super().__init__(f"{status_code} {error}: {message}")


@dataclass
class ClientSession:
    """Token and user of the signed-in account, if any."""
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = field(default=None)

    @property
    def claims(self) -> Dict[str, Any]:
        if not self.token:
            return {}
        try:
            return jwt.get_unverified_claims(self.token)
        except JWTError:
            return {}

    @property
    def expires_at(self) -> Optional[datetime]:
        exp = self.claims.get("exp")
        return datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return True
        return (now or datetime.now(timezone.utc)) >= expires_at

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and not self.is_expired()

    def has_role(self, role: str) -> bool:
        return bool(self.user) and self.user.get("role") == role

    def start(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None


class PortalClient:
    """
    Thin API client over an injected ``httpx.Client``.

    Args:
        http: Client whose ``base_url`` points at the API server
        session: Session holding the bearer token
    """

    def __init__(self, http: httpx.Client, session: Optional[ClientSession] = None):
        self.http = http
        self.session = session if session is not None else ClientSession()

    def _request(self, method: str, path: str, authenticated: bool = False, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if authenticated:
            if not self.session.is_authenticated:
                self.session.clear()
                raise PortalAPIError(401, "invalid_token", "Not signed in or session expired")
            headers["Authorization"] = f"Bearer {self.session.token}"

        response = self.http.request(method, path, headers=headers, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            error = body.get("error", "http_error")
            if error == "invalid_token":
                logger.info("Server rejected the session token; clearing session")
                self.session.clear()
            raise PortalAPIError(response.status_code, error, body.get("message", response.reason_phrase))
        return body

    def register(self, **payload: Any) -> Dict[str, Any]:
        """Register; only an approved account (patient) is signed in."""
        body = self._request("POST", "/api/auth/register", json=payload)
        data = body["data"]
        if data.get("token"):
            self.session.start(data["token"], data["user"])
        return body

    def login(self, phone: str, password: str, role: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/login", json={"phone": phone, "password": password, "role": role})
        self.session.start(body["data"]["token"], body["data"]["user"])
        return body["data"]["user"]

    def admin_login(self, username: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/admin/login", json={"username": username, "password": password})
        self.session.start(body["data"]["token"], body["data"]["user"])
        return body["data"]["user"]

    def logout(self) -> None:
        self.session.clear()

    def get_profile(self) -> Dict[str, Any]:
        user = self._request("GET", "/api/auth/profile", authenticated=True)["data"]["user"]
        self.session.user = user
        return user

    def update_profile(self, **fields: Any) -> Dict[str, Any]:
        user = self._request("PUT", "/api/auth/profile", authenticated=True, json=fields)["data"]["user"]
        self.session.user = user
        return user

    def pending_approvals(self):
        return self._request("GET", "/api/admin/approvals/pending", authenticated=True)["data"]["users"]

    def approve(self, user_id: str) -> Dict[str, Any]:
        return self._request("PUT", f"/api/admin/approvals/{user_id}/approve", authenticated=True)["data"]["user"]

    def reject(self, user_id: str) -> Dict[str, Any]:
        return self._request("PUT", f"/api/admin/approvals/{user_id}/reject", authenticated=True)["data"]["user"]
