"""HTTP client for the RepairConnect API, used by the admin console.

Holds the bearer token the way the web frontend does: stored after login,
sent on every admin request, and dropped as soon as the server answers 401.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import jwt

# Suspension lengths (hours) offered to admins.
SUSPEND_DURATION_OPTIONS = (6, 12, 24, 72, 168)

LANDING_PATHS = {
    "admin": "/admin/dashboard",
    "provider": "/provider/dashboard",
}
DEFAULT_LANDING_PATH = "/customer/dashboard"


class ApiError(Exception):
    """Raised when the API answers with an error; message is the server's `error` field."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SessionExpiredError(ApiError):
    """Raised on any 401 from an authenticated call; the stored token has been cleared."""


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] if resp.text else fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def read_token_claims(token: str) -> dict[str, Any]:
    """Decode token claims without verifying the signature (client-side routing only)."""
    return jwt.decode(token, options={"verify_signature": False})


def landing_path_for(token: str) -> str:
    """Where to go after login, by the role carried in the token."""
    role = read_token_claims(token).get("role")
    return LANDING_PATHS.get(role, DEFAULT_LANDING_PATH)


@dataclass
class UserTable:
    """Local copy of the admin user list, patched in place after successful actions."""

    rows: list[dict[str, Any]] = field(default_factory=list)

    def apply(self, updated: dict[str, Any]) -> None:
        for i, row in enumerate(self.rows):
            if row.get("id") == updated.get("id"):
                self.rows[i] = {**row, **updated}
                return
        self.rows.append(updated)

    def remove(self, user_id: int) -> None:
        self.rows = [r for r in self.rows if r.get("id") != user_id]

    def get(self, user_id: int) -> dict[str, Any] | None:
        return next((r for r in self.rows if r.get("id") == user_id), None)


class RepairConnectClient:
    """Synchronous client over httpx. Pass `transport` to run against a mock or in-process app."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.token = token
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> RepairConnectClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if authenticated and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self._http.request(method, path, json=json, headers=headers)
        if authenticated and resp.status_code == 401:
            self.token = None
            raise SessionExpiredError(_error_message(resp, "Session expired"), 401)
        if resp.status_code >= 400:
            raise ApiError(
                _error_message(resp, f"Request failed ({resp.status_code})"),
                resp.status_code,
            )
        return resp

    def login(self, email: str, password: str) -> str:
        """
        Try the admin login first, then customer/provider login. Stores the token
        and returns the landing path for its role.
        """
        creds = {"email": email, "password": password}
        resp = self._http.post("/auth/admin/login", json=creds)
        if resp.status_code != 200:
            resp = self._http.post("/auth/login", json=creds)
        if resp.status_code != 200:
            raise ApiError(_error_message(resp, "Login failed"), resp.status_code)
        self.token = resp.json()["token"]
        return landing_path_for(self.token)

    def logout(self) -> None:
        self.token = None

    def register(self, name: str, email: str, password: str, role: str = "customer") -> dict[str, Any]:
        resp = self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
            authenticated=False,
        )
        return resp.json()["user"]

    def summary(self) -> dict[str, Any]:
        return self._request("GET", "/admin/summary").json()

    def list_users(self) -> list[dict[str, Any]]:
        return self._request("GET", "/admin/users").json()

    def load_table(self) -> UserTable:
        return UserTable(rows=self.list_users())

    def delete_user(self, user_id: int) -> int:
        return self._request("DELETE", f"/admin/users/{user_id}").json()["id"]

    def suspend_user(self, user_id: int, hours: int = 24) -> dict[str, Any]:
        if hours not in SUSPEND_DURATION_OPTIONS:
            raise ValueError(
                f"duration must be one of {', '.join(str(h) for h in SUSPEND_DURATION_OPTIONS)} hours"
            )
        return self._request(
            "POST", f"/admin/users/{user_id}/suspend", json={"duration": hours}
        ).json()

    def ban_user(self, user_id: int) -> dict[str, Any]:
        return self._request("POST", f"/admin/users/{user_id}/ban").json()

    def activate_user(self, user_id: int) -> dict[str, Any]:
        return self._request("POST", f"/admin/users/{user_id}/activate").json()
