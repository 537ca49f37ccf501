"""Client for a hosted GoTrue-compatible identity service.

Endpoints used:

- ``POST /auth/v1/token?grant_type=password``: sign in
- ``POST /auth/v1/signup``: create an identity
- ``PUT /auth/v1/user``: change the signed-in identity's password
- ``PUT /auth/v1/admin/users/{id}``: administrative password reset

The service does not distinguish a missing identity from a wrong password;
both come back as ``Invalid login credentials`` and are reported as a
credential rejection.
"""

from typing import Any

import httpx

from memberdesk.core.config import Settings, get_settings
from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import (
    IdentityAlreadyExistsError,
    IdentityCredentialsRejectedError,
    IdentityProvider,
    IdentityServiceError,
)
from memberdesk.domain.entities import AccountIdentity, AuthSession

logger = get_logger(__name__)

_ALREADY_EXISTS_CODES = {"user_already_exists", "email_exists"}
_REJECTED_CODES = {"invalid_credentials", "invalid_grant"}


def _error_text(response: httpx.Response) -> tuple[str, str]:
    """Extract ``(error_code, message)`` from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return "", response.text or f"HTTP {response.status_code}"
    if not isinstance(body, dict):
        return "", f"HTTP {response.status_code}"
    code = str(body.get("error_code") or body.get("error") or "")
    message = (
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or code
        or f"HTTP {response.status_code}"
    )
    return code, str(message)


class HostedIdentityClient(IdentityProvider):
    """Identity provider backed by a hosted GoTrue-style REST API."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the client.

        Args:
            settings: Application settings. Defaults to the cached settings.
        """
        self.settings = settings or get_settings()
        self.base_url = f"{self.settings.identity_url}/auth/v1"
        self.timeout = self.settings.identity_timeout_seconds

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.settings.identity_api_key,
            "Content-Type": "application/json",
        }
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def sign_in(self, email: str, credential: str) -> AuthSession:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/token",
                    params={"grant_type": "password"},
                    json={"email": email, "password": credential},
                    headers=self._headers(),
                )
            except httpx.HTTPError as e:
                raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        if response.status_code != 200:
            code, message = _error_text(response)
            if response.status_code in (400, 401) and (
                code in _REJECTED_CODES or "invalid login credentials" in message.lower()
            ):
                raise IdentityCredentialsRejectedError(message, status_code=response.status_code)
            raise IdentityServiceError(
                f"Sign-in failed: {message}", status_code=response.status_code
            )

        data = response.json()
        user = data.get("user") or {}
        return AuthSession(
            access_token=data.get("access_token") or "",
            refresh_token=data.get("refresh_token"),
            expires_in=int(data.get("expires_in") or 0),
            user_id=user.get("id") or "",
            email=user.get("email") or email,
            token_type=data.get("token_type") or "bearer",
        )

    async def sign_up(
        self, email: str, credential: str, metadata: dict[str, Any]
    ) -> AccountIdentity:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/signup",
                    json={"email": email, "password": credential, "data": metadata},
                    headers=self._headers(),
                )
            except httpx.HTTPError as e:
                raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        if response.status_code not in (200, 201):
            code, message = _error_text(response)
            if code in _ALREADY_EXISTS_CODES or "already registered" in message.lower():
                raise IdentityAlreadyExistsError(message, status_code=response.status_code)
            raise IdentityServiceError(
                f"Sign-up failed: {message}", status_code=response.status_code
            )

        data = response.json()
        # Auto-confirming instances wrap the user in a session payload.
        user = data.get("user") if isinstance(data.get("user"), dict) else data
        if not user.get("id"):
            raise IdentityServiceError("Sign-up returned no user", status_code=response.status_code)
        logger.info("Hosted identity created", user_id=user["id"], email=email)
        return AccountIdentity(
            id=user["id"],
            email=user.get("email") or email,
            metadata=user.get("user_metadata") or dict(metadata),
        )

    async def update_password(self, session: AuthSession, new_credential: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.put(
                    f"{self.base_url}/user",
                    json={"password": new_credential},
                    headers=self._headers(bearer=session.access_token),
                )
            except httpx.HTTPError as e:
                raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        if response.status_code == 401:
            _, message = _error_text(response)
            raise IdentityCredentialsRejectedError(message, status_code=401)
        if response.status_code != 200:
            _, message = _error_text(response)
            raise IdentityServiceError(
                f"Password update failed: {message}", status_code=response.status_code
            )

    async def update_email(self, session: AuthSession, new_email: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.put(
                    f"{self.base_url}/user",
                    json={"email": new_email},
                    headers=self._headers(bearer=session.access_token),
                )
            except httpx.HTTPError as e:
                raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        if response.status_code == 200:
            return
        code, message = _error_text(response)
        if response.status_code == 401:
            raise IdentityCredentialsRejectedError(message, status_code=401)
        if code in _ALREADY_EXISTS_CODES or "already" in message.lower():
            raise IdentityAlreadyExistsError(message, status_code=response.status_code)
        raise IdentityServiceError(
            f"Email update failed: {message}", status_code=response.status_code
        )

    async def admin_set_password(self, user_id: str, new_credential: str) -> None:
        if not self.settings.identity_service_key:
            raise IdentityServiceError("Service key is not configured for admin operations")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.put(
                    f"{self.base_url}/admin/users/{user_id}",
                    json={"password": new_credential},
                    headers=self._headers(bearer=self.settings.identity_service_key),
                )
            except httpx.HTTPError as e:
                raise IdentityServiceError(f"Identity service unreachable: {e}") from e

        if response.status_code != 200:
            _, message = _error_text(response)
            raise IdentityServiceError(
                f"Admin password update failed: {message}", status_code=response.status_code
            )
