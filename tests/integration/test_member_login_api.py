"""Integration tests for the member login API."""

from unittest.mock import AsyncMock

import pytest

from memberdesk.domain.collaborators import IdentityProvider, IdentityServiceError
from memberdesk.domain.exceptions import GENERIC_LOGIN_FAILURE

LOGIN_URL = "/api/v1/auth/member-login"


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_first_login_creates_member(client):
    response = await client.post(LOGIN_URL, json={"member_number": "ab1234", "password": "AB1234"})

    assert response.status_code == 200
    data = response.json()
    assert data["password_change_required"] is True
    assert data["role"] == "member"
    assert data["member"]["member_number"] == "AB1234"
    assert data["member"]["email"] == "ab1234@temp.memberdesk.local"
    assert data["session"]["access_token"]
    assert data["session"]["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_wrong_password_returns_generic_401(client, make_linked_member):
    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)

    response = await client.post(
        LOGIN_URL, json={"member_number": "AB1234", "password": "Wrong1Pass"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == GENERIC_LOGIN_FAILURE


@pytest.mark.asyncio
async def test_malformed_member_number_returns_generic_401(client):
    response = await client.post(LOGIN_URL, json={"member_number": "AB 12", "password": "x"})

    assert response.status_code == 401
    assert response.json()["message"] == GENERIC_LOGIN_FAILURE


@pytest.mark.asyncio
async def test_missing_fields_return_422(client):
    response = await client.post(LOGIN_URL, json={"member_number": "AB1234"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_lockout_then_admin_unlock(client, admin_token, make_linked_member):
    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)
    wrong = {"member_number": "AB1234", "password": "Wrong1Pass"}

    statuses = [(await client.post(LOGIN_URL, json=wrong)).status_code for _ in range(5)]
    assert statuses == [401, 401, 401, 401, 423]

    locked = await client.post(
        LOGIN_URL, json={"member_number": "AB1234", "password": "Chosen1Pass"}
    )
    assert locked.status_code == 423

    unlock = await client.post("/api/v1/members/AB1234/unlock", headers=_bearer(admin_token))
    assert unlock.status_code == 200
    assert unlock.json()["failed_login_attempts"] == 0
    assert unlock.json()["locked_until"] is None

    ok = await client.post(LOGIN_URL, json={"member_number": "AB1234", "password": "Chosen1Pass"})
    assert ok.status_code == 200


@pytest.mark.asyncio
async def test_identity_service_outage_returns_503(client, make_linked_member):
    from memberdesk.infrastructure.api.app import app
    from memberdesk.infrastructure.api.dependencies import get_identity_provider

    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)
    provider = AsyncMock(spec=IdentityProvider)
    provider.sign_in.side_effect = IdentityServiceError("timed out", status_code=504)
    app.dependency_overrides[get_identity_provider] = lambda: provider

    response = await client.post(
        LOGIN_URL, json={"member_number": "AB1234", "password": "Chosen1Pass"}
    )

    assert response.status_code == 503
    assert response.json()["error"] == "Service unavailable"


@pytest.mark.asyncio
async def test_me_returns_role_and_tabs(client, member_token, admin_token):
    member = await client.get("/api/v1/auth/me", headers=_bearer(member_token))
    assert member.status_code == 200
    assert member.json()["role"] == "member"
    assert member.json()["tabs"] == ["dashboard"]
    assert member.json()["password_change_required"] is True

    admin = await client.get("/api/v1/auth/me", headers=_bearer(admin_token))
    assert admin.json()["role"] == "admin"
    assert "audit" in admin.json()["tabs"]
    assert admin.json()["password_change_required"] is False


@pytest.mark.asyncio
async def test_me_requires_valid_token(client, issue_token):
    from memberdesk.infrastructure.persistence.models import AccountIdentityModel

    assert (await client.get("/api/v1/auth/me")).status_code == 401
    assert (await client.get("/api/v1/auth/me", headers=_bearer("garbage"))).status_code == 401

    orphan = AccountIdentityModel(id="orphan-1", email="orphan@example.org",
                                  password_hash="x", user_metadata={})
    response = await client.get("/api/v1/auth/me", headers=_bearer(issue_token(orphan)))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_change_password_flow(client):
    login = await client.post(LOGIN_URL, json={"member_number": "AB1234", "password": "AB1234"})
    token = login.json()["session"]["access_token"]

    weak = await client.post(
        "/api/v1/auth/change-password",
        json={"new_password": "weak", "confirm_password": "weak"},
        headers=_bearer(token),
    )
    assert weak.status_code == 400
    assert weak.json()["details"]

    changed = await client.post(
        "/api/v1/auth/change-password",
        json={"new_password": "Chosen1Pass", "confirm_password": "Chosen1Pass"},
        headers=_bearer(token),
    )
    assert changed.status_code == 200

    old = await client.post(LOGIN_URL, json={"member_number": "AB1234", "password": "AB1234"})
    assert old.status_code == 401

    relogin = await client.post(
        LOGIN_URL, json={"member_number": "AB1234", "password": "Chosen1Pass"}
    )
    assert relogin.status_code == 200
    assert relogin.json()["password_change_required"] is False


@pytest.mark.asyncio
async def test_profile_update_then_login_by_member_number(client):
    first = await client.post(LOGIN_URL, json={"member_number": "AB1234", "password": "AB1234"})
    token = first.json()["session"]["access_token"]

    profile = await client.put(
        "/api/v1/auth/profile",
        json={"full_name": "Jane Doe", "email": "jane.doe@mailbox.org", "phone": "07700 900123"},
        headers=_bearer(token),
    )
    assert profile.status_code == 200
    assert profile.json()["member"]["email"] == "jane.doe@mailbox.org"
    assert profile.json()["member"]["profile_updated"] is True
    assert profile.json()["email_verification_required"] is True

    again = await client.post(LOGIN_URL, json={"member_number": "AB1234", "password": "AB1234"})
    assert again.status_code == 200
    assert again.json()["member"]["email"] == "jane.doe@mailbox.org"
    assert again.json()["member"]["full_name"] == "Jane Doe"


@pytest.mark.asyncio
async def test_profile_update_rejects_taken_email(client, member_token, make_linked_member):
    await make_linked_member("CD5678", "Other1Pass", email="taken@mailbox.org")

    response = await client.put(
        "/api/v1/auth/profile",
        json={"full_name": "Jane Doe", "email": "taken@mailbox.org"},
        headers=_bearer(member_token),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Profile update failed"


@pytest.mark.asyncio
async def test_profile_update_requires_valid_email(client, member_token):
    response = await client.put(
        "/api/v1/auth/profile",
        json={"full_name": "Jane Doe", "email": "not-an-email"},
        headers=_bearer(member_token),
    )

    assert response.status_code == 422
