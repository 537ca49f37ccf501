"""Integration tests for the member administration API."""

import uuid

import pytest

from memberdesk.infrastructure.persistence.models import MemberModel


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(client, member_token):
    response = await client.post("/api/v1/members/MB0001/unlock", headers=_bearer(member_token))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_member_returns_404(client, admin_token):
    response = await client.post(
        "/api/v1/members/ZZ9999/reset-password", headers=_bearer(admin_token)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reset_password_forces_change_on_next_login(client, admin_token, make_linked_member):
    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)

    reset = await client.post(
        "/api/v1/members/ab1234/reset-password", headers=_bearer(admin_token)
    )
    assert reset.status_code == 200
    temporary = reset.json()["temporary_password"]
    assert temporary.startswith("AB1234")
    assert reset.json()["member"]["password_reset_required"] is True

    login = await client.post(
        "/api/v1/auth/member-login",
        json={"member_number": "AB1234", "password": temporary},
    )
    assert login.status_code == 200
    assert login.json()["password_change_required"] is True

    # Temporary passwords are replaced without re-entering them.
    change = await client.post(
        "/api/v1/auth/change-password",
        json={"new_password": "Better2Pass", "confirm_password": "Better2Pass"},
        headers=_bearer(login.json()["session"]["access_token"]),
    )
    assert change.status_code == 200


@pytest.mark.asyncio
async def test_reset_password_before_first_login_conflicts(client, admin_token, db_session):
    db_session.add(
        MemberModel(
            id=str(uuid.uuid4()),
            member_number="NS0001",
            email="ns0001@temp.memberdesk.local",
            full_name="NS0001",
        )
    )
    await db_session.commit()

    response = await client.post(
        "/api/v1/members/NS0001/reset-password", headers=_bearer(admin_token)
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_activate_member_with_collector(client, admin_token, db_session):
    member = MemberModel(
        id=str(uuid.uuid4()),
        member_number="PD0001",
        email="pd0001@temp.memberdesk.local",
        full_name="Pending Member",
        status="pending",
    )
    db_session.add(member)
    await db_session.commit()
    created = await client.post(
        "/api/v1/collectors",
        json={"name": "North", "prefix": "NO", "number": "01"},
        headers=_bearer(admin_token),
    )
    collector_id = created.json()["id"]

    response = await client.post(
        f"/api/v1/members/{member.id}/activate",
        json={"collector_id": collector_id},
        headers=_bearer(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["member"]["status"] == "active"
    assert response.json()["member"]["collector_id"] == collector_id

    audit = await client.get(
        "/api/v1/audit-logs",
        params={"table_name": "members", "record_id": member.id},
        headers=_bearer(admin_token),
    )
    assert audit.json()["items"][0]["new_values"]["status"] == "active"


@pytest.mark.asyncio
async def test_activate_with_unknown_collector_returns_404(client, admin_token, db_session):
    member = MemberModel(
        id=str(uuid.uuid4()),
        member_number="PD0002",
        email="pd0002@temp.memberdesk.local",
        full_name="Pending Member",
        status="pending",
    )
    db_session.add(member)
    await db_session.commit()

    response = await client.post(
        f"/api/v1/members/{member.id}/activate",
        json={"collector_id": "no-such-collector"},
        headers=_bearer(admin_token),
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_activate_requires_admin(client, member_token):
    response = await client.post(
        "/api/v1/members/some-id/activate",
        json={"collector_id": "c-1"},
        headers=_bearer(member_token),
    )

    assert response.status_code == 403
