"""Tests for MemberLoginService against the local identity backend."""

from unittest.mock import AsyncMock

import pytest

from memberdesk.core.config import Settings
from memberdesk.domain.collaborators import RecordStoreError
from memberdesk.domain.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    MemberLookupError,
)
from memberdesk.domain.services.member_login_service import MemberLoginService
from memberdesk.domain.services.role_resolver import MemberRole
from memberdesk.infrastructure.auth import LocalIdentityProvider
from memberdesk.infrastructure.persistence.repositories import (
    AccountIdentityRepository,
    AuditLogRepository,
    MemberRepository,
    UserRoleRepository,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(max_failed_login_attempts=3, lockout_minutes=15)


@pytest.fixture
def service(db_session, settings) -> MemberLoginService:
    return MemberLoginService(db_session, LocalIdentityProvider(db_session), settings)


@pytest.mark.asyncio
async def test_first_login_provisions_member_identity_and_role(service, db_session):
    result = await service.login(" ab1234 ", "AB1234")

    assert result.member_created is True
    assert result.password_change_required is True
    assert result.role is MemberRole.MEMBER
    assert result.session.access_token
    assert result.member.member_number == "AB1234"
    assert result.member.first_time_login is False

    db_session.expire_all()
    member = await MemberRepository(db_session).get_by_member_number("AB1234")
    assert member.email == "ab1234@temp.memberdesk.local"
    assert member.auth_user_id == result.session.user_id
    assert member.first_time_login is False

    identity = await AccountIdentityRepository(db_session).get_by_email(member.email)
    assert identity.user_metadata == {"member_number": "AB1234"}

    roles = await UserRoleRepository(db_session).list_roles(result.session.user_id)
    assert roles == ["member"]

    entries, _ = await AuditLogRepository(db_session).list_logs(
        table_name="members", record_id=member.id
    )
    assert [e.operation for e in entries] == ["create"]
    assert entries[0].new_values["source"] == "first_login"


@pytest.mark.asyncio
async def test_second_login_reuses_member(service, make_linked_member):
    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)

    result = await service.login("AB1234", "Chosen1Pass")

    assert result.member_created is False
    assert result.password_change_required is False


@pytest.mark.asyncio
async def test_admin_role_is_reported(service, make_linked_member):
    await make_linked_member("AD0001", "AdminPass1", role="admin", password_changed=True)

    result = await service.login("AD0001", "AdminPass1")

    assert result.role is MemberRole.ADMIN


@pytest.mark.asyncio
async def test_wrong_password_counts_failure(service, db_session, make_linked_member):
    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)

    with pytest.raises(InvalidCredentialsError):
        await service.login("AB1234", "Wrong1Pass")

    db_session.expire_all()
    member = await MemberRepository(db_session).get_by_member_number("AB1234")
    assert member.failed_login_attempts == 1
    assert member.locked_until is None


@pytest.mark.asyncio
async def test_member_is_locked_after_repeated_failures(
    service, db_session, make_linked_member
):
    member, _ = await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)

    for _ in range(2):
        with pytest.raises(InvalidCredentialsError):
            await service.login("AB1234", "Wrong1Pass")
    with pytest.raises(AccountLockedError) as exc_info:
        await service.login("AB1234", "Wrong1Pass")
    assert exc_info.value.locked_until is not None

    # Correct password is refused while locked.
    with pytest.raises(AccountLockedError):
        await service.login("AB1234", "Chosen1Pass")

    entries, _ = await AuditLogRepository(db_session).list_logs(
        table_name="members", record_id=member.id
    )
    assert entries[0].severity == "warning"
    assert entries[0].new_values["locked"] is True


@pytest.mark.asyncio
async def test_successful_login_clears_failed_attempts(service, db_session, make_linked_member):
    await make_linked_member("AB1234", "Chosen1Pass", password_changed=True)
    with pytest.raises(InvalidCredentialsError):
        await service.login("AB1234", "Wrong1Pass")

    result = await service.login("AB1234", "Chosen1Pass")

    assert result.member.failed_login_attempts == 0
    db_session.expire_all()
    member = await MemberRepository(db_session).get_by_member_number("AB1234")
    assert member.failed_login_attempts == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["", "AB 1234", "AB#1"])
async def test_malformed_identifier_is_invalid_credentials(service, identifier):
    with pytest.raises(InvalidCredentialsError):
        await service.login(identifier, "whatever")


@pytest.mark.asyncio
async def test_store_outage_raises_member_lookup_error(service):
    service.record_store.find_by_identifier = AsyncMock(
        side_effect=RecordStoreError("database is locked")
    )

    with pytest.raises(MemberLookupError):
        await service.login("AB1234", "AB1234")
