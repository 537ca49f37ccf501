"""Tests for PasswordChangeService."""

import pytest

from memberdesk.domain.exceptions import PasswordChangeError
from memberdesk.domain.services.password_change_service import PasswordChangeService
from memberdesk.infrastructure.auth import LocalIdentityProvider
from memberdesk.infrastructure.persistence.member_record_store import to_member_record
from memberdesk.infrastructure.persistence.repositories import MemberRepository


@pytest.fixture
def provider(db_session) -> LocalIdentityProvider:
    return LocalIdentityProvider(db_session)


@pytest.fixture
def service(db_session, provider) -> PasswordChangeService:
    return PasswordChangeService(db_session, provider)


async def _signed_in(provider, make_linked_member, member_number, password, **kwargs):
    model, identity = await make_linked_member(member_number, password, **kwargs)
    auth_session = await provider.sign_in(identity.email, password)
    return to_member_record(model), auth_session


@pytest.mark.asyncio
async def test_first_time_member_changes_without_current_password(
    service, provider, db_session, make_linked_member
):
    member, auth_session = await _signed_in(provider, make_linked_member, "AB1234", "AB1234")

    await service.change_password(member, auth_session, "Chosen1Pass", "Chosen1Pass")

    assert member.password_changed is True
    session = await provider.sign_in(auth_session.email, "Chosen1Pass")
    assert session.user_id == auth_session.user_id

    db_session.expire_all()
    model = await MemberRepository(db_session).get_by_member_number("AB1234")
    assert model.password_changed is True
    assert model.password_set_at is not None


@pytest.mark.asyncio
async def test_mismatched_confirmation_is_rejected(service, provider, make_linked_member):
    member, auth_session = await _signed_in(provider, make_linked_member, "AB1234", "AB1234")

    with pytest.raises(PasswordChangeError) as exc_info:
        await service.change_password(member, auth_session, "Chosen1Pass", "Chosen2Pass")

    assert exc_info.value.details[0]["code"] == "password_mismatch"


@pytest.mark.asyncio
async def test_weak_password_reports_rule_codes(service, provider, make_linked_member):
    member, auth_session = await _signed_in(provider, make_linked_member, "AB1234", "AB1234")

    with pytest.raises(PasswordChangeError) as exc_info:
        await service.change_password(member, auth_session, "short", "short")

    codes = {d["code"] for d in exc_info.value.details}
    assert {"password_too_short", "password_no_uppercase", "password_no_digit"} <= codes


@pytest.mark.asyncio
async def test_established_member_must_supply_current_password(
    service, provider, make_linked_member
):
    member, auth_session = await _signed_in(
        provider, make_linked_member, "AB1234", "Chosen1Pass", password_changed=True
    )

    with pytest.raises(PasswordChangeError) as exc_info:
        await service.change_password(member, auth_session, "Better2Pass", "Better2Pass")
    assert exc_info.value.details[0]["field"] == "current_password"

    with pytest.raises(PasswordChangeError, match="incorrect"):
        await service.change_password(
            member, auth_session, "Better2Pass", "Better2Pass", current_password="Nope1Pass"
        )

    await service.change_password(
        member, auth_session, "Better2Pass", "Better2Pass", current_password="Chosen1Pass"
    )
    assert (await provider.sign_in(auth_session.email, "Better2Pass")).access_token


@pytest.mark.asyncio
async def test_established_member_cannot_reuse_current_password(
    service, provider, make_linked_member
):
    member, auth_session = await _signed_in(
        provider, make_linked_member, "AB1234", "Chosen1Pass", password_changed=True
    )

    with pytest.raises(PasswordChangeError, match="differ"):
        await service.change_password(
            member, auth_session, "Chosen1Pass", "Chosen1Pass", current_password="Chosen1Pass"
        )


@pytest.mark.asyncio
async def test_reset_member_changes_without_current_password(
    service, provider, make_linked_member
):
    member, auth_session = await _signed_in(
        provider, make_linked_member, "AB1234", "AB1234x7k2", password_changed=True
    )
    member.password_reset_required = True

    await service.change_password(member, auth_session, "Chosen1Pass", "Chosen1Pass")

    assert member.password_reset_required is False
