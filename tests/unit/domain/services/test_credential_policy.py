import pytest

from memberdesk.domain.entities import MemberRecord
from memberdesk.domain.services.credential_policy import (
    CredentialPolicy,
    CredentialStage,
    normalize_member_number,
)


@pytest.fixture
def policy() -> CredentialPolicy:
    return CredentialPolicy("temp.example.org")


def _member(**kwargs) -> MemberRecord:
    return MemberRecord(member_number="AB123", email="ab123@temp.example.org",
                        full_name="AB123", **kwargs)


@pytest.mark.parametrize(
    "raw,expected",
    [("AB123", "AB123"), (" ab123 ", "AB123"), ("tr-0042", "TR-0042")],
)
def test_normalize_member_number(raw, expected):
    assert normalize_member_number(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "-AB1", "AB 1", "AB_1", "ab@1"])
def test_normalize_member_number_rejects_malformed(raw):
    with pytest.raises(ValueError):
        normalize_member_number(raw)


def test_placeholder_email_is_lowercased(policy):
    assert policy.placeholder_email("AB123") == "ab123@temp.example.org"


def test_is_placeholder_email(policy):
    assert policy.is_placeholder_email("AB123@TEMP.EXAMPLE.ORG") is True
    assert policy.is_placeholder_email("member@club.example.org") is False
    assert policy.is_placeholder_email(None) is False


def test_first_time_stage_uses_member_number_as_default(policy):
    member = _member()

    assert policy.stage(member) is CredentialStage.FIRST_TIME
    assert policy.default_credential(member) == "AB123"
    assert policy.requires_password_change(member) is True


def test_reset_stage_has_no_derivable_default(policy):
    member = _member(password_changed=True, password_reset_required=True)

    assert policy.stage(member) is CredentialStage.RESET
    assert policy.default_credential(member) is None
    assert policy.requires_password_change(member) is True


def test_established_stage(policy):
    member = _member(password_changed=True)

    assert policy.stage(member) is CredentialStage.ESTABLISHED
    assert policy.default_credential(member) is None
    assert policy.requires_password_change(member) is False


def test_temporary_credential_format(policy):
    temporary = policy.generate_temporary_credential("AB123")

    assert temporary.startswith("AB123")
    suffix = temporary[len("AB123"):]
    assert len(suffix) == 4
    assert all(c.islower() or c.isdigit() for c in suffix)
