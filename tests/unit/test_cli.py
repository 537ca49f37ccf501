from click.testing import CliRunner

from memberdesk import __version__
from memberdesk.cli import cli


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_info_shows_identity_settings(monkeypatch):
    monkeypatch.setenv("MEMBERDESK_PLACEHOLDER_EMAIL_DOMAIN", "temp.club.example")

    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "*@temp.club.example" in result.output
    assert "Backend:      local" in result.output


def test_grant_role_rejects_malformed_member_number():
    result = CliRunner().invoke(cli, ["grant-role", "AB 12"])

    assert result.exit_code == 1
    assert "Invalid member number" in result.output


def test_grant_role_rejects_unknown_role():
    result = CliRunner().invoke(cli, ["grant-role", "AB1234", "--role", "owner"])

    assert result.exit_code == 2
