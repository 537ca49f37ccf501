import structlog

from memberdesk.core.logging import (
    LoggingContext,
    add_correlation_id,
    add_logger_name,
    bind_correlation_id,
    clear_context,
    redact_sensitive_values,
    rename_message_field,
)


def test_redact_sensitive_values_masks_credentials():
    event = {
        "event": "Member login",
        "member_number": "AB1234",
        "password": "AB1234",
        "access_token": "eyJ...",
        "temporary_password": "AB1234x7k2",
    }

    result = redact_sensitive_values(None, "info", event)

    assert result["member_number"] == "AB1234"
    assert result["password"] == "***"
    assert result["access_token"] == "***"
    assert result["temporary_password"] == "***"


def test_add_correlation_id_keeps_bound_value():
    assert add_correlation_id(None, "info", {"correlation_id": "cid_1"})["correlation_id"] == "cid_1"
    generated = add_correlation_id(None, "info", {})["correlation_id"]
    assert generated.startswith("cid_")


def test_add_logger_name_falls_back_to_application_name():
    assert add_logger_name(object(), "info", {})["logger"] == "memberdesk"


def test_rename_message_field():
    assert rename_message_field(None, "info", {"event": "hello"}) == {"message": "hello"}


def test_logging_context_binds_and_unbinds():
    clear_context()
    with LoggingContext(member_number="AB1234"):
        assert structlog.contextvars.get_contextvars()["member_number"] == "AB1234"
    assert "member_number" not in structlog.contextvars.get_contextvars()


def test_bind_and_clear_correlation_id():
    bind_correlation_id("cid_abc")
    assert structlog.contextvars.get_contextvars()["correlation_id"] == "cid_abc"
    clear_context()
    assert structlog.contextvars.get_contextvars() == {}
