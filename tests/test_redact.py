from __future__ import annotations

from pykubeedge._redact import REDACTED, preview_payload, redact_settings


def test_redact_settings_hides_credentials() -> None:
    settings = {
        "host": "broker",
        "username": "mapper",
        "password": "pw",
        "headers": {"Authorization": "Bearer abc"},
    }

    redacted = redact_settings(settings)
    assert redacted["password"] == REDACTED
    assert redacted["headers"]["Authorization"] == REDACTED
    assert redacted["username"] == "mapper"
    assert redacted["host"] == "broker"
    assert settings["password"] == "pw"


def test_redact_settings_keeps_empty_password_visible() -> None:
    assert redact_settings({"password": ""})["password"] == ""


def test_preview_payload_decodes_small_payloads() -> None:
    assert preview_payload(b'{"state":"online"}') == '{"state":"online"}'


def test_preview_payload_truncates_large_payloads() -> None:
    preview = preview_payload(b"x" * 20, max_bytes=10)
    assert preview.startswith("x" * 10)
    assert preview.endswith("<truncated 10b>")
