"""Helpers for safe debug logging.

Broker settings carry MQTT credentials and twin payloads can be large.
Both go through this module before reaching a DEBUG log line.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SECRET_KEYS: frozenset[str] = frozenset({"password", "passwd", "token", "authorization"})

REDACTED = "<redacted>"


def redact_settings(settings: Mapping[str, Any]) -> dict[str, Any]:
    """Copy *settings* with every non-empty secret replaced by ``<redacted>``.

    Empty secrets stay visible so logs show that none was sent.
    Nested mappings are redacted too.
    """
    redacted: dict[str, Any] = {}
    for key, value in settings.items():
        if isinstance(value, Mapping):
            redacted[key] = redact_settings(value)
        elif str(key).lower() in _SECRET_KEYS and value:
            redacted[key] = REDACTED
        else:
            redacted[key] = value
    return redacted


def preview_payload(payload: bytes, *, max_bytes: int = 512) -> str:
    """Decode a JSON payload for logging, truncated to *max_bytes*."""
    if len(payload) <= max_bytes:
        return payload.decode("utf-8", errors="replace")
    head = payload[:max_bytes].decode("utf-8", errors="replace")
    return f"{head}…<truncated {len(payload) - max_bytes}b>"
