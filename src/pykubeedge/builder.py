"""Construction of twin-update and state-update documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pykubeedge._constants import UPDATED_TYPE
from pykubeedge.models.twin import (
    DeviceStateUpdate,
    DeviceTwinUpdate,
    MsgTwin,
    TwinValue,
    TypeMetadata,
)


def _updated_field(raw_value: str) -> MsgTwin:
    return MsgTwin(actual=TwinValue(value=raw_value), metadata=TypeMetadata(type=UPDATED_TYPE))


def build_twin_updates(
    values: Mapping[str, str],
    *,
    event_id: str | None = None,
    timestamp: int | None = None,
) -> DeviceTwinUpdate:
    """Build one twin update carrying an ``Updated`` actual value per field.

    ``event_id`` and ``timestamp`` keep the :class:`BaseMessage` defaults
    unless given explicitly.
    """
    base: dict[str, Any] = {}
    if event_id is not None:
        base["event_id"] = event_id
    if timestamp is not None:
        base["timestamp"] = timestamp
    return DeviceTwinUpdate(
        twin={name: _updated_field(value) for name, value in values.items()},
        **base,
    )


def build_twin_update(
    field_name: str,
    raw_value: str,
    *,
    event_id: str | None = None,
    timestamp: int | None = None,
) -> DeviceTwinUpdate:
    """Build a twin update for a single field.

    The field gets ``actual.value = raw_value`` and
    ``metadata.type = "Updated"``; ``optional``, ``expected_version`` and
    ``actual_version`` stay absent.
    """
    return build_twin_updates({field_name: raw_value}, event_id=event_id, timestamp=timestamp)


def build_state_update(state: str) -> DeviceStateUpdate:
    """Wrap a lifecycle state string (no validation of the value).

    An empty state is left unset, so the payload is ``{}``.
    """
    return DeviceStateUpdate(state=state or None)
