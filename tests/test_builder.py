from __future__ import annotations

import pytest

from pykubeedge.builder import build_state_update, build_twin_update, build_twin_updates
from pykubeedge.models import DeviceState


@pytest.mark.parametrize(("field", "value"), [("CPU_Temperatur", "42.5"), ("door", ""), ("x", "ünïcode")])
def test_build_twin_update_sets_actual_value_and_updated_type(field: str, value: str) -> None:
    update = build_twin_update(field, value)

    assert list(update.twin) == [field]
    twin = update.twin[field]
    assert twin.actual is not None
    assert twin.actual.value == value
    assert twin.metadata is not None
    assert twin.metadata.type == "Updated"


def test_build_twin_update_leaves_other_members_absent() -> None:
    twin = build_twin_update("f", "1").twin["f"]
    assert twin.optional is None
    assert twin.expected_version is None
    assert twin.actual_version is None
    assert twin.actual is not None and twin.actual.metadata is None


def test_build_twin_update_keeps_base_message_defaults() -> None:
    update = build_twin_update("f", "1")
    assert update.event_id == ""
    assert update.timestamp == 0


def test_build_twin_update_accepts_explicit_identity() -> None:
    update = build_twin_update("f", "1", event_id="evt", timestamp=99)
    assert (update.event_id, update.timestamp) == ("evt", 99)


def test_build_twin_updates_covers_every_field() -> None:
    update = build_twin_updates({"batteryPercentage": "80", "robotLocation": "HOME"})
    assert {name: twin.actual.value for name, twin in update.twin.items() if twin.actual} == {
        "batteryPercentage": "80",
        "robotLocation": "HOME",
    }


def test_build_state_update_wraps_literal_state() -> None:
    assert build_state_update("online").state == "online"
    assert build_state_update("rebooting").to_json() == '{"state":"rebooting"}'
    assert build_state_update(DeviceState.OFFLINE).state == "offline"


def test_build_state_update_omits_empty_state() -> None:
    update = build_state_update("")
    assert update.state is None
    assert update.to_json() == "{}"
