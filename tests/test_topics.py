from __future__ import annotations

import pytest

from pykubeedge.topics import TopicClass, resolve_topic


@pytest.mark.parametrize(
    ("topic_class", "expected"),
    [
        (TopicClass.STATE, "$hw/events/device/dev-1/state/update"),
        (TopicClass.TWIN, "$hw/events/device/dev-1/twin/update"),
        (TopicClass.TWIN_CLOUD, "$hw/events/device/dev-1/twin/cloud_update"),
    ],
)
def test_resolve_topic_concatenates_prefix_id_and_suffix(topic_class: TopicClass, expected: str) -> None:
    assert resolve_topic("dev-1", topic_class) == expected


def test_resolve_topic_accepts_class_strings() -> None:
    assert resolve_topic("sensor", "twin-cloud") == resolve_topic("sensor", TopicClass.TWIN_CLOUD)


def test_resolve_topic_uses_device_id_verbatim() -> None:
    assert resolve_topic("a/b c", TopicClass.STATE, prefix="p/") == "p/a/b c/state/update"


def test_resolve_topic_rejects_unknown_class() -> None:
    with pytest.raises(ValueError):
        resolve_topic("dev-1", "twin-get")
