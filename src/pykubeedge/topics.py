"""MQTT topic resolution for KubeEdge device events."""

from __future__ import annotations

from enum import StrEnum

from pykubeedge._constants import (
    DEVICE_TOPIC_PREFIX,
    STATE_UPDATE_SUFFIX,
    TWIN_CLOUD_UPDATE_SUFFIX,
    TWIN_UPDATE_SUFFIX,
)


class TopicClass(StrEnum):
    """Message classes a device publishes."""

    STATE = "state"
    TWIN = "twin"
    TWIN_CLOUD = "twin-cloud"


_SUFFIXES: dict[TopicClass, str] = {
    TopicClass.STATE: STATE_UPDATE_SUFFIX,
    TopicClass.TWIN: TWIN_UPDATE_SUFFIX,
    TopicClass.TWIN_CLOUD: TWIN_CLOUD_UPDATE_SUFFIX,
}


def resolve_topic(
    device_id: str,
    topic_class: TopicClass | str,
    *,
    prefix: str = DEVICE_TOPIC_PREFIX,
) -> str:
    """Return ``<prefix><device_id><suffix>`` for *topic_class*.

    *device_id* is used verbatim; callers validate it beforehand.
    """
    return f"{prefix}{device_id}{_SUFFIXES[TopicClass(topic_class)]}"
