"""Device twin and device state documents."""

from __future__ import annotations

import time
import uuid
from enum import StrEnum
from typing import Self

from pydantic import Field

from pykubeedge.models._base import TwinBaseModel


class DeviceState(StrEnum):
    """Common device lifecycle states.

    :class:`DeviceStateUpdate` accepts any string; these are the values
    KubeEdge mappers usually report.
    """

    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


class ValueMetadata(TwinBaseModel):
    """Metadata attached to a twin value."""

    timestamp: int | None = None
    """Epoch milliseconds; absent when not yet stamped."""


class TwinValue(TwinBaseModel):
    """One versioned scalar reading."""

    value: str | None = None
    metadata: ValueMetadata | None = None


class TypeMetadata(TwinBaseModel):
    """Free-form classification tag of a twin field (e.g. ``"Updated"``)."""

    type: str | None = None


class TwinVersion(TwinBaseModel):
    """Independent edge and cloud version counters.

    Nothing reconciles the two counters automatically; callers bump the
    side they observed with :meth:`next_edge` / :meth:`next_cloud`.
    """

    cloud: int = 0
    edge: int = 0

    def next_edge(self) -> TwinVersion:
        return self.model_copy(update={"edge": self.edge + 1})

    def next_cloud(self) -> TwinVersion:
        return self.model_copy(update={"cloud": self.cloud + 1})


class MsgTwin(TwinBaseModel):
    """One named field of a twin document."""

    actual: TwinValue | None = Field(default=None, alias="temperature")
    optional: bool | None = None
    metadata: TypeMetadata | None = None
    expected_version: TwinValue | None = None
    actual_version: TwinVersion | None = None


class BaseMessage(TwinBaseModel):
    """Identity of one update event.

    Both fields are always serialized, even at their defaults.
    """

    event_id: str = ""
    timestamp: int = 0

    def stamped(self, *, event_id: str | None = None, timestamp: int | None = None) -> Self:
        """Return a copy carrying an event id and an epoch-millisecond timestamp.

        Missing values are generated (``uuid4`` and the current time).
        """
        return self.model_copy(
            update={
                "event_id": event_id if event_id is not None else str(uuid.uuid4()),
                "timestamp": timestamp if timestamp is not None else int(time.time() * 1000),
            }
        )


class DeviceTwinUpdate(BaseMessage):
    """Twin update published to the edge and cloud twin topics."""

    twin: dict[str, MsgTwin] = Field(default_factory=dict)


class DeviceStateUpdate(TwinBaseModel):
    """Lifecycle signal published on the state topic."""

    state: str | None = None
