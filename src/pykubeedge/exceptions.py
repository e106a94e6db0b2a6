"""Custom exception hierarchy for pykubeedge."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pykubeedge.client import PublishOutcome


class KubeEdgeError(Exception):
    """Base exception for all pykubeedge errors."""


class KubeEdgeConfigError(KubeEdgeError):
    """Invalid or missing configuration."""


class KubeEdgeSerializationError(KubeEdgeError):
    """A twin or state document could not be encoded as JSON."""


class KubeEdgeTransportError(KubeEdgeError):
    """MQTT-level failure (not connected, queue full, broker refused)."""

    def __init__(
        self,
        message: str,
        *,
        topic: str = "",
        rc: int | None = None,
    ) -> None:
        self.topic = topic
        self.rc = rc
        super().__init__(message)


class KubeEdgeFatalError(KubeEdgeError):
    """The device could not signal its own state.

    Raised by :meth:`pykubeedge.client.TwinSyncClient.change_sensor_status`
    when the state update cannot be serialized or published.  The original
    failure is available as ``__cause__`` and on :attr:`cause`; :attr:`outcome`
    carries the :class:`PublishOutcome` with ``Severity.FATAL``.  Deciding
    whether to terminate the process is left to the caller.
    """

    def __init__(
        self,
        message: str,
        *,
        topic: str = "",
        cause: Exception | None = None,
        outcome: PublishOutcome | None = None,
    ) -> None:
        self.topic = topic
        self.cause = cause
        self.outcome = outcome
        super().__init__(message)
