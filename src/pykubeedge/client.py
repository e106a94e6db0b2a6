"""High-level async client that syncs a device twin to the edge and the cloud."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pykubeedge._mqtt import MqttTransport, Transport
from pykubeedge._redact import preview_payload
from pykubeedge.builder import build_state_update, build_twin_update
from pykubeedge.config import KubeEdgeConfig
from pykubeedge.exceptions import (
    KubeEdgeError,
    KubeEdgeFatalError,
    KubeEdgeSerializationError,
    KubeEdgeTransportError,
)
from pykubeedge.models import DeviceTwinUpdate, serialize_document
from pykubeedge.topics import TopicClass, resolve_topic

_logger = logging.getLogger(__name__)


class Severity(StrEnum):
    OK = "ok"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    """Result of one publish attempt.

    ``payload`` is ``None`` when serialization failed and nothing was
    published.  ``acknowledged`` is ``False`` when the ack wait timed out.
    """

    topic: str
    payload: bytes | None
    severity: Severity = Severity.OK
    error: Exception | None = None
    acknowledged: bool = True

    @property
    def ok(self) -> bool:
        return self.severity is Severity.OK


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of the edge-then-cloud sequence run by :meth:`TwinSyncClient.update`."""

    update: DeviceTwinUpdate
    edge: PublishOutcome
    cloud: PublishOutcome

    @property
    def ok(self) -> bool:
        return self.edge.ok and self.cloud.ok


class TwinSyncClient:
    """Async client publishing KubeEdge device state and twin updates.

    Usage::

        async with TwinSyncClient(config) as client:
            await client.change_sensor_status("online")
            await client.update("42.5")

    The transport is blocking; every connect and publish runs in the
    loop's default executor.
    """

    def __init__(
        self,
        config: KubeEdgeConfig,
        *,
        transport: Transport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._transport: Transport = transport if transport is not None else MqttTransport(config, logger=_logger)
        self._sleep = sleep
        self._update_lock = asyncio.Lock()
        self._connected = False

    @property
    def config(self) -> KubeEdgeConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TwinSyncClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.disconnect()

    async def connect(self) -> None:
        """Open the broker connection (failures are logged by the transport)."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._transport.connect)
        self._connected = True

    async def disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._transport.disconnect)
        except Exception:
            _logger.debug("MQTT disconnect failed", exc_info=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _topic(self, topic_class: TopicClass) -> str:
        return resolve_topic(self._config.device_id, topic_class, prefix=self._config.topic_prefix)

    def _publish_blocking(self, topic: str, payload: bytes) -> tuple[bool, Exception | None]:
        token = self._transport.publish(topic, payload)
        acknowledged = token.wait(self._config.ack_timeout)
        return acknowledged, token.error()

    async def _publish(self, topic: str, payload: bytes) -> tuple[bool, Exception | None]:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._publish_blocking, topic, payload)
        except KubeEdgeError as exc:
            return True, exc
        except Exception as exc:
            error = KubeEdgeTransportError(str(exc) or type(exc).__name__, topic=topic)
            error.__cause__ = exc
            return True, error

    def _ack_timeout_error(self, topic: str) -> KubeEdgeTransportError:
        return KubeEdgeTransportError(f"No acknowledgment within {self._config.ack_timeout}s", topic=topic)

    async def _publish_twin(self, update: DeviceTwinUpdate, topic_class: TopicClass) -> PublishOutcome:
        topic = self._topic(topic_class)
        try:
            payload = serialize_document(update)
        except KubeEdgeSerializationError as exc:
            _logger.warning("Twin update for %s not published: %s", topic, exc)
            return PublishOutcome(topic=topic, payload=None, severity=Severity.RECOVERABLE, error=exc)

        _logger.debug("Publishing twin update topic=%s payload=%s", topic, preview_payload(payload))
        acknowledged, error = await self._publish(topic, payload)
        if error is not None:
            _logger.warning("Publish error in twin update to %s: %s", topic, error)
            return PublishOutcome(
                topic=topic,
                payload=payload,
                severity=Severity.RECOVERABLE,
                error=error,
                acknowledged=acknowledged,
            )
        if not acknowledged:
            timeout_error = self._ack_timeout_error(topic)
            _logger.warning("Twin update to %s not acknowledged: %s", topic, timeout_error)
            return PublishOutcome(
                topic=topic,
                payload=payload,
                severity=Severity.RECOVERABLE,
                error=timeout_error,
                acknowledged=False,
            )
        return PublishOutcome(topic=topic, payload=payload)

    # ------------------------------------------------------------------
    # Publish operations
    # ------------------------------------------------------------------

    async def change_sensor_status(self, state: str) -> PublishOutcome:
        """Publish a device state update.

        Raises
        ------
        KubeEdgeFatalError
            If the document cannot be serialized or the transport reports an
            error.  Without a working state topic the device cannot signal
            its own availability.
        """
        _logger.info("Changing the state of the device to %s", state)
        topic = self._topic(TopicClass.STATE)
        document = build_state_update(state)
        try:
            payload = serialize_document(document)
        except KubeEdgeSerializationError as exc:
            _logger.error("State update for %s could not be serialized: %s", topic, exc)
            outcome = PublishOutcome(topic=topic, payload=None, severity=Severity.FATAL, error=exc)
            raise KubeEdgeFatalError(str(exc), topic=topic, cause=exc, outcome=outcome) from exc

        acknowledged, error = await self._publish(topic, payload)
        if error is not None:
            _logger.error("Publish error in sensor state update to %s: %s", topic, error)
            raise KubeEdgeFatalError(
                f"State update to {topic} failed: {error}",
                topic=topic,
                cause=error,
                outcome=PublishOutcome(
                    topic=topic,
                    payload=payload,
                    severity=Severity.FATAL,
                    error=error,
                    acknowledged=acknowledged,
                ),
            ) from error
        if not acknowledged:
            _logger.warning("State update to %s not acknowledged within %ss", topic, self._config.ack_timeout)
            return PublishOutcome(
                topic=topic,
                payload=payload,
                severity=Severity.RECOVERABLE,
                error=self._ack_timeout_error(topic),
                acknowledged=False,
            )
        return PublishOutcome(topic=topic, payload=payload)

    async def change_twin_value(self, update: DeviceTwinUpdate) -> PublishOutcome:
        """Send a twin update to the edge. Failures are logged and returned, never raised."""
        return await self._publish_twin(update, TopicClass.TWIN)

    async def sync_to_cloud(self, update: DeviceTwinUpdate) -> PublishOutcome:
        """Send a twin update to the cloud-facing topic. Failures are logged and returned."""
        return await self._publish_twin(update, TopicClass.TWIN_CLOUD)

    async def update(self, value: str, *, field_name: str | None = None) -> SyncResult:
        """Publish *value* to the edge, pause ``sync_delay`` seconds, then to the cloud.

        Both phases publish the same document.  A failed edge publish does
        not skip the cloud publish.
        """
        update = build_twin_update(field_name if field_name is not None else self._config.twin_field, value)
        async with self._update_lock:
            _logger.info("Syncing to edge")
            edge = await self.change_twin_value(update)
            await self._sleep(self._config.sync_delay)
            _logger.info("Syncing to cloud")
            cloud = await self.sync_to_cloud(update)
        return SyncResult(update=update, edge=edge, cloud=cloud)
