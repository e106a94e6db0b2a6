"""Internal MQTT transport: broker parsing, client setup and publish tokens."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from typing import Any, Protocol, cast

import paho.mqtt.client as mqtt

from pykubeedge._constants import (
    DEFAULT_MQTT_PORT,
    DEFAULT_MQTTS_PORT,
    PLAIN_SCHEMES,
    TLS_SCHEMES,
    WS_SCHEMES,
    WSS_SCHEMES,
)
from pykubeedge._redact import redact_settings
from pykubeedge.config import KubeEdgeConfig
from pykubeedge.exceptions import KubeEdgeConfigError, KubeEdgeTransportError


class PublishToken(Protocol):
    """Acknowledgment handle returned by :meth:`Transport.publish`."""

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the publish completes; ``False`` on timeout."""
        ...

    def error(self) -> Exception | None:
        ...


class Transport(Protocol):
    """Structural transport interface used by :class:`TwinSyncClient`.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (:class:`MqttTransport`) concrete.
    """

    def connect(self) -> None:
        ...

    def publish(self, topic: str, payload: bytes) -> PublishToken:
        ...

    def disconnect(self) -> None:
        ...


@dataclass(frozen=True)
class BrokerAddress:
    """Parsed broker address."""

    scheme: str
    host: str
    port: int
    path: str = ""

    @property
    def uses_tls(self) -> bool:
        return self.scheme in TLS_SCHEMES or self.scheme in WSS_SCHEMES

    @property
    def uses_websockets(self) -> bool:
        return self.scheme in WS_SCHEMES or self.scheme in WSS_SCHEMES


def parse_broker(raw_broker: str) -> BrokerAddress:
    """Split ``scheme://host:port/path`` into a :class:`BrokerAddress`.

    A missing scheme means plain ``tcp``.  A missing port defaults to 1883,
    or 8883 for TLS schemes.
    """
    value = raw_broker.strip()
    if not value:
        raise KubeEdgeConfigError("Broker value is empty")

    scheme = "tcp"
    if "://" in value:
        scheme, value = value.split("://", 1)
        scheme = scheme.lower()
    known = PLAIN_SCHEMES | TLS_SCHEMES | WS_SCHEMES | WSS_SCHEMES
    if scheme not in known:
        raise KubeEdgeConfigError(f"Unsupported broker scheme {scheme!r}")

    path = ""
    if "/" in value:
        value, rest = value.split("/", 1)
        path = f"/{rest}"

    default_port = DEFAULT_MQTTS_PORT if scheme in TLS_SCHEMES | WSS_SCHEMES else DEFAULT_MQTT_PORT
    host, sep, maybe_port = value.rpartition(":")
    if not sep or (value.startswith("[") and value.endswith("]")):
        host, port = value, default_port
    elif maybe_port.isdigit():
        port = int(maybe_port)
    else:
        raise KubeEdgeConfigError(f"Invalid broker port {maybe_port!r}")
    host = host.strip("[]")
    if not host:
        raise KubeEdgeConfigError(f"Broker host missing in {raw_broker!r}")
    if not 0 < port < 65536:
        raise KubeEdgeConfigError(f"Broker port out of range: {port}")
    return BrokerAddress(scheme=scheme, host=host, port=port, path=path)


def _apply_credentials(client: Any, username: str, password: str) -> None:
    """Send a username only when set, and a password only alongside it."""
    if not username:
        return
    client.username_pw_set(username, password or None)


def _insecure_tls_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def build_mqtt_client(
    config: KubeEdgeConfig,
    broker: BrokerAddress,
    *,
    logger: logging.Logger | None = None,
) -> mqtt.Client:
    """Create an unconnected paho client for *config*.

    TLS is configured only for TLS schemes; in that case broker
    certificate verification follows ``config.tls_insecure`` and no client
    certificate is presented.
    """
    client = mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=config.effective_client_id,
        clean_session=True,
        protocol=mqtt.MQTTv311,
        transport="websockets" if broker.uses_websockets else "tcp",
    )
    if logger is not None:
        client.enable_logger(logger)
    _apply_credentials(client, config.username, config.password)
    if broker.uses_websockets and broker.path:
        client.ws_set_options(path=broker.path)
    if broker.uses_tls:
        if config.tls_insecure:
            client.tls_set_context(_insecure_tls_context())
            client.tls_insecure_set(True)
        else:
            client.tls_set_context(ssl.create_default_context())
    return client


class MqttPublishToken:
    """Wraps a paho ``MQTTMessageInfo`` behind the :class:`PublishToken` API."""

    def __init__(
        self,
        info: mqtt.MQTTMessageInfo | None,
        *,
        topic: str,
        error: Exception | None = None,
    ) -> None:
        self._info = info
        self._topic = topic
        self._error = error

    def wait(self, timeout: float | None = None) -> bool:
        info = self._info
        if info is None or self._error is not None:
            return True
        try:
            info.wait_for_publish(timeout)
        except (RuntimeError, ValueError) as exc:
            self._error = KubeEdgeTransportError(str(exc), topic=self._topic, rc=info.rc)
            return True
        return info.is_published()

    def error(self) -> Exception | None:
        info = self._info
        if self._error is None and info is not None and info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._error = KubeEdgeTransportError(
                f"Publish to {self._topic} failed: {mqtt.error_string(info.rc)}",
                topic=self._topic,
                rc=info.rc,
            )
        return self._error


class MqttTransport:
    """Threaded paho-mqtt transport owning one broker connection."""

    def __init__(
        self,
        config: KubeEdgeConfig,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or logging.getLogger(__name__)
        self._broker = parse_broker(config.broker)
        self._client: mqtt.Client | None = None

    @property
    def is_connected(self) -> bool:
        """Whether the underlying client currently holds a broker session."""
        return self._client is not None and self._client.is_connected()

    def connect(self) -> None:
        """Create the client and start its network loop.

        A failed connection attempt is logged and otherwise ignored: the
        network loop keeps retrying, and publishes made while disconnected
        report their own errors through their tokens.
        """
        self.disconnect()
        broker = self._broker
        self._logger.debug(
            "MQTT connect requested %s",
            redact_settings(
                {
                    "scheme": broker.scheme,
                    "host": broker.host,
                    "port": broker.port,
                    "client_id": self._config.effective_client_id,
                    "username": self._config.username,
                    "password": self._config.password,
                }
            ),
        )
        client = build_mqtt_client(self._config, broker, logger=self._logger)

        def on_connect(
            _client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.is_failure:
                self._logger.warning("MQTT connect refused: %s", reason_code)
                return
            self._logger.debug("MQTT connected reason=%s", reason_code)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_disconnect = on_disconnect

        try:
            client.connect(broker.host, broker.port, keepalive=self._config.keepalive)
        except (OSError, ValueError) as exc:
            self._logger.error("MQTT connect to %s:%s failed: %s", broker.host, broker.port, exc)
        client.loop_start()
        self._client = client

    def publish(self, topic: str, payload: bytes) -> MqttPublishToken:
        client = self._client
        if client is None:
            return MqttPublishToken(
                None,
                topic=topic,
                error=KubeEdgeTransportError("Transport not connected", topic=topic),
            )
        try:
            info = client.publish(topic, payload, qos=self._config.qos, retain=False)
        except ValueError as exc:
            return MqttPublishToken(None, topic=topic, error=KubeEdgeTransportError(str(exc), topic=topic))
        return MqttPublishToken(info, topic=topic)

    def disconnect(self) -> None:
        """Stop and disconnect the current client, if any."""
        client = self._client
        self._client = None
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
