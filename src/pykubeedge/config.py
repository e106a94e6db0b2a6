"""Client configuration for pykubeedge."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from pykubeedge._constants import (
    DEFAULT_KEEPALIVE,
    DEFAULT_SYNC_DELAY,
    DEFAULT_TWIN_FIELD,
    DEVICE_TOPIC_PREFIX,
)
from pykubeedge.exceptions import KubeEdgeConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_optional_float(value: str) -> float | None:
    stripped = value.strip().lower()
    if stripped in {"", "none", "off"}:
        return None
    return float(stripped)


@dataclasses.dataclass(frozen=True)
class KubeEdgeConfig:
    """Client configuration.

    Parameters
    ----------
    broker : str
        Edge MQTT broker address, e.g. ``"tcp://127.0.0.1:1883"``.
        Bare ``host[:port]`` is accepted as well.
    device_id : str
        KubeEdge device identifier used in every topic.
    username : str
        Optional MQTT username.  When empty no credentials are sent.
    password : str
        Optional MQTT password.  Only sent together with a username.
    client_id : str or None
        MQTT client id.  Defaults to ``device_id``.
    topic_prefix : str
        Device event namespace prepended to every topic.
    twin_field : str
        Twin property name used by :meth:`TwinSyncClient.update`.
    sync_delay : float
        Seconds to pause between the edge publish and the cloud publish.
    ack_timeout : float or None
        Seconds to wait for a publish acknowledgment.  ``None`` waits
        indefinitely.
    qos : int
        MQTT QoS level for every publish (0, 1 or 2).
    keepalive : int
        MQTT keepalive in seconds.
    tls_insecure : bool
        Skip broker certificate verification on TLS connections.
    """

    broker: str
    device_id: str
    username: str = ""
    password: str = dataclasses.field(default="", repr=False)
    client_id: str | None = None
    topic_prefix: str = DEVICE_TOPIC_PREFIX
    twin_field: str = DEFAULT_TWIN_FIELD
    sync_delay: float = DEFAULT_SYNC_DELAY
    ack_timeout: float | None = None
    qos: int = 0
    keepalive: int = DEFAULT_KEEPALIVE
    tls_insecure: bool = True

    def __post_init__(self) -> None:
        if not self.broker.strip():
            raise KubeEdgeConfigError("broker must be non-empty")
        if not self.device_id.strip():
            raise KubeEdgeConfigError("device_id must be non-empty")
        if not self.twin_field:
            raise KubeEdgeConfigError("twin_field must be non-empty")
        if math.isnan(self.sync_delay) or self.sync_delay < 0:
            raise KubeEdgeConfigError(f"sync_delay must be >= 0, got {self.sync_delay}")
        if self.ack_timeout is not None and self.ack_timeout <= 0:
            raise KubeEdgeConfigError(f"ack_timeout must be > 0 or None, got {self.ack_timeout}")
        if self.qos not in (0, 1, 2):
            raise KubeEdgeConfigError(f"qos must be 0, 1 or 2, got {self.qos}")
        if self.keepalive <= 0:
            raise KubeEdgeConfigError(f"keepalive must be > 0, got {self.keepalive}")

    @property
    def effective_client_id(self) -> str:
        """Client id sent to the broker."""
        return self.client_id or self.device_id

    @classmethod
    def from_env(cls, **overrides: Any) -> KubeEdgeConfig:
        """Create configuration from environment variables.

        Reads ``KUBEEDGE_BROKER``, ``KUBEEDGE_DEVICE_ID`` and the optional
        ``KUBEEDGE_*`` variables listed below.  Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        KubeEdgeConfig
            Populated configuration.

        Raises
        ------
        KubeEdgeConfigError
            If a required value is missing or a numeric variable is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "KUBEEDGE_BROKER": "broker",
            "KUBEEDGE_DEVICE_ID": "device_id",
            "KUBEEDGE_USERNAME": "username",
            "KUBEEDGE_PASSWORD": "password",
            "KUBEEDGE_CLIENT_ID": "client_id",
            "KUBEEDGE_TOPIC_PREFIX": "topic_prefix",
            "KUBEEDGE_TWIN_FIELD": "twin_field",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            delay_env = env.get("KUBEEDGE_SYNC_DELAY")
            if delay_env is not None and "sync_delay" not in overrides:
                config_kwargs["sync_delay"] = float(delay_env)

            timeout_env = env.get("KUBEEDGE_ACK_TIMEOUT")
            if timeout_env is not None and "ack_timeout" not in overrides:
                config_kwargs["ack_timeout"] = _env_optional_float(timeout_env)

            qos_env = env.get("KUBEEDGE_QOS")
            if qos_env is not None and "qos" not in overrides:
                config_kwargs["qos"] = int(qos_env)

            keepalive_env = env.get("KUBEEDGE_KEEPALIVE")
            if keepalive_env is not None and "keepalive" not in overrides:
                config_kwargs["keepalive"] = int(keepalive_env)
        except ValueError as exc:
            raise KubeEdgeConfigError(f"Malformed numeric environment value: {exc}") from exc

        if "tls_insecure" not in overrides:
            config_kwargs["tls_insecure"] = _env_bool(env.get("KUBEEDGE_TLS_INSECURE"), True)

        config_kwargs.update(overrides)

        for required in ("broker", "device_id"):
            if required not in config_kwargs:
                raise KubeEdgeConfigError(
                    f"Missing {required!r}: pass it explicitly or set KUBEEDGE_{required.upper()}"
                )

        return cls(**config_kwargs)
