from __future__ import annotations

import pytest

from pykubeedge.config import KubeEdgeConfig
from pykubeedge.exceptions import KubeEdgeConfigError

_ENV_KEYS = (
    "KUBEEDGE_BROKER",
    "KUBEEDGE_DEVICE_ID",
    "KUBEEDGE_USERNAME",
    "KUBEEDGE_PASSWORD",
    "KUBEEDGE_CLIENT_ID",
    "KUBEEDGE_TOPIC_PREFIX",
    "KUBEEDGE_TWIN_FIELD",
    "KUBEEDGE_SYNC_DELAY",
    "KUBEEDGE_ACK_TIMEOUT",
    "KUBEEDGE_QOS",
    "KUBEEDGE_KEEPALIVE",
    "KUBEEDGE_TLS_INSECURE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = KubeEdgeConfig(broker="tcp://broker:1883", device_id="dev-1")
    assert config.topic_prefix == "$hw/events/device/"
    assert config.twin_field == "CPU_Temperatur"
    assert config.sync_delay == 2.0
    assert config.ack_timeout is None
    assert config.qos == 0
    assert config.tls_insecure is True
    assert config.effective_client_id == "dev-1"


def test_password_not_in_repr() -> None:
    config = KubeEdgeConfig(broker="b", device_id="d", username="user", password="hunter2")
    assert "hunter2" not in repr(config)
    assert "user" in repr(config)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"broker": "", "device_id": "d"},
        {"broker": "b", "device_id": "  "},
        {"broker": "b", "device_id": "d", "sync_delay": -1},
        {"broker": "b", "device_id": "d", "ack_timeout": 0},
        {"broker": "b", "device_id": "d", "qos": 3},
        {"broker": "b", "device_id": "d", "keepalive": 0},
        {"broker": "b", "device_id": "d", "twin_field": ""},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(KubeEdgeConfigError):
        KubeEdgeConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBEEDGE_BROKER", "ssl://edge:8883")
    monkeypatch.setenv("KUBEEDGE_DEVICE_ID", "sensor-7")
    monkeypatch.setenv("KUBEEDGE_USERNAME", "mapper")
    monkeypatch.setenv("KUBEEDGE_PASSWORD", "pw")
    monkeypatch.setenv("KUBEEDGE_SYNC_DELAY", "0.5")
    monkeypatch.setenv("KUBEEDGE_ACK_TIMEOUT", "3")
    monkeypatch.setenv("KUBEEDGE_QOS", "1")
    monkeypatch.setenv("KUBEEDGE_TLS_INSECURE", "no")

    config = KubeEdgeConfig.from_env()

    assert config.broker == "ssl://edge:8883"
    assert config.device_id == "sensor-7"
    assert (config.username, config.password) == ("mapper", "pw")
    assert config.sync_delay == 0.5
    assert config.ack_timeout == 3.0
    assert config.qos == 1
    assert config.tls_insecure is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBEEDGE_BROKER", "tcp://env:1883")
    monkeypatch.setenv("KUBEEDGE_DEVICE_ID", "env-device")
    monkeypatch.setenv("KUBEEDGE_SYNC_DELAY", "9")

    config = KubeEdgeConfig.from_env(device_id="explicit", sync_delay=0.0)

    assert config.broker == "tcp://env:1883"
    assert config.device_id == "explicit"
    assert config.sync_delay == 0.0


def test_from_env_ack_timeout_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBEEDGE_ACK_TIMEOUT", "none")
    config = KubeEdgeConfig.from_env(broker="b", device_id="d")
    assert config.ack_timeout is None


def test_from_env_missing_required() -> None:
    with pytest.raises(KubeEdgeConfigError, match="broker"):
        KubeEdgeConfig.from_env(device_id="d")


def test_from_env_malformed_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBEEDGE_QOS", "high")
    with pytest.raises(KubeEdgeConfigError, match="Malformed"):
        KubeEdgeConfig.from_env(broker="b", device_id="d")
