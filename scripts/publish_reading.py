#!/usr/bin/env python3
"""Publish one sensor reading to a KubeEdge edge node.

The script:
1) connects to the edge MQTT broker,
2) marks the device ``online``,
3) publishes the reading to the edge twin topic, waits, then to the cloud topic,
4) marks the device ``offline`` (unless ``--keep-online``).

Unset flags fall back to the ``KUBEEDGE_*`` environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pykubeedge import (  # noqa: E402
    DeviceState,
    KubeEdgeConfig,
    KubeEdgeConfigError,
    KubeEdgeFatalError,
    TwinSyncClient,
)

_LOG = logging.getLogger("publish_reading")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("value", help="Reading to publish, e.g. 42.5")
    parser.add_argument("--broker", help="Broker address, e.g. tcp://127.0.0.1:1883")
    parser.add_argument("--device-id", help="KubeEdge device id")
    parser.add_argument("--username", help="MQTT username")
    parser.add_argument("--password", help="MQTT password")
    parser.add_argument("--field", dest="twin_field", help="Twin property name")
    parser.add_argument("--delay", dest="sync_delay", type=float, help="Seconds between edge and cloud publish")
    parser.add_argument("--ack-timeout", type=float, help="Seconds to wait for each publish ack")
    parser.add_argument("--keep-online", action="store_true", help="Do not mark the device offline afterwards")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> KubeEdgeConfig:
    overrides: dict[str, Any] = {}
    for name in ("broker", "device_id", "username", "password", "twin_field", "sync_delay", "ack_timeout"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return KubeEdgeConfig.from_env(**overrides)


async def _run(config: KubeEdgeConfig, value: str, *, keep_online: bool) -> int:
    async with TwinSyncClient(config) as client:
        await client.change_sensor_status(DeviceState.ONLINE)
        result = await client.update(value)
        for phase, outcome in (("edge", result.edge), ("cloud", result.cloud)):
            if outcome.ok:
                _LOG.info("%s update published to %s", phase, outcome.topic)
            else:
                _LOG.warning("%s update to %s failed: %s", phase, outcome.topic, outcome.error)
        if not keep_online:
            await client.change_sensor_status(DeviceState.OFFLINE)
    return 0 if result.ok else 2


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        config = _config_from_args(args)
    except KubeEdgeConfigError as exc:
        _LOG.error("Invalid configuration: %s", exc)
        return 1
    try:
        return asyncio.run(_run(config, args.value, keep_online=args.keep_online))
    except KubeEdgeFatalError as exc:
        _LOG.error("Fatal: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
