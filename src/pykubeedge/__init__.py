"""pykubeedge - Async Python client for KubeEdge device twin synchronization."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pykubeedge")
except PackageNotFoundError:
    __version__ = "0+local"
from pykubeedge.builder import build_state_update, build_twin_update, build_twin_updates
from pykubeedge.client import PublishOutcome, Severity, SyncResult, TwinSyncClient
from pykubeedge.config import KubeEdgeConfig
from pykubeedge.exceptions import (
    KubeEdgeConfigError,
    KubeEdgeError,
    KubeEdgeFatalError,
    KubeEdgeSerializationError,
    KubeEdgeTransportError,
)
from pykubeedge.models import (
    BaseMessage,
    DeviceState,
    DeviceStateUpdate,
    DeviceTwinUpdate,
    MsgTwin,
    TwinValue,
    TwinVersion,
    TypeMetadata,
    ValueMetadata,
)
from pykubeedge.topics import TopicClass, resolve_topic

__all__ = [
    "__version__",
    "BaseMessage",
    "DeviceState",
    "DeviceStateUpdate",
    "DeviceTwinUpdate",
    "KubeEdgeConfig",
    "KubeEdgeConfigError",
    "KubeEdgeError",
    "KubeEdgeFatalError",
    "KubeEdgeSerializationError",
    "KubeEdgeTransportError",
    "MsgTwin",
    "PublishOutcome",
    "Severity",
    "SyncResult",
    "TopicClass",
    "TwinSyncClient",
    "TwinValue",
    "TwinVersion",
    "TypeMetadata",
    "ValueMetadata",
    "build_state_update",
    "build_twin_update",
    "build_twin_updates",
    "resolve_topic",
]
