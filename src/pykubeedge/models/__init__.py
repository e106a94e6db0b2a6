"""Twin document models."""

from pykubeedge.models._base import TwinBaseModel, serialize_document
from pykubeedge.models.twin import (
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

__all__ = [
    "BaseMessage",
    "DeviceState",
    "DeviceStateUpdate",
    "DeviceTwinUpdate",
    "MsgTwin",
    "TwinBaseModel",
    "TwinValue",
    "TwinVersion",
    "TypeMetadata",
    "ValueMetadata",
    "serialize_document",
]
