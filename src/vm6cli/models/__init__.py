"""Data models."""

from .config import AuthConfig, OutputConfig, ProfileConfig
from .task import (
    TASK_STATUS_COMPLETE,
    DeferredTask,
    Malformed,
    RemoteError,
    SyncResult,
    TaskAcknowledgement,
    TaskRecord,
    TaskStatus,
    decode_acknowledgement,
)
from .vm import (
    DiskResize,
    NodeInfo,
    ReinstallParams,
    VMConfigUpdate,
    VMCreateParams,
    VMInfo,
    VmRef,
    VMResources,
)

__all__ = [
    "AuthConfig",
    "DeferredTask",
    "DiskResize",
    "Malformed",
    "NodeInfo",
    "OutputConfig",
    "ProfileConfig",
    "ReinstallParams",
    "RemoteError",
    "SyncResult",
    "TASK_STATUS_COMPLETE",
    "TaskAcknowledgement",
    "TaskRecord",
    "TaskStatus",
    "VMConfigUpdate",
    "VMCreateParams",
    "VMInfo",
    "VmRef",
    "VMResources",
    "decode_acknowledgement",
]
