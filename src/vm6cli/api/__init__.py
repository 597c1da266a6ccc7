"""API client, transport and task handling."""

from .client import VMManagerClient
from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigError,
    DecodeError,
    EmptyResponseError,
    FieldMissingError,
    NetworkError,
    PermissionError,
    RemoteTaskError,
    ResourceNotFoundError,
    TaskFailedError,
    TimeoutError,
    TransportError,
    VM6CliError,
)
from .fetcher import RetryableJSONFetcher
from .orchestrator import MutationOrchestrator, MutationSpec
from .session import Session
from .tasks import TaskOutcomePoller

__all__ = [
    "APIError",
    "AuthenticationError",
    "ConfigError",
    "DecodeError",
    "EmptyResponseError",
    "FieldMissingError",
    "MutationOrchestrator",
    "MutationSpec",
    "NetworkError",
    "PermissionError",
    "RemoteTaskError",
    "ResourceNotFoundError",
    "RetryableJSONFetcher",
    "Session",
    "TaskFailedError",
    "TaskOutcomePoller",
    "TimeoutError",
    "TransportError",
    "VM6CliError",
    "VMManagerClient",
]
