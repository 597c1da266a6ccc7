"""Custom exceptions for vm6cli API interactions."""

from typing import Any


class VM6CliError(Exception):
    """Base exception for vm6cli."""

    pass


class ConfigError(VM6CliError):
    """Configuration related errors."""

    pass


class AuthenticationError(VM6CliError):
    """Authentication failures."""

    pass


class TransportError(VM6CliError):
    """Failure to get a usable HTTP response from the API."""

    pass


class NetworkError(TransportError):
    """Network related errors, including request timeouts."""

    pass


class APIError(TransportError):
    """General API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
        """
        super().__init__(message)
        self.status_code = status_code


class PermissionError(APIError):
    """Permission denied (403)."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, status_code=403)


class DecodeError(VM6CliError):
    """Response body is not the JSON shape the operation expects."""

    def __init__(self, message: str, context: str | None = None) -> None:
        """Initialize decode error.

        Args:
            message: Error message
            context: Operation that produced the response
        """
        if context:
            message = f"{message} ({context})"
        super().__init__(message)
        self.context = context


class EmptyResponseError(DecodeError):
    """A mutating call returned no body at all."""

    def __init__(self, context: str) -> None:
        super().__init__("Empty response from server", context=context)


class ResourceNotFoundError(VM6CliError):
    """Requested entity is absent."""

    def __init__(self, resource: str, identifier: Any) -> None:
        """Initialize resource not found error.

        Args:
            resource: Type of resource (VM, disk, etc.)
            identifier: Resource identifier
        """
        super().__init__(f"{resource} '{identifier}' not found")
        self.resource = resource
        self.identifier = identifier


class FieldMissingError(VM6CliError):
    """A well-formed response lacks a required field."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Field '{field}' missing from response")
        self.field = field


class RemoteTaskError(VM6CliError):
    """The server embedded an error object in a mutation response."""

    def __init__(self, payload: Any, rendered: str) -> None:
        """Initialize remote task error.

        Args:
            payload: Decoded ``error`` member of the response
            rendered: Pretty-printed JSON of the payload
        """
        super().__init__(f"Error response: {rendered}")
        self.payload = payload


class TimeoutError(VM6CliError):
    """A deferred task did not complete within the wait budget."""

    def __init__(self, message: str, task_id: int | None = None, waited: float = 0) -> None:
        super().__init__(message)
        self.task_id = task_id
        self.waited = waited


class TaskFailedError(VM6CliError):
    """A task reached a terminal status other than success."""

    def __init__(self, task_id: int, status: str) -> None:
        super().__init__(f"Task {task_id} failed with status: {status}")
        self.task_id = task_id
        self.status = status
