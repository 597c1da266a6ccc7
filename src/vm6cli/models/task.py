"""Task models: mutation acknowledgements and task status listings."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

TASK_STATUS_COMPLETE = "complete"


class _Acknowledgement(BaseModel):
    model_config = {"frozen": True}

    payload: dict[str, Any] = Field(default_factory=dict)

    def field(self, name: str) -> Any:
        """Return a payload member, or None when absent."""
        return self.payload.get(name)


class SyncResult(_Acknowledgement):
    """The mutation completed within the request."""

    kind: Literal["sync"] = "sync"


class DeferredTask(_Acknowledgement):
    """The mutation continues in a server-side task that must be polled."""

    kind: Literal["deferred"] = "deferred"
    task: int


class RemoteError(_Acknowledgement):
    """The server rejected the mutation."""

    kind: Literal["error"] = "error"
    error: Any


class Malformed(_Acknowledgement):
    """The body fits none of the known shapes."""

    kind: Literal["malformed"] = "malformed"
    raw: Any = None
    reason: str = ""


TaskAcknowledgement = Annotated[
    Union[SyncResult, DeferredTask, RemoteError, Malformed],
    Field(discriminator="kind"),
]


def _as_task_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def decode_acknowledgement(body: Any) -> TaskAcknowledgement:
    """Classify a decoded mutation response.

    ``error`` wins over ``task``; a body with neither must carry some other
    member (an assigned ``id`` for instance) to count as a synchronous result.

    Args:
        body: Decoded JSON body (not None)

    Returns:
        One of SyncResult, DeferredTask, RemoteError or Malformed
    """
    if not isinstance(body, dict):
        return Malformed(raw=body, reason=f"expected a JSON object, got {type(body).__name__}")

    if body.get("error") is not None:
        return RemoteError(error=body["error"], payload=body)

    if body.get("task") is not None:
        task_id = _as_task_id(body["task"])
        if task_id is None:
            return Malformed(raw=body, payload=body, reason=f"task id {body['task']!r} is not an integer")
        return DeferredTask(task=task_id, payload=body)

    if not any(value is not None for value in body.values()):
        return Malformed(raw=body, payload=body, reason="no error, task or result fields")

    return SyncResult(payload=body)


class TaskRecord(BaseModel):
    """One entry of a /task listing."""

    model_config = {"extra": "allow"}

    status: str
    consul_id: int | None = None
    name: str | None = None


class TaskStatus(BaseModel):
    """Result of querying a task id."""

    task_id: int
    records: list[TaskRecord] = Field(default_factory=list)

    @property
    def label(self) -> str | None:
        return self.records[0].status if self.records else None

    @property
    def is_pending(self) -> bool:
        return not self.records

    @property
    def is_complete(self) -> bool:
        return self.label == TASK_STATUS_COMPLETE
