"""Submission of mutating calls and resolution of their acknowledgements."""

import json
import logging
from typing import Any

from pydantic import BaseModel

from ..models.task import DeferredTask, Malformed, RemoteError, decode_acknowledgement
from .exceptions import DecodeError, EmptyResponseError, FieldMissingError, RemoteTaskError
from .session import Session
from .tasks import TaskOutcomePoller

logger = logging.getLogger(__name__)


class MutationSpec(BaseModel):
    """How one kind of mutation is sent and resolved."""

    model_config = {"frozen": True}

    name: str
    method: str
    path: str
    description: str
    waits_for_task: bool = True
    result_field: str | None = None

    def render(self, **args: Any) -> tuple[str, str]:
        """Fill the path and description templates."""
        return self.path.format(**args), self.description.format(**args)


CREATE_VM = MutationSpec(
    name="create_vm", method="POST", path="/host",
    description="create VM {name}", result_field="id",
)
DELETE_VM = MutationSpec(
    name="delete_vm", method="DELETE", path="/host/{vm_id}",
    description="delete VM {vm_id}",
)
UPDATE_RESOURCES = MutationSpec(
    name="update_resources", method="POST", path="/host/{vm_id}/resource",
    description="update VM {vm_id} resources",
)
RESIZE_DISK = MutationSpec(
    name="resize_disk", method="POST", path="/disk/{disk_id}",
    description="update disk {disk_id} size",
)
# Config edits return without waiting for any task they start.
UPDATE_CONFIG = MutationSpec(
    name="update_config", method="POST", path="/host/{vm_id}",
    description="update VM {vm_id} config", waits_for_task=False,
)
REINSTALL = MutationSpec(
    name="reinstall", method="POST", path="/host/{vm_id}/reinstall",
    description="reinstall VM {vm_id}",
)
CHANGE_PASSWORD = MutationSpec(
    name="change_password", method="POST", path="/host/{vm_id}/password",
    description="change VM {vm_id} password",
)
CHANGE_OWNER = MutationSpec(
    name="change_owner", method="POST", path="/host/{vm_id}/account",
    description="change VM {vm_id} owner",
)

MUTATIONS = {
    spec.name: spec
    for spec in (
        CREATE_VM,
        DELETE_VM,
        UPDATE_RESOURCES,
        RESIZE_DISK,
        UPDATE_CONFIG,
        REINSTALL,
        CHANGE_PASSWORD,
        CHANGE_OWNER,
    )
}


class MutationOrchestrator:
    """Send a mutation once and turn its acknowledgement into an outcome."""

    def __init__(
        self,
        session: Session,
        poller: TaskOutcomePoller,
        task_timeout: float | None = None,
    ) -> None:
        self.session = session
        self.poller = poller
        self.task_timeout = poller.timeout if task_timeout is None else task_timeout

    async def _send(self, method: str, path: str, payload: Any) -> Any:
        if method == "POST":
            return await self.session.post_json(path, body=payload)
        if method == "DELETE":
            return await self.session.delete_json(path, body=payload)
        raise ValueError(f"Unsupported mutation method: {method}")

    async def submit(
        self,
        method: str,
        path: str,
        payload: Any = None,
        *,
        description: str | None = None,
        waits_for_task: bool = True,
        result_field: str | None = None,
    ) -> Any:
        """Perform a mutating call and wait for its task if one was started.

        Args:
            method: HTTP method (POST or DELETE)
            path: Endpoint path
            payload: JSON body
            description: Human-readable operation, used in errors
            waits_for_task: Poll a deferred task to completion
            result_field: Acknowledgement member to return

        Returns:
            The ``result_field`` value if requested, else the acknowledgement

        Raises:
            EmptyResponseError: If the server returned no body
            RemoteTaskError: If the response carries an ``error`` member
            DecodeError: If the response has no recognisable shape
            FieldMissingError: If ``result_field`` is absent
            TimeoutError: If the task didn't complete in time
        """
        context = description or f"{method} {path}"
        body = await self._send(method, path, payload)
        if body is None:
            raise EmptyResponseError(context)

        ack = decode_acknowledgement(body)

        if isinstance(ack, RemoteError):
            raise RemoteTaskError(ack.error, json.dumps(ack.error, indent=2, ensure_ascii=False))
        if isinstance(ack, Malformed):
            raise DecodeError(f"Unexpected response: {ack.reason}", context=context)

        if isinstance(ack, DeferredTask):
            if waits_for_task:
                logger.debug("%s deferred to task %s", context, ack.task)
                await self.poller.wait(ack.task, self.task_timeout)
            else:
                logger.debug("%s started task %s, not waiting", context, ack.task)

        if result_field is None:
            return ack
        value = ack.field(result_field)
        if value is None:
            raise FieldMissingError(result_field, f"Field '{result_field}' missing from response to {context}")
        return value

    async def run(self, spec: MutationSpec, payload: Any = None, **args: Any) -> Any:
        """Submit a mutation described by a MutationSpec.

        Args:
            spec: Operation definition
            payload: JSON body
            **args: Values for the path and description templates
        """
        path, description = spec.render(**args)
        return await self.submit(
            spec.method,
            path,
            payload,
            description=description,
            waits_for_task=spec.waits_for_task,
            result_field=spec.result_field,
        )
