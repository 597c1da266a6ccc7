"""Polling of deferred server-side tasks."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from ..models.task import TaskRecord, TaskStatus
from .exceptions import DecodeError, TaskFailedError, TimeoutError, VM6CliError
from .session import Session

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]

TERMINAL_FAILURE_STATUSES = frozenset({"failed", "error", "canceled"})


class TaskOutcomePoller:
    """Wait for a task to reach the ``complete`` status.

    By default anything other than ``complete`` (an empty listing, a failed
    query, or some other status label) is treated as still running until the
    deadline. With ``fail_on_terminal_status`` a label from
    ``TERMINAL_FAILURE_STATUSES`` ends the wait immediately.
    """

    def __init__(
        self,
        session: Session,
        timeout: float = 300,
        poll_interval: float = 5,
        fail_on_terminal_status: bool = False,
        sleep: Sleep | None = None,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.session = session
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.fail_on_terminal_status = fail_on_terminal_status
        self._sleep = sleep or asyncio.sleep

    async def query(self, task_id: int) -> TaskStatus:
        """Fetch the current status of a task.

        Args:
            task_id: Task ID from a mutation acknowledgement

        Returns:
            Task status (no records if the task isn't visible yet)

        Raises:
            AuthenticationError: If the session is rejected
            TransportError: On request failures
            DecodeError: If the listing has an unexpected shape
        """
        context = f"status of task {task_id}"
        data = await self.session.get_json("/task", params={"where": f"consul_id EQ {task_id}"})
        if data is None:
            return TaskStatus(task_id=task_id)
        if not isinstance(data, dict):
            raise DecodeError("Expected a JSON object", context=context)

        items = data.get("list") or []
        if not isinstance(items, list):
            raise DecodeError("'list' is not an array", context=context)
        try:
            records = [TaskRecord.model_validate(item) for item in items]
        except ValidationError as e:
            raise DecodeError(f"Invalid task record: {e.error_count()} validation error(s)", context=context)
        return TaskStatus(task_id=task_id, records=records)

    async def wait(self, task_id: int, timeout: float | None = None) -> TaskStatus:
        """Poll until the task completes or the wait budget is spent.

        Args:
            task_id: Task ID
            timeout: Wait budget in seconds (defaults to the configured one)

        Returns:
            Final task status

        Raises:
            TimeoutError: If the task didn't complete within the budget
            TaskFailedError: On a terminal failure status, when enabled
        """
        budget = self.timeout if timeout is None else timeout
        if budget < 0:
            raise ValueError("timeout must not be negative")

        waited: float = 0
        while waited < budget:
            try:
                status = await self.query(task_id)
            except VM6CliError as e:
                logger.debug("Task %s status query failed: %s", task_id, e)
            else:
                if status.is_complete:
                    logger.debug("Task %s complete after %ss", task_id, waited)
                    return status
                label = status.label
                logger.debug("Task %s status: %s", task_id, label or "not found yet")
                if self.fail_on_terminal_status and label in TERMINAL_FAILURE_STATUSES:
                    raise TaskFailedError(task_id, label)

            await self._sleep(self.poll_interval)
            waited += self.poll_interval

        raise TimeoutError(f"Wait timeout for task {task_id} after {waited}s", task_id=task_id, waited=waited)
