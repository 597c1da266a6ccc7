from typing import Any

import pytest

from vm6cli.api.exceptions import (
    AuthenticationError,
    DecodeError,
    NetworkError,
    PermissionError,
    ResourceNotFoundError,
    TaskFailedError,
    TimeoutError,
)
from vm6cli.api.tasks import TaskOutcomePoller

from .conftest import SleepRecorder

COMPLETE = {"list": [{"status": "complete", "consul_id": 42}]}
RUNNING = {"list": [{"status": "running", "consul_id": 42}]}
NOT_YET = {"list": []}


class ScriptedSession:
    """Replays task listings; the last outcome repeats."""

    def __init__(self, outcomes: list[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, Any]] = []

    async def get_json(self, path: str, params: Any = None, headers: Any = None) -> Any:
        self.calls.append((path, params))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_poller(outcomes: list[Any], **kwargs: Any) -> tuple[TaskOutcomePoller, ScriptedSession, SleepRecorder]:
    session = ScriptedSession(outcomes)
    sleeps = SleepRecorder()
    kwargs.setdefault("timeout", 30)
    kwargs.setdefault("poll_interval", 5)
    return TaskOutcomePoller(session, sleep=sleeps, **kwargs), session, sleeps


@pytest.mark.asyncio
async def test_complete_on_first_poll_returns_without_sleeping() -> None:
    poller, session, sleeps = make_poller([COMPLETE])

    status = await poller.wait(42)

    assert status.is_complete
    assert session.calls == [("/task", {"where": "consul_id EQ 42"})]
    assert sleeps.calls == []


@pytest.mark.asyncio
async def test_complete_on_second_poll_sleeps_one_interval() -> None:
    poller, session, sleeps = make_poller([NOT_YET, COMPLETE])

    await poller.wait(42)

    assert len(session.calls) == 2
    assert sleeps.calls == [5]


@pytest.mark.asyncio
async def test_times_out_within_one_interval_of_deadline() -> None:
    poller, session, sleeps = make_poller([RUNNING], timeout=12)

    with pytest.raises(TimeoutError) as exc_info:
        await poller.wait(42)

    assert exc_info.value.task_id == 42
    assert exc_info.value.waited == 15
    assert len(session.calls) == 3
    assert sleeps.calls == [5, 5, 5]


@pytest.mark.asyncio
async def test_explicit_timeout_overrides_configured_one() -> None:
    poller, session, _ = make_poller([NOT_YET], timeout=300)

    with pytest.raises(TimeoutError):
        await poller.wait(42, timeout=10)

    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_zero_timeout_fails_without_polling() -> None:
    poller, session, sleeps = make_poller([COMPLETE])

    with pytest.raises(TimeoutError):
        await poller.wait(42, timeout=0)

    assert session.calls == []
    assert sleeps.calls == []


@pytest.mark.asyncio
async def test_query_errors_and_other_statuses_keep_waiting() -> None:
    poller, session, sleeps = make_poller([
        NetworkError("down"),
        {"list": None},
        {"list": [{"no_status": True}]},
        {"list": [{"status": "failed"}]},
        COMPLETE,
    ])

    status = await poller.wait(42)

    assert status.label == "complete"
    assert len(session.calls) == 5
    assert sleeps.calls == [5, 5, 5, 5]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [AuthenticationError("token expired"), PermissionError(), ResourceNotFoundError("resource", "/task")],
)
async def test_rejected_status_queries_keep_waiting(error: Exception) -> None:
    poller, session, sleeps = make_poller([error, COMPLETE])

    status = await poller.wait(42)

    assert status.is_complete
    assert len(session.calls) == 2
    assert sleeps.calls == [5]


@pytest.mark.asyncio
async def test_rejected_status_queries_still_time_out() -> None:
    poller, session, _ = make_poller([AuthenticationError("token expired")], timeout=10)

    with pytest.raises(TimeoutError):
        await poller.wait(42)

    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_terminal_failure_raises_when_enabled() -> None:
    poller, session, _ = make_poller([NOT_YET, {"list": [{"status": "failed"}]}], fail_on_terminal_status=True)

    with pytest.raises(TaskFailedError) as exc_info:
        await poller.wait(42)

    assert exc_info.value.status == "failed"
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_query_reports_pending_and_rejects_bad_records() -> None:
    poller, _, _ = make_poller([None])
    assert (await poller.query(7)).is_pending

    poller, _, _ = make_poller([{"list": "nope"}])
    with pytest.raises(DecodeError):
        await poller.query(7)


def test_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        TaskOutcomePoller(ScriptedSession([COMPLETE]), poll_interval=0)
