from typing import Any

import pytest

from vm6cli.api.exceptions import (
    DecodeError,
    EmptyResponseError,
    FieldMissingError,
    RemoteTaskError,
    TimeoutError,
)
from vm6cli.api.orchestrator import (
    CREATE_VM,
    DELETE_VM,
    MUTATIONS,
    UPDATE_CONFIG,
    MutationOrchestrator,
)
from vm6cli.models.task import DeferredTask, SyncResult


class RecordingSession:
    def __init__(self, body: Any) -> None:
        self.body = body
        self.calls: list[tuple[str, str, Any]] = []

    async def post_json(self, path: str, body: Any = None, params: Any = None, headers: Any = None) -> Any:
        self.calls.append(("POST", path, body))
        return self.body

    async def delete_json(self, path: str, body: Any = None, params: Any = None, headers: Any = None) -> Any:
        self.calls.append(("DELETE", path, body))
        return self.body


class RecordingPoller:
    def __init__(self, timeout: float = 30, error: Exception | None = None) -> None:
        self.timeout = timeout
        self.error = error
        self.calls: list[tuple[int, float | None]] = []

    async def wait(self, task_id: int, timeout: float | None = None) -> None:
        self.calls.append((task_id, timeout))
        if self.error:
            raise self.error


def make(body: Any, **poller_kwargs: Any) -> tuple[MutationOrchestrator, RecordingSession, RecordingPoller]:
    session = RecordingSession(body)
    poller = RecordingPoller(**poller_kwargs)
    return MutationOrchestrator(session, poller), session, poller


@pytest.mark.asyncio
async def test_error_member_short_circuits_before_polling() -> None:
    orchestrator, _, poller = make({"error": {"code": 5008, "msg": "No free IP"}, "task": 42})

    with pytest.raises(RemoteTaskError) as exc_info:
        await orchestrator.run(CREATE_VM, {"name": "web"}, name="web")

    assert poller.calls == []
    assert exc_info.value.payload == {"code": 5008, "msg": "No free IP"}
    assert '"msg": "No free IP"' in str(exc_info.value)
    assert '\n  "code": 5008' in str(exc_info.value)


@pytest.mark.asyncio
async def test_task_member_invokes_poller_once_with_configured_timeout() -> None:
    orchestrator, session, poller = make({"id": 7, "task": 42}, timeout=120)

    vm_id = await orchestrator.run(CREATE_VM, {"name": "web"}, name="web")

    assert vm_id == 7
    assert session.calls == [("POST", "/host", {"name": "web"})]
    assert poller.calls == [(42, 120)]


@pytest.mark.asyncio
async def test_poller_errors_propagate() -> None:
    orchestrator, _, _ = make({"task": 42}, error=TimeoutError("Wait timeout", task_id=42))

    with pytest.raises(TimeoutError):
        await orchestrator.run(DELETE_VM, vm_id=3)


@pytest.mark.asyncio
async def test_sync_result_is_returned_without_polling() -> None:
    orchestrator, _, poller = make({"id": 9})

    ack = await orchestrator.run(DELETE_VM, vm_id=9)

    assert isinstance(ack, SyncResult)
    assert ack.field("id") == 9
    assert poller.calls == []


@pytest.mark.asyncio
async def test_empty_body_names_the_operation() -> None:
    orchestrator, session, poller = make(None)

    with pytest.raises(EmptyResponseError, match="delete VM 11"):
        await orchestrator.run(DELETE_VM, vm_id=11)

    assert session.calls == [("DELETE", "/host/11", None)]
    assert poller.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"task": None, "error": None}, [], "ok", {"task": "soon"}])
async def test_malformed_body_is_a_decode_error(body: Any) -> None:
    orchestrator, _, poller = make(body)

    with pytest.raises(DecodeError, match="update VM 4 resources"):
        await orchestrator.run(MUTATIONS["update_resources"], {"cpu_number": 2}, vm_id=4)

    assert poller.calls == []


@pytest.mark.asyncio
async def test_missing_result_field() -> None:
    orchestrator, _, _ = make({"task": 42})

    with pytest.raises(FieldMissingError) as exc_info:
        await orchestrator.run(CREATE_VM, {}, name="web")

    assert exc_info.value.field == "id"


@pytest.mark.asyncio
async def test_update_config_does_not_wait_for_its_task() -> None:
    orchestrator, _, poller = make({"id": 5, "task": 77})

    ack = await orchestrator.run(UPDATE_CONFIG, {"name": "db"}, vm_id=5)

    assert isinstance(ack, DeferredTask)
    assert ack.task == 77
    assert poller.calls == []


@pytest.mark.asyncio
async def test_update_config_still_surfaces_remote_errors() -> None:
    orchestrator, _, _ = make({"error": {"msg": "name taken"}})

    with pytest.raises(RemoteTaskError):
        await orchestrator.run(UPDATE_CONFIG, {"name": "db"}, vm_id=5)


def test_only_update_config_skips_waiting() -> None:
    assert {name for name, spec in MUTATIONS.items() if not spec.waits_for_task} == {"update_config"}
    assert len(MUTATIONS) == 8


@pytest.mark.asyncio
async def test_unsupported_method() -> None:
    orchestrator, _, _ = make({"id": 1})

    with pytest.raises(ValueError):
        await orchestrator.submit("PATCH", "/host/1", {})
