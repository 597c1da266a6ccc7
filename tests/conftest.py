from typing import Any

import httpx
import pytest

from vm6cli.api.client import VMManagerClient
from vm6cli.models.config import AuthConfig, ProfileConfig

API_URL = "https://vm.example.com/vm/v3"
API_PREFIX = "/vm/v3"


class SleepRecorder:
    """Stand-in for asyncio.sleep that only records the requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


class MockAPI:
    """Scripted VMmanager server behind httpx.MockTransport.

    Responses queued for a route are served in order; the last one repeats.
    A queued dict is served as a 200 JSON body, an httpx.Response as is, and
    an exception is raised from the transport.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"error": {"msg": f"no route for {path}"}})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == API_PREFIX + path
        ]


@pytest.fixture
def profile() -> ProfileConfig:
    return ProfileConfig(
        api_url=API_URL,
        auth=AuthConfig(type="token", token="secret-token"),
        task_timeout=30,
        poll_interval=5,
    )


@pytest.fixture
def api() -> MockAPI:
    return MockAPI()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def client(profile: ProfileConfig, api: MockAPI, sleeps: SleepRecorder) -> VMManagerClient:
    vm_client = VMManagerClient(profile, http_client=api.client(), sleep=sleeps)
    vm_client.set_api_token("secret-token")
    return vm_client
