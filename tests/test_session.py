import json

import httpx
import pytest

from vm6cli.api.exceptions import (
    APIError,
    AuthenticationError,
    DecodeError,
    NetworkError,
    PermissionError,
    ResourceNotFoundError,
)
from vm6cli.api.session import TOKEN_HEADER, Session

from .conftest import API_URL, MockAPI

AUTH_URL = "https://vm.example.com/auth/v4/public/token"


def make_session(api: MockAPI) -> Session:
    return Session(API_URL, auth_url=AUTH_URL, client=api.client())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error",
    [
        (401, AuthenticationError),
        (403, PermissionError),
        (404, ResourceNotFoundError),
        (500, APIError),
        (503, APIError),
    ],
)
async def test_http_errors_map_to_exceptions(api: MockAPI, status: int, error: type) -> None:
    api.add("GET", "/host", httpx.Response(status, json={"error": {"msg": "nope"}}))

    with pytest.raises(error):
        await make_session(api).get_json("/host")


@pytest.mark.asyncio
async def test_api_error_carries_status_and_server_message(api: MockAPI) -> None:
    api.add("POST", "/host", httpx.Response(500, json={"error": {"code": 1, "msg": "db is down"}}))

    with pytest.raises(APIError, match="db is down") as exc_info:
        await make_session(api).post_json("/host", body={})

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_transport_failures_are_network_errors(api: MockAPI) -> None:
    api.add("GET", "/node", httpx.ConnectError("connection refused"))
    api.add("GET", "/host", httpx.ReadTimeout("slow"))
    session = make_session(api)

    with pytest.raises(NetworkError, match="connection refused"):
        await session.get_json("/node")
    with pytest.raises(NetworkError, match="timed out"):
        await session.get_json("/host")


@pytest.mark.asyncio
async def test_empty_body_decodes_to_none(api: MockAPI) -> None:
    api.add("DELETE", "/host/3", httpx.Response(200, content=b""))

    assert await make_session(api).delete_json("/host/3") is None


@pytest.mark.asyncio
async def test_invalid_json_is_a_decode_error(api: MockAPI) -> None:
    api.add("GET", "/host", httpx.Response(200, content=b"<html>gateway</html>"))

    with pytest.raises(DecodeError, match="GET /host"):
        await make_session(api).get_json("/host")


@pytest.mark.asyncio
async def test_token_query_and_body_are_sent(api: MockAPI) -> None:
    api.add("POST", "/host/3/password", {"task": 1})
    session = make_session(api)
    session.set_api_token("abc")

    await session.post_json("/host/3/password", body={"password": "pw"}, params={"x": "1"})

    request = api.requests[-1]
    assert request.headers[TOKEN_HEADER] == "abc"
    assert request.url.params["x"] == "1"
    assert json.loads(request.read()) == {"password": "pw"}


@pytest.mark.asyncio
async def test_login_stores_token(api: MockAPI) -> None:
    api.add("POST", "/auth/v4/public/token", {"token": "fresh", "expires_at": "later"})
    api.add("GET", "/node", {"list": []})
    session = make_session(api)

    await session.login("admin@example.com", "pw")
    await session.get_json("/node")

    assert session.authenticated
    assert api.requests[-1].headers[TOKEN_HEADER] == "fresh"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [httpx.Response(401, json={}), httpx.Response(200, json={"no": "token"}), httpx.ConnectError("refused")],
)
async def test_login_failures(api: MockAPI, response: object) -> None:
    api.add("POST", "/auth/v4/public/token", response)

    with pytest.raises(AuthenticationError):
        await make_session(api).login("admin@example.com", "bad")


@pytest.mark.asyncio
async def test_delete_discards_body(api: MockAPI) -> None:
    api.add("DELETE", "/disk/9", {"whatever": True})

    assert await make_session(api).delete("/disk/9") is None
