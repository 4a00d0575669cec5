"""Tests for the httpx transport."""

import json

import httpx
import pytest

from dino_http import HTTPXTransport, ProxyConfig, RequestDescriptor, TransportError
from dino_http.transport import join_url


def make_transport(handler):
    return HTTPXTransport(transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "base_url, url, expected",
    [
        ("https://api.test/v1/", "/users", "https://api.test/v1/users"),
        ("https://api.test/v1", "users", "https://api.test/v1/users"),
        ("https://api.test", "https://other.test/x", "https://other.test/x"),
        (None, "https://api.test/x", "https://api.test/x"),
        ("https://api.test", "", "https://api.test"),
    ],
)
def test_join_url(base_url, url, expected):
    assert join_url(base_url, url) == expected


@pytest.mark.asyncio
async def test_json_request_and_response():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"code": 0, "data": {"user_id": 1}})

    transport = make_transport(handler)
    response = await transport(
        RequestDescriptor(
            url="/users",
            method="POST",
            base_url="https://api.test",
            headers={"Content-Type": "application/json", "X-App": "dino"},
            params={"pn": 0, "filter": {"status": 1}, "ids": [1, 2]},
            data={"body": {"name": "dino"}},
        )
    )

    sent = captured["request"]
    assert sent.method == "POST"
    assert sent.url.path == "/users"
    assert sent.url.params.get("pn") == "0"
    assert sent.url.params.get("filter[status]") == "1"
    assert sent.url.params.get_list("ids") == ["1", "2"]
    assert sent.headers["X-App"] == "dino"
    assert json.loads(sent.content) == {"body": {"name": "dino"}}
    assert response.status == 200
    assert response.body == {"code": 0, "data": {"user_id": 1}}
    await transport.aclose()


@pytest.mark.asyncio
async def test_non_2xx_is_not_an_error():
    transport = make_transport(lambda request: httpx.Response(404, text="missing"))

    response = await transport(RequestDescriptor(url="https://api.test/x"))

    assert response.status == 404
    assert response.body == "missing"


@pytest.mark.asyncio
async def test_string_body_sent_as_content():
    captured = {}

    def handler(request):
        captured["content"] = request.content
        return httpx.Response(200, json={})

    transport = make_transport(handler)
    await transport(
        RequestDescriptor(
            url="https://api.test/form",
            method="POST",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data="a=1&b%5Bc%5D=2",
        )
    )

    assert captured["content"] == b"a=1&b%5Bc%5D=2"


@pytest.mark.asyncio
async def test_multipart_upload_with_progress():
    captured = {}
    events = []

    def handler(request):
        captured["content_type"] = request.headers["Content-Type"]
        captured["content"] = request.read()
        return httpx.Response(200, json={"code": 0})

    transport = make_transport(handler)
    await transport(
        RequestDescriptor(
            url="https://api.test/upload",
            method="POST",
            headers={"Content-Type": "multipart/form-data"},
            data={"file": ("a.txt", b"hello"), "folder": "docs"},
            on_upload_progress=events.append,
        )
    )

    assert captured["content_type"].startswith("multipart/form-data; boundary=")
    assert b"hello" in captured["content"]
    assert b"docs" in captured["content"]
    assert events
    assert events[-1].upload
    assert events[-1].progress == 100.0


@pytest.mark.asyncio
async def test_download_progress():
    events = []
    transport = make_transport(lambda request: httpx.Response(200, content=b"x" * 10))

    response = await transport(
        RequestDescriptor(
            url="https://api.test/file",
            response_type="bytes",
            on_download_progress=events.append,
        )
    )

    assert response.body == b"x" * 10
    assert events[-1].loaded == 10
    assert events[-1].download


@pytest.mark.asyncio
async def test_network_error_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = make_transport(handler)

    with pytest.raises(TransportError) as exc_info:
        await transport(RequestDescriptor(url="https://api.test/x"))

    assert isinstance(exc_info.value.cause, httpx.ConnectError)


@pytest.mark.asyncio
async def test_client_per_proxy():
    transport = make_transport(lambda request: httpx.Response(200, json={}))
    proxy = ProxyConfig(host="127.0.0.1", port=8888)

    await transport(RequestDescriptor(url="https://api.test/x"))
    await transport(RequestDescriptor(url="https://api.test/x", proxy=proxy))
    await transport(RequestDescriptor(url="https://api.test/y", proxy=proxy))

    assert set(transport._clients) == {None, "http://127.0.0.1:8888"}
    await transport.aclose()
    assert transport._clients == {}
