"""Default transport built on httpx.

``HTTPXTransport`` turns a ``RequestDescriptor`` into an ``httpx.Request``,
sends it, and returns a ``ResponseDescriptor``. It does not interpret the
business envelope and does not treat non-2xx statuses as errors; that is up
to the layers above. Network and timeout failures are raised as
``TransportError``.

One ``httpx.AsyncClient`` is kept per distinct proxy setting, since httpx
configures proxies per client rather than per request.

Example:
    Use a mock transport in tests::

        transport = HTTPXTransport(transport=httpx.MockTransport(handler))
        response = await transport(RequestDescriptor(url="https://api.test/users"))
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx

from . import qs
from .errors import TransportError
from .types import (
    ProgressEvent,
    ProgressHandler,
    ProxyConfig,
    RequestDescriptor,
    ResponseDescriptor,
    ServiceConfig,
)

MULTIPART_FORM_DATA = "multipart/form-data"
UPLOAD_CHUNK_SIZE = 64 * 1024


def join_url(base_url: str | None, url: str) -> str:
    """Join a base URL and a relative URL; absolute URLs win.

    Example:
        >>> join_url("https://api.test/v1/", "/users")
        'https://api.test/v1/users'
    """
    if not base_url or httpx.URL(url).is_absolute_url:
        return url
    if not url:
        return base_url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def _is_file(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, tuple)) or hasattr(value, "read")


class HTTPXTransport:
    """Transport executing requests with ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        verify: bool = True,
        follow_redirects: bool = True,
    ):
        self._transport = transport
        self._verify = verify
        self._follow_redirects = follow_redirects
        self._clients: dict[str | None, httpx.AsyncClient] = {}

    def _client(self, proxy: ProxyConfig | None) -> httpx.AsyncClient:
        """Get or lazily create the client for ``proxy``."""
        key = proxy.url if proxy else None
        client = self._clients.get(key)
        if client is None or client.is_closed:
            kwargs: dict[str, Any] = {
                "verify": self._verify,
                "follow_redirects": self._follow_redirects,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            elif key:
                kwargs["proxy"] = key
            client = httpx.AsyncClient(**kwargs)
            self._clients[key] = client
        return client

    def build_request(self, client: httpx.AsyncClient, request: RequestDescriptor) -> httpx.Request:
        """Translate a descriptor into an ``httpx.Request``."""
        headers = dict(request.headers)
        body: dict[str, Any] = {}
        content_type = (request.header("Content-Type") or "").lower()
        data = request.data

        if data is None:
            pass
        elif isinstance(data, (str, bytes, bytearray)):
            body["content"] = data
        elif content_type.startswith(MULTIPART_FORM_DATA) and isinstance(data, Mapping):
            # httpx generates the multipart boundary itself
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
            body["files"] = {k: v for k, v in data.items() if _is_file(v)}
            body["data"] = {k: v for k, v in data.items() if not _is_file(v)}
        else:
            body["json"] = data

        return client.build_request(
            request.method,
            join_url(request.base_url, request.url),
            params=qs.flatten(request.params) if request.params is not None else None,
            headers=headers,
            timeout=request.timeout if request.timeout is not None else httpx.USE_CLIENT_DEFAULT,
            **body,
        )

    @staticmethod
    def _with_upload_progress(
        http_request: httpx.Request, on_progress: ProgressHandler
    ) -> httpx.Request:
        payload = http_request.read()
        total = len(payload)

        async def chunks():
            loaded = 0
            for start in range(0, total, UPLOAD_CHUNK_SIZE):
                chunk = payload[start : start + UPLOAD_CHUNK_SIZE]
                loaded += len(chunk)
                on_progress(ProgressEvent(loaded=loaded, total=total, upload=True))
                yield chunk

        headers = http_request.headers.copy()
        headers["Content-Length"] = str(total)
        return httpx.Request(
            http_request.method,
            http_request.url,
            headers=headers,
            content=chunks(),
            extensions=http_request.extensions,
        )

    @staticmethod
    async def _read(response: httpx.Response, on_progress: ProgressHandler | None) -> bytes:
        if on_progress is None:
            return await response.aread()

        length = response.headers.get("Content-Length")
        total = int(length) if length and length.isdigit() else None
        loaded = 0
        chunks = []
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            loaded += len(chunk)
            on_progress(ProgressEvent(loaded=loaded, total=total, download=True))
        return b"".join(chunks)

    @staticmethod
    def _decode(content: bytes, response: httpx.Response, response_type: str) -> Any:
        if response_type == "bytes":
            return content
        text = content.decode(response.encoding or "utf-8", errors="replace")
        if response_type == "text":
            return text
        if not content:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def __call__(self, request: RequestDescriptor) -> ResponseDescriptor:
        """Send ``request`` and return the decoded response.

        Raises:
            TransportError: On connection errors, timeouts and protocol errors
        """
        client = self._client(request.proxy)
        http_request = self.build_request(client, request)
        if request.on_upload_progress is not None:
            http_request = self._with_upload_progress(http_request, request.on_upload_progress)

        try:
            response = await client.send(http_request, stream=True)
            try:
                content = await self._read(response, request.on_download_progress)
            finally:
                await response.aclose()
        except httpx.TransportError as e:
            raise TransportError(
                f"{request.method} {http_request.url} failed: {type(e).__name__}: {e}", cause=e
            ) from e

        return ResponseDescriptor(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            body=self._decode(content, response, request.response_type),
            request=request,
        )

    async def aclose(self) -> None:
        """Close all pooled clients."""
        for client in self._clients.values():
            if not client.is_closed:
                await client.aclose()
        self._clients.clear()


def httpx_transport(config: ServiceConfig) -> HTTPXTransport:
    """Default ``TransportFactory``."""
    return HTTPXTransport()
