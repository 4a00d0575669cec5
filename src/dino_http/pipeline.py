"""Request pipeline wrapping a transport call with interceptor chains.

The pipeline normalizes its input to a ``RequestDescriptor``, runs the
request interceptors, calls the transport, and runs the response
interceptors. It is also the state machine behind the single
re-authentication retry: the re-auth interceptor never calls back into the
pipeline, it flags the response with ``reissue`` and the pipeline loop sends
the original request again, at most ``max_reauth`` times.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from loguru import logger

from .errors import LoginExpiredError, TransportError
from .interceptors import InterceptorManager
from .message import Message
from .types import RequestDescriptor, ResponseDescriptor, Transport

MAX_REAUTH_ATTEMPTS = 1
NETWORK_ERROR_MESSAGE = "Network error, please check your network connection."


@dataclass(frozen=True)
class RequestContext:
    """Context passed to request interceptors."""

    service: str


@dataclass(frozen=True)
class ResponseContext:
    """Context passed to response interceptors.

    Attributes:
        original: The descriptor the caller passed in, before interceptors
        service: Name of the service handling the call
        attempt: 0 for the first round trip, 1 for the retry after re-auth
        max_reauth: Maximum number of re-auth retries for this call
    """

    original: RequestDescriptor
    service: str
    attempt: int = 0
    max_reauth: int = MAX_REAUTH_ATTEMPTS


class RequestPipeline:
    """Composed request function of a service entry.

    Example:
        >>> response = await pipeline("/users", RequestDescriptor(params={"pn": 0}))
        >>> response = await pipeline(RequestDescriptor(url="/users", method="POST"))
    """

    def __init__(
        self,
        service: str,
        transport: Transport,
        request_interceptors: InterceptorManager[RequestDescriptor, RequestContext],
        response_interceptors: InterceptorManager[ResponseDescriptor, ResponseContext],
        message: Message,
        max_reauth: int = MAX_REAUTH_ATTEMPTS,
    ):
        self.service = service
        self.transport = transport
        self.request_interceptors = request_interceptors
        self.response_interceptors = response_interceptors
        self.message = message
        self.max_reauth = max_reauth

    async def __call__(
        self,
        url_or_request: str | RequestDescriptor,
        request: RequestDescriptor | None = None,
        **overrides: Any,
    ) -> ResponseDescriptor:
        """Send a request through the interceptor chains.

        Args:
            url_or_request: A URL, or a complete descriptor
            request: Optional descriptor when a URL is given first
            **overrides: Descriptor fields to replace

        Returns:
            The response after all response interceptors.

        Raises:
            TransportError: When the transport fails
            ApiError: When a response interceptor rejects the response
        """
        original = self._normalize(url_or_request, request, overrides)

        for attempt in range(self.max_reauth + 1):
            response = await self._round_trip(original, attempt)
            if not response.reissue:
                return response
            logger.debug(f"[{self.service}] reissuing {original.method} {original.url}")

        # Only reachable if a custom interceptor flags reissue on the last attempt.
        raise LoginExpiredError(response, "re-authentication retry limit reached")

    @staticmethod
    def _normalize(
        url_or_request: str | RequestDescriptor,
        request: RequestDescriptor | None,
        overrides: dict[str, Any],
    ) -> RequestDescriptor:
        if isinstance(url_or_request, RequestDescriptor):
            descriptor = url_or_request
        else:
            descriptor = replace(request or RequestDescriptor(), url=url_or_request)
        if overrides:
            descriptor = replace(descriptor, **overrides)
        return descriptor

    async def _round_trip(self, original: RequestDescriptor, attempt: int) -> ResponseDescriptor:
        outbound = await self.request_interceptors.execute(
            replace(original, headers=dict(original.headers)),
            RequestContext(service=self.service),
        )

        logger.debug(
            f"[{self.service}] {outbound.method} {outbound.base_url or ''}{outbound.url}"
            f" (attempt {attempt + 1})"
        )

        try:
            response = await self.transport(outbound)
        except TransportError as e:
            logger.error(f"[{self.service}] transport failure: {e}")
            self.message.error(NETWORK_ERROR_MESSAGE)
            raise

        if response.request is None:
            response = replace(response, request=outbound)

        return await self.response_interceptors.execute(
            response,
            ResponseContext(
                original=original,
                service=self.service,
                attempt=attempt,
                max_reauth=self.max_reauth,
            ),
        )
