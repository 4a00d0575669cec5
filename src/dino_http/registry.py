"""Service registry.

Maps service names to ``ServiceEntry`` objects. An entry bundles the
service configuration, its request and response interceptor managers and
the composed ``RequestPipeline``. The registry is owned by an ``ApiClient``
rather than living at module level; insertion and lookup are guarded by a
lock so services can be set up while requests are in flight.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from loguru import logger

from . import builtin
from .errors import ServiceNotFoundError
from .interceptors import InterceptorManager
from .message import LoggingMessage, Message
from .pipeline import RequestContext, RequestPipeline, ResponseContext
from .types import RequestDescriptor, ResponseDescriptor, ServiceConfig, TransportFactory

DEFAULT_SERVICE = "__default__"


@dataclass
class ServiceEntry:
    """Everything needed to call one backend service."""

    name: str
    config: ServiceConfig
    request_interceptors: InterceptorManager[RequestDescriptor, RequestContext]
    response_interceptors: InterceptorManager[ResponseDescriptor, ResponseContext]
    request: RequestPipeline


class ServiceRegistry:
    """Manages service entries by name.

    Example:
        >>> registry = ServiceRegistry()
        >>> entry = registry.setup(ServiceConfig(base_url="https://api.example.com"))
        >>> response = await registry.get().request("/users")
    """

    def __init__(self, message: Message | None = None):
        self.message = message or LoggingMessage()
        self._entries: dict[str, ServiceEntry] = {}
        self._lock = threading.RLock()
        self._replaced: list[ServiceEntry] = []

    def setup(
        self,
        config: ServiceConfig,
        transport_factory: TransportFactory,
        name: str = DEFAULT_SERVICE,
    ) -> ServiceEntry:
        """Create the entry for ``name``, replacing any previous one.

        A replaced entry stays tracked so ``aclose`` still closes its transport.

        Args:
            config: Service configuration
            transport_factory: Builds the transport for this configuration
            name: Service name (default: the default service)

        Returns:
            The new entry with built-in interceptors installed.
        """
        request_interceptors: InterceptorManager[RequestDescriptor, RequestContext] = (
            InterceptorManager(chain=True)
        )
        response_interceptors: InterceptorManager[ResponseDescriptor, ResponseContext] = (
            InterceptorManager(chain=True)
        )
        builtin.install(config, request_interceptors, response_interceptors, self.message)

        entry = ServiceEntry(
            name=name,
            config=config,
            request_interceptors=request_interceptors,
            response_interceptors=response_interceptors,
            request=RequestPipeline(
                name,
                transport_factory(config),
                request_interceptors,
                response_interceptors,
                self.message,
            ),
        )

        with self._lock:
            previous = self._entries.get(name)
            if previous is not None:
                logger.warning(f"Service '{name}' is already set up. Replacing.")
                self._replaced.append(previous)
            self._entries[name] = entry

        logger.info(f"Service '{name}' set up with base URL '{config.base_url}'")
        return entry

    def get(self, name: str | None = None) -> ServiceEntry:
        """Return the entry for ``name`` (default service when ``None``).

        Raises:
            ServiceNotFoundError: If the service was never set up
        """
        name = name or DEFAULT_SERVICE
        with self._lock:
            entry = self._entries.get(name)
            if entry is None:
                raise ServiceNotFoundError(name, list(self._entries))
            return entry

    async def aclose(self) -> None:
        """Close the transports of all entries that support closing.

        Transports of entries replaced by a later ``setup`` are closed here
        too. A transport shared by several entries is closed once.
        """
        with self._lock:
            entries = [*self._replaced, *self._entries.values()]
            self._replaced = []
        closed: set[int] = set()
        for entry in entries:
            transport = entry.request.transport
            if id(transport) in closed or not hasattr(transport, "aclose"):
                continue
            closed.add(id(transport))
            await transport.aclose()

    def names(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"ServiceRegistry(services={self.names()})"
