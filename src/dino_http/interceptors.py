"""Ordered, possibly-asynchronous interceptor chains.

An ``InterceptorManager`` owns a list of handlers and runs them one after
another. Handlers are called as ``handler(arg, context)`` and may return the
replacement argument directly or an awaitable of it. Raising from a handler
aborts the rest of the chain and propagates to the caller of ``execute``.

Two modes are supported:

* chained (default): each handler receives the previous handler's output.
* unchained: each handler receives the original argument; the last output
  is the result.

Handlers are tagged with a monotonically increasing id on registration.
Removal goes by id, and ``execute`` walks the live list by id instead of by
index, so handlers may be added or removed while other requests are
traversing the chain. A handler removed (or cleared) before a traversal
reaches it does not run.

Example:
    >>> manager = InterceptorManager()
    >>> cancel = manager.use(lambda request, ctx: request)
    >>> await manager.execute(request, ctx)
    >>> cancel()
"""

from __future__ import annotations

import inspect
import itertools
import threading
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

ArgT = TypeVar("ArgT")
CtxT = TypeVar("CtxT")

InterceptorHandler = Callable[[ArgT, CtxT], Union[ArgT, Awaitable[ArgT]]]
"""Handler mapping ``(arg, context)`` to a replacement argument."""


class InterceptorManager(Generic[ArgT, CtxT]):
    """Manages an ordered list of interceptor handlers."""

    def __init__(self, chain: bool = True):
        self.chain = chain
        self._handlers: list[tuple[int, InterceptorHandler]] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def use(self, handler: InterceptorHandler) -> Callable[[], None]:
        """Append a handler.

        Args:
            handler: Callable taking ``(arg, context)``

        Returns:
            A function removing exactly this registration. Calling it more
            than once has no further effect.
        """
        with self._lock:
            handler_id = next(self._ids)
            self._handlers.append((handler_id, handler))

        def cancel() -> None:
            with self._lock:
                self._handlers = [h for h in self._handlers if h[0] != handler_id]

        return cancel

    def clear(self) -> None:
        """Remove all handlers."""
        with self._lock:
            self._handlers = []

    @property
    def handlers(self) -> list[InterceptorHandler]:
        """Snapshot of the registered handlers in execution order."""
        with self._lock:
            return [handler for _, handler in self._handlers]

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def _next_after(self, handler_id: int) -> tuple[int, InterceptorHandler] | None:
        with self._lock:
            for entry in self._handlers:
                if entry[0] > handler_id:
                    return entry
        return None

    async def execute(self, arg: ArgT, context: CtxT) -> ArgT:
        """Run all handlers in insertion order.

        Args:
            arg: Initial argument
            context: Read-only context passed to every handler

        Returns:
            The final argument.
        """
        result: Any = arg
        current: Any = arg
        last_id = 0

        while (entry := self._next_after(last_id)) is not None:
            last_id, handler = entry
            result = handler(current, context)
            if inspect.isawaitable(result):
                result = await result
            if self.chain:
                current = result

        return result
