"""User-facing message boundary.

The pipeline reports two kinds of events to the user: generic transport
failures and auto-login failures. Applications plug in their own
notification surface by passing any object with ``success``, ``info``,
``warning`` and ``error`` methods. Without one, ``LoggingMessage`` routes
messages to loguru instead of failing.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class Message(Protocol):
    """Notification surface used for user-facing messages."""

    def success(self, text: str) -> None: ...

    def info(self, text: str) -> None: ...

    def warning(self, text: str) -> None: ...

    def error(self, text: str) -> None: ...


class LoggingMessage:
    """Fallback ``Message`` writing to loguru.

    Warns once that no message handler is configured.
    """

    def __init__(self) -> None:
        self._warned = False

    def _emit(self, level: str, text: str) -> None:
        if not self._warned:
            self._warned = True
            logger.warning("No message handler configured, falling back to logging")
        logger.log(level, text)

    def success(self, text: str) -> None:
        self._emit("SUCCESS", text)

    def info(self, text: str) -> None:
        self._emit("INFO", text)

    def warning(self, text: str) -> None:
        self._emit("WARNING", text)

    def error(self, text: str) -> None:
        self._emit("ERROR", text)
