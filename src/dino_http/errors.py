"""Exception hierarchy for dino-http.

Every failure that crosses the request pipeline is raised as one of the
exceptions below. Business-level rejections keep the full response and the
decoded envelope so callers can inspect ``code`` and ``msg`` themselves.

Exception Hierarchy:
    DinoHTTPError: Base exception for all dino-http errors
    ├── ConfigurationError: Invalid configuration values
    ├── ServiceNotFoundError: No service registered under the requested name
    ├── TransportError: Network or timeout failure below the pipeline
    ├── ApiStatusError: HTTP status other than 200
    ├── ApiError: Business code outside the configured success set
    │   └── LoginExpiredError: Re-authentication failed or was needed twice
    └── AutoLoginError: Default auto-login hook was never configured

Example:
    >>> try:
    ...     users = await api.get("/users")
    ... except ApiError as e:
    ...     print(e.code, e.msg)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .types import ResponseDescriptor


class DinoHTTPError(Exception):
    """Base exception for all dino-http errors."""

    pass


class ConfigurationError(DinoHTTPError):
    """Raised when service configuration values are invalid."""

    pass


class ServiceNotFoundError(DinoHTTPError, LookupError):
    """Raised when a service name does not resolve to a registry entry."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available or []
        super().__init__(
            f"Service '{name}' is not set up. Call setup_api() first. "
            f"Available: {self.available}"
        )


class TransportError(DinoHTTPError):
    """Raised when the transport fails before producing a response.

    Wraps connection errors, timeouts and protocol errors from httpx.
    The original exception is kept in ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ApiStatusError(DinoHTTPError):
    """Raised by the endpoint layer when the HTTP status is not 200."""

    def __init__(self, response: ResponseDescriptor):
        self.response = response
        self.status = response.status
        super().__init__(f"HTTP {response.status}: {response.status_text}")


class ApiError(DinoHTTPError):
    """Raised when a response carries a non-success business code.

    Attributes:
        response: The full response descriptor that was rejected
        envelope: The decoded body (``{code, msg, cost, data}``) or the raw body
        code: Business code from the envelope, ``None`` if missing
        msg: Message from the envelope, empty if missing
    """

    def __init__(self, response: ResponseDescriptor, message: str | None = None):
        self.response = response
        self.envelope: Any = response.body
        self.code = response.code
        self.msg = response.msg
        super().__init__(message or f"API error {self.code}: {self.msg}")


class LoginExpiredError(ApiError):
    """Raised when a "needs login" response cannot be recovered.

    Either the auto-login hook failed, or the request still reported
    "needs login" after the single retry.
    """

    def __init__(
        self,
        response: ResponseDescriptor,
        message: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(response, message or f"Login expired (code {response.code})")
        self.cause = cause


class AutoLoginError(DinoHTTPError):
    """Raised by the default ``auto_login`` hook."""

    pass
