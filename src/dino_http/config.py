"""Environment-driven service configuration.

Reads the static parts of a ``ServiceConfig`` from environment variables so
deployments can point a service at a different backend without code
changes. Hooks (tenant, auth token, auto login) are code and must be passed
as keyword overrides.

Recognized variables (shown with the default ``DINO_HTTP_`` prefix):

    DINO_HTTP_BASE_URL          base URL, may contain ``{tenant}``
    DINO_HTTP_REQUEST_TIMEOUT   timeout in seconds
    DINO_HTTP_SUCCESS_CODE      int or comma-separated ints
    DINO_HTTP_NEED_LOGIN_CODE   int or comma-separated ints
    DINO_HTTP_PROXY             proxy URL, e.g. ``http://user:pw@127.0.0.1:8888``
    DINO_HTTP_DEFAULT_HEADERS   comma-separated ``Name=value`` pairs

Example:
    >>> config = load_service_config("BILLING_", auth_token=token_store.current)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from .errors import ConfigurationError
from .types import BasicCredentials, ProxyConfig, ServiceConfig
from .utils import as_array

DEFAULT_PREFIX = "DINO_HTTP_"

_FIELDS = (
    "base_url",
    "request_timeout",
    "success_code",
    "need_login_code",
    "proxy",
    "default_headers",
)


def convert_value(value: str) -> Any:
    """Convert an environment string to bool, int, float, list or str."""
    if not value:
        return value

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    if "," in value:
        return [convert_value(item.strip()) for item in value.split(",")]

    return value


def parse_proxy(value: str) -> ProxyConfig:
    """Parse a proxy URL into a ``ProxyConfig``.

    Raises:
        ConfigurationError: If the URL has no host or port
    """
    parts = urlsplit(value)
    if not parts.hostname or not parts.port:
        raise ConfigurationError(f"Invalid proxy URL: {value!r}")
    auth = None
    if parts.username:
        auth = BasicCredentials(username=parts.username, password=parts.password or "")
    return ProxyConfig(
        host=parts.hostname,
        port=parts.port,
        auth=auth,
        protocol=parts.scheme or "http",
    )


def parse_headers(value: str) -> dict[str, str]:
    """Parse ``Name=value,Other=value`` into a header dict."""
    headers = {}
    for item in value.split(","):
        if not item.strip():
            continue
        name, sep, header_value = item.partition("=")
        if not sep:
            raise ConfigurationError(f"Invalid header entry: {item!r}")
        headers[name.strip()] = header_value.strip()
    return headers


def load_environment(
    prefix: str = DEFAULT_PREFIX, environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Collect ``ServiceConfig`` fields from the environment.

    Args:
        prefix: Variable prefix (default: ``DINO_HTTP_``)
        environ: Mapping to read instead of ``os.environ``

    Returns:
        Keyword arguments for ``ServiceConfig``; missing variables are omitted.
    """
    environ = os.environ if environ is None else environ
    prefix = prefix.upper()
    values: dict[str, Any] = {}

    for name in _FIELDS:
        raw = environ.get(f"{prefix}{name.upper()}")
        if raw is None or raw == "":
            continue

        if name == "base_url":
            values[name] = raw
        elif name == "proxy":
            values[name] = parse_proxy(raw)
        elif name == "default_headers":
            values[name] = parse_headers(raw)
        elif name == "request_timeout":
            try:
                values[name] = float(raw)
            except ValueError as e:
                raise ConfigurationError(f"{prefix}REQUEST_TIMEOUT must be a number") from e
        else:
            codes = as_array(convert_value(raw))
            if not all(isinstance(code, int) and not isinstance(code, bool) for code in codes):
                raise ConfigurationError(f"{prefix}{name.upper()} must be integers: {raw!r}")
            values[name] = codes

    return values


def load_service_config(
    prefix: str = DEFAULT_PREFIX,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ServiceConfig:
    """Build a ``ServiceConfig`` from the environment plus overrides.

    Overrides win over environment values.
    """
    values = load_environment(prefix, environ)
    values.update(overrides)
    return ServiceConfig(**values)
