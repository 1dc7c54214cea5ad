"""
Logging for git-providers.

Three loggers are used:

- ``gitproviders``: parent of everything below, plus per-backend children
  such as ``gitproviders.stash``
- ``gitproviders.http``: one DEBUG line per request attempt and per response
- ``gitproviders.reconcile``: one INFO line per reconcile decision

Nothing is emitted unless the application configures logging, either through
:func:`configure_logging` or its own ``logging`` setup. Access tokens,
``Authorization`` headers and private keys are masked before formatting.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

ROOT_LOGGER_NAME = "gitproviders"

_root_logger = logging.getLogger(ROOT_LOGGER_NAME)
_http_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.http")
_reconcile_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.reconcile")

_REDACTED = "[REDACTED]"

_MASKS: tuple[tuple[re.Pattern[str], str], ...] = (
    # PEM and OpenSSH private key blocks
    (
        re.compile(r"-----BEGIN[^-]*PRIVATE KEY-----.*?-----END[^-]*PRIVATE KEY-----", re.DOTALL),
        "[PRIVATE_KEY_REDACTED]",
    ),
    # Authorization header values
    (re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), rf"\1 {_REDACTED}"),
    # "token": "...", password='...', secret=...
    (
        re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE),
        rf"\1: {_REDACTED}",
    ),
)

SENSITIVE_KEYS = frozenset({"authorization", "private_key", "secret", "token", "password", "api_key"})

# Response bodies are cut to this many bytes in debug output
_BODY_PREVIEW_BYTES = 512

_DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_installed_handler: logging.Handler | None = None


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    reconcile_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the ``gitproviders`` logger and set levels.

    Calling this again replaces the handler installed by the previous call
    instead of adding a second one.

    Args:
        level: Level of the ``gitproviders`` logger (default: INFO)
        http_level: Level of ``gitproviders.http``; DEBUG shows every request (default: ``level``)
        reconcile_level: Level of ``gitproviders.reconcile`` (default: ``level``)
        handler: Handler to attach (default: a stderr ``StreamHandler``)
        format_string: Record format (default: time, level, logger name, message)

    Example:
        ```python
        import logging
        from gitproviders import configure_logging

        configure_logging(http_level=logging.DEBUG)
        ```
    """
    global _installed_handler

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))

    if _installed_handler is not None:
        _root_logger.removeHandler(_installed_handler)
    _root_logger.addHandler(handler)
    _installed_handler = handler

    _root_logger.setLevel(level)
    _http_logger.setLevel(level if http_level is None else http_level)
    _reconcile_logger.setLevel(level if reconcile_level is None else reconcile_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``gitproviders`` or its child ``gitproviders.<name>``."""
    if not name:
        return _root_logger
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def mask_sensitive_data(text: str) -> str:
    """Replace private keys, credentials and token-like pairs in ``text``."""
    for pattern, replacement in _MASKS:
        text = pattern.sub(replacement, text)
    return text


def _is_sensitive(key: str, sensitive_keys: frozenset[str] | set[str]) -> bool:
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in sensitive_keys)


def _masked(value: Any, sensitive_keys: frozenset[str] | set[str]) -> Any:
    if isinstance(value, Mapping):
        return safe_log_dict(value, sensitive_keys)
    if isinstance(value, list):
        return [_masked(item, sensitive_keys) for item in value]
    if isinstance(value, str):
        return mask_sensitive_data(value)
    return value


def safe_log_dict(
    data: Mapping[str, Any], sensitive_keys: set[str] | frozenset[str] | None = None
) -> dict[str, Any]:
    """
    Copy ``data`` with sensitive values replaced by ``"[REDACTED]"``.

    A key is sensitive when it contains one of ``sensitive_keys``
    (case-insensitive). Nested mappings and lists are masked as well; the
    input is not modified.
    """
    keys = SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys
    return {
        key: _REDACTED if _is_sensitive(key, keys) else _masked(value, keys)
        for key, value in data.items()
    }


def log_http_request(
    method: str,
    url: str,
    attempt: int = 0,
    headers: Mapping[str, str] | None = None,
    body: Mapping[str, Any] | None = None,
    query: Sequence[tuple[str, str]] | None = None,
) -> None:
    """Log one request attempt at DEBUG. ``attempt`` counts from zero."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    line = f"{method} {url}"
    if query:
        line += "?" + "&".join(f"{key}={value}" for key, value in query)
    fields = [line]
    if attempt:
        fields.append(f"attempt={attempt + 1}")
    if headers:
        fields.append(f"headers={safe_log_dict(headers)}")
    if body:
        fields.append(f"body={safe_log_dict(body)}")
    _http_logger.debug(" | ".join(fields))


def log_http_response(
    status_code: int,
    url: str,
    body: bytes | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Log a response at DEBUG, with the body truncated and masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    fields = [f"Response {status_code} from {url}"]
    if elapsed_ms is not None:
        fields.append(f"elapsed={elapsed_ms:.2f}ms")
    if body:
        preview = body[:_BODY_PREVIEW_BYTES].decode("utf-8", errors="replace")
        fields.append(f"body={mask_sensitive_data(preview)}")
    _http_logger.debug(" | ".join(fields))


def log_reconcile(kind: str, name: str, outcome: str) -> None:
    """Log that reconciling the ``kind`` called ``name`` was ``created``, ``updated`` or ``unchanged``."""
    _reconcile_logger.info("%s %s %s", kind, name, outcome)


__all__ = [
    "SENSITIVE_KEYS",
    "configure_logging",
    "get_logger",
    "log_http_request",
    "log_http_response",
    "log_reconcile",
    "mask_sensitive_data",
    "safe_log_dict",
]
