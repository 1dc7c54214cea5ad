"""
HTTP Transport for git-providers.

Sends one logical request to the provider with automatic retry logic,
context-aware timeouts and typed error classification.
"""

import json
import random
import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    AuthorizationError,
    GitProviderError,
    HTTPError,
    NotFoundError,
    RateLimitedError,
    RetriesExhaustedError,
    ServerError,
    UnexpectedStatusError,
    ValidationError,
)
from gitproviders.logging import log_http_request, log_http_response

# Error bodies are truncated to this many characters on exceptions
_BODY_SNIPPET_LENGTH = 256


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for automatic retry behavior. Fixed at construction."""

    max_retries: int = 3
    wait_min: float = 1.0  # Lower bound of a backoff sleep, in seconds
    wait_max: float = 30.0  # Upper bound of a backoff sleep, in seconds
    retry_on: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    respect_retry_after: bool = True
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.wait_min < 0 or self.wait_max < self.wait_min:
            raise ValueError("require 0 <= wait_min <= wait_max")


@dataclass(frozen=True)
class SessionInfo:
    """Identity of the session that served a response, read from its headers."""

    user_id: int | None = None
    user_name: str | None = None
    session_id: str | None = None
    request_id: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "SessionInfo":
        user_id = headers.get("X-AUSERID")
        return cls(
            user_id=int(user_id) if user_id and user_id.isdigit() else None,
            user_name=headers.get("X-AUSERNAME"),
            session_id=headers.get("X-ASESSIONID"),
            request_id=headers.get("X-AREQUESTID"),
        )


@dataclass(frozen=True)
class Request:
    """
    An immutable description of one logical HTTP call.

    Paths are relative to the transport's base URL. Builder methods return
    new instances; a Request is never mutated after construction.
    """

    method: str
    path: str
    query: tuple[tuple[str, str], ...] = ()
    body: Any = None
    headers: tuple[tuple[str, str], ...] = ()

    def with_query(self, **params: Any) -> "Request":
        """Return a copy with extra query parameters. None values are skipped."""
        extra = tuple(
            (key, _query_value(value)) for key, value in params.items() if value is not None
        )
        return replace(self, query=self.query + extra)

    def with_body(self, body: Any) -> "Request":
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> "Request":
        return replace(self, headers=self.headers + ((name, value),))


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Response:
    """A successful (2xx) provider response."""

    status_code: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    session: SessionInfo = field(default_factory=SessionInfo)

    def json(self) -> Any:
        """Decode the body as JSON. An empty body decodes to ``{}``."""
        if not self.body:
            return {}
        return json.loads(self.body)


class HTTPTransport:
    """
    HTTP transport layer with retry logic.

    Handles:
    - Bearer authentication and JSON content negotiation
    - Exponential backoff with jitter, bounded by ``wait_min``/``wait_max``
    - Retry-After header respect for rate limiting
    - Cancellation and deadlines through :class:`Context`
    - Error response parsing into typed exceptions

    The transport keeps no per-call state and may be shared between threads.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://stash.example.com")
            token: Personal access token sent as a Bearer credential
            timeout: Per-attempt request timeout in seconds
            retry_config: Configuration for retry behavior
            headers: Extra headers sent with every request
            transport: Optional httpx transport (e.g. ``httpx.MockTransport`` in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        default_headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if token:
            default_headers["Authorization"] = f"Bearer {token}"
        if headers:
            default_headers.update(headers)

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=default_headers,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(self, req: Request, ctx: Context | None = None) -> Response:
        """
        Send a request with automatic retry.

        Args:
            req: The request to send
            ctx: Cancellation/deadline context (default: background)

        Returns:
            The 2xx response

        Raises:
            ContextCancelledError: If ``ctx`` was cancelled before, during or between attempts
            DeadlineExceededError: If the deadline of ``ctx`` passed
            RetriesExhaustedError: If every allowed attempt hit a retryable failure
            HTTPError: The typed error for a non-retryable failure
        """
        ctx = ensure_context(ctx)
        return self._execute_with_retry(req, ctx)

    def _send_once(self, req: Request, ctx: Context, attempt: int) -> httpx.Response:
        timeout = self.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        log_http_request(
            req.method,
            req.path,
            attempt,
            headers=dict(req.headers) if req.headers else None,
            body=req.body if isinstance(req.body, dict) else None,
            query=req.query,
        )
        started = time.monotonic()
        response = self._client.request(
            req.method,
            req.path,
            params=list(req.query) or None,
            json=req.body,
            headers=dict(req.headers) if req.headers else None,
            timeout=timeout,
        )
        log_http_response(
            response.status_code,
            req.path,
            response.content,
            (time.monotonic() - started) * 1000,
        )
        return response

    def _execute_with_retry(self, req: Request, ctx: Context) -> Response:
        """
        Execute a request, retrying on retryable statuses and network errors.

        At most ``max_retries + 1`` attempts are made. Non-retryable errors are
        raised immediately; exhausting the retries raises
        :class:`RetriesExhaustedError` chained from the last failure. A context
        that finished while an attempt was in flight wins over its outcome:
        the context error is raised, even for a successful response.
        """
        max_attempts = self.retry_config.max_retries + 1
        attempt = 0

        while True:
            ctx.check()

            error: GitProviderError
            retry_after: str | None = None
            try:
                response = self._send_once(req, ctx, attempt)
            except httpx.TransportError as e:
                context_error = ctx.error()
                if context_error is not None:
                    raise context_error from e
                error = ServerError("CONNECTION_ERROR", str(e))
                error.__cause__ = e
            else:
                ctx.check()
                if response.status_code < 300:
                    return Response(
                        status_code=response.status_code,
                        body=response.content,
                        headers=dict(response.headers),
                        session=SessionInfo.from_headers(response.headers),
                    )

                error = self._parse_error_response(response)
                if response.status_code not in self.retry_config.retry_on:
                    raise error
                retry_after = response.headers.get("Retry-After")

            attempt += 1
            if attempt >= max_attempts:
                raise RetriesExhaustedError(max_attempts, error) from error
            ctx.sleep(self._get_backoff_time(attempt - 1, retry_after))

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting the Retry-After header
        if present. The result is always clamped to ``[wait_min, wait_max]``.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)
        """
        config = self.retry_config
        wait_time: float | None = None

        if retry_after and config.respect_retry_after:
            try:
                wait_time = float(retry_after)
            except ValueError:
                wait_time = None  # HTTP-date form, fall back to exponential backoff

        if wait_time is None:
            base_wait = config.wait_min * (2 ** attempt)
            jitter_range = base_wait * config.jitter
            wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(max(wait_time, config.wait_min), config.wait_max)

    def _parse_error_response(self, response: httpx.Response) -> HTTPError:
        """
        Parse an error response into a typed exception.

        Stash error bodies look like
        ``{"errors": [{"message": "...", "exceptionName": "..."}]}``.
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        errors = data.get("errors") or []
        first = errors[0] if errors and isinstance(errors[0], dict) else {}
        status_code = response.status_code
        code = first.get("exceptionName") or f"HTTP_{status_code}"
        message = first.get("message") or f"HTTP {status_code}"
        request_id = response.headers.get("X-AREQUESTID")
        body = response.text[:_BODY_SNIPPET_LENGTH]

        if status_code == 400:
            return ValidationError(code, message, request_id, status_code, body)
        elif status_code == 401:
            return AuthenticationError(code, message, request_id, status_code, body)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id, status_code, body)
        elif status_code == 404:
            return NotFoundError(code, message, request_id, status_code, body)
        elif status_code == 409:
            return AlreadyExistsError(code, message, request_id, status_code, body)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after, request_id, status_code, body)
        elif status_code >= 500:
            return ServerError(code, message, request_id, status_code, body)
        else:
            return UnexpectedStatusError(code, message, request_id, status_code, body)


__all__ = ["HTTPTransport", "Request", "Response", "RetryConfig", "SessionInfo"]
