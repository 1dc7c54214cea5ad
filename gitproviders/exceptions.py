"""git-providers exception classes.

Every error raised by the library derives from :class:`GitProviderError`, so
callers can match a whole class of failures with a single ``except`` clause.
Wrapping layers always chain with ``raise ... from err``.
"""

from collections.abc import Iterable


class GitProviderError(Exception):
    """Base exception for all git-providers errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitProviderError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class InvalidArgumentError(GitProviderError):
    """Raised when an invalid argument is passed to a function."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_ARGUMENT", message)


class DomainUnsupportedError(GitProviderError):
    """Raised when a reference points at a domain this client does not serve."""

    def __init__(self, domain: str, expected: str) -> None:
        super().__init__(
            "DOMAIN_UNSUPPORTED",
            f"domain {domain!r} not supported by this client (expected {expected!r})",
        )
        self.domain = domain


class NoProviderSupportError(GitProviderError):
    """Raised when the backend does not implement the requested capability."""

    def __init__(self, feature: str) -> None:
        super().__init__("NO_PROVIDER_SUPPORT", f"no provider support for {feature}")
        self.feature = feature


class InvalidPermissionLevelError(GitProviderError):
    """Raised for a permission level that has no mapping in either direction."""

    def __init__(self, level: object) -> None:
        super().__init__("INVALID_PERMISSION_LEVEL", f"invalid permission level: {level!r}")
        self.level = level


class DestructiveCallDisallowedError(GitProviderError):
    """Raised when a destructive call is made on a client that forbids them."""

    def __init__(self, action: str) -> None:
        super().__init__(
            "DESTRUCTIVE_CALL_DISALLOWED",
            f"destructive call {action!r} was blocked, enable destructive_actions on the client",
        )


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


class FieldError(GitProviderError):
    """A single invalid or missing field on a named object."""

    def __init__(self, code: str, obj: str, field: str, detail: str) -> None:
        super().__init__(code, f"{obj}.{field}: {detail}")
        self.obj = obj
        self.field = field


class FieldRequiredError(FieldError):
    """A required field was not set."""

    def __init__(self, obj: str, field: str) -> None:
        super().__init__("FIELD_REQUIRED", obj, field, "field is required")


class FieldInvalidError(FieldError):
    """A field was set to a value outside its allowed domain."""

    def __init__(self, obj: str, field: str, value: object) -> None:
        super().__init__("FIELD_INVALID", obj, field, f"invalid value {value!r}")
        self.value = value


class MultiError(GitProviderError):
    """Bundle of several errors raised at once."""

    code_name = "MULTIPLE_ERRORS"

    def __init__(self, name: str, errors: Iterable[Exception]) -> None:
        self.errors = list(errors)
        details = "".join(f"\n- {err}" for err in self.errors)
        super().__init__(self.code_name, f"{name}: multiple errors occurred:{details}")

    def contains(self, error_type: type[Exception]) -> bool:
        """Return True if any bundled error is an instance of ``error_type``."""
        return any(isinstance(err, error_type) for err in self.errors)


class InvalidInfoError(MultiError):
    """Raised when a desired-state object fails validation."""

    code_name = "INVALID_INFO"


class InvalidServerDataError(MultiError):
    """Raised when the server returned an object missing required fields."""

    code_name = "INVALID_SERVER_DATA"


# ---------------------------------------------------------------------------
# Transport / HTTP
# ---------------------------------------------------------------------------


class HTTPError(GitProviderError):
    """An error response returned by the provider."""

    def __init__(
        self,
        code: str,
        message: str,
        request_id: str | None = None,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(code, message, request_id)
        self.status_code = status_code
        self.body = body


class ValidationError(HTTPError):
    """Raised when the provider rejects a request as invalid (400)."""

    pass


class AuthenticationError(HTTPError):
    """Raised when the credentials are rejected (401)."""

    pass


class AuthorizationError(HTTPError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(HTTPError):
    """Raised when a resource is not found."""

    pass


class AlreadyExistsError(HTTPError):
    """Raised by create calls when the resource already exists (409).

    Use ``reconcile`` to create a resource idempotently.
    """

    pass


class VersionConflictError(HTTPError):
    """Raised when an update carried a stale optimistic-concurrency version."""

    def __init__(
        self,
        message: str,
        expected_version: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__("VERSION_CONFLICT", message, request_id, status_code=409)
        self.expected_version = expected_version


class RateLimitedError(HTTPError):
    """Raised when rate limited (429)."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
        status_code: int | None = 429,
        body: str = "",
    ) -> None:
        super().__init__(code, message, request_id, status_code, body)
        self.retry_after = retry_after


class ServerError(HTTPError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class UnexpectedStatusError(HTTPError):
    """Raised for any other non-2xx status."""

    pass


class RetriesExhaustedError(GitProviderError):
    """Raised when every allowed attempt failed; ``last_error`` is also ``__cause__``."""

    def __init__(self, attempts: int, last_error: Exception) -> None:
        super().__init__(
            "RETRIES_EXHAUSTED",
            f"request failed after {attempts} attempts: {last_error}",
            getattr(last_error, "request_id", None),
        )
        self.attempts = attempts
        self.last_error = last_error


# ---------------------------------------------------------------------------
# Context, pagination and reconciliation
# ---------------------------------------------------------------------------


class ContextError(GitProviderError):
    """Base for cancellation and deadline errors."""

    pass


class ContextCancelledError(ContextError):
    """Raised when the caller cancelled the context."""

    def __init__(self) -> None:
        super().__init__("CONTEXT_CANCELLED", "context cancelled")


class DeadlineExceededError(ContextError):
    """Raised when the context deadline passed."""

    def __init__(self) -> None:
        super().__init__("DEADLINE_EXCEEDED", "context deadline exceeded")


class PaginationLimitExceededError(GitProviderError):
    """Raised when a listing did not finish within ``max_pages`` pages."""

    def __init__(self, max_pages: int) -> None:
        super().__init__(
            "PAGINATION_LIMIT_EXCEEDED",
            f"provider did not report a last page within {max_pages} pages",
        )
        self.max_pages = max_pages


class RecreateFailedError(GitProviderError):
    """Raised when a delete-then-recreate update deleted the resource but could
    not create it again. The resource is now absent; do not blindly retry.
    """

    def __init__(self, resource: str, cause: Exception) -> None:
        super().__init__(
            "RECREATE_FAILED",
            f"{resource} was deleted but recreating it failed, resource is now absent: {cause}",
            getattr(cause, "request_id", None),
        )
        self.resource = resource
