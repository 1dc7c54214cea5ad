"""
Bitbucket Server (Stash) client.

Provides the entry point for working with a Stash server: organizations
(projects), organization repositories and personal repositories.
"""

import os
from typing import Any

import httpx

from gitproviders.exceptions import ConfigurationError
from gitproviders.stash.api import StashAPI
from gitproviders.stash.clients import (
    OrganizationsClient,
    OrgRepositoriesClient,
    UserRepositoriesClient,
)
from gitproviders.transport import HTTPTransport, RetryConfig

PROVIDER_ID = "stash"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


class StashClient:
    """
    Main client for a Stash server.

    Example:
        ```python
        from gitproviders import OrgRepositoryRef, RepositoryInfo
        from gitproviders.stash import StashClient

        client = StashClient(domain="stash.example.com", token="...")

        ref = OrgRepositoryRef("stash.example.com", "Platform", "deployments")
        repo, changed = client.org_repositories.reconcile(
            ref, RepositoryInfo(description="Cluster manifests")
        )
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        domain: str,
        token: str | None = None,
        username: str | None = None,
        base_url: str | None = None,
        destructive_actions: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        page_limit: int = 0,
        max_pages: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the Stash client.

        Args:
            domain: Host (optionally "host:port") that references must point at
            token: Personal access token
            username: Login of the token's owner
            base_url: Server URL (default: https://<domain>)
            destructive_actions: Allow repository deletion (default: False)
            timeout: Per-attempt request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            page_limit: Page size requested from list endpoints (0 = server default)
            max_pages: Upper bound on pages fetched by one listing (None = unbounded)
            transport: Optional httpx transport, e.g. for tests
        """
        if not domain:
            raise ConfigurationError("domain is required")

        self.domain = domain
        self.base_url = base_url or f"https://{domain}"

        self._transport = HTTPTransport(
            base_url=self.base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            transport=transport,
        )
        self._api = StashAPI(
            self._transport,
            domain,
            username=username,
            destructive_actions=destructive_actions,
            page_limit=page_limit,
            max_pages=max_pages,
        )

        self.organizations = OrganizationsClient(self._api)
        self.org_repositories = OrgRepositoriesClient(self._api)
        self.user_repositories = UserRepositoriesClient(self._api)

    @classmethod
    def from_env(cls, transport: httpx.BaseTransport | None = None) -> "StashClient":
        """
        Create a client from environment variables.

        Environment variables:
            STASH_DOMAIN: Server host, optionally with port (required)
            STASH_TOKEN: Personal access token (required)
            STASH_USERNAME: Login of the token's owner (optional)
            STASH_BASE_URL: Server URL (optional, default: https://<STASH_DOMAIN>)
            STASH_DESTRUCTIVE_ACTIONS: "true" to allow deletions (optional, default: false)
            STASH_TIMEOUT: Per-attempt timeout in seconds (optional, default: 30)
            STASH_RETRY_MAX: Retries after the first attempt (optional, default: 3)
            STASH_RETRY_WAIT_MIN: Shortest backoff in seconds (optional, default: 1)
            STASH_RETRY_WAIT_MAX: Longest backoff in seconds (optional, default: 30)

        Raises:
            ConfigurationError: If a required variable is missing or a value is malformed
        """
        domain = os.environ.get("STASH_DOMAIN")
        token = os.environ.get("STASH_TOKEN")

        if not domain:
            raise ConfigurationError("STASH_DOMAIN environment variable not set")

        if not token:
            raise ConfigurationError("STASH_TOKEN environment variable not set")

        defaults = RetryConfig()
        try:
            retry_config = RetryConfig(
                max_retries=_env_number("STASH_RETRY_MAX", int, defaults.max_retries),
                wait_min=_env_number("STASH_RETRY_WAIT_MIN", float, defaults.wait_min),
                wait_max=_env_number("STASH_RETRY_WAIT_MAX", float, defaults.wait_max),
            )
        except ValueError as e:
            raise ConfigurationError(f"invalid retry configuration: {e}") from e

        return cls(
            domain=domain,
            token=token,
            username=os.environ.get("STASH_USERNAME") or None,
            base_url=os.environ.get("STASH_BASE_URL") or None,
            destructive_actions=_env_bool("STASH_DESTRUCTIVE_ACTIONS"),
            timeout=_env_number("STASH_TIMEOUT", float, cls.DEFAULT_TIMEOUT),
            retry_config=retry_config,
            transport=transport,
        )

    @property
    def provider_id(self) -> str:
        return PROVIDER_ID

    @property
    def supported_domain(self) -> str:
        return self.domain

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "StashClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def _env_bool(name: str) -> bool:
    value = os.environ.get(name, "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _env_number(name: str, kind: type[int] | type[float], default: float) -> Any:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return kind(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
