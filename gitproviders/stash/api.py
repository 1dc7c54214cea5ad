"""
Shared plumbing for the Stash resource clients.

:class:`StashAPI` bundles the transport with the things every resource
client needs: URL building, paginated listing with validation of every
decoded object, owner (project key) resolution and the destructive-call
guard.
"""

from typing import Any
from urllib.parse import quote

from gitproviders.context import Context
from gitproviders.exceptions import (
    DestructiveCallDisallowedError,
    DomainUnsupportedError,
    InvalidServerDataError,
    NotFoundError,
)
from gitproviders.logging import get_logger
from gitproviders.pagination import PageCursor, all_pages
from gitproviders.refs import IdentityRef, OrgRepositoryRef, UserRef, UserRepositoryRef
from gitproviders.stash.types.projects import Project, parse_project
from gitproviders.transport import HTTPTransport, Request, Response, SessionInfo
from gitproviders.validation import missing_fields, validate_api_object

API_PREFIX = "/rest/api/1.0"
KEYS_PREFIX = "/rest/keys/1.0"

logger = get_logger("stash")


def _join(prefix: str, elements: tuple[str | int, ...]) -> str:
    return "/".join([prefix, *(quote(str(element), safe="~") for element in elements)])


def api_path(*elements: str | int) -> str:
    """Build a path under the core REST API, e.g. ``api_path("projects", key)``."""
    return _join(API_PREFIX, elements)


def keys_path(*elements: str | int) -> str:
    """Build a path under the SSH keys REST API."""
    return _join(KEYS_PREFIX, elements)


def user_owner_key(login: str) -> str:
    """Personal repositories live under the pseudo-project ``~<login>``."""
    return login if login.startswith("~") else f"~{login}"


class StashAPI:
    """Transport plus provider conventions shared by every resource client."""

    def __init__(
        self,
        transport: HTTPTransport,
        domain: str,
        username: str | None = None,
        destructive_actions: bool = False,
        page_limit: int = 0,
        max_pages: int | None = None,
    ) -> None:
        """
        Args:
            transport: HTTP transport bound to the server's base URL
            domain: Host (and optional port) references must point at
            username: Login of the authenticated user, if known
            destructive_actions: Allow repository deletion
            page_limit: Page size requested from list endpoints (0 = server default)
            max_pages: Upper bound on pages fetched by one listing (None = unbounded)
        """
        self.transport = transport
        self.domain = domain
        self.username = username
        self.destructive_actions = destructive_actions
        self.page_limit = page_limit
        self.max_pages = max_pages

    def request(self, ctx: Context, req: Request) -> Response:
        return self.transport.request(req, ctx)

    def get_object(
        self,
        ctx: Context,
        path: str,
        obj: str,
        required: tuple[str, ...],
        **query: Any,
    ) -> tuple[dict[str, Any], SessionInfo]:
        """GET a single object and validate its required fields."""
        response = self.request(ctx, Request("GET", path).with_query(**query))
        data = response.json()
        validate_api_object(obj, data, required)
        return data, response.session

    def send_object(
        self,
        ctx: Context,
        req: Request,
        obj: str,
        required: tuple[str, ...],
    ) -> tuple[dict[str, Any], SessionInfo]:
        """Send a mutating request whose response body is the resulting object."""
        response = self.request(ctx, req)
        data = response.json()
        validate_api_object(obj, data, required)
        return data, response.session

    def list_all(
        self,
        ctx: Context,
        path: str,
        obj: str,
        required: tuple[str, ...],
        **query: Any,
    ) -> list[tuple[dict[str, Any], SessionInfo]]:
        """
        Fetch every page of a list endpoint.

        Each item is returned with the session of the page it came from. All
        items are validated after the last page; every missing field across
        all of them is reported in one :class:`InvalidServerDataError`.
        """
        items: list[tuple[dict[str, Any], SessionInfo]] = []
        cursor = PageCursor(limit=self.page_limit)

        def fetch_one() -> PageCursor:
            req = Request("GET", path).with_query(**query, **cursor.query_params())
            response = self.request(ctx, req)
            data = response.json()
            items.extend((value, response.session) for value in data.get("values", []))
            return PageCursor.from_page(data)

        all_pages(cursor, fetch_one, self.max_pages)

        errors: list[Exception] = []
        for value, _ in items:
            errors.extend(missing_fields(obj, value, required))
        if errors:
            raise InvalidServerDataError(obj, errors)
        return items

    def validate_ref(self, ref: IdentityRef | OrgRepositoryRef | UserRepositoryRef) -> None:
        """
        Check a reference is complete and points at this client's domain.

        Raises:
            InvalidInfoError: If a required field of the reference is empty
            DomainUnsupportedError: If the reference's domain is another server's
        """
        ref.validate()
        if ref.domain != self.domain:
            raise DomainUnsupportedError(ref.domain, self.domain)

    def require_destructive(self, action: str) -> None:
        """Raise unless the client was built with destructive actions enabled."""
        if not self.destructive_actions:
            raise DestructiveCallDisallowedError(action)

    def get_project(self, ctx: Context, name: str) -> Project:
        """
        Find a project by name, falling back to its key.

        The ``name`` query parameter is only a filter hint, so candidates are
        compared exactly.

        Raises:
            NotFoundError: If no project has that name or key
        """
        candidates = self.list_all(
            ctx, api_path("projects"), "Stash.Project", ("key", "name"), name=name
        )
        for data, session in candidates:
            if data["name"] == name:
                return parse_project(data, session)
        try:
            data, session = self.get_object(
                ctx, api_path("projects", name), "Stash.Project", ("key", "name")
            )
        except NotFoundError as e:
            raise NotFoundError(
                "NOT_FOUND", f"project {name!r} not found", e.request_id, status_code=404
            ) from e
        return parse_project(data, session)

    def owner_key(self, ctx: Context, ref: IdentityRef | OrgRepositoryRef | UserRepositoryRef) -> str:
        """Return the project key that owns repositories of ``ref``."""
        if isinstance(ref, (UserRef, UserRepositoryRef)):
            return user_owner_key(ref.user_login)
        key = self.get_project(ctx, ref.organization).key
        logger.debug("resolved organization %s to project key %s", ref.organization, key)
        return key


__all__ = ["API_PREFIX", "KEYS_PREFIX", "StashAPI", "api_path", "keys_path", "user_owner_key"]
