"""Repositories resource clients, for organization and personal repositories."""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import FieldInvalidError, InvalidInfoError
from gitproviders.info import DEFAULT_BRANCH, RepositoryInfo, RepositoryVisibility
from gitproviders.refs import (
    OrganizationRef,
    OrgRepositoryRef,
    RepositoryRef,
    UserRef,
    UserRepositoryRef,
)
from gitproviders.resource import Resource, reconcile_resource
from gitproviders.stash.api import api_path
from gitproviders.stash.clients.branches import BranchesClient
from gitproviders.stash.clients.commits import CommitsClient
from gitproviders.stash.clients.deploy_keys import DeployKeysClient
from gitproviders.stash.clients.files import FilesClient, TreesClient
from gitproviders.stash.clients.pull_requests import PullRequestsClient
from gitproviders.stash.clients.team_access import TeamAccessClient
from gitproviders.stash.types.repos import Repository, parse_repository
from gitproviders.transport import Request

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI

_REQUIRED = ("name", "slug")


# Stash repositories are either public or private
_SUPPORTED_VISIBILITIES = frozenset({RepositoryVisibility.PUBLIC, RepositoryVisibility.PRIVATE})


def validate_repository_info(info: RepositoryInfo) -> None:
    """Validate ``info`` and reject values Stash cannot store."""
    info.validate()
    if info.visibility is not None and info.visibility not in _SUPPORTED_VISIBILITIES:
        raise InvalidInfoError(
            "RepositoryInfo", [FieldInvalidError("RepositoryInfo", "visibility", info.visibility)]
        )


def repository_from_api(raw: Repository) -> RepositoryInfo:
    return RepositoryInfo(
        description=raw.description,
        default_branch=raw.default_branch or DEFAULT_BRANCH,
        visibility=RepositoryVisibility.PUBLIC if raw.public else RepositoryVisibility.PRIVATE,
    )


def apply_repository_info(info: RepositoryInfo, raw: Repository) -> Repository:
    """Return a new raw form with the fields ``info`` sets; unset fields are kept."""
    changes: dict[str, Any] = {}
    if info.description is not None:
        changes["description"] = info.description
    if info.default_branch is not None:
        changes["default_branch"] = info.default_branch
    if info.visibility is not None:
        changes["public"] = info.visibility is RepositoryVisibility.PUBLIC
    return replace(raw, **changes)


class UserRepository(Resource[RepositoryInfo, Repository]):
    """
    A repository. Updates are PATCH-like: only fields set on the applied
    info change.
    """

    def __init__(self, client: "_RepositoriesClient", raw: Repository, ref: RepositoryRef) -> None:
        self._client = client
        self._raw = raw
        self.ref = ref

        api = client.api
        self.deploy_keys = DeployKeysClient(api, ref)
        self.branches = BranchesClient(api, ref)
        self.commits = CommitsClient(api, ref)
        self.pull_requests = PullRequestsClient(api, ref)
        self.files = FilesClient()
        self.trees = TreesClient()

    def get(self) -> RepositoryInfo:
        return repository_from_api(self._raw)

    def set(self, spec: RepositoryInfo) -> None:
        validate_repository_info(spec)
        self._raw = apply_repository_info(spec, self._raw)

    def api_object(self) -> Repository:
        return self._raw

    def update(self, ctx: Context | None = None) -> None:
        ctx = ensure_context(ctx)
        self._raw = self._client._update_raw(ctx, self.ref, self._raw)

    def delete(self, ctx: Context | None = None) -> None:
        """
        Delete the repository irreversibly.

        Raises:
            DestructiveCallDisallowedError: Unless the client allows destructive actions
        """
        ctx = ensure_context(ctx)
        self._client.api.require_destructive("delete repository")
        self._client.api.request(ctx, Request("DELETE", self._client._path(ctx, self.ref)))

    def reconcile(self, ctx: Context | None = None) -> bool:
        ctx = ensure_context(ctx)
        actual, changed = self._client.reconcile(self.ref, self.get(), ctx)
        self._raw = actual.api_object()
        return changed


class OrgRepository(UserRepository):
    """A repository owned by an organization; also exposes team access."""

    def __init__(self, client: "_RepositoriesClient", raw: Repository, ref: RepositoryRef) -> None:
        super().__init__(client, raw, ref)
        self.team_access = TeamAccessClient(client.api, ref)


class _RepositoriesClient(ABC):
    handle_class: type[UserRepository] = UserRepository

    def __init__(self, api: "StashAPI") -> None:
        self.api = api

    def _path(self, ctx: Context, ref: RepositoryRef | OrganizationRef | UserRef) -> str:
        owner = self.api.owner_key(ctx, ref)
        if isinstance(ref, (OrgRepositoryRef, UserRepositoryRef)):
            return api_path("projects", owner, "repos", ref.repository_name)
        return api_path("projects", owner, "repos")

    @abstractmethod
    def _ref(self, owner: OrganizationRef | UserRef, slug: str) -> RepositoryRef:
        """Build the reference of repository ``slug`` under ``owner``."""
        pass

    def _update_raw(self, ctx: Context, ref: RepositoryRef, raw: Repository) -> Repository:
        data, session = self.api.send_object(
            ctx,
            Request("PUT", self._path(ctx, ref)).with_body(raw.to_api()),
            "Stash.Repository",
            _REQUIRED,
        )
        return parse_repository(data, session)

    def get(self, ref: RepositoryRef, ctx: Context | None = None) -> UserRepository:
        """
        Get a repository.

        Raises:
            DomainUnsupportedError: If ``ref`` points at another server
            NotFoundError: If the owner or the repository does not exist
        """
        ctx = ensure_context(ctx)
        self.api.validate_ref(ref)
        data, session = self.api.get_object(ctx, self._path(ctx, ref), "Stash.Repository", _REQUIRED)
        return self.handle_class(self, parse_repository(data, session), ref)

    def list(self, owner: OrganizationRef | UserRef, ctx: Context | None = None) -> list[UserRepository]:
        """List every repository of ``owner``."""
        ctx = ensure_context(ctx)
        self.api.validate_ref(owner)
        repositories = [
            parse_repository(data, session)
            for data, session in self.api.list_all(
                ctx, self._path(ctx, owner), "Stash.Repository", _REQUIRED
            )
        ]
        return [self.handle_class(self, raw, self._ref(owner, raw.slug)) for raw in repositories]

    def create(
        self, ref: RepositoryRef, info: RepositoryInfo | None = None, ctx: Context | None = None
    ) -> UserRepository:
        """
        Create a repository. Unset fields are defaulted (private, ``main``).

        Raises:
            InvalidInfoError: If ``info`` is invalid
            AlreadyExistsError: If the repository already exists
        """
        ctx = ensure_context(ctx)
        self.api.validate_ref(ref)
        info = info or RepositoryInfo()
        validate_repository_info(info)
        raw = apply_repository_info(info.with_defaults(), Repository(name=ref.repository_name))
        owner_path = self._path(ctx, ref.organization_ref if isinstance(ref, OrgRepositoryRef) else ref.user_ref)
        data, session = self.api.send_object(
            ctx,
            Request("POST", owner_path).with_body(raw.to_api()),
            "Stash.Repository",
            _REQUIRED,
        )
        return self.handle_class(self, parse_repository(data, session), ref)

    def reconcile(
        self, ref: RepositoryRef, info: RepositoryInfo | None = None, ctx: Context | None = None
    ) -> tuple[UserRepository, bool]:
        """
        Make ``info`` the actual state of the repository at ``ref``.

        Only fields set on ``info`` are compared and sent; defaults are applied
        when the repository has to be created.

        Returns:
            The repository and whether anything was changed
        """
        ctx = ensure_context(ctx)
        info = info or RepositoryInfo()
        validate_repository_info(info)
        return reconcile_resource(
            ctx,
            info,
            lambda ctx: self.get(ref, ctx),
            lambda ctx, desired: self.create(ref, desired, ctx),
            kind="repository",
            name=str(ref),
        )


class OrgRepositoriesClient(_RepositoriesClient):
    """Client for repositories owned by organizations (Stash projects)."""

    handle_class = OrgRepository

    def _ref(self, owner: OrganizationRef | UserRef, slug: str) -> RepositoryRef:
        return OrgRepositoryRef(owner.domain, owner.identity, slug)


class UserRepositoriesClient(_RepositoriesClient):
    """Client for personal repositories (the ``~login`` pseudo-project)."""

    def _ref(self, owner: OrganizationRef | UserRef, slug: str) -> RepositoryRef:
        return UserRepositoryRef(owner.domain, owner.identity, slug)
