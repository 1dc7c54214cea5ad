"""Team access (group permissions on a repository) resource client."""

from dataclasses import replace
from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import NotFoundError
from gitproviders.info import TeamAccessInfo
from gitproviders.refs import OrgRepositoryRef
from gitproviders.resource import Resource, reconcile_resource
from gitproviders.stash.api import api_path
from gitproviders.stash.permissions import STASH_PERMISSIONS
from gitproviders.stash.types.permissions import GroupPermission, parse_group_permission
from gitproviders.transport import Request

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI

_REQUIRED = ("group.name", "permission")


class TeamAccessHandle(Resource[TeamAccessInfo, GroupPermission]):
    """
    The permission a team holds on a repository.

    The raw form carries the team's effective permission: the highest of its
    repository-level and project-level grants.
    """

    def __init__(self, client: "TeamAccessClient", raw: GroupPermission) -> None:
        self._client = client
        self._raw = raw

    @property
    def repository(self) -> OrgRepositoryRef:
        return self._client.ref

    def get(self) -> TeamAccessInfo:
        return TeamAccessInfo(
            name=self._raw.group_name,
            permission=STASH_PERMISSIONS.to_ordinal(self._raw.permission),
        )

    def set(self, spec: TeamAccessInfo) -> None:
        spec.validate()
        self._raw = GroupPermission(
            group_name=spec.name,
            permission=STASH_PERMISSIONS.to_provider_level(spec.effective_permission),
            session=self._raw.session,
        )

    def api_object(self) -> GroupPermission:
        return self._raw

    def update(self, ctx: Context | None = None) -> None:
        """Grant the held permission at repository level (replaces any previous grant)."""
        ctx = ensure_context(ctx)
        self._client._grant(ctx, self._raw.group_name, self._raw.permission)
        self._raw = self._client._effective(ctx, self._raw.group_name)

    def delete(self, ctx: Context | None = None) -> None:
        """Revoke the repository-level grant. Project-level grants are left untouched."""
        ctx = ensure_context(ctx)
        self._client.api.request(
            ctx,
            Request("DELETE", self._client._repo_path(ctx)).with_query(name=self._raw.group_name),
        )

    def reconcile(self, ctx: Context | None = None) -> bool:
        ctx = ensure_context(ctx)
        actual, changed = self._client.reconcile(self.get(), ctx)
        self._raw = actual.api_object()
        return changed


class TeamAccessClient:
    """
    Client for the teams that can access one organization repository.

    Stash grants group permissions both on the repository and on its
    project. Reads report the effective (highest) level across both; writes
    only ever touch the repository-level grant, so a desired level below a
    project-level grant cannot be reached from here.
    """

    def __init__(self, api: "StashAPI", ref: OrgRepositoryRef) -> None:
        self.api = api
        self.ref = ref

    def _repo_path(self, ctx: Context) -> str:
        owner = self.api.owner_key(ctx, self.ref)
        return api_path("projects", owner, "repos", self.ref.repository_name, "permissions", "groups")

    def _project_path(self, ctx: Context) -> str:
        owner = self.api.owner_key(ctx, self.ref)
        return api_path("projects", owner, "permissions", "groups")

    def _grants(self, ctx: Context, name: str | None = None) -> list[GroupPermission]:
        query = {"filter": name} if name else {}
        grants: list[GroupPermission] = []
        for path, obj in (
            (self._repo_path(ctx), "Stash.RepositoryGroupPermission"),
            (self._project_path(ctx), "Stash.ProjectGroupPermission"),
        ):
            grants.extend(
                parse_group_permission(data, session)
                for data, session in self.api.list_all(ctx, path, obj, _REQUIRED, **query)
            )
        if name:
            grants = [grant for grant in grants if grant.group_name == name]
        return grants

    def _effective(self, ctx: Context, name: str) -> GroupPermission:
        grants = self._grants(ctx, name)
        level = STASH_PERMISSIONS.effective_permission(grant.permission for grant in grants)
        if level is None:
            raise NotFoundError("NOT_FOUND", f"team {name!r} has no access", status_code=404)
        return GroupPermission(
            group_name=name,
            permission=STASH_PERMISSIONS.to_provider_level(level),
            session=grants[0].session,
        )

    def _grant(self, ctx: Context, name: str, permission: str) -> None:
        self.api.request(
            ctx,
            Request("PUT", self._repo_path(ctx)).with_query(name=name, permission=permission),
        )

    def get(self, name: str, ctx: Context | None = None) -> TeamAccessHandle:
        """
        Get the effective access of team ``name``.

        Raises:
            NotFoundError: If the team has no grant on the repository or its project
            InvalidPermissionLevelError: If a grant carries an unknown permission string
        """
        ctx = ensure_context(ctx)
        return TeamAccessHandle(self, self._effective(ctx, name))

    def list(self, ctx: Context | None = None) -> list[TeamAccessHandle]:
        """List every team with access, each at its effective level."""
        ctx = ensure_context(ctx)
        by_team: dict[str, list[GroupPermission]] = {}
        for grant in self._grants(ctx):
            by_team.setdefault(grant.group_name, []).append(grant)

        handles = []
        for name, grants in by_team.items():
            level = STASH_PERMISSIONS.effective_permission(grant.permission for grant in grants)
            raw = GroupPermission(name, STASH_PERMISSIONS.to_provider_level(level), grants[0].session)
            handles.append(TeamAccessHandle(self, raw))
        return handles

    def create(self, info: TeamAccessInfo, ctx: Context | None = None) -> TeamAccessHandle:
        """Grant ``info.permission`` (default: pull) to team ``info.name`` on the repository."""
        ctx = ensure_context(ctx)
        info.validate()
        self._grant(ctx, info.name, STASH_PERMISSIONS.to_provider_level(info.effective_permission))
        return self.get(info.name, ctx)

    def reconcile(
        self, info: TeamAccessInfo, ctx: Context | None = None
    ) -> tuple[TeamAccessHandle, bool]:
        """
        Make ``info`` the effective access of team ``info.name``.

        Levels Stash has no string for (triage, maintain) are compared as the
        level they are stored as, so reconciling them converges.
        """
        ctx = ensure_context(ctx)
        info.validate()
        info = replace(info, permission=STASH_PERMISSIONS.normalize(info.effective_permission))
        return reconcile_resource(
            ctx,
            info,
            lambda ctx: self.get(info.name, ctx),
            lambda ctx, desired: self.create(desired, ctx),
            kind="team access",
            name=info.name,
        )
