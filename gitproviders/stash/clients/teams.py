"""Teams (Stash groups) resource client."""

from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import NotFoundError
from gitproviders.info import TeamInfo
from gitproviders.refs import OrganizationRef
from gitproviders.stash.api import api_path
from gitproviders.stash.types.users import Group, User, parse_group, parse_user

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI


class Team:
    """A group with its members. Read-only."""

    def __init__(self, group: Group, members: list[User], organization: OrganizationRef) -> None:
        self._group = group
        self._members = members
        self.organization = organization

    def get(self) -> TeamInfo:
        return TeamInfo(name=self._group.name, members=tuple(user.name for user in self._members))

    def api_object(self) -> Group:
        return self._group

    @property
    def members(self) -> list[User]:
        return list(self._members)


class TeamsClient:
    """Client for the teams that hold permissions on an organization."""

    def __init__(self, api: "StashAPI", ref: OrganizationRef) -> None:
        self.api = api
        self.ref = ref

    def get(self, name: str, ctx: Context | None = None) -> Team:
        """
        Get a team and its members by exact name.

        Raises:
            NotFoundError: If no group has that name
        """
        ctx = ensure_context(ctx)
        group = self._get_group(ctx, name)
        members = [
            parse_user(data, session)
            for data, session in self.api.list_all(
                ctx,
                api_path("admin", "groups", "more-members"),
                "Stash.User",
                ("name",),
                context=group.name,
            )
        ]
        return Team(group, members, self.ref)

    def _get_group(self, ctx: Context, name: str) -> Group:
        candidates = self.api.list_all(
            ctx, api_path("admin", "groups"), "Stash.Group", ("name",), filter=name
        )
        for data, session in candidates:
            if data["name"] == name:
                return parse_group(data, session)
        raise NotFoundError("NOT_FOUND", f"team {name!r} not found", status_code=404)

    def list(self, ctx: Context | None = None) -> list[Team]:
        """List the teams holding a permission on the organization's project."""
        ctx = ensure_context(ctx)
        key = self.api.owner_key(ctx, self.ref)
        grants = self.api.list_all(
            ctx,
            api_path("projects", key, "permissions", "groups"),
            "Stash.ProjectGroupPermission",
            ("group.name", "permission"),
        )
        return [self.get(data["group"]["name"], ctx) for data, _ in grants]
