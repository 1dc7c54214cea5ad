"""Branches resource client."""

from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import NoProviderSupportError, NotFoundError
from gitproviders.info import BranchInfo
from gitproviders.refs import RepositoryRef
from gitproviders.stash.api import api_path
from gitproviders.stash.types.branches import Branch, parse_branch

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI

_REQUIRED = ("id", "displayId")


class BranchHandle:
    """A branch. Read-only."""

    def __init__(self, raw: Branch) -> None:
        self._raw = raw

    def get(self) -> BranchInfo:
        return BranchInfo(
            name=self._raw.display_id,
            sha=self._raw.latest_commit,
            is_default=self._raw.is_default,
        )

    def api_object(self) -> Branch:
        return self._raw


class BranchesClient:
    """Client for the branches of one repository."""

    def __init__(self, api: "StashAPI", ref: RepositoryRef) -> None:
        self.api = api
        self.ref = ref

    def _path(self, ctx: Context, *elements: str) -> str:
        owner = self.api.owner_key(ctx, self.ref)
        return api_path("projects", owner, "repos", self.ref.repository_name, "branches", *elements)

    def list(self, ctx: Context | None = None) -> list[BranchHandle]:
        ctx = ensure_context(ctx)
        return [
            BranchHandle(parse_branch(data, session))
            for data, session in self.api.list_all(ctx, self._path(ctx), "Stash.Branch", _REQUIRED)
        ]

    def get(self, name: str, ctx: Context | None = None) -> BranchHandle:
        """
        Get a branch by its short name.

        Raises:
            NotFoundError: If no branch has that name
        """
        ctx = ensure_context(ctx)
        candidates = self.api.list_all(
            ctx, self._path(ctx), "Stash.Branch", _REQUIRED, filterText=name
        )
        for data, session in candidates:
            if data["displayId"] == name:
                return BranchHandle(parse_branch(data, session))
        raise NotFoundError("NOT_FOUND", f"branch {name!r} not found", status_code=404)

    def default(self, ctx: Context | None = None) -> BranchHandle:
        """Get the repository's default branch."""
        ctx = ensure_context(ctx)
        data, session = self.api.get_object(ctx, self._path(ctx, "default"), "Stash.Branch", _REQUIRED)
        return BranchHandle(parse_branch(data, session))

    def create(self, branch: str, sha: str, ctx: Context | None = None) -> BranchHandle:
        """Creating branches needs a git push; always raises :class:`NoProviderSupportError`."""
        raise NoProviderSupportError("branch creation")
