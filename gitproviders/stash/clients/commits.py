"""Commits resource client."""

from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import InvalidArgumentError, NoProviderSupportError
from gitproviders.info import CommitInfo
from gitproviders.refs import RepositoryRef
from gitproviders.stash.api import api_path
from gitproviders.stash.types.commits import Commit, parse_commit
from gitproviders.transport import Request
from gitproviders.validation import validate_api_object

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI

_REQUIRED = ("id",)


class CommitHandle:
    """A commit. Read-only."""

    def __init__(self, raw: Commit) -> None:
        self._raw = raw

    def get(self) -> CommitInfo:
        return CommitInfo(
            sha=self._raw.id,
            message=self._raw.message,
            author=self._raw.author.name if self._raw.author else "",
            created_at=self._raw.author_timestamp,
        )

    def api_object(self) -> Commit:
        return self._raw


class CommitsClient:
    """Client for the commits of one repository."""

    def __init__(self, api: "StashAPI", ref: RepositoryRef) -> None:
        self.api = api
        self.ref = ref

    def _path(self, ctx: Context, *elements: str) -> str:
        owner = self.api.owner_key(ctx, self.ref)
        return api_path("projects", owner, "repos", self.ref.repository_name, "commits", *elements)

    def list_page(
        self, branch: str, per_page: int, page: int, ctx: Context | None = None
    ) -> list[CommitHandle]:
        """
        List one page of the history of ``branch``, newest first.

        Args:
            branch: Branch name
            per_page: Commits per page (> 0)
            page: Page number, starting at 1
        """
        if per_page <= 0 or page <= 0:
            raise InvalidArgumentError("per_page and page must be positive")
        ctx = ensure_context(ctx)
        req = Request("GET", self._path(ctx)).with_query(
            until=f"refs/heads/{branch}",
            start=(page - 1) * per_page,
            limit=per_page,
        )
        response = self.api.request(ctx, req)
        values = response.json().get("values", [])
        for data in values:
            validate_api_object("Stash.Commit", data, _REQUIRED)
        return [CommitHandle(parse_commit(data, response.session)) for data in values[:per_page]]

    def get(self, sha: str, ctx: Context | None = None) -> CommitHandle:
        ctx = ensure_context(ctx)
        data, session = self.api.get_object(ctx, self._path(ctx, sha), "Stash.Commit", _REQUIRED)
        return CommitHandle(parse_commit(data, session))

    def create(
        self, branch: str, message: str, files: dict[str, str], ctx: Context | None = None
    ) -> CommitHandle:
        """Creating commits needs a git push; always raises :class:`NoProviderSupportError`."""
        raise NoProviderSupportError("commit creation")
