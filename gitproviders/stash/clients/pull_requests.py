"""Pull requests resource client."""

from dataclasses import replace
from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import (
    AlreadyExistsError,
    FieldInvalidError,
    InvalidInfoError,
    NotFoundError,
    VersionConflictError,
)
from gitproviders.info import PullRequestInfo, PullRequestStatus
from gitproviders.refs import RepositoryRef
from gitproviders.resource import Resource, reconcile_resource
from gitproviders.stash.api import api_path
from gitproviders.stash.types.pulls import PullRequest, Ref, parse_pull_request
from gitproviders.transport import Request

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI

_REQUIRED = ("id", "title", "fromRef.id", "toRef.id")


def _branch_ref(branch: str) -> str:
    return f"refs/heads/{branch}"


def pull_request_from_api(raw: PullRequest) -> PullRequestInfo:
    return PullRequestInfo(
        title=raw.title,
        source_branch=raw.from_ref.branch,
        target_branch=raw.to_ref.branch,
        description=raw.description,
    )


class PullRequestHandle(Resource[PullRequestInfo, PullRequest]):
    """
    A pull request.

    The handle holds the server's ``version``. :meth:`update`,
    :meth:`delete` and :meth:`merge` send it back; if someone else changed
    the pull request in between, :class:`VersionConflictError` is raised and
    nothing is applied. Call :meth:`refresh` to pick up the new version.
    """

    def __init__(self, client: "PullRequestsClient", raw: PullRequest) -> None:
        self._client = client
        self._raw = raw

    @property
    def number(self) -> int:
        """
        Raises:
            NotFoundError: If the pull request was never created
        """
        if self._raw.id is None:
            raise NotFoundError("NOT_FOUND", "pull request was never created", status_code=404)
        return self._raw.id

    def get(self) -> PullRequestInfo:
        return pull_request_from_api(self._raw)

    def status(self) -> PullRequestStatus:
        return PullRequestStatus(
            number=self.number,
            web_url=self._raw.web_url,
            merged=self._raw.merged,
            state=self._raw.state,
            version=self._raw.version,
        )

    def set(self, spec: PullRequestInfo) -> None:
        spec.validate()
        if spec.source_branch != self._raw.from_ref.branch:
            raise InvalidInfoError(
                "PullRequestInfo",
                [FieldInvalidError("PullRequestInfo", "source_branch", spec.source_branch)],
            )
        self._raw = replace(
            self._raw,
            title=spec.title,
            description=spec.description,
            to_ref=replace(self._raw.to_ref, id=_branch_ref(spec.target_branch)),
        )

    def api_object(self) -> PullRequest:
        return self._raw

    def update(self, ctx: Context | None = None) -> None:
        """Replace title, description and target branch, guarded by the held version."""
        ctx = ensure_context(ctx)
        req = Request("PUT", self._client._path(ctx, self.number)).with_body(self._raw.to_update_api())
        self._raw = self._client._send(ctx, req, self._raw.version)

    def delete(self, ctx: Context | None = None) -> None:
        ctx = ensure_context(ctx)
        req = Request("DELETE", self._client._path(ctx, self.number)).with_body(
            {"version": self._raw.version}
        )
        try:
            self._client.api.request(ctx, req)
        except AlreadyExistsError as e:
            raise VersionConflictError(e.message, self._raw.version, e.request_id) from e

    def merge(self, ctx: Context | None = None) -> None:
        ctx = ensure_context(ctx)
        req = Request("POST", self._client._path(ctx, self.number, "merge")).with_query(
            version=self._raw.version
        )
        self._raw = self._client._send(ctx, req, self._raw.version)

    def refresh(self, ctx: Context | None = None) -> None:
        """Replace the held raw form (and version) with the server's."""
        ctx = ensure_context(ctx)
        self._raw = self._client.get(self.number, ctx).api_object()

    def reconcile(self, ctx: Context | None = None) -> bool:
        ctx = ensure_context(ctx)

        def fetch(ctx: Context) -> "PullRequestHandle":
            return self._client.get(self.number, ctx)

        def create(ctx: Context, desired: PullRequestInfo) -> "PullRequestHandle":
            return self._client.create(
                desired.title,
                desired.source_branch,
                desired.target_branch,
                desired.description,
                ctx,
            )

        actual, changed = reconcile_resource(
            ctx, self.get(), fetch, create, kind="pull request", name=self._raw.title
        )
        self._raw = actual.api_object()
        return changed


class PullRequestsClient:
    """Client for the pull requests of one repository."""

    def __init__(self, api: "StashAPI", ref: RepositoryRef) -> None:
        self.api = api
        self.ref = ref

    def _path(self, ctx: Context, *elements: str | int) -> str:
        owner = self.api.owner_key(ctx, self.ref)
        return api_path(
            "projects", owner, "repos", self.ref.repository_name, "pull-requests", *elements
        )

    def _send(self, ctx: Context, req: Request, version: int) -> PullRequest:
        try:
            data, session = self.api.send_object(ctx, req, "Stash.PullRequest", _REQUIRED)
        except AlreadyExistsError as e:
            raise VersionConflictError(e.message, version, e.request_id) from e
        return parse_pull_request(data, session)

    def list(self, state: str | None = None, ctx: Context | None = None) -> list[PullRequestHandle]:
        """
        List pull requests.

        Args:
            state: "OPEN", "DECLINED", "MERGED" or "ALL" (default: server default, open)
        """
        ctx = ensure_context(ctx)
        return [
            PullRequestHandle(self, parse_pull_request(data, session))
            for data, session in self.api.list_all(
                ctx, self._path(ctx), "Stash.PullRequest", _REQUIRED, state=state
            )
        ]

    def get(self, number: int, ctx: Context | None = None) -> PullRequestHandle:
        ctx = ensure_context(ctx)
        data, session = self.api.get_object(
            ctx, self._path(ctx, number), "Stash.PullRequest", _REQUIRED
        )
        return PullRequestHandle(self, parse_pull_request(data, session))

    def create(
        self,
        title: str,
        branch: str,
        base_branch: str,
        description: str = "",
        ctx: Context | None = None,
    ) -> PullRequestHandle:
        """
        Open a pull request from ``branch`` into ``base_branch``.

        Raises:
            InvalidInfoError: If title or a branch is empty
            AlreadyExistsError: If an open pull request already joins the two branches
        """
        ctx = ensure_context(ctx)
        PullRequestInfo(title, branch, base_branch, description).validate()
        owner = self.api.owner_key(ctx, self.ref)
        slug = self.ref.repository_name
        raw = PullRequest(
            title=title,
            description=description,
            from_ref=Ref(id=_branch_ref(branch), repository_slug=slug, project_key=owner),
            to_ref=Ref(id=_branch_ref(base_branch), repository_slug=slug, project_key=owner),
        )
        data, session = self.api.send_object(
            ctx,
            Request("POST", self._path(ctx)).with_body(raw.to_api()),
            "Stash.PullRequest",
            _REQUIRED,
        )
        return PullRequestHandle(self, parse_pull_request(data, session))

    def merge(self, number: int, version: int, ctx: Context | None = None) -> PullRequestHandle:
        """
        Merge pull request ``number`` at ``version``.

        Raises:
            VersionConflictError: If the pull request changed since ``version``
        """
        ctx = ensure_context(ctx)
        req = Request("POST", self._path(ctx, number, "merge")).with_query(version=version)
        return PullRequestHandle(self, self._send(ctx, req, version))
