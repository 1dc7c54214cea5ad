"""Pull request data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.transport import SessionInfo

MERGED_STATE = "MERGED"


@dataclass
class Ref:
    """One side of a pull request: a branch in a repository."""

    id: str  # Full ref name, e.g. "refs/heads/feature"
    repository_slug: str = ""
    project_key: str = ""
    display_id: str = ""
    latest_commit: str = ""

    @property
    def branch(self) -> str:
        return self.id.removeprefix("refs/heads/")

    def to_api(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "repository": {
                "slug": self.repository_slug,
                "project": {"key": self.project_key},
            },
        }


@dataclass
class PullRequest:
    """
    A Stash pull request.

    ``version`` is the server's optimistic-concurrency counter; it must be
    sent back unchanged on update and delete, and increases on every change.
    """

    title: str
    from_ref: Ref
    to_ref: Ref
    description: str = ""
    id: int | None = None
    version: int = 0
    state: str = "OPEN"
    open: bool = True
    closed: bool = False
    locked: bool = False
    author: str = ""
    created_date: int | None = None
    updated_date: int | None = None
    links: dict[str, Any] = field(default_factory=dict)
    session: SessionInfo = field(default_factory=SessionInfo)

    @property
    def web_url(self) -> str:
        selves = self.links.get("self") or []
        return selves[0]["href"] if selves else ""

    @property
    def merged(self) -> bool:
        return self.state == MERGED_STATE

    def to_api(self) -> dict[str, Any]:
        """Body for the create endpoint."""
        return {
            "title": self.title,
            "description": self.description,
            "state": self.state,
            "open": self.open,
            "closed": self.closed,
            "locked": self.locked,
            "fromRef": self.from_ref.to_api(),
            "toRef": self.to_ref.to_api(),
        }

    def to_update_api(self) -> dict[str, Any]:
        """Body for the update endpoint, carrying the held version."""
        return {
            "id": self.id,
            "version": self.version,
            "title": self.title,
            "description": self.description,
            "toRef": self.to_ref.to_api(),
        }


def _parse_ref(data: dict[str, Any]) -> Ref:
    repository = data.get("repository") or {}
    return Ref(
        id=data["id"],
        repository_slug=repository.get("slug", ""),
        project_key=(repository.get("project") or {}).get("key", ""),
        display_id=data.get("displayId", ""),
        latest_commit=data.get("latestCommit", ""),
    )


def parse_pull_request(data: dict[str, Any], session: SessionInfo | None = None) -> PullRequest:
    author = (data.get("author") or {}).get("user") or {}
    return PullRequest(
        title=data["title"],
        from_ref=_parse_ref(data["fromRef"]),
        to_ref=_parse_ref(data["toRef"]),
        description=data.get("description") or "",
        id=data["id"],
        version=data.get("version", 0),
        state=data.get("state", "OPEN"),
        open=data.get("open", True),
        closed=data.get("closed", False),
        locked=data.get("locked", False),
        author=author.get("name", ""),
        created_date=data.get("createdDate"),
        updated_date=data.get("updatedDate"),
        links=data.get("links") or {},
        session=session or SessionInfo(),
    )
