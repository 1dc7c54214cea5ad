"""Repository data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.stash.types.projects import Project, parse_project
from gitproviders.transport import SessionInfo


@dataclass
class Repository:
    """A Stash repository, as returned by the server."""

    name: str
    slug: str = ""
    id: int | None = None
    description: str = ""
    public: bool = False
    forkable: bool = True
    scm_id: str = "git"
    state: str = ""
    default_branch: str | None = None
    project: Project | None = None
    links: dict[str, Any] = field(default_factory=dict)
    session: SessionInfo = field(default_factory=SessionInfo)

    @property
    def clone_links(self) -> dict[str, str]:
        """Clone URLs keyed by transport name ("http", "ssh")."""
        return {link["name"]: link["href"] for link in self.links.get("clone", [])}

    def to_api(self) -> dict[str, Any]:
        """Body for the create and update endpoints."""
        body: dict[str, Any] = {
            "name": self.name,
            "scmId": self.scm_id,
            "description": self.description,
            "public": self.public,
            "forkable": self.forkable,
        }
        if self.default_branch:
            body["defaultBranch"] = self.default_branch
        return body


def parse_repository(data: dict[str, Any], session: SessionInfo | None = None) -> Repository:
    project = data.get("project")
    return Repository(
        name=data["name"],
        slug=data["slug"],
        id=data.get("id"),
        description=data.get("description") or "",
        public=data.get("public", False),
        forkable=data.get("forkable", True),
        scm_id=data.get("scmId", "git"),
        state=data.get("state", ""),
        default_branch=data.get("defaultBranch"),
        project=parse_project(project) if project else None,
        links=data.get("links") or {},
        session=session or SessionInfo(),
    )
