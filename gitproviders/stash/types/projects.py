"""Project (organization) data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.transport import SessionInfo


@dataclass
class Project:
    """A Stash project."""

    key: str
    name: str
    id: int | None = None
    description: str = ""
    public: bool = False
    type: str = "NORMAL"
    links: dict[str, Any] = field(default_factory=dict)
    session: SessionInfo = field(default_factory=SessionInfo)


def parse_project(data: dict[str, Any], session: SessionInfo | None = None) -> Project:
    return Project(
        key=data["key"],
        name=data["name"],
        id=data.get("id"),
        description=data.get("description") or "",
        public=data.get("public", False),
        type=data.get("type", "NORMAL"),
        links=data.get("links") or {},
        session=session or SessionInfo(),
    )
