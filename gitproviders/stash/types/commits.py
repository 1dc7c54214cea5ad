"""Commit data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.stash.types.users import User, parse_user
from gitproviders.transport import SessionInfo


@dataclass
class Commit:
    """A commit."""

    id: str
    display_id: str
    message: str = ""
    author: User | None = None
    author_timestamp: int | None = None
    committer: User | None = None
    committer_timestamp: int | None = None
    parents: list[str] = field(default_factory=list)
    session: SessionInfo = field(default_factory=SessionInfo)


def parse_commit(data: dict[str, Any], session: SessionInfo | None = None) -> Commit:
    author = data.get("author")
    committer = data.get("committer")
    return Commit(
        id=data["id"],
        display_id=data.get("displayId") or data["id"][:11],
        message=data.get("message", ""),
        author=parse_user(author) if author and author.get("name") else None,
        author_timestamp=data.get("authorTimestamp"),
        committer=parse_user(committer) if committer and committer.get("name") else None,
        committer_timestamp=data.get("committerTimestamp"),
        parents=[parent["id"] for parent in data.get("parents", [])],
        session=session or SessionInfo(),
    )
