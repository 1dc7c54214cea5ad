"""User and group data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.transport import SessionInfo


@dataclass
class User:
    """A Stash user account."""

    name: str
    slug: str
    id: int | None = None
    display_name: str = ""
    email_address: str = ""
    active: bool = True
    type: str = "NORMAL"
    session: SessionInfo = field(default_factory=SessionInfo)


@dataclass
class Group:
    """A Stash user group (a team)."""

    name: str
    deletable: bool = True
    session: SessionInfo = field(default_factory=SessionInfo)


def parse_user(data: dict[str, Any], session: SessionInfo | None = None) -> User:
    return User(
        name=data["name"],
        slug=data.get("slug") or data["name"],
        id=data.get("id"),
        display_name=data.get("displayName", ""),
        email_address=data.get("emailAddress", ""),
        active=data.get("active", True),
        type=data.get("type", "NORMAL"),
        session=session or SessionInfo(),
    )


def parse_group(data: dict[str, Any], session: SessionInfo | None = None) -> Group:
    return Group(
        name=data["name"],
        deletable=data.get("deletable", True),
        session=session or SessionInfo(),
    )
