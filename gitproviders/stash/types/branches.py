"""Branch data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.transport import SessionInfo


@dataclass
class Branch:
    """A branch ref. ``id`` is the full ref name, e.g. ``refs/heads/main``."""

    id: str
    display_id: str
    latest_commit: str = ""
    is_default: bool = False
    type: str = "BRANCH"
    session: SessionInfo = field(default_factory=SessionInfo)


def parse_branch(data: dict[str, Any], session: SessionInfo | None = None) -> Branch:
    return Branch(
        id=data["id"],
        display_id=data["displayId"],
        latest_commit=data.get("latestCommit") or data.get("latestChangeset", ""),
        is_default=data.get("isDefault", False),
        type=data.get("type", "BRANCH"),
        session=session or SessionInfo(),
    )
