"""Group permission grants."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.transport import SessionInfo


@dataclass
class GroupPermission:
    """A permission granted to a group, on a project or on a repository."""

    group_name: str
    permission: str  # e.g. "REPO_WRITE" or "PROJECT_READ"
    session: SessionInfo = field(default_factory=SessionInfo)


def parse_group_permission(
    data: dict[str, Any], session: SessionInfo | None = None
) -> GroupPermission:
    return GroupPermission(
        group_name=data["group"]["name"],
        permission=data["permission"],
        session=session or SessionInfo(),
    )
