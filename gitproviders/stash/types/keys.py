"""Deploy (access) key data models."""

from dataclasses import dataclass, field
from typing import Any

from gitproviders.transport import SessionInfo


@dataclass
class DeployKey:
    """An SSH access key registered on a repository."""

    label: str
    text: str
    permission: str = "REPO_READ"
    id: int | None = None
    session: SessionInfo = field(default_factory=SessionInfo)

    def to_api(self) -> dict[str, Any]:
        """Body for the create endpoint. The server assigns the id."""
        return {
            "key": {"text": self.text, "label": self.label},
            "permission": self.permission,
        }


def parse_deploy_key(data: dict[str, Any], session: SessionInfo | None = None) -> DeployKey:
    key = data["key"]
    return DeployKey(
        label=key.get("label", ""),
        text=key["text"],
        permission=data["permission"],
        id=key.get("id"),
        session=session or SessionInfo(),
    )
