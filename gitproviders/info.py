"""Desired-state ("spec") objects.

Each ``*Info`` class holds only the fields a caller can ask the provider to
converge on. Server-assigned fields (ids, timestamps, links, session data,
versions) are not part of these classes, so comparing two infos can never be
influenced by them.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum

from gitproviders.exceptions import FieldInvalidError, FieldRequiredError, InvalidInfoError
from gitproviders.keys import is_ssh_public_key
from gitproviders.permissions import RepositoryPermission

DEFAULT_BRANCH = "main"


class RepositoryVisibility(str, Enum):
    PUBLIC = "public"
    INTERNAL = "internal"
    PRIVATE = "private"


def _raise_if_errors(name: str, errors: list[Exception]) -> None:
    if errors:
        raise InvalidInfoError(name, errors)


@dataclass(frozen=True)
class RepositoryInfo:
    """
    Desired state of a repository.

    Updates are PATCH-like: fields left as None are neither sent nor
    compared, so :meth:`equals` is desired-subset equality.
    """

    description: str | None = None
    default_branch: str | None = None
    visibility: RepositoryVisibility | None = None

    def validate(self) -> None:
        errors: list[Exception] = []
        if self.visibility is not None and not isinstance(self.visibility, RepositoryVisibility):
            errors.append(FieldInvalidError("RepositoryInfo", "visibility", self.visibility))
        if self.default_branch is not None and not self.default_branch.strip():
            errors.append(FieldInvalidError("RepositoryInfo", "default_branch", self.default_branch))
        _raise_if_errors("RepositoryInfo", errors)

    def with_defaults(self) -> "RepositoryInfo":
        """Return a copy with unset fields defaulted (private, ``main``)."""
        return replace(
            self,
            default_branch=self.default_branch if self.default_branch is not None else DEFAULT_BRANCH,
            visibility=self.visibility if self.visibility is not None else RepositoryVisibility.PRIVATE,
        )

    def equals(self, actual: "RepositoryInfo") -> bool:
        for f in fields(self):
            desired = getattr(self, f.name)
            if desired is not None and desired != getattr(actual, f.name):
                return False
        return True


@dataclass(frozen=True)
class DeployKeyInfo:
    """
    Desired state of a deploy key.

    Deploy keys cannot be edited in place: an update deletes the key and
    creates it again, so every field is sent and compared. Leaving
    ``read_only`` unset means the default, read-only.
    """

    name: str
    key: str
    read_only: bool | None = None

    def validate(self) -> None:
        errors: list[Exception] = []
        if not self.name:
            errors.append(FieldRequiredError("DeployKeyInfo", "name"))
        if not self.key:
            errors.append(FieldRequiredError("DeployKeyInfo", "key"))
        elif not is_ssh_public_key(self.key):
            errors.append(FieldInvalidError("DeployKeyInfo", "key", self.key[:32]))
        _raise_if_errors("DeployKeyInfo", errors)

    def with_defaults(self) -> "DeployKeyInfo":
        return replace(self, read_only=True if self.read_only is None else self.read_only)

    def equals(self, actual: "DeployKeyInfo") -> bool:
        # The comment field of the key text carries the name, compare key material only
        desired = self.with_defaults()
        return (
            desired.name == actual.name
            and desired.key.split()[:2] == actual.key.split()[:2]
            and desired.read_only == actual.with_defaults().read_only
        )


@dataclass(frozen=True)
class TeamAccessInfo:
    """Desired permission of a team (group) on a repository."""

    name: str
    permission: RepositoryPermission | None = None

    def validate(self) -> None:
        errors: list[Exception] = []
        if not self.name:
            errors.append(FieldRequiredError("TeamAccessInfo", "name"))
        if self.permission is not None and not isinstance(self.permission, RepositoryPermission):
            errors.append(FieldInvalidError("TeamAccessInfo", "permission", self.permission))
        _raise_if_errors("TeamAccessInfo", errors)

    @property
    def effective_permission(self) -> RepositoryPermission:
        """The requested level, or pull when none was given."""
        if self.permission is None:
            return RepositoryPermission.PULL
        return self.permission

    def with_defaults(self) -> "TeamAccessInfo":
        if self.permission is not None:
            return self
        return replace(self, permission=self.effective_permission)

    def equals(self, actual: "TeamAccessInfo") -> bool:
        return self.with_defaults() == actual.with_defaults()


@dataclass(frozen=True)
class PullRequestInfo:
    """
    Desired state of a pull request.

    Updates replace title, description and target branch together, so every
    field is compared. The source branch of an existing pull request cannot
    change.
    """

    title: str
    source_branch: str
    target_branch: str
    description: str = ""

    def validate(self) -> None:
        errors: list[Exception] = []
        for name in ("title", "source_branch", "target_branch"):
            if not getattr(self, name):
                errors.append(FieldRequiredError("PullRequestInfo", name))
        _raise_if_errors("PullRequestInfo", errors)

    def equals(self, actual: "PullRequestInfo") -> bool:
        return self == actual


@dataclass(frozen=True)
class PullRequestStatus:
    """Read-only state of a pull request, as reported by the provider."""

    number: int
    web_url: str
    merged: bool
    state: str
    version: int


@dataclass(frozen=True)
class OrganizationInfo:
    """Read-only view of an organization."""

    name: str
    description: str | None = None


@dataclass(frozen=True)
class TeamInfo:
    """Read-only view of a team and its members' logins."""

    name: str
    members: tuple[str, ...] = ()


@dataclass(frozen=True)
class BranchInfo:
    name: str
    sha: str
    is_default: bool = False


@dataclass(frozen=True)
class CommitInfo:
    sha: str
    message: str
    author: str
    tree_sha: str | None = None
    url: str | None = None
    created_at: int | None = None  # Milliseconds since the epoch


__all__ = [
    "DEFAULT_BRANCH",
    "BranchInfo",
    "CommitInfo",
    "DeployKeyInfo",
    "OrganizationInfo",
    "PullRequestInfo",
    "PullRequestStatus",
    "RepositoryInfo",
    "RepositoryVisibility",
    "TeamAccessInfo",
    "TeamInfo",
]
