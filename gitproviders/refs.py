"""
Resource references.

References identify a remote object (an organization, a user account or a
repository under either) and are immutable value objects. They can be parsed
from, and rendered back to, their HTTPS URLs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from gitproviders.exceptions import FieldRequiredError, InvalidArgumentError, InvalidInfoError


class TransportType(str, Enum):
    """How a repository is cloned."""

    HTTPS = "https"
    GIT = "git"
    SSH = "ssh"


@dataclass(frozen=True)
class OrganizationRef:
    """An organization (a Stash project) on a given domain."""

    domain: str
    organization: str

    @property
    def identity(self) -> str:
        return self.organization

    def validate(self) -> None:
        _require("OrganizationRef", domain=self.domain, organization=self.organization)

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.identity}"


@dataclass(frozen=True)
class UserRef:
    """A user account on a given domain."""

    domain: str
    user_login: str

    @property
    def identity(self) -> str:
        return self.user_login

    def validate(self) -> None:
        _require("UserRef", domain=self.domain, user_login=self.user_login)

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.identity}"


class _RepositoryRefMixin(ABC):
    domain: str
    repository_name: str

    @property
    @abstractmethod
    def identity(self) -> str:
        """Login or key of the owner."""
        pass

    @property
    def repository(self) -> str:
        return self.repository_name

    def clone_url(self, transport: TransportType) -> str:
        """Return the URL to clone this repository over ``transport``."""
        transport = TransportType(transport)
        if transport is TransportType.HTTPS:
            return f"{self}.git"
        if transport is TransportType.GIT:
            return f"git@{self.domain}:{self.identity}/{self.repository_name}.git"
        return f"ssh://git@{self.domain}/{self.identity}/{self.repository_name}"


@dataclass(frozen=True)
class OrgRepositoryRef(_RepositoryRefMixin):
    """A repository owned by an organization."""

    domain: str
    organization: str
    repository_name: str

    @property
    def identity(self) -> str:
        return self.organization

    @property
    def organization_ref(self) -> OrganizationRef:
        return OrganizationRef(self.domain, self.organization)

    def validate(self) -> None:
        _require(
            "OrgRepositoryRef",
            domain=self.domain,
            organization=self.organization,
            repository_name=self.repository_name,
        )

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.organization}/{self.repository_name}"


@dataclass(frozen=True)
class UserRepositoryRef(_RepositoryRefMixin):
    """A repository owned by a user account."""

    domain: str
    user_login: str
    repository_name: str

    @property
    def identity(self) -> str:
        return self.user_login

    @property
    def user_ref(self) -> UserRef:
        return UserRef(self.domain, self.user_login)

    def validate(self) -> None:
        _require(
            "UserRepositoryRef",
            domain=self.domain,
            user_login=self.user_login,
            repository_name=self.repository_name,
        )

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.user_login}/{self.repository_name}"


RepositoryRef = OrgRepositoryRef | UserRepositoryRef
IdentityRef = OrganizationRef | UserRef


def _require(obj: str, **fields: str) -> None:
    errors = [FieldRequiredError(obj, name) for name, value in fields.items() if not value]
    if errors:
        raise InvalidInfoError(obj, errors)


def _parse_url(url: str) -> tuple[str, list[str]]:
    if not url:
        raise InvalidArgumentError("url cannot be empty")
    parts = urlsplit(url)
    if parts.scheme != "https":
        raise InvalidArgumentError(f"unsupported URL scheme, only https is allowed: {url}")
    if parts.query or parts.fragment or parts.username or parts.password:
        raise InvalidArgumentError(f"URL must not carry a query, fragment or user info: {url}")
    segments = parts.path.strip("/").split("/")
    if any(not segment for segment in segments):
        raise InvalidArgumentError(f"invalid URL path: {url}")
    return parts.netloc, segments


def parse_organization_url(url: str) -> OrganizationRef:
    """Parse ``https://<domain>/<organization>``."""
    domain, segments = _parse_url(url)
    if len(segments) != 1:
        raise InvalidArgumentError(f"sub-organizations are not supported: {url}")
    return OrganizationRef(domain, segments[0])


def parse_user_url(url: str) -> UserRef:
    """Parse ``https://<domain>/<login>``."""
    ref = parse_organization_url(url)
    return UserRef(ref.domain, ref.organization)


def _parse_repository_url(url: str) -> tuple[str, str, str]:
    domain, segments = _parse_url(url)
    if len(segments) != 2:
        raise InvalidArgumentError(f"expected https://<domain>/<owner>/<repository>: {url}")
    owner, name = segments
    name = name.removesuffix(".git")
    if not name:
        raise InvalidArgumentError(f"missing repository name: {url}")
    return domain, owner, name


def parse_org_repository_url(url: str) -> OrgRepositoryRef:
    """Parse an HTTPS clone URL into an :class:`OrgRepositoryRef`."""
    return OrgRepositoryRef(*_parse_repository_url(url))


def parse_user_repository_url(url: str) -> UserRepositoryRef:
    """Parse an HTTPS clone URL into a :class:`UserRepositoryRef`."""
    return UserRepositoryRef(*_parse_repository_url(url))


__all__ = [
    "IdentityRef",
    "OrgRepositoryRef",
    "OrganizationRef",
    "RepositoryRef",
    "TransportType",
    "UserRef",
    "UserRepositoryRef",
    "parse_org_repository_url",
    "parse_organization_url",
    "parse_user_repository_url",
    "parse_user_url",
]
