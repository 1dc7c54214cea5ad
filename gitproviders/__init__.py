"""git-providers - declarative access to Git hosting REST APIs."""

from gitproviders.context import Context
from gitproviders.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ContextCancelledError,
    DeadlineExceededError,
    DestructiveCallDisallowedError,
    DomainUnsupportedError,
    GitProviderError,
    HTTPError,
    InvalidArgumentError,
    InvalidInfoError,
    InvalidPermissionLevelError,
    InvalidServerDataError,
    NoProviderSupportError,
    NotFoundError,
    PaginationLimitExceededError,
    RateLimitedError,
    RecreateFailedError,
    RetriesExhaustedError,
    ServerError,
    UnexpectedStatusError,
    ValidationError,
    VersionConflictError,
)
from gitproviders.info import (
    BranchInfo,
    CommitInfo,
    DeployKeyInfo,
    OrganizationInfo,
    PullRequestInfo,
    PullRequestStatus,
    RepositoryInfo,
    RepositoryVisibility,
    TeamAccessInfo,
    TeamInfo,
)
from gitproviders.logging import configure_logging, get_logger
from gitproviders.pagination import PageCursor, all_pages
from gitproviders.permissions import PermissionMapper, RepositoryPermission
from gitproviders.refs import (
    OrganizationRef,
    OrgRepositoryRef,
    TransportType,
    UserRef,
    UserRepositoryRef,
    parse_org_repository_url,
    parse_organization_url,
    parse_user_repository_url,
    parse_user_url,
)
from gitproviders.resource import Resource, reconcile_resource, replace_resource
from gitproviders.transport import HTTPTransport, Request, Response, RetryConfig, SessionInfo

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Context
    "Context",
    # Transport
    "HTTPTransport",
    "Request",
    "Response",
    "RetryConfig",
    "SessionInfo",
    # Pagination
    "PageCursor",
    "all_pages",
    # Resources
    "Resource",
    "reconcile_resource",
    "replace_resource",
    # Infos
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
    # Permissions
    "PermissionMapper",
    "RepositoryPermission",
    # References
    "OrganizationRef",
    "OrgRepositoryRef",
    "TransportType",
    "UserRef",
    "UserRepositoryRef",
    "parse_org_repository_url",
    "parse_organization_url",
    "parse_user_repository_url",
    "parse_user_url",
    # Exceptions
    "GitProviderError",
    "AlreadyExistsError",
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "DestructiveCallDisallowedError",
    "DomainUnsupportedError",
    "HTTPError",
    "InvalidArgumentError",
    "InvalidInfoError",
    "InvalidPermissionLevelError",
    "InvalidServerDataError",
    "NoProviderSupportError",
    "NotFoundError",
    "PaginationLimitExceededError",
    "RateLimitedError",
    "RecreateFailedError",
    "RetriesExhaustedError",
    "ServerError",
    "UnexpectedStatusError",
    "ValidationError",
    "VersionConflictError",
    # Logging
    "configure_logging",
    "get_logger",
]
