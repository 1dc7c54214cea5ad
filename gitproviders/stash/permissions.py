"""Stash group permission strings."""

from types import MappingProxyType

from gitproviders.permissions import PermissionMapper, RepositoryPermission

REPO_READ = "REPO_READ"
REPO_WRITE = "REPO_WRITE"
REPO_ADMIN = "REPO_ADMIN"
PROJECT_READ = "PROJECT_READ"
PROJECT_WRITE = "PROJECT_WRITE"
PROJECT_ADMIN = "PROJECT_ADMIN"

# Repository-scope strings are listed first so they are the ones written back
STASH_PERMISSION_TABLE = MappingProxyType(
    {
        REPO_READ: RepositoryPermission.PULL,
        REPO_WRITE: RepositoryPermission.PUSH,
        REPO_ADMIN: RepositoryPermission.ADMIN,
        PROJECT_READ: RepositoryPermission.PULL,
        PROJECT_WRITE: RepositoryPermission.PUSH,
        PROJECT_ADMIN: RepositoryPermission.ADMIN,
    }
)

# Stash has no triage or maintain level
STASH_PERMISSION_ALIASES = MappingProxyType(
    {
        RepositoryPermission.TRIAGE: REPO_WRITE,
        RepositoryPermission.MAINTAIN: REPO_WRITE,
    }
)

STASH_PERMISSIONS = PermissionMapper(STASH_PERMISSION_TABLE, STASH_PERMISSION_ALIASES)
