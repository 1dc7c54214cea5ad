"""Stash payload types.

Raw forms of the objects the Stash REST API returns, one dataclass per
kind, each carrying the :class:`~gitproviders.transport.SessionInfo` of the
response it was decoded from.
"""

from gitproviders.stash.types.branches import Branch
from gitproviders.stash.types.commits import Commit
from gitproviders.stash.types.keys import DeployKey
from gitproviders.stash.types.permissions import GroupPermission
from gitproviders.stash.types.projects import Project
from gitproviders.stash.types.pulls import PullRequest, Ref
from gitproviders.stash.types.repos import Repository
from gitproviders.stash.types.users import Group, User

__all__ = [
    "Branch",
    "Commit",
    "DeployKey",
    "Group",
    "GroupPermission",
    "Project",
    "PullRequest",
    "Ref",
    "Repository",
    "User",
]
