"""Stash resource clients."""

from gitproviders.stash.clients.branches import BranchesClient, BranchHandle
from gitproviders.stash.clients.commits import CommitHandle, CommitsClient
from gitproviders.stash.clients.deploy_keys import DeployKeyHandle, DeployKeysClient
from gitproviders.stash.clients.organizations import Organization, OrganizationsClient
from gitproviders.stash.clients.pull_requests import PullRequestHandle, PullRequestsClient
from gitproviders.stash.clients.repositories import (
    OrgRepositoriesClient,
    OrgRepository,
    UserRepositoriesClient,
    UserRepository,
)
from gitproviders.stash.clients.team_access import TeamAccessClient, TeamAccessHandle
from gitproviders.stash.clients.teams import Team, TeamsClient

__all__ = [
    "BranchHandle",
    "BranchesClient",
    "CommitHandle",
    "CommitsClient",
    "DeployKeyHandle",
    "DeployKeysClient",
    "OrgRepositoriesClient",
    "OrgRepository",
    "Organization",
    "OrganizationsClient",
    "PullRequestHandle",
    "PullRequestsClient",
    "Team",
    "TeamAccessClient",
    "TeamAccessHandle",
    "TeamsClient",
    "UserRepositoriesClient",
    "UserRepository",
]
