"""
Pytest plugin for git-providers testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitproviders.testing.conftest"]

Or import the fixtures directly:

    from gitproviders.testing.fixtures import fake_stash, stash_client
"""

# Re-export all fixtures for pytest auto-discovery
from gitproviders.testing.fixtures import (
    fake_stash,
    org_ref,
    org_repo_ref,
    other_ssh_public_key,
    seeded_stash,
    ssh_public_key,
    stash_client,
    user_repo_ref,
)

__all__ = [
    "fake_stash",
    "seeded_stash",
    "stash_client",
    "org_ref",
    "org_repo_ref",
    "user_repo_ref",
    "ssh_public_key",
    "other_ssh_public_key",
]
