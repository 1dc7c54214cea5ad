"""Shared fixtures for the git-providers test suite."""

from gitproviders.testing.conftest import (  # noqa: F401
    fake_stash,
    org_ref,
    org_repo_ref,
    other_ssh_public_key,
    seeded_stash,
    ssh_public_key,
    stash_client,
    user_repo_ref,
)
