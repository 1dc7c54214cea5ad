"""
Pytest fixtures for testing code built on git-providers.

Provides a fake Stash server, a client wired to it and sample SSH keys.
"""

from collections.abc import Generator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from gitproviders.refs import OrganizationRef, OrgRepositoryRef, UserRepositoryRef
from gitproviders.stash.client import StashClient
from gitproviders.testing.fake_server import FakeStashServer

FAKE_DOMAIN = "stash.example.com"
FAKE_PROJECT_KEY = "PLAT"
FAKE_PROJECT_NAME = "Platform"


# ============================================================================
# Fake Server Fixtures
# ============================================================================


@pytest.fixture
def fake_stash() -> FakeStashServer:
    """
    Provide an empty :class:`FakeStashServer`.

    Example:
        ```python
        def test_listing(fake_stash):
            fake_stash.add_project("PLAT", "Platform")
            client = fake_stash.client()
            assert [o.get().name for o in client.organizations.list()] == ["Platform"]
        ```
    """
    return FakeStashServer(domain=FAKE_DOMAIN)


@pytest.fixture
def seeded_stash(fake_stash: FakeStashServer) -> FakeStashServer:
    """Provide a fake server with the "Platform" project (key PLAT) and a developers group."""
    fake_stash.add_project(FAKE_PROJECT_KEY, FAKE_PROJECT_NAME, "Platform team")
    fake_stash.add_group("developers", ["alice", "bob"])
    fake_stash.add_group("release-managers", ["carol"])
    return fake_stash


@pytest.fixture
def stash_client(seeded_stash: FakeStashServer) -> Generator[StashClient, None, None]:
    """
    Provide a :class:`StashClient` bound to :func:`seeded_stash`.

    Retries are immediate so failure tests do not sleep.
    """
    client = seeded_stash.client()
    yield client
    client.close()


# ============================================================================
# Reference Fixtures
# ============================================================================


@pytest.fixture
def org_ref() -> OrganizationRef:
    return OrganizationRef(FAKE_DOMAIN, FAKE_PROJECT_NAME)


@pytest.fixture
def org_repo_ref() -> OrgRepositoryRef:
    return OrgRepositoryRef(FAKE_DOMAIN, FAKE_PROJECT_NAME, "deployments")


@pytest.fixture
def user_repo_ref() -> UserRepositoryRef:
    return UserRepositoryRef(FAKE_DOMAIN, "alice", "dotfiles")


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def ssh_public_key() -> str:
    """
    Provide a freshly generated Ed25519 public key in OpenSSH format.

    Example:
        ```python
        def test_key(ssh_public_key):
            assert ssh_public_key.startswith("ssh-ed25519 ")
        ```
    """
    return generate_ssh_public_key()


@pytest.fixture
def other_ssh_public_key() -> str:
    """Provide a second, different public key."""
    return generate_ssh_public_key()


# ============================================================================
# Helper Functions
# ============================================================================


def generate_ssh_public_key(comment: str = "") -> str:
    """
    Generate an Ed25519 public key line ("ssh-ed25519 AAAA... [comment]").

    Args:
        comment: Optional comment field appended to the key
    """
    public_key = Ed25519PrivateKey.generate().public_key()
    line = public_key.public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    ).decode()
    return f"{line} {comment}" if comment else line
