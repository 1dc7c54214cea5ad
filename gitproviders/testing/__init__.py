"""git-providers testing utilities.

Provides an in-memory fake Stash server and fixtures for testing
applications that use git-providers.
"""

from gitproviders.testing.fake_server import FakeStashServer, RecordedCall
from gitproviders.testing.fixtures import generate_ssh_public_key

__all__ = [
    # Fake server
    "FakeStashServer",
    "RecordedCall",
    # Helper functions
    "generate_ssh_public_key",
]
