"""Bitbucket Server (Stash) backend."""

from gitproviders.stash.client import PROVIDER_ID, StashClient
from gitproviders.stash.permissions import STASH_PERMISSIONS

__all__ = ["PROVIDER_ID", "STASH_PERMISSIONS", "StashClient"]
