"""File content and tree access, which this backend does not provide."""

from gitproviders.context import Context
from gitproviders.exceptions import NoProviderSupportError


class FilesClient:
    def get(self, path: str, branch: str, ctx: Context | None = None) -> list[bytes]:
        raise NoProviderSupportError("file content retrieval")


class TreesClient:
    def get(self, sha: str, recursive: bool = False, ctx: Context | None = None) -> list[str]:
        raise NoProviderSupportError("tree retrieval")

    def list(self, sha: str, path: str = "", ctx: Context | None = None) -> list[str]:
        raise NoProviderSupportError("tree listing")
