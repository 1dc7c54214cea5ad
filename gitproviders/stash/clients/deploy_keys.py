"""Deploy keys (repository SSH access keys) resource client."""

from dataclasses import replace
from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import NotFoundError
from gitproviders.info import DeployKeyInfo
from gitproviders.keys import with_comment
from gitproviders.refs import RepositoryRef
from gitproviders.resource import Resource, reconcile_resource, replace_resource
from gitproviders.stash.api import keys_path
from gitproviders.stash.permissions import REPO_READ, REPO_WRITE
from gitproviders.stash.types.keys import DeployKey, parse_deploy_key
from gitproviders.transport import Request

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI

_REQUIRED = ("key.id", "key.text", "permission")


def deploy_key_from_api(raw: DeployKey) -> DeployKeyInfo:
    return DeployKeyInfo(name=raw.label, key=raw.text, read_only=raw.permission == REPO_READ)


def deploy_key_to_api(info: DeployKeyInfo) -> DeployKey:
    """
    Build the raw form of ``info``. The name becomes both the label and the
    comment field of the key text.
    """
    info = info.with_defaults()
    return DeployKey(
        label=info.name,
        text=with_comment(info.key, info.name),
        permission=REPO_READ if info.read_only else REPO_WRITE,
    )


class DeployKeyHandle(Resource[DeployKeyInfo, DeployKey]):
    """
    A deploy key of one repository.

    Stash cannot edit a key in place, so :meth:`update` deletes the key and
    creates it again. If the second step fails the key is gone and
    :class:`~gitproviders.exceptions.RecreateFailedError` is raised.
    """

    def __init__(self, client: "DeployKeysClient", raw: DeployKey) -> None:
        self._client = client
        self._raw = raw

    @property
    def repository(self) -> RepositoryRef:
        return self._client.ref

    def get(self) -> DeployKeyInfo:
        return deploy_key_from_api(self._raw)

    def set(self, spec: DeployKeyInfo) -> None:
        spec.validate()
        # Keep the id: it names the key that update() deletes
        self._raw = replace(deploy_key_to_api(spec), id=self._raw.id, session=self._raw.session)

    def api_object(self) -> DeployKey:
        return self._raw

    def update(self, ctx: Context | None = None) -> None:
        ctx = ensure_context(ctx)
        desired = self._raw
        self._raw = replace_resource(
            ctx,
            f"deploy key {desired.label!r}",
            self.delete,
            lambda ctx: self._client._create_raw(ctx, desired),
        )

    def delete(self, ctx: Context | None = None) -> None:
        ctx = ensure_context(ctx)
        if self._raw.id is None:
            raise NotFoundError("NOT_FOUND", f"deploy key {self._raw.label!r} has no id", status_code=404)
        self._client.api.request(
            ctx, Request("DELETE", self._client._path(ctx, self._raw.id))
        )

    def reconcile(self, ctx: Context | None = None) -> bool:
        ctx = ensure_context(ctx)
        actual, changed = self._client.reconcile(self.get(), ctx)
        self._raw = actual.api_object()
        return changed


class DeployKeysClient:
    """Client for the deploy keys of one repository."""

    def __init__(self, api: "StashAPI", ref: RepositoryRef) -> None:
        self.api = api
        self.ref = ref

    def _path(self, ctx: Context, *elements: str | int) -> str:
        owner = self.api.owner_key(ctx, self.ref)
        return keys_path("projects", owner, "repos", self.ref.repository_name, "ssh", *elements)

    def _list_raw(self, ctx: Context) -> list[DeployKey]:
        return [
            parse_deploy_key(data, session)
            for data, session in self.api.list_all(
                ctx, self._path(ctx), "Stash.DeployKey", _REQUIRED
            )
        ]

    def _create_raw(self, ctx: Context, raw: DeployKey) -> DeployKey:
        data, session = self.api.send_object(
            ctx,
            Request("POST", self._path(ctx)).with_body(raw.to_api()),
            "Stash.DeployKey",
            _REQUIRED,
        )
        return parse_deploy_key(data, session)

    def get(self, name: str, ctx: Context | None = None) -> DeployKeyHandle:
        """
        Get the deploy key labelled ``name``.

        Raises:
            NotFoundError: If no key carries that label
        """
        ctx = ensure_context(ctx)
        for raw in self._list_raw(ctx):
            if raw.label == name:
                return DeployKeyHandle(self, raw)
        raise NotFoundError("NOT_FOUND", f"deploy key {name!r} not found", status_code=404)

    def list(self, ctx: Context | None = None) -> list[DeployKeyHandle]:
        ctx = ensure_context(ctx)
        return [DeployKeyHandle(self, raw) for raw in self._list_raw(ctx)]

    def create(self, info: DeployKeyInfo, ctx: Context | None = None) -> DeployKeyHandle:
        """
        Register a new deploy key.

        Raises:
            InvalidInfoError: If ``info`` is incomplete or the key text is not an SSH public key
            AlreadyExistsError: If the key is already registered
        """
        ctx = ensure_context(ctx)
        info.validate()
        return DeployKeyHandle(self, self._create_raw(ctx, deploy_key_to_api(info)))

    def reconcile(
        self, info: DeployKeyInfo, ctx: Context | None = None
    ) -> tuple[DeployKeyHandle, bool]:
        """
        Make ``info`` the actual state of the key labelled ``info.name``.

        Returns:
            The handle and whether anything was changed
        """
        ctx = ensure_context(ctx)
        info.validate()
        return reconcile_resource(
            ctx,
            info,
            lambda ctx: self.get(info.name, ctx),
            lambda ctx, desired: self.create(desired, ctx),
            kind="deploy key",
            name=info.name,
        )
