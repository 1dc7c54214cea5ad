"""
Generic resource handles and the reconcile algorithm.

A handle wraps the provider's raw form of one remote object. ``get()``
projects it to a desired-state info, ``set()`` applies an info onto it, and
``update()``/``delete()`` push it to the provider. Every successful mutating
call replaces the raw form with what the server returned.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from gitproviders.context import Context
from gitproviders.exceptions import GitProviderError, NotFoundError, RecreateFailedError
from gitproviders.logging import log_reconcile

SpecT = TypeVar("SpecT", bound="Comparable")
RawT = TypeVar("RawT")
HandleT = TypeVar("HandleT", bound="Resource")


class Comparable(Protocol):
    def equals(self, actual) -> bool: ...


class Resource(ABC, Generic[SpecT, RawT]):
    """A handle on one remote object."""

    @abstractmethod
    def get(self) -> SpecT:
        """Project the raw form to its desired-state info."""

    @abstractmethod
    def set(self, spec: SpecT) -> None:
        """Validate ``spec`` and apply it onto a new raw form held by this handle."""

    @abstractmethod
    def api_object(self) -> RawT:
        """Return the provider-specific raw form."""

    @abstractmethod
    def update(self, ctx: Context | None = None) -> None:
        """Push the current raw form to the provider."""

    @abstractmethod
    def delete(self, ctx: Context | None = None) -> None:
        """Delete the remote object."""

    @abstractmethod
    def reconcile(self, ctx: Context | None = None) -> bool:
        """Converge the remote object on this handle's state; True if it changed."""


def reconcile_resource(
    ctx: Context,
    desired: SpecT,
    fetch: Callable[[Context], HandleT],
    create: Callable[[Context, SpecT], HandleT],
    kind: str = "resource",
    name: str = "",
) -> tuple[HandleT, bool]:
    """
    Make ``desired`` the actual state using at most one mutating call.

    1. Fetch the actual handle.
    2. If it does not exist, create it from ``desired``.
    3. Any other fetch error propagates.
    4. If the actual info equals ``desired`` nothing is sent; otherwise
       ``desired`` is set on the handle and the handle is updated.

    Returns:
        The handle and whether a change was made.
    """
    try:
        actual = fetch(ctx)
    except NotFoundError:
        created = create(ctx, desired)
        log_reconcile(kind, name, "created")
        return created, True

    if desired.equals(actual.get()):
        log_reconcile(kind, name, "unchanged")
        return actual, False

    actual.set(desired)
    actual.update(ctx)
    log_reconcile(kind, name, "updated")
    return actual, True


def replace_resource(
    ctx: Context,
    name: str,
    delete: Callable[[Context], None],
    create: Callable[[Context], RawT],
) -> RawT:
    """
    Update a resource that has no edit endpoint by deleting and recreating it.

    The two steps are not atomic. If ``delete`` fails nothing has changed and
    its error propagates as-is. If ``create`` fails the resource is gone and
    :class:`RecreateFailedError` is raised, chained from the cause.
    """
    delete(ctx)
    try:
        return create(ctx)
    except GitProviderError as e:
        raise RecreateFailedError(name, e) from e


__all__ = ["Comparable", "Resource", "reconcile_resource", "replace_resource"]
