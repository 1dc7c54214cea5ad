"""
Repository permission levels and provider permission mapping.

Permission levels are ordinal so that the effective permission of a subject
holding grants at several scopes (repository and project) is simply the
highest level among them.
"""

from collections.abc import Iterable, Mapping
from enum import IntEnum
from types import MappingProxyType

from gitproviders.exceptions import InvalidPermissionLevelError


class RepositoryPermission(IntEnum):
    """Provider-independent repository permission, ordered by strength."""

    PULL = 10
    TRIAGE = 20
    PUSH = 30
    MAINTAIN = 40
    ADMIN = 50

    @classmethod
    def parse(cls, value: "str | int | RepositoryPermission") -> "RepositoryPermission":
        """
        Parse a permission from its name ("push") or its ordinal (30).

        Raises:
            InvalidPermissionLevelError: If the value names no level
        """
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, str):
                return cls[value.strip().upper()]
            return cls(value)
        except (KeyError, ValueError) as e:
            raise InvalidPermissionLevelError(value) from e


class PermissionMapper:
    """
    Bidirectional mapping between provider permission strings and
    :class:`RepositoryPermission` levels.

    ``table`` maps provider strings to levels; several strings may map to the
    same level (repository and project scopes), in which case the first one
    listed is the string written for that level. ``aliases`` lets levels the
    provider has no native string for be written as another provider string;
    aliased levels are never produced by :meth:`to_ordinal`.

    Both tables are copied into read-only mappings at construction.
    """

    def __init__(
        self,
        table: Mapping[str, RepositoryPermission],
        aliases: Mapping[RepositoryPermission, str] | None = None,
    ) -> None:
        self._to_ordinal: Mapping[str, RepositoryPermission] = MappingProxyType(dict(table))

        to_provider: dict[RepositoryPermission, str] = {}
        for provider_level, level in table.items():
            to_provider.setdefault(level, provider_level)
        for level, provider_level in (aliases or {}).items():
            if provider_level not in self._to_ordinal:
                raise ValueError(f"alias target {provider_level!r} is not in the table")
            to_provider.setdefault(level, provider_level)
        self._to_provider: Mapping[RepositoryPermission, str] = MappingProxyType(to_provider)
        self._defined = frozenset(table.values())

    @property
    def defined_levels(self) -> frozenset[RepositoryPermission]:
        """Levels with a native provider string; these round-trip exactly."""
        return self._defined

    def to_provider_level(self, level: RepositoryPermission) -> str:
        """
        Translate a level to the provider's permission string.

        Raises:
            InvalidPermissionLevelError: If the level has no mapping
        """
        try:
            return self._to_provider[level]
        except KeyError as e:
            raise InvalidPermissionLevelError(level) from e

    def to_ordinal(self, provider_level: str) -> RepositoryPermission:
        """
        Translate a provider permission string to a level.

        Unknown strings are an error, never downgraded.

        Raises:
            InvalidPermissionLevelError: If the string is not in the table
        """
        try:
            return self._to_ordinal[provider_level]
        except KeyError as e:
            raise InvalidPermissionLevelError(provider_level) from e

    def normalize(self, level: RepositoryPermission) -> RepositoryPermission:
        """Return the level ``level`` reads back as once written (aliases resolved)."""
        return self.to_ordinal(self.to_provider_level(level))

    def effective_permission(self, grants: Iterable[str]) -> RepositoryPermission | None:
        """
        Return the highest level among ``grants``, or None if there are none.

        Every grant is translated, so an unknown string anywhere raises
        :class:`InvalidPermissionLevelError` regardless of the others.
        """
        levels = [self.to_ordinal(grant) for grant in grants]
        return max(levels) if levels else None


__all__ = ["PermissionMapper", "RepositoryPermission"]
