"""
Property-based tests for permission mapping.

Feature: git-providers
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gitproviders.exceptions import InvalidPermissionLevelError
from gitproviders.permissions import PermissionMapper, RepositoryPermission
from gitproviders.stash.permissions import (
    STASH_PERMISSION_TABLE,
    STASH_PERMISSIONS,
)

known_grant_strategy = st.sampled_from(sorted(STASH_PERMISSION_TABLE))
grants_strategy = st.lists(known_grant_strategy, min_size=1, max_size=8)
unknown_grant_strategy = st.text(min_size=1, max_size=20).filter(
    lambda s: s not in STASH_PERMISSION_TABLE
)


def test_defined_levels_round_trip() -> None:
    """Every level with a native string reads back as itself once written."""
    for level in STASH_PERMISSIONS.defined_levels:
        assert STASH_PERMISSIONS.to_ordinal(STASH_PERMISSIONS.to_provider_level(level)) == level


def test_defined_levels() -> None:
    assert STASH_PERMISSIONS.defined_levels == frozenset(
        {RepositoryPermission.PULL, RepositoryPermission.PUSH, RepositoryPermission.ADMIN}
    )


def test_repository_strings_are_written() -> None:
    assert STASH_PERMISSIONS.to_provider_level(RepositoryPermission.PULL) == "REPO_READ"
    assert STASH_PERMISSIONS.to_provider_level(RepositoryPermission.PUSH) == "REPO_WRITE"
    assert STASH_PERMISSIONS.to_provider_level(RepositoryPermission.ADMIN) == "REPO_ADMIN"


def test_project_strings_are_read() -> None:
    assert STASH_PERMISSIONS.to_ordinal("PROJECT_READ") is RepositoryPermission.PULL
    assert STASH_PERMISSIONS.to_ordinal("PROJECT_WRITE") is RepositoryPermission.PUSH
    assert STASH_PERMISSIONS.to_ordinal("PROJECT_ADMIN") is RepositoryPermission.ADMIN


@pytest.mark.parametrize("level", [RepositoryPermission.TRIAGE, RepositoryPermission.MAINTAIN])
def test_levels_without_native_string_are_aliased(level: RepositoryPermission) -> None:
    assert STASH_PERMISSIONS.to_provider_level(level) == "REPO_WRITE"
    assert STASH_PERMISSIONS.normalize(level) is RepositoryPermission.PUSH


@given(grants=grants_strategy, data=st.data())
@settings(max_examples=100)
def test_effective_permission_is_order_independent_max(grants: list[str], data: st.DataObject) -> None:
    """
    The effective permission of any set of grants is the highest of them,
    whatever order the provider lists them in.
    """
    shuffled = data.draw(st.permutations(grants))

    effective = STASH_PERMISSIONS.effective_permission(grants)

    assert effective == max(STASH_PERMISSIONS.to_ordinal(grant) for grant in grants)
    assert STASH_PERMISSIONS.effective_permission(shuffled) == effective


def test_effective_permission_of_nothing_is_none() -> None:
    assert STASH_PERMISSIONS.effective_permission([]) is None


def test_effective_permission_project_admin_beats_repo_read() -> None:
    effective = STASH_PERMISSIONS.effective_permission(["REPO_READ", "PROJECT_ADMIN"])

    assert effective is RepositoryPermission.ADMIN


@given(unknown=unknown_grant_strategy)
@settings(max_examples=100)
def test_unknown_strings_are_rejected(unknown: str) -> None:
    """Unknown provider strings are an error, never silently downgraded."""
    with pytest.raises(InvalidPermissionLevelError):
        STASH_PERMISSIONS.to_ordinal(unknown)


@given(grants=grants_strategy, unknown=unknown_grant_strategy)
@settings(max_examples=50)
def test_one_unknown_grant_poisons_the_fold(grants: list[str], unknown: str) -> None:
    with pytest.raises(InvalidPermissionLevelError):
        STASH_PERMISSIONS.effective_permission([*grants, unknown])


def test_unmapped_level_is_rejected() -> None:
    mapper = PermissionMapper({"read": RepositoryPermission.PULL})

    with pytest.raises(InvalidPermissionLevelError):
        mapper.to_provider_level(RepositoryPermission.ADMIN)


def test_alias_must_target_a_known_string() -> None:
    with pytest.raises(ValueError):
        PermissionMapper({"read": RepositoryPermission.PULL}, {RepositoryPermission.PUSH: "write"})


def test_mapper_is_isolated_from_its_input() -> None:
    table = {"read": RepositoryPermission.PULL}
    mapper = PermissionMapper(table)

    table["write"] = RepositoryPermission.PUSH

    with pytest.raises(InvalidPermissionLevelError):
        mapper.to_ordinal("write")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("push", RepositoryPermission.PUSH),
        (" Admin ", RepositoryPermission.ADMIN),
        (20, RepositoryPermission.TRIAGE),
        (RepositoryPermission.MAINTAIN, RepositoryPermission.MAINTAIN),
    ],
)
def test_parse_permission(value: object, expected: RepositoryPermission) -> None:
    assert RepositoryPermission.parse(value) is expected


@pytest.mark.parametrize("value", ["owner", 15, ""])
def test_parse_rejects_unknown_levels(value: object) -> None:
    with pytest.raises(InvalidPermissionLevelError):
        RepositoryPermission.parse(value)


def test_levels_are_ordered() -> None:
    assert (
        RepositoryPermission.PULL
        < RepositoryPermission.TRIAGE
        < RepositoryPermission.PUSH
        < RepositoryPermission.MAINTAIN
        < RepositoryPermission.ADMIN
    )
