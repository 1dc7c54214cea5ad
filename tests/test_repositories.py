"""
Tests for organization and personal repositories against the fake server.

Feature: git-providers
"""

import pytest

from gitproviders.exceptions import (
    AlreadyExistsError,
    DestructiveCallDisallowedError,
    FieldInvalidError,
    FieldRequiredError,
    InvalidInfoError,
    InvalidServerDataError,
    NotFoundError,
    RetriesExhaustedError,
)
from gitproviders.info import RepositoryInfo, RepositoryVisibility
from gitproviders.refs import OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
from gitproviders.stash import StashClient
from gitproviders.stash.clients import OrgRepository
from gitproviders.stash.clients.repositories import _RepositoriesClient
from gitproviders.testing import FakeStashServer

REPOS_PATH = "/rest/api/1.0/projects/PLAT/repos"
REPO_PATH = "/rest/api/1.0/projects/PLAT/repos/deployments"


def test_reconcile_creates_missing_repository(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    repo, changed = stash_client.org_repositories.reconcile(
        org_repo_ref, RepositoryInfo(description="Cluster manifests")
    )

    assert changed
    assert isinstance(repo, OrgRepository)
    assert repo.get() == RepositoryInfo("Cluster manifests", "main", RepositoryVisibility.PRIVATE)
    assert len(seeded_stash.calls_to("POST", REPOS_PATH)) == 1
    created = seeded_stash.repositories[("PLAT", "deployments")]
    assert created["description"] == "Cluster manifests"
    assert created["public"] is False
    assert created["defaultBranch"] == "main"


def test_reconcile_is_idempotent(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    info = RepositoryInfo(description="Cluster manifests", visibility=RepositoryVisibility.PRIVATE)
    stash_client.org_repositories.reconcile(org_repo_ref, info)
    seeded_stash.reset_calls()

    _, changed = stash_client.org_repositories.reconcile(org_repo_ref, info)

    assert not changed
    assert seeded_stash.mutating_calls() == []


def test_reconcile_updates_changed_fields_once(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments", description="old", defaultBranch="main")
    seeded_stash.reset_calls()

    repo, changed = stash_client.org_repositories.reconcile(
        org_repo_ref, RepositoryInfo(description="new", visibility=RepositoryVisibility.PUBLIC)
    )

    assert changed
    assert [call.method for call in seeded_stash.mutating_calls()] == ["PUT"]
    put = seeded_stash.calls_to("PUT", REPO_PATH)[0]
    assert put.body["description"] == "new"
    assert put.body["public"] is True
    assert repo.get().description == "new"
    assert seeded_stash.repositories[("PLAT", "deployments")]["public"] is True


def test_reconcile_leaves_unset_fields_alone(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository(
        "PLAT", "deployments", description="kept", public=True, defaultBranch="develop"
    )
    seeded_stash.reset_calls()

    repo, changed = stash_client.org_repositories.reconcile(org_repo_ref, RepositoryInfo())

    assert not changed
    assert seeded_stash.mutating_calls() == []
    assert repo.get() == RepositoryInfo("kept", "develop", RepositoryVisibility.PUBLIC)


def test_internal_visibility_is_rejected_before_any_call(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    info = RepositoryInfo(visibility=RepositoryVisibility.INTERNAL)

    with pytest.raises(InvalidInfoError) as exc_info:
        stash_client.org_repositories.reconcile(org_repo_ref, info)
    with pytest.raises(InvalidInfoError):
        stash_client.org_repositories.create(org_repo_ref, info)

    error = exc_info.value.errors[0]
    assert isinstance(error, FieldInvalidError)
    assert error.field == "visibility"
    assert seeded_stash.calls == []
    assert ("PLAT", "deployments") not in seeded_stash.repositories


def test_internal_visibility_cannot_be_set_on_a_handle(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")
    repo = stash_client.org_repositories.get(org_repo_ref)

    with pytest.raises(InvalidInfoError):
        repo.set(RepositoryInfo(visibility=RepositoryVisibility.INTERNAL))

    assert repo.get().visibility is RepositoryVisibility.PRIVATE


@pytest.mark.parametrize("visibility", [RepositoryVisibility.PUBLIC, RepositoryVisibility.PRIVATE])
def test_reconcile_visibility_converges(
    stash_client: StashClient,
    seeded_stash: FakeStashServer,
    org_repo_ref: OrgRepositoryRef,
    visibility: RepositoryVisibility,
) -> None:
    info = RepositoryInfo(visibility=visibility)
    _, first = stash_client.org_repositories.reconcile(org_repo_ref, info)
    seeded_stash.reset_calls()

    _, second = stash_client.org_repositories.reconcile(org_repo_ref, info)

    assert first
    assert not second
    assert seeded_stash.mutating_calls() == []


def test_missing_default_branch_reads_as_main(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")

    repo = stash_client.org_repositories.get(org_repo_ref)

    assert repo.get().default_branch == "main"


def test_handle_set_and_update(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments", description="old")
    repo = stash_client.org_repositories.get(org_repo_ref)

    repo.set(RepositoryInfo(description="new"))
    repo.update()

    assert seeded_stash.repositories[("PLAT", "deployments")]["description"] == "new"
    assert repo.api_object().session.user_name == "admin"
    assert repo.api_object().session.request_id is not None


def test_handle_reconcile_pushes_local_changes(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments", description="old")
    repo = stash_client.org_repositories.get(org_repo_ref)
    repo.set(RepositoryInfo(description="new"))

    assert repo.reconcile()
    assert not repo.reconcile()
    assert seeded_stash.repositories[("PLAT", "deployments")]["description"] == "new"


def test_create_existing_repository_fails(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")

    with pytest.raises(AlreadyExistsError):
        stash_client.org_repositories.create(org_repo_ref)


def test_get_missing_repository(stash_client: StashClient, org_repo_ref: OrgRepositoryRef) -> None:
    with pytest.raises(NotFoundError):
        stash_client.org_repositories.get(org_repo_ref)


def test_unknown_organization(stash_client: StashClient) -> None:
    ref = OrgRepositoryRef("stash.example.com", "Nope", "deployments")

    with pytest.raises(NotFoundError) as exc_info:
        stash_client.org_repositories.get(ref)

    assert "Nope" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, NotFoundError)


def test_organization_may_be_named_by_key(
    stash_client: StashClient, seeded_stash: FakeStashServer
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")

    repo = stash_client.org_repositories.get(OrgRepositoryRef("stash.example.com", "PLAT", "deployments"))

    assert repo.api_object().project is not None
    assert repo.api_object().project.key == "PLAT"


def test_list_pages_through_every_repository(
    seeded_stash: FakeStashServer, org_ref: OrganizationRef
) -> None:
    seeded_stash.page_size = 2
    for name in ["a", "b", "c", "d", "e"]:
        seeded_stash.add_repository("PLAT", name)

    with seeded_stash.client() as client:
        repos = client.org_repositories.list(org_ref)

    assert [repo.ref.repository_name for repo in repos] == ["a", "b", "c", "d", "e"]
    assert all(repo.ref.organization == "Platform" for repo in repos)
    assert len(seeded_stash.calls_to("GET", REPOS_PATH)) == 3


def test_list_reports_every_malformed_item(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_ref: OrganizationRef
) -> None:
    seeded_stash.add_repository("PLAT", "good")
    seeded_stash.repositories[("PLAT", "broken")] = {"name": "broken"}
    seeded_stash.repositories[("PLAT", "worse")] = {"slug": "worse"}

    with pytest.raises(InvalidServerDataError) as exc_info:
        stash_client.org_repositories.list(org_ref)

    assert len(exc_info.value.errors) == 2
    assert all(isinstance(error, FieldRequiredError) for error in exc_info.value.errors)
    assert {error.field for error in exc_info.value.errors} == {"slug", "name"}


def test_delete_requires_destructive_actions(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")
    repo = stash_client.org_repositories.get(org_repo_ref)

    with pytest.raises(DestructiveCallDisallowedError):
        repo.delete()

    assert ("PLAT", "deployments") in seeded_stash.repositories
    assert seeded_stash.calls_to("DELETE") == []


def test_delete_with_destructive_actions(
    seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")

    with seeded_stash.client(destructive_actions=True) as client:
        client.org_repositories.get(org_repo_ref).delete()

    assert ("PLAT", "deployments") not in seeded_stash.repositories


def test_transient_errors_are_retried(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")
    seeded_stash.fail_next(503, times=2, method="GET", path=REPO_PATH)

    repo = stash_client.org_repositories.get(org_repo_ref)

    assert repo.ref == org_repo_ref
    assert len(seeded_stash.calls_to("GET", REPO_PATH)) == 3


def test_persistent_errors_exhaust_retries(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")
    seeded_stash.fail_next(503, times=10, method="GET", path=REPO_PATH)

    with pytest.raises(RetriesExhaustedError) as exc_info:
        stash_client.org_repositories.get(org_repo_ref)

    assert exc_info.value.attempts == 4
    assert len(seeded_stash.calls_to("GET", REPO_PATH)) == 4


# ============================================================================
# Personal repositories
# ============================================================================


def test_user_repository_reconcile(
    stash_client: StashClient, seeded_stash: FakeStashServer, user_repo_ref: UserRepositoryRef
) -> None:
    repo, changed = stash_client.user_repositories.reconcile(user_repo_ref)

    assert changed
    assert seeded_stash.was_called("POST", "/rest/api/1.0/projects/~alice/repos")
    assert ("~alice", "dotfiles") in seeded_stash.repositories
    assert not hasattr(repo, "team_access")

    _, changed = stash_client.user_repositories.reconcile(user_repo_ref)
    assert not changed


def test_user_repository_list(stash_client: StashClient, seeded_stash: FakeStashServer) -> None:
    seeded_stash.add_repository("~alice", "dotfiles")
    seeded_stash.add_repository("~alice", "notes")
    seeded_stash.add_repository("PLAT", "deployments")

    repos = stash_client.user_repositories.list(UserRef("stash.example.com", "alice"))

    assert [repo.ref for repo in repos] == [
        UserRepositoryRef("stash.example.com", "alice", "dotfiles"),
        UserRepositoryRef("stash.example.com", "alice", "notes"),
    ]


def test_clone_links(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> None:
    seeded_stash.add_repository("PLAT", "deployments")

    links = stash_client.org_repositories.get(org_repo_ref).api_object().clone_links

    assert links["http"] == "https://stash.example.com/scm/plat/deployments.git"
    assert links["ssh"].startswith("ssh://git@stash.example.com:7999/")


def test_repositories_client_needs_an_owner_kind(stash_client: StashClient) -> None:
    with pytest.raises(TypeError):
        _RepositoriesClient(stash_client.user_repositories.api)  # type: ignore[abstract]

    ref = stash_client.user_repositories._ref(UserRef("stash.example.com", "alice"), "dotfiles")
    assert ref == UserRepositoryRef("stash.example.com", "alice", "dotfiles")
