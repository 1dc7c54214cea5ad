"""
Tests for pull requests and their optimistic-concurrency versions.

Feature: git-providers
"""

import pytest

from gitproviders.exceptions import (
    AlreadyExistsError,
    InvalidInfoError,
    NotFoundError,
    VersionConflictError,
)
from gitproviders.info import PullRequestInfo
from gitproviders.refs import OrgRepositoryRef
from gitproviders.stash import StashClient
from gitproviders.stash.clients import PullRequestHandle, PullRequestsClient
from gitproviders.stash.types.pulls import PullRequest, Ref
from gitproviders.testing import FakeStashServer

PRS_PATH = "/rest/api/1.0/projects/PLAT/repos/deployments/pull-requests"


@pytest.fixture
def pull_requests(
    stash_client: StashClient, seeded_stash: FakeStashServer, org_repo_ref: OrgRepositoryRef
) -> PullRequestsClient:
    seeded_stash.add_repository("PLAT", "deployments")
    prs = stash_client.org_repositories.get(org_repo_ref).pull_requests
    seeded_stash.reset_calls()
    return prs


def server_pr(server: FakeStashServer, number: int) -> dict:
    return server.pull_requests[("PLAT", "deployments")][number]


def test_create(pull_requests: PullRequestsClient, seeded_stash: FakeStashServer) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main", "Raises the chart version")

    status = pr.status()
    assert status.number == 1
    assert status.version == 0
    assert status.state == "OPEN"
    assert not status.merged
    assert status.web_url == "https://stash.example.com/projects/PLAT/repos/deployments/pull-requests/1"
    assert pr.get() == PullRequestInfo("Bump chart", "feature/chart", "main", "Raises the chart version")

    post = seeded_stash.calls_to("POST", PRS_PATH)[0]
    assert post.body["fromRef"]["id"] == "refs/heads/feature/chart"
    assert post.body["toRef"]["repository"] == {"slug": "deployments", "project": {"key": "PLAT"}}


def test_create_duplicate_fails(pull_requests: PullRequestsClient) -> None:
    pull_requests.create("Bump chart", "feature/chart", "main")

    with pytest.raises(AlreadyExistsError):
        pull_requests.create("Bump chart again", "feature/chart", "main")


def test_create_rejects_empty_title(pull_requests: PullRequestsClient, seeded_stash: FakeStashServer) -> None:
    with pytest.raises(InvalidInfoError):
        pull_requests.create("", "feature/chart", "main")

    assert seeded_stash.mutating_calls() == []


def test_update_sends_and_bumps_version(
    pull_requests: PullRequestsClient, seeded_stash: FakeStashServer
) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")

    pr.set(PullRequestInfo("Bump chart to 2.0", "feature/chart", "release"))
    pr.update()

    put = seeded_stash.calls_to("PUT", f"{PRS_PATH}/1")[0]
    assert put.body["version"] == 0
    assert put.body["toRef"]["id"] == "refs/heads/release"
    assert pr.status().version == 1
    assert server_pr(seeded_stash, 1)["title"] == "Bump chart to 2.0"
    assert pr.get().target_branch == "release"


def test_stale_update_is_a_version_conflict(
    pull_requests: PullRequestsClient, seeded_stash: FakeStashServer
) -> None:
    first = pull_requests.create("Bump chart", "feature/chart", "main")
    second = pull_requests.get(first.number)

    first.set(PullRequestInfo("First edit", "feature/chart", "main"))
    first.update()
    second.set(PullRequestInfo("Second edit", "feature/chart", "main"))

    with pytest.raises(VersionConflictError) as exc_info:
        second.update()

    assert exc_info.value.expected_version == 0
    assert isinstance(exc_info.value.__cause__, AlreadyExistsError)
    assert server_pr(seeded_stash, 1)["title"] == "First edit"


def test_refresh_picks_up_new_version(
    pull_requests: PullRequestsClient, seeded_stash: FakeStashServer
) -> None:
    first = pull_requests.create("Bump chart", "feature/chart", "main")
    second = pull_requests.get(first.number)
    first.set(PullRequestInfo("First edit", "feature/chart", "main"))
    first.update()

    second.refresh()
    second.set(PullRequestInfo("Second edit", "feature/chart", "main"))
    second.update()

    assert second.status().version == 2
    assert server_pr(seeded_stash, 1)["title"] == "Second edit"


def test_conflicts_are_not_retried(
    pull_requests: PullRequestsClient, seeded_stash: FakeStashServer
) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")
    server_pr(seeded_stash, 1)["version"] = 5
    pr.set(PullRequestInfo("Edit", "feature/chart", "main"))

    with pytest.raises(VersionConflictError):
        pr.update()

    assert len(seeded_stash.calls_to("PUT")) == 1


def test_merge(pull_requests: PullRequestsClient, seeded_stash: FakeStashServer) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")

    pr.merge()

    assert pr.status().merged
    assert pr.status().state == "MERGED"
    merge = seeded_stash.calls_to("POST", f"{PRS_PATH}/1/merge")[0]
    assert merge.params == {"version": "0"}
    assert pull_requests.list() == []


def test_merge_by_number_with_stale_version(pull_requests: PullRequestsClient) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")
    pr.set(PullRequestInfo("Edit", "feature/chart", "main"))
    pr.update()

    with pytest.raises(VersionConflictError) as exc_info:
        pull_requests.merge(pr.number, version=0)

    assert exc_info.value.expected_version == 0
    assert pull_requests.merge(pr.number, version=1).status().merged


def test_handle_reconcile(pull_requests: PullRequestsClient, seeded_stash: FakeStashServer) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")

    assert not pr.reconcile()

    pr.set(PullRequestInfo("Bump chart to 2.0", "feature/chart", "main", "Now with notes"))
    assert pr.reconcile()
    assert server_pr(seeded_stash, 1)["description"] == "Now with notes"
    assert pr.status().version == 1


def test_source_branch_cannot_change(pull_requests: PullRequestsClient) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")

    with pytest.raises(InvalidInfoError) as exc_info:
        pr.set(PullRequestInfo("Bump chart", "feature/other", "main"))

    assert exc_info.value.errors[0].field == "source_branch"
    assert pr.get().source_branch == "feature/chart"


def test_delete(pull_requests: PullRequestsClient, seeded_stash: FakeStashServer) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")

    pr.delete()

    assert seeded_stash.calls_to("DELETE", f"{PRS_PATH}/1")[0].body == {"version": 0}
    with pytest.raises(NotFoundError):
        pull_requests.get(1)


def test_stale_delete_is_a_version_conflict(
    pull_requests: PullRequestsClient, seeded_stash: FakeStashServer
) -> None:
    pr = pull_requests.create("Bump chart", "feature/chart", "main")
    server_pr(seeded_stash, 1)["version"] = 3

    with pytest.raises(VersionConflictError):
        pr.delete()

    assert 1 in seeded_stash.pull_requests[("PLAT", "deployments")]


def test_list_by_state(pull_requests: PullRequestsClient) -> None:
    merged = pull_requests.create("Merged", "feature/a", "main")
    pull_requests.create("Open", "feature/b", "main")
    merged.merge()

    assert [pr.get().title for pr in pull_requests.list()] == ["Open"]
    assert [pr.get().title for pr in pull_requests.list(state="ALL")] == ["Merged", "Open"]
    assert [pr.get().title for pr in pull_requests.list(state="MERGED")] == ["Merged"]


def test_unsaved_pull_request_has_no_number(
    pull_requests: PullRequestsClient, seeded_stash: FakeStashServer
) -> None:
    raw = PullRequest("Bump chart", Ref("refs/heads/feature/chart"), Ref("refs/heads/main"))
    pr = PullRequestHandle(pull_requests, raw)

    with pytest.raises(NotFoundError):
        pr.number
    with pytest.raises(NotFoundError):
        pr.refresh()
    assert seeded_stash.calls == []

    assert pr.reconcile()
    assert pr.number == 1
