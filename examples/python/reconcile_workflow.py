#!/usr/bin/env python3
"""
git-providers - Declarative Stash Workflow Example

This example brings one organization repository to a desired state:
1. Reconcile the repository itself
2. Grant a team push access
3. Install a read-only deploy key
4. Open a pull request and list the open ones

Configuration comes from STASH_DOMAIN, STASH_TOKEN and the other
STASH_* variables understood by StashClient.from_env. Set
EXAMPLE_ORGANIZATION, EXAMPLE_REPOSITORY, EXAMPLE_TEAM and
EXAMPLE_DEPLOY_KEY (a path to an OpenSSH public key) to pick the targets.
"""

import logging
import os
import sys
from pathlib import Path

from gitproviders import (
    Context,
    DeployKeyInfo,
    GitProviderError,
    OrgRepositoryRef,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    configure_logging,
)
from gitproviders.exceptions import AlreadyExistsError
from gitproviders.stash import StashClient


def main() -> None:
    """Run the reconcile workflow example."""
    print("=== git-providers Stash Example ===\n")
    configure_logging(level=logging.INFO)

    organization = os.environ.get("EXAMPLE_ORGANIZATION", "Platform")
    repository = os.environ.get("EXAMPLE_REPOSITORY", "deployments")
    team = os.environ.get("EXAMPLE_TEAM", "developers")
    key_path = os.environ.get("EXAMPLE_DEPLOY_KEY")

    # Every call of this run must finish within two minutes
    ctx = Context.with_timeout(120)

    with StashClient.from_env() as client:
        ref = OrgRepositoryRef(client.domain, organization, repository)

        # Step 1: Repository
        print("1. Reconciling repository...")
        repo, changed = client.org_repositories.reconcile(
            ref,
            RepositoryInfo(
                description="Cluster manifests",
                visibility=RepositoryVisibility.PRIVATE,
            ),
            ctx,
        )
        info = repo.get()
        print(f"   {ref}: {'changed' if changed else 'already up to date'}")
        print(f"   Default branch: {info.default_branch}")
        print(f"   Clone (http): {repo.api_object().clone_links.get('http', '-')}")

        # Step 2: Team access
        print(f"\n2. Granting {team!r} push access...")
        access, changed = repo.team_access.reconcile(
            TeamAccessInfo(team, RepositoryPermission.PUSH), ctx
        )
        print(f"   Effective level: {access.get().permission.name.lower()}")
        print(f"   {'changed' if changed else 'already up to date'}")

        # Step 3: Deploy key
        if key_path:
            print("\n3. Installing deploy key...")
            public_key = Path(key_path).read_text().strip()
            key, changed = repo.deploy_keys.reconcile(
                DeployKeyInfo(name="ci", key=public_key, read_only=True), ctx
            )
            print(f"   Key id: {key.api_object().id}")
            print(f"   {'changed' if changed else 'already up to date'}")
        else:
            print("\n3. Skipping deploy key (EXAMPLE_DEPLOY_KEY not set)")

        # Step 4: Pull requests
        print("\n4. Opening a pull request...")
        try:
            pr = repo.pull_requests.create(
                "Bump chart version", "feature/chart", info.default_branch or "main", ctx=ctx
            )
            status = pr.status()
            print(f"   #{status.number} (version {status.version}): {status.web_url}")
        except AlreadyExistsError:
            print("   An open pull request already joins these branches")

        open_prs = repo.pull_requests.list(ctx=ctx)
        print(f"   Open pull requests: {len(open_prs)}")
        for handle in open_prs:
            pr_info = handle.get()
            print(f"   - {pr_info.title} ({pr_info.source_branch} -> {pr_info.target_branch})")

    print("\n=== Example Complete ===")


if __name__ == "__main__":
    try:
        main()
    except GitProviderError as e:
        print(f"\nError: [{e.code}] {e.message}", file=sys.stderr)
        sys.exit(1)
