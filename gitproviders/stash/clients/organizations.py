"""Organizations (Stash projects) resource client."""

from typing import TYPE_CHECKING

from gitproviders.context import Context, ensure_context
from gitproviders.exceptions import NoProviderSupportError
from gitproviders.info import OrganizationInfo
from gitproviders.refs import OrganizationRef
from gitproviders.stash.api import api_path
from gitproviders.stash.clients.teams import TeamsClient
from gitproviders.stash.types.projects import Project, parse_project

if TYPE_CHECKING:
    from gitproviders.stash.api import StashAPI


class Organization:
    """A project seen as an organization. Read-only."""

    def __init__(self, api: "StashAPI", project: Project, ref: OrganizationRef) -> None:
        self._project = project
        self.ref = ref
        self.teams = TeamsClient(api, ref)

    def get(self) -> OrganizationInfo:
        return OrganizationInfo(
            name=self._project.name,
            description=self._project.description or None,
        )

    def api_object(self) -> Project:
        return self._project


class OrganizationsClient:
    """Client for organization-level operations."""

    def __init__(self, api: "StashAPI") -> None:
        self.api = api

    def get(self, ref: OrganizationRef, ctx: Context | None = None) -> Organization:
        """
        Get an organization by name.

        Raises:
            DomainUnsupportedError: If ``ref`` points at another server
            NotFoundError: If no project has that name or key
        """
        ctx = ensure_context(ctx)
        self.api.validate_ref(ref)
        project = self.api.get_project(ctx, ref.organization)
        return Organization(self.api, project, ref)

    def children(self, ref: OrganizationRef, ctx: Context | None = None) -> list[Organization]:
        """Stash projects cannot be nested; always raises :class:`NoProviderSupportError`."""
        raise NoProviderSupportError("sub-organizations")

    def list(self, ctx: Context | None = None) -> list[Organization]:
        """List every project visible to the authenticated user."""
        ctx = ensure_context(ctx)
        projects = [
            parse_project(data, session)
            for data, session in self.api.list_all(
                ctx, api_path("projects"), "Stash.Project", ("key", "name")
            )
        ]
        return [
            Organization(self.api, project, OrganizationRef(self.api.domain, project.name))
            for project in projects
        ]
