from __future__ import annotations

from typing import TYPE_CHECKING
from cytomine.api.uri import ResourceUri, NestedUri
from .base_entity import BaseEntity
from .base_collection import Collection

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine
    from .user import User, UserCollection


class Project(BaseEntity):
    """A project gathers images, the users working on them and an ontology."""

    callback_identifier = 'project'
    uri_strategy = ResourceUri('project')
    backend_class = 'be.cytomine.project.Project'

    name: str | None = None
    ontology: int | None = None
    ontology_name: str | None = None
    discipline: int | None = None
    discipline_name: str | None = None

    blind_mode: bool | None = None
    are_images_downloadable: bool | None = None
    is_closed: bool | None = None
    is_read_only: bool | None = None
    is_restricted: bool | None = None
    hide_users_layers: bool | None = None
    hide_admins_layers: bool | None = None

    retrieval_disable: bool | None = None
    retrieval_all_ontology: bool | None = None
    retrieval_projects: list[int] | None = None

    number_of_slides: int | None = None
    number_of_images: int | None = None
    number_of_annotations: int | None = None
    number_of_job_annotations: int | None = None
    number_of_reviewed_annotations: int | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.name}"

    def fetch_creator(self, session: Cytomine | None = None) -> User:
        """Fetch the user who created the project."""
        return self._api(session).fetch_creator(self)

    def fetch_users(self, session: Cytomine | None = None) -> UserCollection:
        """Fetch the members of the project."""
        return self._api(session).fetch_users(self)

    def fetch_users_activity(self, session: Cytomine | None = None) -> UserCollection:
        """Fetch the members of the project with their last activity."""
        return self._api(session).fetch_users_activity(self)

    def fetch_connected_users(self, session: Cytomine | None = None) -> list[int]:
        """Fetch the identifiers of the users currently connected to the project."""
        return self._api(session).fetch_connected_users(self)

    def fetch_user_layers(self, session: Cytomine | None = None) -> UserCollection:
        """Fetch the users whose annotation layer is visible to the current user."""
        return self._api(session).fetch_user_layers(self)

    def fetch_administrators(self, session: Cytomine | None = None) -> UserCollection:
        return self._api(session).fetch_administrators(self)

    def fetch_representatives(self, session: Cytomine | None = None) -> UserCollection:
        return self._api(session).fetch_representatives(self)

    def add_user(self, user: int | User, session: Cytomine | None = None) -> None:
        self._api(session).add_user(self, user)

    def delete_user(self, user: int | User, session: Cytomine | None = None) -> None:
        self._api(session).delete_user(self, user)

    def add_admin(self, user: int | User, session: Cytomine | None = None) -> None:
        self._api(session).add_admin(self, user)

    def delete_admin(self, user: int | User, session: Cytomine | None = None) -> None:
        self._api(session).delete_admin(self, user)

    def record_user_connection(self, session: Cytomine | None = None) -> None:
        """Record a connection of the current user to the project."""
        self._api(session).record_user_connection(self)


class ProjectCollection(Collection[Project]):
    model = Project
    resource_name = 'project'
    allowed_filters = ('user', 'ontology', 'software')

    @classmethod
    def fetch_last_opened(cls, max_count: int = 0, session: Cytomine | None = None) -> ProjectCollection:
        """Fetch the projects last opened by the current user, most recent first.

        Args:
            max_count: Maximum number of projects to return (0 for all of them).
                This is a number of projects, not a page index.
        """
        return Project._get_api(session).fetch_last_opened(max_count)


class ProjectRepresentative(BaseEntity):
    """A member of a project designated as contact person for it."""

    callback_identifier = 'projectrepresentativeuser'
    uri_strategy = NestedUri('project', 'project', 'representative')

    project: int | None = None
    user: int | None = None


class ProjectRepresentativeCollection(Collection[ProjectRepresentative]):
    model = ProjectRepresentative
    resource_name = 'representative'
    allowed_filters = ('project',)
    filter_required = True


class ProjectDefaultLayer(BaseEntity):
    """A user annotation layer displayed by default in a project."""

    callback_identifier = 'projectdefaultlayer'
    uri_strategy = NestedUri('project', 'project', 'defaultlayer')

    project: int | None = None
    user: int | None = None
    hide_by_default: bool | None = None


class ProjectDefaultLayerCollection(Collection[ProjectDefaultLayer]):
    model = ProjectDefaultLayer
    resource_name = 'defaultlayer'
    allowed_filters = ('project',)
    filter_required = True


class Discipline(BaseEntity):
    callback_identifier = 'discipline'
    uri_strategy = ResourceUri('discipline')

    name: str | None = None


class DisciplineCollection(Collection[Discipline]):
    model = Discipline
    resource_name = 'discipline'
