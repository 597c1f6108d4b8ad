import logging
from typing import Any, TYPE_CHECKING
import httpx
from cytomine.api.base_api import ApiConfig, EntityBaseApi
from cytomine.entities.base_entity import identifier_of
from cytomine.entities.project import Project, ProjectCollection
from cytomine.entities.user import User, UserCollection
from cytomine.exceptions import ResourceNotFoundError

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine

_LOGGER = logging.getLogger(__name__)


class ProjectsApi(EntityBaseApi[Project]):
    """API handler for project-related endpoints."""

    def __init__(self,
                 config: ApiConfig,
                 client: httpx.Client | None = None,
                 session: 'Cytomine | None' = None) -> None:
        """Initialize the projects API handler.

        Args:
            config: API configuration containing host, base path, etc.
            client: Optional HTTP client instance. If None, a new one will be created.
            session: Session the decoded entities are bound to.
        """
        super().__init__(config, Project, client, session)

    def _project_endpoint(self, project: Project, action: str, path: str) -> str:
        self._require_persisted(project, action)
        return f"{project.uri_strategy.resource}/{project.id}/{path}"

    def _get_users(self, project: Project, path: str, params: dict | None = None) -> UserCollection:
        endpoint = self._project_endpoint(project, 'list the users of', path)
        try:
            users = self._get_entities(endpoint, User, params)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise ResourceNotFoundError('project', {'id': project.id}) from e
            raise
        return UserCollection.from_entities(users, session=self.session)

    def fetch_creator(self, project: Project) -> User:
        """Get the user who created `project`.

        Raises:
            ResourceNotFoundError: If the project does not exist or has no known creator.
        """
        creators = self._get_users(project, 'creator.json')
        if len(creators) == 0:
            raise ResourceNotFoundError('user', {'creator_of_project': project.id})
        return creators[0]

    def fetch_users(self, project: Project) -> UserCollection:
        """Get the members of `project`."""
        self._require_persisted(project, 'list the users of')
        return UserCollection.fetch_with_filter('project', project.id, session=self.session)

    def fetch_users_activity(self, project: Project) -> UserCollection:
        return self._get_users(project, 'usersActivity.json')

    def fetch_connected_users(self, project: Project) -> list[int]:
        """Get the identifiers of the users currently connected to `project`."""
        endpoint = self._project_endpoint(project, 'list the connected users of', 'online/user.json')
        response = self._make_entity_request('GET', project, endpoint)
        items, _ = self._convert_array_response(response.json())
        return [item['id'] if isinstance(item, dict) else item for item in items]

    def fetch_user_layers(self, project: Project, image: Any = None) -> UserCollection:
        """Get the users whose annotation layer is visible to the current user in `project`.

        Args:
            project: The project.
            image: If given, restrict the layers to the ones of this image instance.
        """
        params = {'image': identifier_of(image)} if image is not None else None
        return self._get_users(project, 'userlayer.json', params)

    def fetch_administrators(self, project: Project) -> UserCollection:
        return self._get_users(project, 'admin.json')

    def fetch_representatives(self, project: Project) -> UserCollection:
        return self._get_users(project, 'users/representative.json')

    def add_user(self, project: Project, user: int | User) -> None:
        """Add `user` as member of `project`."""
        endpoint = self._project_endpoint(project, 'add a user to', f"user/{identifier_of(user)}.json")
        self._make_entity_request('POST', project, endpoint)
        _LOGGER.debug(f"Added user {identifier_of(user)} to {project}")

    def delete_user(self, project: Project, user: int | User) -> None:
        """Remove `user` from the members of `project`."""
        endpoint = self._project_endpoint(project, 'remove a user from', f"user/{identifier_of(user)}.json")
        self._make_entity_request('DELETE', project, endpoint)
        _LOGGER.debug(f"Removed user {identifier_of(user)} from {project}")

    def add_admin(self, project: Project, user: int | User) -> None:
        """Make `user` a manager of `project`."""
        endpoint = self._project_endpoint(project, 'add an administrator to',
                                          f"user/{identifier_of(user)}/admin.json")
        self._make_entity_request('POST', project, endpoint)

    def delete_admin(self, project: Project, user: int | User) -> None:
        endpoint = self._project_endpoint(project, 'remove an administrator from',
                                          f"user/{identifier_of(user)}/admin.json")
        self._make_entity_request('DELETE', project, endpoint)

    def record_user_connection(self, project: Project) -> None:
        endpoint = self._project_endpoint(project, 'record a connection to', 'userconnection.json')
        self._make_entity_request('POST', project, endpoint, json={'project': project.id})

    def fetch_last_opened(self, max_count: int = 0) -> ProjectCollection:
        """Get the projects last opened by the current user, most recent first.

        Args:
            max_count: Maximum number of projects (0 for no limit).
        """
        params = {'max': max_count} if max_count else None
        response = self._make_request('GET', 'project/method/lastopened.json', params=params)
        items, _ = self._convert_array_response(response.json())
        return ProjectCollection.from_entities([self._init_entity_obj(item) for item in items],
                                               session=self.session)
