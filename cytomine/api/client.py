from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import ClassVar, TypeVar
import httpx
from .base_api import ApiConfig, BaseApi, EntityBaseApi
from .endpoints import AnnotationTermsApi, AttachedFilesApi, ImageInstancesApi, ProjectsApi, UsersApi
import cytomine.configs
from cytomine.entities.association import AbstractAnnotationTerm
from cytomine.entities.base_entity import BaseEntity
from cytomine.entities.domain import AttachedFile
from cytomine.entities.image import ImageInstance
from cytomine.entities.project import Project
from cytomine.entities.user import User
from cytomine.entities.annotation import AnnotationTerm
from cytomine.exceptions import CytomineException, SessionNotInitializedError, UsageError

_LOGGER = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseEntity)

_SPECIALIZED_APIS: dict[type[BaseEntity], type[EntityBaseApi]] = {
    Project: ProjectsApi,
    ImageInstance: ImageInstancesApi,
    User: UsersApi,
    AttachedFile: AttachedFilesApi,
}


class Cytomine:
    """Session with a Cytomine server.

    A session holds the server configuration, the HTTP client (and thus the
    authentication cookies) and one API handler per entity type. Entities and
    collections use the session they were obtained from, the one passed explicitly
    to their operations, or the default session.

    The most recently created session (with ``set_default=True``) becomes the
    default session, returned by :meth:`get_default`.

    Args:
        host: URL of the server. If None, the configured ``default_host`` is used.
        base_path: Path of the API on the server.
        timeout: Request timeout in seconds.
        set_default: Whether this session becomes the default one.

    Example:
        >>> with Cytomine('https://demo.cytomine.com') as session:
        ...     session.login('admin', 'password')
        ...     project = Project(name='My project', ontology=12).save()
    """
    CYTOMINE_HOST_VENV_NAME = cytomine.configs.ENV_VARS[cytomine.configs.HOST_KEY]

    _default: ClassVar[Cytomine | None] = None

    def __init__(self,
                 host: str | None = None,
                 base_path: str = '/api/',
                 timeout: float = 30.0,
                 set_default: bool = True) -> None:
        if host is None:
            host = cytomine.configs.get_value(cytomine.configs.HOST_KEY)
            if host is None:
                msg = f"Cytomine host not provided! Use the environment variable " + \
                    f"{Cytomine.CYTOMINE_HOST_VENV_NAME} or pass it as an argument."
                raise UsageError(msg)
        host = host.rstrip('/')

        self.config = ApiConfig(host=host, base_path=base_path, timeout=timeout)
        self._base_api = BaseApi(self.config, session=self)
        self._client = self._base_api.client
        self._handlers: dict[type[BaseEntity], EntityBaseApi] = {}
        self._current_user: User | None = None

        if set_default:
            self.make_default()

    def __repr__(self) -> str:
        return f"Cytomine(host={self.host!r})"

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def client(self) -> httpx.Client:
        """The HTTP client shared by all the API handlers of the session."""
        return self._client

    # ------------------------------------------------------------------
    # Default session
    # ------------------------------------------------------------------

    def make_default(self) -> Cytomine:
        """Use this session when no session is given explicitly."""
        Cytomine._default = self
        return self

    @classmethod
    def get_default(cls) -> Cytomine:
        """Return the default session.

        Raises:
            SessionNotInitializedError: If no default session was created.
        """
        if cls._default is None:
            raise SessionNotInitializedError("No Cytomine session was created. "
                                             "Create one with Cytomine(host) before using the entities.")
        return cls._default

    # ------------------------------------------------------------------
    # API handlers
    # ------------------------------------------------------------------

    def api_for(self, entity_class: type[T]) -> EntityBaseApi[T]:
        """Return the API handler of an entity type, creating it on first use."""
        handler = self._handlers.get(entity_class)
        if handler is None:
            if issubclass(entity_class, AbstractAnnotationTerm):
                handler = AnnotationTermsApi(self.config, entity_class, self._client, self)
            elif entity_class in _SPECIALIZED_APIS:
                handler = _SPECIALIZED_APIS[entity_class](self.config, self._client, self)
            else:
                handler = EntityBaseApi(self.config, entity_class, self._client, self)
            self._handlers[entity_class] = handler
        return handler

    @property
    def projects(self) -> ProjectsApi:
        """Access to project-related endpoints."""
        return self.api_for(Project)

    @property
    def images(self) -> ImageInstancesApi:
        """Access to image instance endpoints."""
        return self.api_for(ImageInstance)

    @property
    def users(self) -> UsersApi:
        """Access to user-related endpoints."""
        return self.api_for(User)

    @property
    def annotation_terms(self) -> AnnotationTermsApi[AnnotationTerm]:
        return self.api_for(AnnotationTerm)

    @property
    def attached_files(self) -> AttachedFilesApi:
        return self.api_for(AttachedFile)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self,
              username: str | None = None,
              password: str | None = None,
              remember_me: bool = True) -> None:
        """Authenticate the session with a username and a password.

        Missing credentials are read from the configuration (environment variables,
        ``~/.netrc`` or the configuration file).

        Raises:
            UsageError: If no credentials are available.
            httpx.HTTPStatusError: If the server refuses the credentials.
        """
        if username is None:
            username = cytomine.configs.get_value(cytomine.configs.USERNAME_KEY)
        if password is None:
            password = cytomine.configs.get_value(cytomine.configs.PASSWORD_KEY)
        if username is None or password is None:
            raise UsageError("Credentials not provided! Pass them as arguments or "
                             "configure them with the cytomine-config command.")

        form = {'j_username': username, 'j_password': password}
        if remember_me:
            form['remember_me'] = 'on'
        self._base_api._make_request('POST', f"{self.host}/j_spring_security_check", data=form)
        self._current_user = None
        _LOGGER.info(f"Logged in to {self.host} as {username}.")

    def logout(self) -> None:
        self._base_api._make_request('GET', f"{self.host}/logout")
        self._current_user = None
        self._client.cookies.clear()
        _LOGGER.info(f"Logged out from {self.host}.")

    def open_admin_session(self) -> None:
        """Grant the administrator privileges to the session (the user must be an administrator)."""
        self._base_api._make_request('GET', 'session/admin/open.json')
        self._current_user = None

    def close_admin_session(self) -> None:
        self._base_api._make_request('GET', 'session/admin/close.json')
        self._current_user = None

    def fetch_current_user(self, refresh: bool = False) -> User:
        """Return the authenticated user, fetching it only on first use.

        Args:
            refresh: Fetch the user again even if it is cached.
        """
        if self._current_user is None or refresh:
            self._current_user = self.users.fetch_current()
        return self._current_user

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    def delete_many(self, entities: Iterable[BaseEntity]) -> list[BaseEntity]:
        """Delete entities in the reverse order of `entities`, continuing on failures.

        Entities created in dependency order (a project, then its images...) are thus
        deleted dependents first.

        Returns:
            The entities that could not be deleted.
        """
        failed = []
        for entity in reversed(list(entities)):
            try:
                entity.delete(session=self)
            except (CytomineException, httpx.HTTPError) as e:
                _LOGGER.warning(f"Could not delete {entity}: {e}")
                failed.append(entity)
        if failed:
            _LOGGER.warning(f"{len(failed)} entities could not be deleted.")
        return failed

    def close(self) -> None:
        """Close the HTTP client. The session cannot be used afterwards."""
        self._client.close()
        if Cytomine._default is self:
            Cytomine._default = None

    def __enter__(self) -> Cytomine:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
