from __future__ import annotations

import logging
from typing import Any, TypeVar, Generic, Type, Generator, TYPE_CHECKING
import httpx
from dataclasses import dataclass, field
from cytomine.entities.base_entity import BaseEntity
from cytomine.exceptions import (EntityAlreadyExistsError, InvalidResponseError,
                                 OperationNotAllowedError, ResourceNotFoundError, UsageError)
import json

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine

logger = logging.getLogger(__name__)

# Generic type for entities
T = TypeVar('T', bound=BaseEntity)
E = TypeVar('E', bound=BaseEntity)
_PAGE_LIMIT = 1000
_MASKED_FIELDS = ('password', 'j_password', 'newPassword', 'privateKey')


@dataclass
class ApiConfig:
    """Configuration for API client.

    Attributes:
        host: URL of the Cytomine server (e.g. ``https://demo.cytomine.com``).
        base_path: Path of the API on the server.
        timeout: Request timeout in seconds.
    """
    host: str
    base_path: str = '/api/'
    timeout: float = 30.0

    @property
    def api_url(self) -> str:
        """Root URL of the API, always ending with a slash."""
        path = self.base_path.strip('/')
        host = self.host.rstrip('/')
        return f"{host}/{path}/" if path else f"{host}/"


@dataclass
class Page(Generic[T]):
    """One page of a listing.

    Attributes:
        items: Entities of the page, in server order.
        total: Total number of entities reported by the server, if any.
        offset: Index of the first item of the page in the whole listing.
        max_per_page: Requested page size (0 if the server default was used).
    """
    items: list[T] = field(default_factory=list)
    total: int | None = None
    offset: int = 0
    max_per_page: int = 0


class BaseApi:
    """Base class for all API endpoint handlers."""

    def __init__(self,
                 config: ApiConfig,
                 client: httpx.Client | None = None,
                 session: Cytomine | None = None) -> None:
        """Initialize the base API handler.

        Args:
            config: API configuration containing host, base path, etc.
            client: Optional HTTP client instance. If None, a new one will be created.
            session: Session the decoded entities are bound to.
        """
        self.config = config
        self.client = client or self._create_client()
        self.session = session

    def _create_client(self) -> httpx.Client:
        """Create and configure HTTP client with the API root URL and timeouts."""
        return httpx.Client(
            base_url=self.config.api_url,
            headers={'Accept': 'application/json'},
            timeout=self.config.timeout
        )

    def _make_request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Make HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint path, relative to the API root
            **kwargs: Additional arguments for the request

        Returns:
            HTTP response object

        Raises:
            httpx.HTTPStatusError: If the server answers with an error status
            httpx.RequestError: If the request could not be sent
        """
        url = endpoint.lstrip('/')  # Remove leading slash for httpx

        try:
            curl_command = self._generate_curl_command({"method": method,
                                                        "url": url,
                                                        "headers": self.client.headers,
                                                        **kwargs})
            logger.debug(f'Equivalent curl command: "{curl_command}"')
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} for {method} {endpoint}: {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error for {method} {endpoint}: {e}")
            raise

    @staticmethod
    def _mask(data: dict) -> dict:
        return {k: ('<HIDDEN>' if k in _MASKED_FIELDS else v) for k, v in data.items()}

    def _generate_curl_command(self, request_args: dict) -> str:
        """
        Generate a curl command for debugging purposes.

        Args:
            request_args (dict): Request arguments dictionary containing method, url, headers, etc.

        Returns:
            str: Equivalent curl command
        """
        method = request_args.get('method', 'GET').upper()
        url = request_args['url']
        headers = request_args.get('headers', {})
        data = request_args.get('json') or request_args.get('data')
        params = request_args.get('params')

        curl_command = ['curl']

        # Add method if not GET
        if method != 'GET':
            curl_command.extend(['-X', method])

        # Add headers
        for key, value in headers.items():
            if key.lower() == 'cookie':
                value = '<SESSION-COOKIE>'  # Mask session cookie
            curl_command.extend(['-H', f"'{key}: {value}'"])

        # Add query parameters
        if params:
            param_str = '&'.join([f"{k}={v}" for k, v in params.items()])
            url = f"{url}?{param_str}"
        # Add URL
        curl_command.append(f"'{url}'")

        # Add data
        files = request_args.get('files')
        if files:
            for name, value in files.items():
                filename = value[0] if isinstance(value, tuple) else getattr(value, 'name', 'file')
                curl_command.extend(['-F', f"'{name}=@{filename}'"])
        if data:
            if isinstance(data, dict):
                curl_command.extend(['-d', f"'{json.dumps(self._mask(data), default=str)}'"])
            else:
                curl_command.extend(['-d', f"'{data}'"])

        return ' '.join(curl_command)

    @staticmethod
    def get_status_code(e) -> int:
        if not hasattr(e, 'response') or e.response is None:
            return -1
        return e.response.status_code

    def _make_request_with_pagination(self,
                                      method: str,
                                      endpoint: str,
                                      max_per_page: int = 0,
                                      **kwargs
                                      ) -> Generator[tuple[httpx.Response, list, int | None], None, None]:
        """Make paginated HTTP requests, yielding each page of results.

        Pages are requested with the ``offset`` and ``max`` query parameters until
        a page is empty, shorter than requested, or the total reported by the server
        is reached.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            max_per_page: Number of items per request. 0 uses a default page size.
            **kwargs: Additional arguments for the request (e.g., params, json)

        Yields:
            Tuples of (HTTP response, items of the page, total reported by the server)
        """
        offset = 0
        total_fetched = 0
        page_limit = max_per_page or _PAGE_LIMIT
        params = {k: v for k, v in (kwargs.get('params') or {}).items() if v is not None}
        # Ensure kwargs carries our params reference so mutations below take effect
        kwargs['params'] = params

        while True:
            params['offset'] = offset
            params['max'] = page_limit

            response = self._make_request(method=method,
                                          endpoint=endpoint,
                                          **kwargs)
            items, total = self._convert_array_response(response.json())

            if not items:
                break

            yield response, items, total
            total_fetched += len(items)

            if total is not None and total_fetched >= total:
                break
            if len(items) < page_limit:
                break

            offset += len(items)

    def _convert_array_response(self, data: dict | list) -> tuple[list, int | None]:
        """Normalize array-like responses into a list and the total reported by the server.

        Args:
            data: Parsed JSON response.

        Returns:
            The items and the total size of the listing (None when not reported).
        """
        if isinstance(data, list):
            return data, None
        if isinstance(data, dict) and 'collection' in data:
            items = data['collection'] or []
            total = data.get('size')
            return items, int(total) if total is not None else None
        raise InvalidResponseError(f"Expected a collection response, got: {str(data)[:200]}")

    def _bind(self, entity: E) -> E:
        entity._session = self.session
        return entity

    def _get_entities(self,
                      endpoint: str,
                      entity_class: Type[E],
                      params: dict | None = None) -> list[E]:
        """Get every entity of a listing, decoded as `entity_class`."""
        all_items = []
        for _, items, _ in self._make_request_with_pagination('GET', endpoint, params=params):
            all_items.extend(items)
        return [self._bind(entity_class.from_response(item)) for item in all_items]


class EntityBaseApi(BaseApi, Generic[T]):
    """Base API handler for entity-related endpoints with CRUD operations.

    This class provides the operations shared by every entity type, deriving the
    URIs from the entity URI strategy. Usage errors (missing identity or context)
    and unsupported operations are raised before any request is sent.

    Type Parameters:
        T: The entity type this API handler manages (must extend BaseEntity)
    """

    def __init__(self,
                 config: ApiConfig,
                 entity_class: Type[T],
                 client: httpx.Client | None = None,
                 session: Cytomine | None = None) -> None:
        """Initialize the entity API handler.

        Args:
            config: API configuration containing host, base path, etc.
            entity_class: The entity class this handler manages
            client: Optional HTTP client instance. If None, a new one will be created.
            session: Session the decoded entities are bound to.
        """
        super().__init__(config, client, session)
        self.entity_class = entity_class

    @property
    def resource_name(self) -> str:
        return self.entity_class.callback_identifier or self.entity_class.__name__.lower()

    def _init_entity_obj(self, data: Any) -> T:
        return self._bind(self.entity_class.from_response(data))

    def _check_operation(self, operation: str) -> None:
        if operation in self.entity_class.disallowed_operations:
            raise OperationNotAllowedError(self.entity_class.__name__, operation)

    @staticmethod
    def _key_params(entity: BaseEntity) -> dict[str, Any]:
        return {f: getattr(entity, f, None) for f in entity.uri_strategy.key_fields}

    def _make_entity_request(self,
                             method: str,
                             entity: BaseEntity,
                             endpoint: str,
                             **kwargs) -> httpx.Response:
        try:
            return self._make_request(method, endpoint, **kwargs)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise ResourceNotFoundError(self.resource_name, self._key_params(entity)) from e
            raise

    def _require_persisted(self, entity: BaseEntity, action: str) -> None:
        if entity.is_new():
            raise UsageError(f"Cannot {action} {type(entity).__name__} with no ID.")

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def fetch(self, entity: T) -> T:
        """Retrieve the server state of `entity` and overwrite its attributes.

        Raises:
            UsageError: If the entity key is not set.
            ResourceNotFoundError: If the entity does not exist.
            httpx.HTTPStatusError: If the request fails.
        """
        self._check_operation('fetch')
        entity.uri_strategy.require_key(entity, 'fetch')
        response = self._make_entity_request('GET', entity, entity.uri)
        entity.populate(response.json())
        return self._bind(entity)

    def get_by_key(self, *key: Any) -> T:
        """Get a specific entity by its key (its ID for most entity types)."""
        return self.fetch(self.entity_class.from_key(*key))

    def create(self, entity: T) -> T:
        """Create `entity` on the server and repopulate it from the response.

        Raises:
            EntityAlreadyExistsError: If the server reports a conflict.
            httpx.HTTPStatusError: If creation fails (e.g. validation error).
        """
        self._check_operation('save')
        endpoint = entity.uri_strategy.create_uri(entity)
        try:
            response = self._make_request('POST', endpoint, json=entity.to_payload())
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 409:
                raise EntityAlreadyExistsError(self.resource_name, self._key_params(entity)) from e
            raise
        entity.populate(response.json())
        logger.debug(f"Created {entity}")
        return self._bind(entity)

    def save(self, entity: T) -> T:
        """Create `entity` if it is new, update it otherwise."""
        if entity.is_new():
            return self.create(entity)
        return self.update(entity)

    def update(self, entity: T) -> T:
        """Send the attributes of a persisted entity and repopulate it from the response.

        Raises:
            OperationNotAllowedError: If the entity type cannot be updated.
            UsageError: If the entity has no ID.
            httpx.HTTPStatusError: If update fails or entity not found.
        """
        self._check_operation('update')
        self._require_persisted(entity, 'update')
        response = self._make_entity_request('PUT', entity, entity.uri, json=entity.to_payload())
        entity.populate(response.json())
        return self._bind(entity)

    def delete(self, entity: T) -> None:
        """Delete an entity on the server.

        Raises:
            OperationNotAllowedError: If the entity type cannot be deleted.
            UsageError: If the entity key is not set.
            httpx.HTTPStatusError: If deletion fails or entity not found
        """
        self._check_operation('delete')
        entity.uri_strategy.require_key(entity, 'delete')
        self._make_entity_request('DELETE', entity, entity.uri)
        logger.debug(f"Deleted {entity}")

    def delete_by_key(self, *key: Any) -> None:
        self.delete(self.entity_class.from_key(*key))

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def get_page(self,
                 endpoint: str,
                 page: int = 0,
                 max_per_page: int = 0,
                 params: dict | None = None) -> Page[T]:
        """Get one page of a listing.

        Args:
            endpoint: Listing endpoint (e.g. ``project/3/imageinstance.json``).
            page: Zero-based page index.
            max_per_page: Page size. 0 lets the server decide and ignores `page`.
            params: Additional query parameters.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        offset = 0
        if max_per_page:
            offset = page * max_per_page
            query['offset'] = offset
            query['max'] = max_per_page
        response = self._make_request('GET', endpoint, params=query)
        items, total = self._convert_array_response(response.json())
        return Page(items=[self._init_entity_obj(item) for item in items],
                    total=total,
                    offset=offset,
                    max_per_page=max_per_page)

    def get_list(self,
                 endpoint: str,
                 max_per_page: int = 0,
                 params: dict | None = None) -> list[T]:
        """Get every entity of a listing, paging through it.

        Nothing is returned if any page fails: the error is raised instead.

        Raises:
            httpx.HTTPStatusError: If a request fails.
        """
        items_gen = self._make_request_with_pagination('GET', endpoint,
                                                       max_per_page=max_per_page,
                                                       params=params)
        all_items = []
        for resp, items, total in items_gen:
            all_items.extend(items)

        return [self._init_entity_obj(item) for item in all_items]
