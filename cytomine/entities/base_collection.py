"""Paginated and filterable listings of entities."""
from __future__ import annotations

import logging
import math
import sys
from collections.abc import Iterable, MutableSequence
from typing import Any, ClassVar, Generic, TypeVar, TYPE_CHECKING, overload

from cytomine.exceptions import MissingFilterError, UsageError
from .base_entity import BaseEntity, identifier_of

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

if TYPE_CHECKING:
    from cytomine.api.base_api import EntityBaseApi
    from cytomine.api.client import Cytomine

_LOGGER = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseEntity)


class Collection(MutableSequence[T], Generic[T]):
    """Ordered, filterable and paginated view over the entities of one type.

    The collection behaves like a list that only accepts instances of :attr:`model`.
    Its content is replaced by :meth:`fetch_page` (one page) or :meth:`fetch`
    (every page). The order is the one of the server.

    Subclasses declare:

    - ``model``: the entity class;
    - ``resource_name``: the resource listed (``{resource_name}.json``);
    - ``allowed_filters``: the association filters; a filter ``(key, value)`` lists
      ``{key}/{value}/{resource_name}.json``. At most one filter is active;
    - ``filter_required``: whether the collection can be listed without filter.

    Args:
        max_per_page: Number of items per page. 0 lets the server decide for
            :meth:`fetch_page` and uses a default page size for :meth:`fetch`.
        filter_key: Optional filter key, one of ``allowed_filters``.
        filter_value: Value of the filter (an identifier or an entity).
        session: Session used for the requests. If None, the default session is used.
    """

    model: ClassVar[type[BaseEntity]] = BaseEntity
    resource_name: ClassVar[str] = ''
    allowed_filters: ClassVar[tuple[str, ...]] = ()
    filter_required: ClassVar[bool] = False

    def __init__(self,
                 max_per_page: int = 0,
                 filter_key: str | None = None,
                 filter_value: Any = None,
                 *,
                 session: Cytomine | None = None) -> None:
        if max_per_page < 0:
            raise ValueError("max_per_page must be positive or 0.")
        self._data: list[T] = []
        self.max_per_page = max_per_page
        self.cur_page = 0
        self.total: int | None = None
        self._filter: tuple[str, Any] | None = None
        self._params: dict[str, Any] = {}
        self._session = session
        if filter_key is not None:
            self.set_filter(filter_key, filter_value)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def _check_item(self, value: Any) -> None:
        if not isinstance(value, self.model):
            raise TypeError(f"{type(self).__name__} only accepts {self.model.__name__} instances, "
                            f"got {type(value).__name__}.")

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            value = list(value)
            for item in value:
                self._check_item(item)
        else:
            self._check_item(value)
        self._data[index] = value

    def __delitem__(self, index) -> None:
        del self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    def insert(self, index: int, value: T) -> None:
        self._check_item(value)
        self._data.insert(index, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    @classmethod
    def from_entities(cls, entities: Iterable[T], session: Cytomine | None = None) -> Self:
        """Build a collection holding already decoded entities."""
        collection = cls(session=session)
        collection.extend(entities)
        collection.total = len(collection)
        return collection

    # ------------------------------------------------------------------
    # Filters and URI
    # ------------------------------------------------------------------

    @property
    def filter(self) -> tuple[str, Any] | None:
        """The active filter as a ``(key, value)`` pair, if any."""
        return self._filter

    def set_filter(self, key: str, value: Any) -> Self:
        """Restrict the listing to the entities associated with `value`.

        Any previously set filter is replaced.

        Raises:
            UsageError: If `key` is not an allowed filter, or if `value` has no
                identifier (None, 0 or an unsaved entity).
        """
        if key not in self.allowed_filters:
            allowed = ', '.join(self.allowed_filters) if self.allowed_filters else 'none'
            raise UsageError(f"Filter '{key}' not allowed on {type(self).__name__} (allowed: {allowed}).")
        ident = identifier_of(value)
        if ident is None or ident == 0:
            raise UsageError(f"Cannot filter {type(self).__name__} by '{key}': {value!r} has no identifier.")
        self._filter = (key, value)
        return self

    def clear_filter(self) -> Self:
        self._filter = None
        return self

    @property
    def params(self) -> dict[str, Any]:
        """Additional query parameters sent with every request."""
        return self._params

    def _check_filters(self) -> None:
        if self.filter_required and self._filter is None:
            raise MissingFilterError(type(self).__name__, self.allowed_filters)

    @property
    def uri(self) -> str:
        """URI of the listing, relative to the API root."""
        self._check_filters()
        if self._filter is None:
            return f"{self.resource_name}.json"
        key, value = self._filter
        return f"{key}/{identifier_of(value)}/{self.resource_name}.json"

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _api(self) -> EntityBaseApi:
        session = self._session
        if session is None:
            from cytomine.api.client import Cytomine
            session = Cytomine.get_default()
        return session.api_for(self.model)

    def fetch_page(self, page: int | None = None) -> Self:
        """Replace the content with one page of results.

        Args:
            page: Zero-based index of the page. Defaults to :attr:`cur_page`.

        Raises:
            UsageError: If `page` is negative, or greater than 0 while
                :attr:`max_per_page` is 0 (the server then returns a single page).
        """
        if page is None:
            page = self.cur_page
        if page < 0:
            raise UsageError(f"Page index must be positive or 0, got {page}.")
        if page > 0 and not self.max_per_page:
            raise UsageError(f"Cannot fetch page {page} of {type(self).__name__} without a page size.")
        uri = self.uri
        result = self._api().get_page(uri, page=page, max_per_page=self.max_per_page, params=self._params)
        self._data = list(result.items)
        self.total = result.total
        self.cur_page = page
        return self

    def fetch_next_page(self) -> Self:
        return self.fetch_page(self.cur_page + 1)

    def fetch_previous_page(self) -> Self:
        if self.cur_page <= 0:
            raise UsageError("Cannot fetch the page before the first one.")
        return self.fetch_page(self.cur_page - 1)

    def fetch(self) -> Self:
        """Replace the content with every entity of the listing.

        The listing is paged with :attr:`max_per_page` items per request. The content
        is only replaced once all the pages were retrieved.
        """
        uri = self.uri
        items = self._api().get_list(uri, max_per_page=self.max_per_page, params=self._params)
        _LOGGER.debug(f"Fetched {len(items)} items from {uri}")
        self._data = list(items)
        self.total = len(self._data)
        self.cur_page = 0
        return self

    @property
    def nb_pages(self) -> int | None:
        """Number of pages according to the last reported total, if known."""
        if self.total is None or not self.max_per_page:
            return None
        return math.ceil(self.total / self.max_per_page)

    def is_last_page(self) -> bool:
        nb_pages = self.nb_pages
        if nb_pages is None:
            return True
        return self.cur_page >= nb_pages - 1

    @classmethod
    def fetch_all(cls, *args: Any, session: Cytomine | None = None, **kwargs: Any) -> Self:
        """Build a collection with the given arguments and fetch all its entities."""
        return cls(*args, session=session, **kwargs).fetch()

    @classmethod
    def fetch_with_filter(cls,
                          key: str,
                          value: Any,
                          max_per_page: int = 0,
                          session: Cytomine | None = None) -> Self:
        """Fetch all the entities associated with `value`."""
        return cls(max_per_page, key, value, session=session).fetch()


class SearchCollection(Collection[T]):
    """Collection filtered through query parameters rather than an association path.

    ``search_params`` maps the accepted keyword names to the query parameter names
    sent to the server. ``required_params`` lists parameters (by keyword name) of
    which at least one must be set.
    """

    search_params: ClassVar[dict[str, str]] = {}
    required_params: ClassVar[tuple[str, ...]] = ()

    def __init__(self,
                 max_per_page: int = 0,
                 *,
                 session: Cytomine | None = None,
                 **params: Any) -> None:
        super().__init__(max_per_page, session=session)
        for key, value in params.items():
            self.set_parameter(key, value)

    def set_parameter(self, key: str, value: Any) -> Self:
        """Set (or remove, when `value` is None) a search parameter.

        Lists are sent as comma-separated identifiers and booleans as ``true``/``false``.
        """
        if key not in self.search_params:
            raise UsageError(f"Parameter '{key}' not allowed on {type(self).__name__} "
                             f"(allowed: {', '.join(self.search_params)}).")
        wire_name = self.search_params[key]
        if value is None:
            self._params.pop(wire_name, None)
        elif isinstance(value, bool):
            self._params[wire_name] = 'true' if value else 'false'
        elif isinstance(value, (list, tuple, set)):
            self._params[wire_name] = ','.join(str(self._entity_identifier(key, v)) for v in value)
        else:
            self._params[wire_name] = self._entity_identifier(key, value)
        return self

    def _entity_identifier(self, key: str, value: Any) -> Any:
        if isinstance(value, BaseEntity) and not value.id:
            raise UsageError(f"Cannot search {type(self).__name__} by '{key}': {value} is not saved.")
        return identifier_of(value)

    def _check_filters(self) -> None:
        required = [self.search_params[key] for key in self.required_params]
        if required and not any(name in self._params for name in required):
            raise MissingFilterError(type(self).__name__, self.required_params)

    @classmethod
    def fetch_with_filter(cls,
                          key: str,
                          value: Any,
                          max_per_page: int = 0,
                          session: Cytomine | None = None) -> Self:
        """Fetch all the entities whose search parameter `key` is `value`."""
        return cls(max_per_page, session=session, **{key: value}).fetch()
