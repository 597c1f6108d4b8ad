from __future__ import annotations

import logging
import sys
from typing import Any, ClassVar, TYPE_CHECKING
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError
from pydantic.alias_generators import to_camel

from cytomine.api.uri import UriStrategy, ResourceUri
from cytomine.exceptions import InvalidResponseError, UsageError

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

if TYPE_CHECKING:
    from cytomine.api.base_api import EntityBaseApi
    from cytomine.api.client import Cytomine

_LOGGER = logging.getLogger(__name__)


def identifier_of(value: Any) -> Any:
    """Return the identifier of `value` if it is an entity, `value` itself otherwise."""
    if isinstance(value, BaseEntity):
        return value.id
    return value


class BaseEntity(BaseModel):
    """
    Base class for all entities of the Cytomine API.

    An entity is a fixed set of fields (snake_case in Python, camelCase on the wire)
    plus the class-level metadata needed to address it on the server:

    - ``callback_identifier``: key under which the server nests the entity in
      the responses of write requests (e.g. ``'imageinstance'``);
    - ``uri_strategy``: how the entity URIs are derived (see :mod:`cytomine.api.uri`);
    - ``backend_class``: fully qualified class name of the entity on the server,
      used to attach files, properties and descriptions to it;
    - ``disallowed_operations``: operations the server does not support for this type.

    Fields unknown to the model are kept as extra attributes.

    An entity is either *new* (no identifier) or *persisted*. The network
    operations (:meth:`fetch`, :meth:`save`, :meth:`update`, :meth:`delete`) use the
    session the entity was obtained from, or the one given explicitly, or the
    default session.
    """

    model_config = ConfigDict(extra='allow', alias_generator=to_camel, populate_by_name=True)

    callback_identifier: ClassVar[str] = ''
    uri_strategy: ClassVar[UriStrategy] = ResourceUri('')
    backend_class: ClassVar[str | None] = None
    disallowed_operations: ClassVar[frozenset[str]] = frozenset()

    id: int | None = None
    created: str | None = None
    updated: str | None = None
    deleted: str | None = None
    class_name: str | None = Field(default=None, alias='class')

    _session: Any = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        if self.__pydantic_extra__:
            _LOGGER.debug(f"Unknown fields found in {self.__class__.__name__} "
                          f"fields: {self.__pydantic_extra__.keys()}. ")

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}"

    # ------------------------------------------------------------------
    # Identity and URI
    # ------------------------------------------------------------------

    def is_new(self) -> bool:
        """Whether the entity has no persisted identity."""
        return self.id is None or self.id == 0

    @property
    def uri(self) -> str:
        """URI of the entity, relative to the API root."""
        return self.uri_strategy.instance_uri(self)

    @classmethod
    def from_key(cls, *key: Any) -> Self:
        """Build an unfetched instance from the values of its key fields.

        Entities given as key values are replaced by their identifier.
        """
        fields = cls.uri_strategy.key_fields
        if len(key) != len(fields):
            raise UsageError(f"{cls.__name__} is identified by {', '.join(fields)}; "
                             f"{len(key)} value(s) given.")
        return cls(**{field: identifier_of(value) for field, value in zip(fields, key)})

    # ------------------------------------------------------------------
    # Decode / encode
    # ------------------------------------------------------------------

    @classmethod
    def _unwrap(cls, data: dict) -> dict:
        """Return the flat attribute object, unwrapping the callback key if present."""
        nested = data.get(cls.callback_identifier) if cls.callback_identifier else None
        if isinstance(nested, dict):
            return nested
        return data

    @classmethod
    def _decode(cls, data: Any) -> Self:
        if not isinstance(data, dict):
            raise InvalidResponseError(f"Expected an object for {cls.__name__}, got {type(data).__name__}.")
        data = cls._unwrap(data)
        missing = []
        for field in cls.uri_strategy.key_fields:
            alias = cls.model_fields[field].alias or field
            if data.get(alias) is None and data.get(field) is None:
                missing.append(field)
        if missing:
            raise InvalidResponseError(f"{cls.__name__} response is missing {', '.join(missing)}.")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(f"Invalid {cls.__name__} response: {e}") from e

    @classmethod
    def from_response(cls, data: Any) -> Self:
        """Decode a server response (flat or nested under the callback identifier)."""
        return cls._decode(data)

    def populate(self, data: Any) -> Self:
        """Overwrite all the attributes with the ones of a server response.

        The response is fully decoded before any attribute is modified.
        """
        fresh = self._decode(data)
        for name in type(self).model_fields:
            setattr(self, name, getattr(fresh, name))
        self.__pydantic_extra__ = dict(fresh.__pydantic_extra__ or {})
        return self

    def to_payload(self) -> dict[str, Any]:
        """Wire representation of the entity, as sent on creation and update."""
        return self.model_dump(mode='json', by_alias=True)

    def asdict(self) -> dict[str, Any]:
        """Convert the entity to a dictionary, including unknown fields."""
        return self.model_dump()

    def asjson(self) -> str:
        """Convert the entity to a JSON string, including unknown fields."""
        return self.model_dump_json(by_alias=True)

    # ------------------------------------------------------------------
    # Network operations
    # ------------------------------------------------------------------

    @classmethod
    def _get_api(cls, session: Cytomine | None = None) -> EntityBaseApi[Self]:
        if session is None:
            from cytomine.api.client import Cytomine
            session = Cytomine.get_default()
        return session.api_for(cls)

    def _api(self, session: Cytomine | None = None) -> EntityBaseApi[Self]:
        return self._get_api(session or self._session)

    def fetch(self, session: Cytomine | None = None) -> Self:
        """Retrieve the server state of the entity and overwrite the local attributes."""
        return self._api(session).fetch(self)

    def save(self, session: Cytomine | None = None) -> Self:
        """Create the entity if it is new, update it otherwise."""
        return self._api(session).save(self)

    def update(self, session: Cytomine | None = None) -> Self:
        """Send the current attributes of a persisted entity to the server."""
        return self._api(session).update(self)

    def delete(self, session: Cytomine | None = None) -> None:
        """Delete the entity on the server. The local instance is left untouched."""
        self._api(session).delete(self)

    @classmethod
    def retrieve(cls, *key: Any, session: Cytomine | None = None) -> Self:
        """Fetch an entity from its key (its identifier for most entity types)."""
        return cls._get_api(session).get_by_key(*key)

    @classmethod
    def remove(cls, *key: Any, session: Cytomine | None = None) -> None:
        """Delete an entity from its key (its identifier for most entity types)."""
        cls._get_api(session).delete_by_key(*key)


class DomainEntity(BaseEntity):
    """Entity attached to another entity (the *domain* object), such as a file or a property.

    The domain object can be given as first positional argument; it sets
    ``domain_class_name`` and ``domain_ident``.
    """

    domain_class_name: str | None = None
    domain_ident: int | None = None

    def __init__(self, domain: BaseEntity | None = None, /, **data: Any) -> None:
        if domain is not None:
            class_name = domain.class_name or domain.backend_class
            if class_name is None:
                raise UsageError(f"Cannot attach to {type(domain).__name__}: unknown backend class.")
            data.setdefault('domain_class_name', class_name)
            data.setdefault('domain_ident', domain.id)
        super().__init__(**data)

    @classmethod
    def from_key(cls, *key: Any) -> Self:
        """Build an unfetched instance from its identifier (if any) and its domain object."""
        fields = cls.uri_strategy.key_fields
        if 'id' in fields:
            if len(key) != 2 or not isinstance(key[1], BaseEntity):
                raise UsageError(f"{cls.__name__} is identified by its ID and its domain object.")
            return cls(key[1], id=key[0])
        if len(key) != 1 or not isinstance(key[0], BaseEntity):
            raise UsageError(f"{cls.__name__} is identified by its domain object.")
        return cls(key[0])
