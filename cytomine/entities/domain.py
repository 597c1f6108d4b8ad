"""Entities attached to any other entity: files, descriptions and key-value properties."""
from __future__ import annotations

from typing import Any, TypeVar
from pydantic import Field
from cytomine.api.uri import DomainUri
from cytomine.exceptions import MissingFilterError, UsageError
from .base_entity import BaseEntity, DomainEntity
from .base_collection import Collection

D = TypeVar('D', bound=DomainEntity)


class AttachedFile(DomainEntity):
    """A file attached to a domain object.

    The domain object is mandatory. Attached files are created from a multipart
    request and cannot be updated nor deleted.

    Args:
        domain: The entity the file is attached to.
        filename: Name of the file on the server.
        file: Content of the file, as bytes, a path or a binary file object.
    """

    callback_identifier = 'attachedfile'
    uri_strategy = DomainUri('attachedfile', nested_instance=False)
    disallowed_operations = frozenset({'update', 'delete'})

    filename: str | None = None
    url: str | None = None
    file: Any = Field(default=None, exclude=True, repr=False)

    def __init__(self, domain: BaseEntity | None = None, /, **data: Any) -> None:
        if domain is None and data.get('domain_class_name') is None:
            raise UsageError("An attached file must be attached to a domain object.")
        super().__init__(domain, **data)

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.filename}"


class Description(DomainEntity):
    """The rich-text description of a domain object. There is at most one per object."""

    callback_identifier = 'description'
    uri_strategy = DomainUri('description', singleton=True)

    data: str | None = None


class Property(DomainEntity):
    """A key-value pair attached to a domain object."""

    callback_identifier = 'property'
    uri_strategy = DomainUri('property')

    key: str | None = None
    value: str | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.key}={self.value}"


class DomainCollection(Collection[D]):
    """Collection of the entities attached to one domain object.

    Args:
        domain: The entity whose attached entities are listed.
    """

    def __init__(self,
                 domain: BaseEntity | None = None,
                 max_per_page: int = 0,
                 *,
                 session: Any = None) -> None:
        super().__init__(max_per_page, session=session)
        self.domain_class_name: str | None = None
        self.domain_ident: int | None = None
        if domain is not None:
            self.set_domain(domain)

    def set_domain(self, domain: BaseEntity) -> DomainCollection[D]:
        class_name = domain.class_name or domain.backend_class
        if class_name is None or domain.is_new():
            raise UsageError(f"Cannot list the {self.resource_name} of {domain}: unknown or unsaved object.")
        self.domain_class_name = class_name
        self.domain_ident = domain.id
        return self

    def _check_filters(self) -> None:
        if self.domain_class_name is None or self.domain_ident is None:
            raise MissingFilterError(type(self).__name__, ('domain',))

    @classmethod
    def fetch_with_filter(cls,
                          key: str,
                          value: BaseEntity,
                          max_per_page: int = 0,
                          session: Any = None) -> DomainCollection[D]:
        """Fetch all the entities attached to the domain object `value`. `key` must be ``'domain'``."""
        if key != 'domain':
            raise UsageError(f"Filter '{key}' not allowed on {cls.__name__} (allowed: domain).")
        if not isinstance(value, BaseEntity):
            raise UsageError(f"{cls.__name__} must be filtered by an entity, got {value!r}.")
        return cls(value, max_per_page, session=session).fetch()

    @property
    def uri(self) -> str:
        self._check_filters()
        return f"domain/{self.domain_class_name}/{self.domain_ident}/{self.resource_name}.json"


class AttachedFileCollection(DomainCollection[AttachedFile]):
    model = AttachedFile
    resource_name = 'attachedfile'


class PropertyCollection(DomainCollection[Property]):
    model = Property
    resource_name = 'property'
