"""URI strategies used to address entities on the Cytomine API.

Every entity kind declares one strategy. A strategy is a pure function of the
entity type, its identity and, for nested or association entities, its parent
identifiers. It never talks to the server.

The produced paths are relative to the API root, for instance
``project/12.json`` or ``annotation/5/term/8.json``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any
from cytomine.exceptions import UsageError

if TYPE_CHECKING:
    from cytomine.entities.base_entity import BaseEntity


def _is_set(value: Any) -> bool:
    """Whether an identifier is usable: ``None`` and ``0`` both mean "not created yet"."""
    return value is not None and value != 0


class UriStrategy:
    """Base class of the URI strategies.

    Attributes:
        resource: Name of the resource in the API paths (e.g. ``'project'``).
        key_fields: Names of the entity fields identifying one instance.
    """
    resource: str
    key_fields: tuple[str, ...] = ('id',)

    def has_key(self, entity: BaseEntity) -> bool:
        return all(_is_set(getattr(entity, field, None)) for field in self.key_fields)

    def require_key(self, entity: BaseEntity, action: str) -> None:
        missing = [field for field in self.key_fields if not _is_set(getattr(entity, field, None))]
        if missing:
            raise UsageError(f"Cannot {action} {type(entity).__name__} with no {', '.join(missing)}.")

    def instance_uri(self, entity: BaseEntity) -> str:
        raise NotImplementedError

    def create_uri(self, entity: BaseEntity) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resource!r})"


class ResourceUri(UriStrategy):
    """``{resource}.json`` and ``{resource}/{id}.json``."""

    def __init__(self, resource: str):
        self.resource = resource

    def instance_uri(self, entity: BaseEntity) -> str:
        self.require_key(entity, 'construct URI of')
        return f"{self.resource}/{entity.id}.json"

    def create_uri(self, entity: BaseEntity) -> str:
        return f"{self.resource}.json"


class NestedUri(UriStrategy):
    """Sub-resource owned by a parent: ``{parent}/{parent_id}/{resource}/{id}.json``."""

    def __init__(self, parent_resource: str, parent_field: str, resource: str):
        self.parent_resource = parent_resource
        self.parent_field = parent_field
        self.resource = resource
        self.key_fields = ('id', parent_field)

    def _parent_path(self, entity: BaseEntity) -> str:
        parent_id = getattr(entity, self.parent_field, None)
        if not _is_set(parent_id):
            raise UsageError(f"Impossible to construct {type(entity).__name__} URI with no {self.parent_field} ID.")
        return f"{self.parent_resource}/{parent_id}/{self.resource}"

    def instance_uri(self, entity: BaseEntity) -> str:
        path = self._parent_path(entity)
        self.require_key(entity, 'construct URI of')
        return f"{path}/{entity.id}.json"

    def create_uri(self, entity: BaseEntity) -> str:
        return f"{self._parent_path(entity)}.json"


class AssociationUri(UriStrategy):
    """Composite-key entity addressed by a pair of foreign keys: ``{a}/{id_a}/{b}/{id_b}.json``.

    Args:
        resource_a: Resource name of the first key (e.g. ``'annotation'``).
        field_a: Entity field holding the first key.
        resource_b: Resource name of the second key (e.g. ``'term'``).
        field_b: Entity field holding the second key.
        create_suffix: When given, creation posts to ``{a}/{id_a}/{create_suffix}.json``
            instead of the pair URI.
    """

    def __init__(self,
                 resource_a: str,
                 field_a: str,
                 resource_b: str,
                 field_b: str,
                 create_suffix: str | None = None):
        self.resource = f"{resource_a}{resource_b}"
        self.resource_a = resource_a
        self.field_a = field_a
        self.resource_b = resource_b
        self.field_b = field_b
        self.create_suffix = create_suffix
        self.key_fields = (field_a, field_b)

    def instance_uri(self, entity: BaseEntity) -> str:
        id_a = getattr(entity, self.field_a, None)
        id_b = getattr(entity, self.field_b, None)
        if not _is_set(id_a) or not _is_set(id_b):
            raise UsageError(f"Impossible to construct {type(entity).__name__} URI "
                             f"with no {self.field_a} ID or {self.field_b} ID.")
        return f"{self.resource_a}/{id_a}/{self.resource_b}/{id_b}.json"

    def create_uri(self, entity: BaseEntity) -> str:
        if self.create_suffix is None:
            return self.instance_uri(entity)
        id_a = getattr(entity, self.field_a, None)
        if not _is_set(id_a):
            raise UsageError(f"Impossible to construct {type(entity).__name__} URI with no {self.field_a} ID.")
        return f"{self.resource_a}/{id_a}/{self.create_suffix}.json"


class DomainUri(UriStrategy):
    """Resource attached to an arbitrary domain object (project, image, annotation...).

    The domain object is identified by its backend class name and its identifier.

    Args:
        resource: Name of the resource (e.g. ``'property'``).
        nested_instance: If True, instances live under the domain
            (``domain/{class}/{ident}/{resource}/{id}.json``). If False, instances are
            addressed at the API root (``{resource}/{id}.json``).
        singleton: If True, there is a single instance per domain object and its URI
            is ``domain/{class}/{ident}/{resource}.json``.
    """
    domain_fields = ('domain_class_name', 'domain_ident')

    def __init__(self, resource: str, nested_instance: bool = True, singleton: bool = False):
        self.resource = resource
        self.nested_instance = nested_instance
        self.singleton = singleton
        self.key_fields = self.domain_fields if singleton else ('id',) + self.domain_fields

    def domain_path(self, entity: BaseEntity) -> str:
        class_name = getattr(entity, 'domain_class_name', None)
        ident = getattr(entity, 'domain_ident', None)
        if class_name is None or not _is_set(ident):
            raise UsageError(f"Impossible to construct {type(entity).__name__} URI with no associated domain object.")
        return f"domain/{class_name}/{ident}"

    def instance_uri(self, entity: BaseEntity) -> str:
        domain = self.domain_path(entity)
        if self.singleton:
            return f"{domain}/{self.resource}.json"
        self.require_key(entity, 'construct URI of')
        if self.nested_instance:
            return f"{domain}/{self.resource}/{entity.id}.json"
        return f"{self.resource}/{entity.id}.json"

    def create_uri(self, entity: BaseEntity) -> str:
        domain = self.domain_path(entity)
        if self.nested_instance or self.singleton:
            return f"{domain}/{self.resource}.json"
        return f"{self.resource}.json"
