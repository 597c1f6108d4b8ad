from __future__ import annotations

from cytomine.api.uri import ResourceUri
from .base_entity import BaseEntity
from .base_collection import Collection


class Ontology(BaseEntity):
    """A tree of terms used to label the annotations of projects."""

    callback_identifier = 'ontology'
    uri_strategy = ResourceUri('ontology')
    backend_class = 'be.cytomine.ontology.Ontology'

    name: str | None = None
    user: int | None = None
    title: str | None = None
    attr: dict | None = None
    data: list | None = None
    is_folder: bool | None = None
    hide_checkbox: bool | None = None
    state: str | None = None
    project_name: str | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.name}"


class OntologyCollection(Collection[Ontology]):
    model = Ontology
    resource_name = 'ontology'


class Term(BaseEntity):
    """A label of an ontology, optionally child of another term."""

    callback_identifier = 'term'
    uri_strategy = ResourceUri('term')
    backend_class = 'be.cytomine.ontology.Term'

    name: str | None = None
    comment: str | None = None
    ontology: int | None = None
    color: str | None = None
    parent: int | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.name}"


class TermCollection(Collection[Term]):
    """Terms, possibly restricted to one ontology or to the ontology of one project.

    Example:
        >>> TermCollection(filter_key='ontology', filter_value=ontology).fetch()
    """
    model = Term
    resource_name = 'term'
    allowed_filters = ('ontology', 'project')
