from __future__ import annotations

from enum import Enum
from typing import Any
from cytomine.api.uri import ResourceUri, AssociationUri
from .base_entity import BaseEntity
from .association import AbstractAnnotationTerm
from .base_collection import Collection, SearchCollection


class AnnotationType(str, Enum):
    """Kinds of annotations, as named by the server."""
    USER = 'UserAnnotation'
    ALGO = 'AlgoAnnotation'
    REVIEWED = 'ReviewedAnnotation'


class Annotation(BaseEntity):
    """A geometry drawn on an image instance, by a user or a job."""

    callback_identifier = 'annotation'
    uri_strategy = ResourceUri('annotation')
    backend_class = 'be.cytomine.ontology.UserAnnotation'

    location: str | None = None
    geometry_compression: float | None = None
    image: int | None = None
    project: int | None = None
    user: int | None = None
    term: list[int] | None = None

    area: float | None = None
    area_unit: Any = None
    perimeter: float | None = None
    perimeter_unit: Any = None
    centroid: Any = None

    reviewed: bool | None = None
    cropURL: str | None = None


class AnnotationCollection(SearchCollection[Annotation]):
    """Annotations matching search parameters. A project or an image must be given.

    Example:
        >>> AnnotationCollection(image=12, show_wkt=True).fetch()
    """
    model = Annotation
    resource_name = 'annotation'
    search_params = {
        'project': 'project',
        'image': 'image',
        'images': 'images',
        'user': 'user',
        'users': 'users',
        'term': 'term',
        'terms': 'terms',
        'job': 'job',
        'reviewed': 'reviewed',
        'include_algo': 'includeAlgo',
        'no_term': 'noTerm',
        'multiple_term': 'multipleTerm',
        'bbox': 'bbox',
        'show_wkt': 'showWKT',
        'show_term': 'showTerm',
        'show_meta': 'showMeta',
        'show_gis': 'showGIS',
    }
    required_params = ('project', 'image', 'images')


class AnnotationTerm(AbstractAnnotationTerm):
    """Term associated with an annotation by a user."""

    callback_identifier = 'annotationterm'
    uri_strategy = AssociationUri('annotation', 'annotation', 'term', 'term')


class AnnotationTermCollection(Collection[AnnotationTerm]):
    model = AnnotationTerm
    resource_name = 'term'
    allowed_filters = ('annotation',)
    filter_required = True


class AlgoAnnotationTerm(AbstractAnnotationTerm):
    """Term associated with an annotation by a job."""

    callback_identifier = 'algoannotationterm'
    uri_strategy = AssociationUri('annotation', 'annotation', 'term', 'term')

    expected_term: int | None = None
    rate: float | None = None
    user_job: int | None = None


class AlgoAnnotationTermCollection(Collection[AlgoAnnotationTerm]):
    model = AlgoAnnotationTerm
    resource_name = 'term'
    allowed_filters = ('annotation',)
    filter_required = True
