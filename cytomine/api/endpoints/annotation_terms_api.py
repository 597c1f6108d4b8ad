from typing import Any, TYPE_CHECKING, TypeVar
import httpx
from cytomine.api.base_api import ApiConfig, EntityBaseApi
from cytomine.entities.association import AbstractAnnotationTerm
from cytomine.exceptions import UsageError

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine

AT = TypeVar('AT', bound=AbstractAnnotationTerm)


class AnnotationTermsApi(EntityBaseApi[AT]):
    """API handler for the terms associated with annotations, by users or by jobs."""

    def __init__(self,
                 config: ApiConfig,
                 entity_class: type[AT],
                 client: httpx.Client | None = None,
                 session: 'Cytomine | None' = None) -> None:
        super().__init__(config, entity_class, client, session)

    def save_and_clear_previous(self, annotation_term: AT, clear_for_all_users: bool = False) -> AT:
        """Add `annotation_term` and remove all the other terms of its annotation.

        Args:
            annotation_term: The association to create.
            clear_for_all_users: Whether the terms of all users are removed, or only
                the ones of the current user.

        Raises:
            UsageError: If the annotation or the term is not set.
        """
        if annotation_term.annotation is None or annotation_term.term is None:
            raise UsageError("Cannot add annotation term with no annotation ID or term ID.")
        endpoint = f"annotation/{annotation_term.annotation}/term/{annotation_term.term}/clearBefore.json"
        response = self._make_entity_request('POST', annotation_term, endpoint,
                                             json={'clearForAll': clear_for_all_users})
        annotation_term.populate(response.json())
        return self._bind(annotation_term)
