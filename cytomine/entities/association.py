from __future__ import annotations

from typing import TYPE_CHECKING
from .base_entity import BaseEntity

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine


class AssociationEntity(BaseEntity):
    """Entity whose identity is a pair of foreign keys rather than its own identifier.

    Subclasses declare an :class:`~cytomine.api.uri.AssociationUri`. Instances are
    fetched and deleted from the two keys, either given to :meth:`retrieve` and
    :meth:`remove` or read from the two attributes. An association cannot be updated.
    """

    disallowed_operations = frozenset({'update'})


class AbstractAnnotationTerm(AssociationEntity):
    """Link between an annotation and a term, added by a user or by a job."""

    annotation: int | None = None
    term: int | None = None
    user: int | None = None

    def save_and_clear_previous(self,
                                clear_for_all_users: bool = False,
                                session: Cytomine | None = None) -> AbstractAnnotationTerm:
        """Add this annotation term and remove all the other terms of the annotation.

        Args:
            clear_for_all_users: Whether the terms added by all users should be removed,
                or only the ones of the current user.
        """
        return self._api(session).save_and_clear_previous(self, clear_for_all_users)
