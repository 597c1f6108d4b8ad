from __future__ import annotations

from typing import Any, TYPE_CHECKING
from cytomine.api.uri import ResourceUri
from .base_entity import BaseEntity
from .base_collection import Collection

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine


class AbstractImage(BaseEntity):
    """An image file known by the server, independently of any project."""

    callback_identifier = 'abstractimage'
    uri_strategy = ResourceUri('abstractimage')
    backend_class = 'be.cytomine.image.AbstractImage'

    filename: str | None = None
    original_filename: str | None = None
    path: str | None = None
    mime: str | None = None
    user: int | None = None

    width: int | None = None
    height: int | None = None
    depth: int | None = None
    resolution: float | None = None
    magnification: int | None = None

    thumb: str | None = None
    macro_url: str | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.original_filename or self.filename}"


class AbstractImageCollection(Collection[AbstractImage]):
    model = AbstractImage
    resource_name = 'abstractimage'


class ImageInstance(BaseEntity):
    """An abstract image added to a project."""

    callback_identifier = 'imageinstance'
    uri_strategy = ResourceUri('imageinstance')
    backend_class = 'be.cytomine.image.ImageInstance'

    base_image: int | None = None
    project: int | None = None
    user: int | None = None

    filename: str | None = None
    original_filename: str | None = None
    extension: str | None = None
    instance_filename: str | None = None
    path: str | None = None
    full_path: str | None = None

    mime: str | None = None
    sample: int | None = None

    width: int | None = None
    height: int | None = None
    resolution: float | None = None
    magnification: int | None = None
    depth: int | None = None

    thumb: str | None = None
    preview: str | None = None
    macro: str | None = None

    number_of_annotations: int | None = None
    number_of_job_annotations: int | None = None
    number_of_reviewed_annotations: int | None = None

    review_start: str | None = None
    review_stop: str | None = None
    review_user: int | None = None
    reviewed: bool | None = None
    in_review: bool | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.instance_filename}"

    def fetch_next(self, session: Cytomine | None = None) -> ImageInstance | None:
        """Fetch the next image instance of the project (first image created before), if any."""
        return self._api(session).fetch_next(self)

    def fetch_previous(self, session: Cytomine | None = None) -> ImageInstance | None:
        """Fetch the previous image instance of the project (first image created after), if any."""
        return self._api(session).fetch_previous(self)

    def record_consultation(self, mode: str = 'view', session: Cytomine | None = None) -> None:
        """Record a consultation of the image by the current user."""
        self._api(session).record_consultation(self, mode)

    def fetch_layers_in_other_projects(self,
                                       project: int | None = None,
                                       session: Cytomine | None = None) -> list[dict[str, Any]]:
        """Fetch the annotation layers of the same abstract image in other projects.

        Args:
            project: Identifier of the project to search. If not set, all projects are considered.

        Returns:
            The layers, as dictionaries with the keys ``image``, ``project``, ``projectName``,
            ``user``, ``username``, ``firstname``, ``lastname`` and ``admin``.
        """
        return self._api(session).fetch_layers_in_other_projects(self, project)

    def copy_metadata(self, id_source: int, session: Cytomine | None = None) -> None:
        """Copy the properties and description of another image instance to this one."""
        self._api(session).copy_metadata(self, id_source)

    def copy_data(self,
                  layers: list[dict[str, int]],
                  give_me: bool = False,
                  session: Cytomine | None = None) -> None:
        """Copy to this image all the annotations of the given layers.

        Args:
            layers: Layers to copy, as dictionaries with the keys ``image`` and ``user``.
            give_me: If True, all copied annotations are added to the layer of the current user.
        """
        self._api(session).copy_data(self, layers, give_me)

    def review(self, session: Cytomine | None = None) -> ImageInstance:
        """Start the review of the image."""
        return self._api(session).review(self)

    def stop_review(self, cancel: bool = False, session: Cytomine | None = None) -> ImageInstance:
        """Stop the review of the image.

        Args:
            cancel: If True, cancel the review (image under review) or the validation
                (validated image). If False, stop the review and validate the image.
        """
        return self._api(session).stop_review(self, cancel)


class ImageInstanceCollection(Collection[ImageInstance]):
    model = ImageInstance
    resource_name = 'imageinstance'
    allowed_filters = ('project', 'user')
