import logging
from typing import Any, TYPE_CHECKING
import httpx
from cytomine.api.base_api import ApiConfig, EntityBaseApi
from cytomine.entities.base_entity import identifier_of
from cytomine.entities.image import ImageInstance
from cytomine.exceptions import UsageError

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine

_LOGGER = logging.getLogger(__name__)


class ImageInstancesApi(EntityBaseApi[ImageInstance]):
    """API handler for image instance endpoints (navigation, review, copies)."""

    def __init__(self,
                 config: ApiConfig,
                 client: httpx.Client | None = None,
                 session: 'Cytomine | None' = None) -> None:
        super().__init__(config, ImageInstance, client, session)

    def _image_endpoint(self, image: ImageInstance, action: str, path: str) -> str:
        self._require_persisted(image, action)
        return f"{image.uri_strategy.resource}/{image.id}/{path}"

    def _fetch_neighbour(self, image: ImageInstance, path: str) -> ImageInstance | None:
        endpoint = self._image_endpoint(image, 'fetch the neighbour of', path)
        data = self._make_entity_request('GET', image, endpoint).json()
        if not data or ImageInstance._unwrap(data).get('id') is None:
            return None
        return self._init_entity_obj(data)

    def fetch_next(self, image: ImageInstance) -> ImageInstance | None:
        """Get the next image of the project (first image created before `image`).

        Returns:
            The next image, or None if `image` is the last one.
        """
        return self._fetch_neighbour(image, 'next.json')

    def fetch_previous(self, image: ImageInstance) -> ImageInstance | None:
        """Get the previous image of the project (first image created after `image`).

        Returns:
            The previous image, or None if `image` is the first one.
        """
        return self._fetch_neighbour(image, 'previous.json')

    def record_consultation(self, image: ImageInstance, mode: str = 'view') -> None:
        endpoint = self._image_endpoint(image, 'record consultation of', 'consultation.json')
        self._make_entity_request('POST', image, endpoint, json={'image': image.id, 'mode': mode})

    def fetch_layers_in_other_projects(self, image: ImageInstance, project: Any = None) -> list[dict[str, Any]]:
        endpoint = self._image_endpoint(image, 'fetch the layers of', 'sameimagedata.json')
        params = {'project': identifier_of(project)} if project is not None else None
        response = self._make_entity_request('GET', image, endpoint, params=params)
        items, _ = self._convert_array_response(response.json())
        return items

    def copy_metadata(self, image: ImageInstance, id_source: Any) -> None:
        """Copy the properties and the description of the image `id_source` to `image`.

        Raises:
            UsageError: If `image` has no ID or no source is given.
        """
        endpoint = self._image_endpoint(image, 'copy metadata to', 'copymetadata.json')
        if id_source is None:
            raise UsageError("The ID of the source image was not provided.")
        self._make_entity_request('POST', image, endpoint, params={'based': identifier_of(id_source)})
        _LOGGER.debug(f"Copied metadata of image {identifier_of(id_source)} to {image}")

    def copy_data(self, image: ImageInstance, layers: list[dict[str, Any]], give_me: bool = False) -> None:
        """Copy to `image` all the annotations of `layers`.

        Args:
            image: The destination image instance.
            layers: Layers to copy, each one given by an ``image`` and a ``user``.
            give_me: If True, the copies are added to the layer of the current user.

        Raises:
            UsageError: If `image` has no ID or no layer is given.
        """
        endpoint = self._image_endpoint(image, 'copy data to', 'copyimagedata.json')
        if not layers:
            raise UsageError("At least one layer (characterized by image/user object) must be provided.")
        formatted = ','.join(f"{identifier_of(layer['image'])}_{identifier_of(layer['user'])}" for layer in layers)
        params = {'layers': formatted, 'giveMe': 'true' if give_me else 'false'}
        self._make_entity_request('POST', image, endpoint, params=params)

    def review(self, image: ImageInstance) -> ImageInstance:
        """Start the review of `image` and repopulate it from the response."""
        endpoint = self._image_endpoint(image, 'review', 'review.json')
        response = self._make_entity_request('PUT', image, endpoint)
        image.populate(response.json())
        return self._bind(image)

    def stop_review(self, image: ImageInstance, cancel: bool = False) -> ImageInstance:
        """Stop the review of `image` and repopulate it from the response.

        Args:
            image: The image under review (or validated).
            cancel: If True, cancel the review or the validation. Otherwise, validate the image.
        """
        endpoint = self._image_endpoint(image, 'stop the review of', 'review.json')
        response = self._make_entity_request('DELETE', image, endpoint,
                                             params={'cancel': 'true' if cancel else 'false'})
        image.populate(response.json())
        return self._bind(image)
