from __future__ import annotations

from enum import IntEnum
from cytomine.api.uri import ResourceUri
from .base_entity import BaseEntity
from .base_collection import Collection


class Storage(BaseEntity):
    """A storage space of a user, holding uploaded files."""

    callback_identifier = 'storage'
    uri_strategy = ResourceUri('storage')
    backend_class = 'be.cytomine.image.server.Storage'

    name: str | None = None
    base_path: str | None = None
    user: int | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.name}"


class StorageCollection(Collection[Storage]):
    model = Storage
    resource_name = 'storage'


class UploadedFileStatus(IntEnum):
    """Processing states of an uploaded file, with the codes used by the server."""
    UPLOADED = 0
    CONVERTED = 1
    DEPLOYED = 2
    ERROR_FORMAT = 3
    ERROR_CONVERT = 4
    UNCOMPRESSED = 5
    TO_DEPLOY = 6
    TO_CONVERT = 7
    ERROR_CONVERSION = 8
    ERROR_DEPLOYMENT = 9


class UploadedFile(BaseEntity):
    """A file uploaded to a storage, before or after its conversion into images."""

    callback_identifier = 'uploadedfile'
    uri_strategy = ResourceUri('uploadedfile')
    backend_class = 'be.cytomine.image.UploadedFile'

    user: int | None = None
    storage: int | None = None
    parent: int | None = None
    projects: list[int] | None = None
    image: int | None = None

    filename: str | None = None
    original_filename: str | None = None
    ext: str | None = None
    content_type: str | None = None
    path: str | None = None
    size: int | None = None
    status: UploadedFileStatus | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.original_filename}"


class UploadedFileCollection(Collection[UploadedFile]):
    model = UploadedFile
    resource_name = 'uploadedfile'
