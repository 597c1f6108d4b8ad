import logging
import os
from pathlib import Path
from typing import IO, Any, TYPE_CHECKING
import httpx
from cytomine.api.base_api import ApiConfig, EntityBaseApi
from cytomine.entities.domain import AttachedFile
from cytomine.exceptions import EntityAlreadyExistsError, UsageError

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine

_LOGGER = logging.getLogger(__name__)


def _read_content(file: str | Path | IO | bytes) -> IO | bytes:
    if isinstance(file, (str, Path)):
        with open(file, 'rb') as f:
            return f.read()
    return file


class AttachedFilesApi(EntityBaseApi[AttachedFile]):
    """API handler for files attached to domain objects.

    Attached files are created from a multipart request carrying the content of the file.
    """

    def __init__(self,
                 config: ApiConfig,
                 client: httpx.Client | None = None,
                 session: 'Cytomine | None' = None) -> None:
        super().__init__(config, AttachedFile, client, session)

    @staticmethod
    def _filename_of(attached_file: AttachedFile) -> str:
        if attached_file.filename:
            return attached_file.filename
        file = attached_file.file
        if isinstance(file, (str, Path)):
            return os.path.basename(file)
        name = getattr(file, 'name', None)
        if isinstance(name, str):
            return os.path.basename(name)
        return 'file'

    def create(self, entity: AttachedFile) -> AttachedFile:
        """Upload the content of `entity` and repopulate it from the response.

        Raises:
            UsageError: If no file content or no domain object is set.
            EntityAlreadyExistsError: If the server reports a conflict.
            httpx.HTTPStatusError: If the upload fails.
        """
        self._check_operation('save')
        endpoint = entity.uri_strategy.create_uri(entity)
        if entity.file is None:
            raise UsageError("Cannot save an attached file with no file content.")

        filename = self._filename_of(entity)
        form = {
            'domainClassName': entity.domain_class_name,
            'domainIdent': str(entity.domain_ident),
            'filename': filename,
        }
        content = _read_content(entity.file)
        try:
            response = self._make_request('POST', endpoint,
                                          data=form,
                                          files={'files[]': (filename, content)})
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 409:
                raise EntityAlreadyExistsError(self.resource_name, self._key_params(entity)) from e
            raise

        entity.populate(response.json())
        _LOGGER.debug(f"Uploaded {entity}")
        return self._bind(entity)
