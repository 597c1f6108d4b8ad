from typing import TYPE_CHECKING
import httpx
from cytomine.api.base_api import ApiConfig, EntityBaseApi
from cytomine.entities.user import User

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine


class UsersApi(EntityBaseApi[User]):
    """API handler for user-related endpoints."""

    def __init__(self,
                 config: ApiConfig,
                 client: httpx.Client | None = None,
                 session: 'Cytomine | None' = None) -> None:
        super().__init__(config, User, client, session)

    def fetch_current(self) -> User:
        """Get the user authenticated by the session."""
        response = self._make_request('GET', 'user/current.json')
        return self._init_entity_obj(response.json())
