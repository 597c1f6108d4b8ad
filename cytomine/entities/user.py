from __future__ import annotations

from typing import TYPE_CHECKING
from pydantic import Field
from cytomine.api.uri import ResourceUri, AssociationUri
from .base_entity import BaseEntity
from .association import AssociationEntity
from .base_collection import Collection

if TYPE_CHECKING:
    from cytomine.api.client import Cytomine


class User(BaseEntity):
    """A human user of the server."""

    callback_identifier = 'user'
    uri_strategy = ResourceUri('user')
    backend_class = 'be.cytomine.security.User'

    username: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    email: str | None = None
    language: str | None = None
    password: str | None = Field(default=None, repr=False)
    public_key: str | None = None
    private_key: str | None = Field(default=None, repr=False)

    algo: bool | None = None
    is_developer: bool | None = None
    admin: bool | None = None
    user: bool | None = None
    guest: bool | None = None

    last_connection: str | None = None
    last_image: int | None = None
    last_image_name: str | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.username}"

    @classmethod
    def fetch_current(cls, session: Cytomine | None = None) -> User:
        """Fetch the user authenticated by the session."""
        return cls._get_api(session).fetch_current()


class UserCollection(Collection[User]):
    model = User
    resource_name = 'user'
    allowed_filters = ('project',)


class Group(BaseEntity):
    callback_identifier = 'group'
    uri_strategy = ResourceUri('group')
    backend_class = 'be.cytomine.security.Group'

    name: str | None = None


class GroupCollection(Collection[Group]):
    model = Group
    resource_name = 'group'


class UserGroup(AssociationEntity):
    """Membership of a user in a group."""

    callback_identifier = 'usergroup'
    uri_strategy = AssociationUri('user', 'user', 'group', 'group')

    user: int | None = None
    group: int | None = None


class UserGroupCollection(Collection[UserGroup]):
    model = UserGroup
    resource_name = 'group'
    allowed_filters = ('user',)
    filter_required = True


class Role(BaseEntity):
    """A security role (``ROLE_USER``, ``ROLE_ADMIN``, ...)."""

    callback_identifier = 'secrole'
    uri_strategy = ResourceUri('role')

    authority: str | None = None


class RoleCollection(Collection[Role]):
    model = Role
    resource_name = 'role'


class UserRole(AssociationEntity):
    """A role granted to a user."""

    callback_identifier = 'secusersecrole'
    uri_strategy = AssociationUri('user', 'user', 'role', 'role')

    user: int | None = None
    role: int | None = None
    authority: str | None = None


class UserRoleCollection(Collection[UserRole]):
    model = UserRole
    resource_name = 'role'
    allowed_filters = ('user',)
    filter_required = True


class UserPosition(AssociationEntity):
    """Last area of an image viewed by a user.

    Positions are only recorded (created) and read: they cannot be updated nor deleted.
    """

    callback_identifier = 'userposition'
    uri_strategy = AssociationUri('imageinstance', 'image', 'position', 'user', create_suffix='position')
    disallowed_operations = frozenset({'update', 'delete'})

    image: int | None = None
    user: int | None = None
    project: int | None = None

    top_left_x: float | None = None
    top_left_y: float | None = None
    top_right_x: float | None = None
    top_right_y: float | None = None
    bottom_left_x: float | None = None
    bottom_left_y: float | None = None
    bottom_right_x: float | None = None
    bottom_right_y: float | None = None

    x: float | None = None
    y: float | None = None
    zoom: int | None = None
    rotation: float | None = None
    broadcast: bool | None = None


class UserPositionCollection(Collection[UserPosition]):
    model = UserPosition
    resource_name = 'positions'
    allowed_filters = ('imageinstance',)
    filter_required = True
