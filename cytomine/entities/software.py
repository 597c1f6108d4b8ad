from __future__ import annotations

from pydantic import Field
from cytomine.api.uri import ResourceUri
from .base_entity import BaseEntity
from .base_collection import Collection


class Software(BaseEntity):
    """An analysis algorithm that can be run as jobs."""

    callback_identifier = 'software'
    uri_strategy = ResourceUri('software')
    backend_class = 'be.cytomine.processing.Software'

    name: str | None = None
    software_version: str | None = None
    service_name: str | None = None
    result_name: str | None = None
    description: str | None = None
    execute_command: str | None = None
    pull_request: str | None = None
    deprecated: bool | None = None
    executable: bool | None = None

    number_of_job: int | None = None
    number_of_not_launch: int | None = None
    number_of_in_queue: int | None = None
    number_of_running: int | None = None
    number_of_success: int | None = None
    number_of_failed: int | None = None
    number_of_indeterminate: int | None = None
    number_of_wait: int | None = None
    number_of_killed: int | None = None

    def __str__(self) -> str:
        return f"[{self.callback_identifier}] {self.id}: {self.name}"


class SoftwareCollection(Collection[Software]):
    model = Software
    resource_name = 'software'
    allowed_filters = ('project',)


class SoftwareParameter(BaseEntity):
    """An input parameter declared by a software."""

    callback_identifier = 'softwareparameter'
    uri_strategy = ResourceUri('softwareparameter')

    name: str | None = None
    type: str | None = None
    default_param_value: str | None = None
    required: bool | None = None
    software: int | None = None
    index: int | None = None
    set_by_server: bool | None = None
    values_uri: str | None = Field(default=None, alias='uri')
    uri_sort_attribut: str | None = None
    uri_print_attribut: str | None = None
    human_name: str | None = None
    value_key: str | None = None
    command_line_flag: str | None = None


class SoftwareParameterCollection(Collection[SoftwareParameter]):
    model = SoftwareParameter
    resource_name = 'parameter'
    allowed_filters = ('software',)
    filter_required = True


class SoftwareProject(BaseEntity):
    """Availability of a software in a project."""

    callback_identifier = 'softwareproject'
    uri_strategy = ResourceUri('softwareproject')

    software: int | None = None
    project: int | None = None
    name: str | None = None


class SoftwareProjectCollection(Collection[SoftwareProject]):
    model = SoftwareProject
    resource_name = 'softwareproject'
    allowed_filters = ('project',)
    filter_required = True
