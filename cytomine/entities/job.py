from __future__ import annotations

from enum import IntEnum
from typing import Any
from cytomine.api.uri import ResourceUri
from .base_entity import BaseEntity
from .base_collection import Collection, SearchCollection


class JobStatus(IntEnum):
    """Lifecycle states of a job, with the codes used by the server."""
    NOTLAUNCH = 0
    INQUEUE = 1
    RUNNING = 2
    SUCCESS = 3
    FAILED = 4
    INDETERMINATE = 5
    WAIT = 6
    PREVIEWED = 7
    KILLED = 8

    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCESS, JobStatus.FAILED, JobStatus.KILLED)


class Job(BaseEntity):
    """One execution of a software in a project."""

    callback_identifier = 'job'
    uri_strategy = ResourceUri('job')
    backend_class = 'be.cytomine.processing.Job'

    software: int | None = None
    software_name: str | None = None
    project: int | None = None
    user_job: int | None = None
    username: str | None = None
    number: int | None = None

    status: JobStatus | None = None
    progress: int | None = None
    status_comment: str | None = None
    rate: float | None = None
    data_deleted: bool | None = None
    favorite: bool | None = None
    job_parameters: list[dict[str, Any]] | None = None

    def __str__(self) -> str:
        status = self.status.name if self.status is not None else None
        return f"[{self.callback_identifier}] {self.id}: {self.software_name} #{self.number} ({status})"


class JobCollection(SearchCollection[Job]):
    """Jobs, optionally restricted to a software and/or a project."""
    model = Job
    resource_name = 'job'
    search_params = {
        'software': 'software',
        'project': 'project',
        'light': 'light',
    }


class JobParameter(BaseEntity):
    """Value of a software parameter for one job."""

    callback_identifier = 'jobparameter'
    uri_strategy = ResourceUri('jobparameter')

    job: int | None = None
    software_parameter: int | None = None
    value: str | None = None
    name: str | None = None
    human_name: str | None = None
    type: str | None = None
    index: int | None = None


class JobParameterCollection(Collection[JobParameter]):
    model = JobParameter
    resource_name = 'parameter'
    allowed_filters = ('job',)
    filter_required = True


class JobData(BaseEntity):
    """A file produced (or consumed) by a job."""

    callback_identifier = 'jobdata'
    uri_strategy = ResourceUri('jobdata')

    job: int | None = None
    key: str | None = None
    filename: str | None = None
    size: int | None = None
    content_type: str | None = None


class JobDataCollection(Collection[JobData]):
    model = JobData
    resource_name = 'jobdata'
    allowed_filters = ('job',)
    filter_required = True


class JobTemplate(BaseEntity):
    """A preconfigured job of a project, applied to annotations."""

    callback_identifier = 'jobtemplate'
    uri_strategy = ResourceUri('jobtemplate')

    name: str | None = None
    project: int | None = None
    software: int | None = None
    software_name: str | None = None
    job_parameters: list[dict[str, Any]] | None = None


class JobTemplateCollection(Collection[JobTemplate]):
    model = JobTemplate
    resource_name = 'jobtemplate'
    allowed_filters = ('project',)
    filter_required = True


class JobTemplateAnnotation(BaseEntity):
    """Application of a job template to an annotation."""

    callback_identifier = 'jobtemplateannotation'
    uri_strategy = ResourceUri('jobtemplateannotation')

    job_template: int | None = None
    annotation_class: str | None = None
    annotation_ident: int | None = None
    job: Any = None


class JobTemplateAnnotationCollection(SearchCollection[JobTemplateAnnotation]):
    model = JobTemplateAnnotation
    resource_name = 'jobtemplateannotation'
    search_params = {
        'job_template': 'jobtemplate',
        'annotation': 'annotation',
    }
    required_params = ('job_template',)


class UserJob(BaseEntity):
    """The user account a job acts as when it creates annotations."""

    callback_identifier = 'userjob'
    uri_strategy = ResourceUri('userjob')

    username: str | None = None
    job: int | None = None
    user: int | None = None
    software: int | None = None
    software_name: str | None = None
    publickey: str | None = None
    privatekey: str | None = None
    rate: float | None = None
    algo: bool | None = None


class UserJobCollection(Collection[UserJob]):
    model = UserJob
    resource_name = 'userjob'
    allowed_filters = ('project',)
