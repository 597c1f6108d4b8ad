"""
Python client for the Cytomine API.
"""

import importlib.metadata
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .api.client import Cytomine
    from .entities import *  # noqa: F401,F403
    from .exceptions import (CytomineException, UsageError, MissingFilterError, SessionNotInitializedError,
                             OperationNotAllowedError, ResourceNotFoundError, EntityAlreadyExistsError,
                             InvalidResponseError)
else:
    import lazy_loader as lazy

    __getattr__, __dir__, __all__ = lazy.attach(
        __name__,
        submodules=['entities', 'exceptions', 'configs'],
        submod_attrs={
            "api.client": ["Cytomine"],
            "entities": [
                "AbstractImage", "AbstractImageCollection",
                "AlgoAnnotationTerm", "AlgoAnnotationTermCollection",
                "Annotation", "AnnotationCollection", "AnnotationTerm", "AnnotationTermCollection",
                "AnnotationType",
                "AttachedFile", "AttachedFileCollection",
                "Description",
                "Discipline", "DisciplineCollection",
                "Group", "GroupCollection",
                "ImageInstance", "ImageInstanceCollection",
                "Job", "JobCollection", "JobData", "JobDataCollection", "JobParameter",
                "JobParameterCollection", "JobStatus", "JobTemplate", "JobTemplateAnnotation",
                "JobTemplateAnnotationCollection", "JobTemplateCollection",
                "Ontology", "OntologyCollection",
                "Project", "ProjectCollection", "ProjectDefaultLayer", "ProjectDefaultLayerCollection",
                "ProjectRepresentative", "ProjectRepresentativeCollection",
                "Property", "PropertyCollection",
                "Role", "RoleCollection",
                "Software", "SoftwareCollection", "SoftwareParameter", "SoftwareParameterCollection",
                "SoftwareProject", "SoftwareProjectCollection",
                "Storage", "StorageCollection",
                "Term", "TermCollection",
                "UploadedFile", "UploadedFileCollection", "UploadedFileStatus",
                "User", "UserCollection", "UserGroup", "UserGroupCollection", "UserJob", "UserJobCollection",
                "UserPosition", "UserPositionCollection", "UserRole", "UserRoleCollection",
            ],
            "exceptions": [
                "CytomineException", "UsageError", "MissingFilterError", "SessionNotInitializedError",
                "OperationNotAllowedError", "ResourceNotFoundError", "EntityAlreadyExistsError",
                "InvalidResponseError",
            ],
        },
    )

__version__ = importlib.metadata.version("cytomine-client")
