"""API endpoint handlers."""

from .annotation_terms_api import AnnotationTermsApi
from .attached_files_api import AttachedFilesApi
from .images_api import ImageInstancesApi
from .projects_api import ProjectsApi
from .users_api import UsersApi

__all__ = [
    'AnnotationTermsApi',
    'AttachedFilesApi',
    'ImageInstancesApi',
    'ProjectsApi',
    'UsersApi',
]
