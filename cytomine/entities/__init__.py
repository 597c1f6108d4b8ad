"""Cytomine entities package."""

from .base_entity import BaseEntity, DomainEntity
from .base_collection import Collection, SearchCollection
from .association import AssociationEntity, AbstractAnnotationTerm
from .annotation import (Annotation, AnnotationType, AnnotationCollection,
                         AnnotationTerm, AnnotationTermCollection,
                         AlgoAnnotationTerm, AlgoAnnotationTermCollection)
from .domain import (AttachedFile, AttachedFileCollection, Description,
                     Property, PropertyCollection)
from .image import AbstractImage, AbstractImageCollection, ImageInstance, ImageInstanceCollection
from .job import (Job, JobStatus, JobCollection, JobData, JobDataCollection,
                  JobParameter, JobParameterCollection, JobTemplate, JobTemplateCollection,
                  JobTemplateAnnotation, JobTemplateAnnotationCollection, UserJob, UserJobCollection)
from .ontology import Ontology, OntologyCollection, Term, TermCollection
from .project import (Project, ProjectCollection, ProjectRepresentative, ProjectRepresentativeCollection,
                      ProjectDefaultLayer, ProjectDefaultLayerCollection, Discipline, DisciplineCollection)
from .software import (Software, SoftwareCollection, SoftwareParameter, SoftwareParameterCollection,
                       SoftwareProject, SoftwareProjectCollection)
from .storage import Storage, StorageCollection, UploadedFile, UploadedFileStatus, UploadedFileCollection
from .user import (User, UserCollection, Group, GroupCollection, UserGroup, UserGroupCollection,
                   Role, RoleCollection, UserRole, UserRoleCollection, UserPosition, UserPositionCollection)

__all__ = [
    'AbstractAnnotationTerm',
    'AbstractImage',
    'AbstractImageCollection',
    'AlgoAnnotationTerm',
    'AlgoAnnotationTermCollection',
    'Annotation',
    'AnnotationCollection',
    'AnnotationTerm',
    'AnnotationTermCollection',
    'AnnotationType',
    'AssociationEntity',
    'AttachedFile',
    'AttachedFileCollection',
    'BaseEntity',
    'Collection',
    'Description',
    'Discipline',
    'DisciplineCollection',
    'DomainEntity',
    'Group',
    'GroupCollection',
    'ImageInstance',
    'ImageInstanceCollection',
    'Job',
    'JobCollection',
    'JobData',
    'JobDataCollection',
    'JobParameter',
    'JobParameterCollection',
    'JobStatus',
    'JobTemplate',
    'JobTemplateAnnotation',
    'JobTemplateAnnotationCollection',
    'JobTemplateCollection',
    'Ontology',
    'OntologyCollection',
    'Project',
    'ProjectCollection',
    'ProjectDefaultLayer',
    'ProjectDefaultLayerCollection',
    'ProjectRepresentative',
    'ProjectRepresentativeCollection',
    'Property',
    'PropertyCollection',
    'Role',
    'RoleCollection',
    'SearchCollection',
    'Software',
    'SoftwareCollection',
    'SoftwareParameter',
    'SoftwareParameterCollection',
    'SoftwareProject',
    'SoftwareProjectCollection',
    'Storage',
    'StorageCollection',
    'Term',
    'TermCollection',
    'UploadedFile',
    'UploadedFileCollection',
    'UploadedFileStatus',
    'User',
    'UserCollection',
    'UserGroup',
    'UserGroupCollection',
    'UserJob',
    'UserJobCollection',
    'UserPosition',
    'UserPositionCollection',
    'UserRole',
    'UserRoleCollection',
]
