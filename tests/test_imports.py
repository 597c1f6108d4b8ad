"""
Test module to verify that all important cytomine modules can be imported successfully.
This helps catch import issues early and ensures the package structure is correct.
"""
import pytest
import logging

_LOGGER = logging.getLogger(__name__)


class TestImports:
    """Test suite for verifying module imports."""

    def test_main_package_import(self) -> None:
        """Test importing the main cytomine package."""
        try:
            import cytomine
            assert hasattr(cytomine, '__version__')
            _LOGGER.info(f"Successfully imported cytomine version: {cytomine.__version__}")
        except ImportError as e:
            pytest.fail(f"Failed to import main cytomine package: {e}")

    def test_lazy_exports(self) -> None:
        """Test the names exported lazily by the main package."""
        from cytomine import Cytomine, Project, ImageInstanceCollection, UsageError
        from cytomine.api.client import Cytomine as ClientCytomine
        from cytomine.entities import Project as EntityProject

        assert Cytomine is ClientCytomine
        assert Project is EntityProject
        assert ImageInstanceCollection is not None
        assert issubclass(UsageError, Exception)

    def test_entities_exports(self) -> None:
        import cytomine.entities as entities

        for name in entities.__all__:
            assert getattr(entities, name) is not None, f"Missing {name} in cytomine.entities"

    def test_endpoints_imports(self) -> None:
        from cytomine.api.endpoints import (AnnotationTermsApi, AttachedFilesApi, ImageInstancesApi,
                                            ProjectsApi, UsersApi)
        from cytomine.api.base_api import EntityBaseApi

        for handler in (AnnotationTermsApi, AttachedFilesApi, ImageInstancesApi, ProjectsApi, UsersApi):
            assert issubclass(handler, EntityBaseApi)

    def test_config_imports(self) -> None:
        """Test importing configuration modules."""
        from cytomine import configs
        assert hasattr(configs, 'get_value')
        assert hasattr(configs, 'set_value')

    def test_version_consistency(self) -> None:
        import cytomine

        assert isinstance(cytomine.__version__, str)
        version_parts = cytomine.__version__.split('.')
        assert len(version_parts) >= 2, f"Invalid version format: {cytomine.__version__}"
