import pytest
from cytomine.api.client import Cytomine
from helpers import TEST_HOST


@pytest.fixture(autouse=True)
def reset_default_session():
    Cytomine._default = None
    yield
    Cytomine._default = None


@pytest.fixture
def session():
    """A default session against the fake test host."""
    with Cytomine(TEST_HOST) as cytomine_session:
        yield cytomine_session
