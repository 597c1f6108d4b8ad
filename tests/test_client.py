import pytest
import respx
import httpx
from unittest.mock import patch
from urllib.parse import parse_qs
from cytomine.api.base_api import EntityBaseApi
from cytomine.api.client import Cytomine
from cytomine.api.endpoints import (AnnotationTermsApi, AttachedFilesApi, ImageInstancesApi, ProjectsApi,
                                    UsersApi)
from cytomine.entities import AlgoAnnotationTerm, AnnotationTerm, Ontology, Term, User
from cytomine.exceptions import SessionNotInitializedError, UsageError
from helpers import API_URL, TEST_HOST


class TestSessionSetup:
    def test_default_session(self):
        with pytest.raises(SessionNotInitializedError):
            Cytomine.get_default()

        first = Cytomine(TEST_HOST)
        assert Cytomine.get_default() is first
        second = Cytomine(TEST_HOST)
        assert Cytomine.get_default() is second
        not_default = Cytomine(TEST_HOST, set_default=False)
        assert Cytomine.get_default() is second

        first.make_default()
        assert Cytomine.get_default() is first
        for session in (first, second, not_default):
            session.close()

    def test_close_resets_default(self):
        with Cytomine(TEST_HOST) as session:
            assert Cytomine.get_default() is session
        assert session.client.is_closed
        with pytest.raises(SessionNotInitializedError):
            Cytomine.get_default()

    @patch('cytomine.configs.get_value')
    def test_host_from_configuration(self, mock_get_value):
        mock_get_value.return_value = 'https://configured.test/'
        with Cytomine() as session:
            assert session.host == 'https://configured.test'
            assert session.config.api_url == 'https://configured.test/api/'

        mock_get_value.return_value = None
        with pytest.raises(UsageError):
            Cytomine()

    def test_api_handlers(self, session):
        assert isinstance(session.projects, ProjectsApi)
        assert isinstance(session.images, ImageInstancesApi)
        assert isinstance(session.users, UsersApi)
        assert isinstance(session.attached_files, AttachedFilesApi)
        assert isinstance(session.annotation_terms, AnnotationTermsApi)
        assert session.annotation_terms.entity_class is AnnotationTerm
        assert session.api_for(AlgoAnnotationTerm).entity_class is AlgoAnnotationTerm

        term_api = session.api_for(Term)
        assert type(term_api) is EntityBaseApi
        assert term_api is session.api_for(Term)
        assert term_api.client is session.client
        assert term_api.session is session


class TestAuthentication:
    @respx.mock
    def test_login(self, session):
        route = respx.post(f"{TEST_HOST}/j_spring_security_check").mock(
            return_value=httpx.Response(200, json={'success': True}))

        session.login('admin', 'secret')

        form = parse_qs(route.calls.last.request.read().decode())
        assert form == {'j_username': ['admin'], 'j_password': ['secret'], 'remember_me': ['on']}

    @respx.mock
    @patch('cytomine.configs.get_value')
    def test_login_from_configuration(self, mock_get_value, session):
        mock_get_value.side_effect = lambda key, *args, **kwargs: {'username': 'cfg_user',
                                                                   'password': 'cfg_pass'}.get(key)
        route = respx.post(f"{TEST_HOST}/j_spring_security_check").mock(
            return_value=httpx.Response(200, json={'success': True}))

        session.login(remember_me=False)

        form = parse_qs(route.calls.last.request.read().decode())
        assert form == {'j_username': ['cfg_user'], 'j_password': ['cfg_pass']}

    @patch('cytomine.configs.get_value', return_value=None)
    def test_login_without_credentials(self, mock_get_value, session):
        with pytest.raises(UsageError):
            session.login()

    @respx.mock
    def test_login_refused(self, session):
        respx.post(f"{TEST_HOST}/j_spring_security_check").mock(return_value=httpx.Response(401))

        with pytest.raises(httpx.HTTPStatusError):
            session.login('admin', 'wrong')

    @respx.mock
    def test_current_user_is_cached(self, session):
        route = respx.get(f"{API_URL}/user/current.json").mock(
            return_value=httpx.Response(200, json={'id': 1, 'username': 'admin', 'admin': True}))

        user = session.fetch_current_user()
        assert isinstance(user, User)
        assert user.username == 'admin'
        assert session.fetch_current_user() is user
        assert route.call_count == 1

        session.fetch_current_user(refresh=True)
        assert route.call_count == 2
        assert User.fetch_current().username == 'admin'

    @respx.mock
    def test_admin_session_and_logout(self, session):
        open_route = respx.get(f"{API_URL}/session/admin/open.json").mock(
            return_value=httpx.Response(200, json={}))
        close_route = respx.get(f"{API_URL}/session/admin/close.json").mock(
            return_value=httpx.Response(200, json={}))
        logout_route = respx.get(f"{TEST_HOST}/logout").mock(return_value=httpx.Response(200))

        session.open_admin_session()
        session.close_admin_session()
        session.logout()

        assert open_route.called
        assert close_route.called
        assert logout_route.called


class TestDeleteMany:
    @respx.mock
    def test_reverse_order_and_failures(self, session):
        ontology_route = respx.delete(f"{API_URL}/ontology/1.json").mock(return_value=httpx.Response(200, json={}))
        term_route = respx.delete(f"{API_URL}/term/2.json").mock(return_value=httpx.Response(500, json={}))
        other_term_route = respx.delete(f"{API_URL}/term/3.json").mock(return_value=httpx.Response(200, json={}))

        ontology = Ontology(id=1)
        failing_term = Term(id=2)
        entities = [ontology, failing_term, Term(id=3), Term(name='never saved')]

        failed = session.delete_many(entities)

        assert failed == [entities[3], failing_term]
        paths = [call.request.url.path for call in respx.calls]
        assert paths == ['/api/term/3.json', '/api/term/2.json', '/api/ontology/1.json']
        for route in (ontology_route, term_route, other_term_route):
            assert route.call_count == 1
