import pytest
import respx
import httpx
from cytomine.api.base_api import ApiConfig, BaseApi, EntityBaseApi
from cytomine.entities import Term
from cytomine.exceptions import InvalidResponseError
from helpers import API_URL, TEST_HOST, paged_handler


class TestApiConfig:
    @pytest.mark.parametrize('host, base_path, expected', [
        ('https://cytomine.test', '/api/', 'https://cytomine.test/api/'),
        ('https://cytomine.test/', 'api', 'https://cytomine.test/api/'),
        ('https://cytomine.test', '/core/api', 'https://cytomine.test/core/api/'),
        ('https://cytomine.test', '', 'https://cytomine.test/'),
    ])
    def test_api_url(self, host, base_path, expected):
        assert ApiConfig(host=host, base_path=base_path).api_url == expected


class TestBaseApi:
    @pytest.fixture
    def api(self):
        return BaseApi(ApiConfig(host=TEST_HOST))

    def test_curl_command_masks_credentials(self, api):
        curl = api._generate_curl_command({'method': 'POST',
                                           'url': 'j_spring_security_check',
                                           'headers': {'Cookie': 'JSESSIONID=abc123'},
                                           'data': {'j_username': 'admin', 'j_password': 'secret-pass'}})

        assert curl.startswith('curl -X POST')
        assert 'secret-pass' not in curl
        assert '<HIDDEN>' in curl
        assert 'abc123' not in curl
        assert 'admin' in curl

    def test_curl_command_params_and_files(self, api):
        curl = api._generate_curl_command({'method': 'GET',
                                           'url': 'project.json',
                                           'params': {'offset': 0, 'max': 10}})
        assert "'project.json?offset=0&max=10'" in curl
        assert '-X' not in curl

        curl = api._generate_curl_command({'method': 'POST',
                                           'url': 'attachedfile.json',
                                           'files': {'files[]': ('report.xml', b'<a/>')}})
        assert "-F 'files[]=@report.xml'" in curl

    def test_convert_array_response(self, api):
        assert api._convert_array_response([1, 2]) == ([1, 2], None)
        assert api._convert_array_response({'collection': [1], 'size': '3'}) == ([1], 3)
        assert api._convert_array_response({'collection': None}) == ([], None)
        with pytest.raises(InvalidResponseError):
            api._convert_array_response({'project': {'id': 1}})

    @respx.mock
    def test_error_status_is_raised(self, api):
        respx.get(f"{API_URL}/project/1.json").mock(return_value=httpx.Response(500, text='boom'))

        with pytest.raises(httpx.HTTPStatusError):
            api._make_request('GET', 'project/1.json')

    @respx.mock
    def test_pagination_reaches_total(self, api):
        items = [{'id': i} for i in range(1, 6)]
        route = respx.get(f"{API_URL}/term.json").mock(side_effect=paged_handler(items))

        pages = [page_items for _, page_items, _ in
                 api._make_request_with_pagination('GET', 'term.json', max_per_page=2)]

        assert pages == [items[0:2], items[2:4], items[4:5]]
        assert route.call_count == 3
        offsets = [call.request.url.params['offset'] for call in route.calls]
        assert offsets == ['0', '2', '4']

    @respx.mock
    def test_pagination_stops_on_short_page(self, api):
        route = respx.get(f"{API_URL}/term.json").mock(return_value=httpx.Response(200, json=[{'id': 1}]))

        pages = list(api._make_request_with_pagination('GET', 'term.json', max_per_page=2))

        assert len(pages) == 1
        assert route.call_count == 1

    @respx.mock
    def test_pagination_default_page_size(self, api):
        route = respx.get(f"{API_URL}/term.json").mock(
            return_value=httpx.Response(200, json={'collection': [], 'size': 0}))

        assert list(api._make_request_with_pagination('GET', 'term.json')) == []
        assert route.calls.last.request.url.params['max'] == '1000'


class TestEntityBaseApi:
    @respx.mock
    def test_get_page(self):
        api = EntityBaseApi(ApiConfig(host=TEST_HOST), Term)
        items = [{'id': i, 'name': f'term{i}'} for i in range(1, 6)]
        route = respx.get(f"{API_URL}/ontology/3/term.json").mock(side_effect=paged_handler(items))

        page = api.get_page('ontology/3/term.json', page=1, max_per_page=2, params={'unused': None})

        assert [term.id for term in page.items] == [3, 4]
        assert page.total == 5
        assert page.offset == 2
        assert all(isinstance(term, Term) for term in page.items)
        assert 'unused' not in route.calls.last.request.url.params

    @respx.mock
    def test_get_page_without_page_size(self):
        api = EntityBaseApi(ApiConfig(host=TEST_HOST), Term)
        route = respx.get(f"{API_URL}/term.json").mock(
            return_value=httpx.Response(200, json={'collection': [{'id': 1}], 'size': 1}))

        page = api.get_page('term.json', page=3)

        assert len(page.items) == 1
        assert 'offset' not in route.calls.last.request.url.params
        assert 'max' not in route.calls.last.request.url.params

    def test_resource_name(self):
        assert EntityBaseApi(ApiConfig(host=TEST_HOST), Term).resource_name == 'term'
