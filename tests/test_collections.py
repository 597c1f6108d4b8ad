import pytest
import respx
import httpx
from cytomine.entities import (AnnotationCollection, ImageInstanceCollection, JobCollection, Project,
                               ProjectCollection, ProjectRepresentativeCollection, Term, TermCollection, User)
from cytomine.exceptions import MissingFilterError, UsageError
from helpers import API_URL, collection_response, paged_handler


@pytest.fixture
def projects_data() -> list[dict]:
    return [{'id': i, 'name': f'Project {i}', 'class': 'be.cytomine.project.Project'} for i in range(1, 8)]


class TestCollectionAsSequence:
    def test_append_valid_item(self):
        collection = ProjectCollection()
        assert len(collection) == 0
        collection.append(Project(name='p'))
        assert len(collection) == 1
        assert isinstance(collection[0], Project)

    def test_append_invalid_item(self):
        collection = ProjectCollection()
        with pytest.raises(TypeError):
            collection.append({'name': 'p'})
        with pytest.raises(TypeError):
            collection.append(User(username='u'))
        with pytest.raises(TypeError):
            collection[0:0] = [Project(), Term()]
        assert len(collection) == 0

    def test_from_entities(self):
        collection = ProjectCollection.from_entities([Project(id=1), Project(id=2)])
        assert [p.id for p in collection] == [1, 2]
        assert collection.total == 2

    def test_negative_page_size(self):
        with pytest.raises(ValueError):
            ProjectCollection(max_per_page=-1)


class TestCollectionFilters:
    def test_filter_uri(self):
        collection = ImageInstanceCollection(filter_key='project', filter_value=Project(id=3))
        assert collection.uri == 'project/3/imageinstance.json'
        assert collection.filter == ('project', Project(id=3))

    def test_filter_replaces_previous_one(self):
        collection = ImageInstanceCollection().set_filter('project', 3).set_filter('user', 5)
        assert collection.uri == 'user/5/imageinstance.json'
        collection.clear_filter()
        assert collection.uri == 'imageinstance.json'

    def test_unknown_filter(self):
        with pytest.raises(UsageError):
            ImageInstanceCollection().set_filter('ontology', 3)

    @respx.mock
    def test_required_filter(self, session):
        collection = ProjectRepresentativeCollection()
        with pytest.raises(MissingFilterError):
            _ = collection.uri
        with pytest.raises(MissingFilterError):
            collection.fetch()
        assert respx.calls.call_count == 0

        collection.set_filter('project', 4)
        assert collection.uri == 'project/4/representative.json'

    @pytest.mark.parametrize('value', [Project(name='unsaved'), None, 0])
    @respx.mock
    def test_filter_value_without_identifier(self, session, value):
        with pytest.raises(UsageError):
            ProjectRepresentativeCollection(filter_key='project', filter_value=value).fetch()
        with pytest.raises(UsageError):
            ProjectRepresentativeCollection().set_filter('project', value)
        assert respx.calls.call_count == 0

    @respx.mock
    def test_search_parameter_with_unsaved_entity(self, session):
        with pytest.raises(UsageError):
            AnnotationCollection(project=Project(name='unsaved'))
        with pytest.raises(UsageError):
            AnnotationCollection(images=[12, Project()])
        assert respx.calls.call_count == 0

    def test_search_parameters(self):
        collection = AnnotationCollection(image=Project(id=12), show_wkt=True, terms=[1, Term(id=2)], user=None)
        assert collection.params == {'image': 12, 'showWKT': 'true', 'terms': '1,2'}
        assert collection.uri == 'annotation.json'

        collection.set_parameter('show_wkt', None)
        assert 'showWKT' not in collection.params

    def test_search_required_parameters(self):
        with pytest.raises(MissingFilterError):
            _ = AnnotationCollection(user=3).uri
        assert AnnotationCollection(project=3).uri == 'annotation.json'
        assert JobCollection().uri == 'job.json'

    def test_unknown_search_parameter(self):
        with pytest.raises(UsageError):
            AnnotationCollection(colour='red')


class TestCollectionFetch:
    @respx.mock
    def test_fetch_all_pages(self, session, projects_data):
        route = respx.get(f"{API_URL}/project.json").mock(side_effect=paged_handler(projects_data))

        collection = ProjectCollection(max_per_page=3).fetch()

        assert [p.id for p in collection] == list(range(1, 8))
        assert all(isinstance(p, Project) for p in collection)
        assert collection.total == 7
        assert route.call_count == 3

    @respx.mock
    def test_page_size_only_changes_round_trips(self, session, projects_data):
        route = respx.get(f"{API_URL}/project.json").mock(side_effect=paged_handler(projects_data))

        one_request = ProjectCollection().fetch()
        calls_one = route.call_count
        many_requests = ProjectCollection(max_per_page=1).fetch()

        assert calls_one == 1
        assert route.call_count - calls_one == 7
        assert [p.id for p in one_request] == [p.id for p in many_requests]

    @respx.mock
    def test_fetch_page_is_idempotent(self, session, projects_data):
        route = respx.get(f"{API_URL}/project.json").mock(side_effect=paged_handler(projects_data))

        collection = ProjectCollection(max_per_page=2)
        first = [p.id for p in collection.fetch_page(1)]
        second = [p.id for p in collection.fetch_page(1)]

        assert first == second == [3, 4]
        assert collection.cur_page == 1
        assert collection.total == 7
        assert collection.nb_pages == 4
        assert not collection.is_last_page()
        assert route.calls.last.request.url.params['offset'] == '2'

    @respx.mock
    def test_next_and_previous_pages(self, session, projects_data):
        respx.get(f"{API_URL}/project.json").mock(side_effect=paged_handler(projects_data))

        collection = ProjectCollection(max_per_page=2)
        with pytest.raises(UsageError):
            collection.fetch_previous_page()

        assert [p.id for p in collection.fetch_next_page()] == [3, 4]
        assert [p.id for p in collection.fetch_next_page()] == [5, 6]
        assert [p.id for p in collection.fetch_previous_page()] == [3, 4]
        assert collection.cur_page == 1

        collection.fetch_page(3)
        assert [p.id for p in collection] == [7]
        assert collection.is_last_page()

    def test_negative_page(self, session):
        with pytest.raises(UsageError):
            ProjectCollection(max_per_page=2).fetch_page(-1)

    @respx.mock
    def test_page_index_without_page_size(self, session, projects_data):
        route = respx.get(f"{API_URL}/project.json").mock(side_effect=paged_handler(projects_data))

        collection = ProjectCollection()
        with pytest.raises(UsageError):
            collection.fetch_page(1)
        with pytest.raises(UsageError):
            collection.fetch_next_page()
        assert route.call_count == 0
        assert collection.cur_page == 0

        assert len(collection.fetch_page(0)) == 7
        assert 'offset' not in route.calls.last.request.url.params

    @respx.mock
    def test_failed_page_keeps_previous_content(self, session, projects_data):
        pages = iter([
            httpx.Response(200, json=collection_response(projects_data[:2], 7)),
            httpx.Response(500, json={'errors': 'server error'}),
        ])
        respx.get(f"{API_URL}/project.json").mock(side_effect=lambda request: next(pages))

        collection = ProjectCollection.from_entities([Project(id=42)])
        collection.max_per_page = 2
        with pytest.raises(httpx.HTTPStatusError):
            collection.fetch()

        assert [p.id for p in collection] == [42]

    @respx.mock
    def test_empty_filter_result(self, session):
        route = respx.get(f"{API_URL}/ontology/77/term.json").mock(
            return_value=httpx.Response(200, json=collection_response([])))

        terms = TermCollection.fetch_with_filter('ontology', 77)

        assert len(terms) == 0
        assert terms.total == 0
        assert route.called

    @respx.mock
    def test_fetch_all_classmethod(self, session):
        route = respx.get(f"{API_URL}/annotation.json").mock(
            return_value=httpx.Response(200, json=collection_response([{'id': 5, 'image': 12}])))

        annotations = AnnotationCollection.fetch_all(image=12)

        assert [a.id for a in annotations] == [5]
        assert route.calls.last.request.url.params['image'] == '12'

    @respx.mock
    def test_fetch_with_filter_on_search_collections(self, session):
        annotations_route = respx.get(f"{API_URL}/annotation.json").mock(
            return_value=httpx.Response(200, json=collection_response([{'id': 5, 'project': 3}])))
        jobs_route = respx.get(f"{API_URL}/job.json").mock(
            return_value=httpx.Response(200, json=collection_response([{'id': 9, 'project': 3}])))

        annotations = AnnotationCollection.fetch_with_filter('project', Project(id=3))
        jobs = JobCollection.fetch_with_filter('project', 3, max_per_page=10)

        assert [a.id for a in annotations] == [5]
        assert annotations_route.calls.last.request.url.params['project'] == '3'
        assert [j.id for j in jobs] == [9]
        assert jobs_route.calls.last.request.url.params['project'] == '3'
        assert jobs_route.calls.last.request.url.params['max'] == '10'

    def test_fetch_with_filter_on_search_collection_unknown_key(self, session):
        with pytest.raises(UsageError):
            AnnotationCollection.fetch_with_filter('ontology', 3)
