import pytest
import respx
import httpx
from cytomine.entities import (AlgoAnnotationTerm, AnnotationTerm, AnnotationTermCollection, Group, User,
                               UserGroup, UserGroupCollection, UserPosition, UserPositionCollection,
                               UserRole)
from cytomine.exceptions import InvalidResponseError, OperationNotAllowedError, UsageError
from helpers import API_URL, collection_response, request_json


class TestUserGroup:
    def test_uri(self):
        assert UserGroup(user=3, group=7).uri == 'user/3/group/7.json'
        assert UserGroup.from_key(User(id=3), Group(id=7)).uri == 'user/3/group/7.json'
        with pytest.raises(UsageError):
            _ = UserGroup(user=3).uri

    @respx.mock
    def test_create_fetch_delete(self, session):
        respx.post(f"{API_URL}/user/3/group/7.json").mock(
            return_value=httpx.Response(200, json={'usergroup': {'id': 1, 'user': 3, 'group': 7}}))
        respx.get(f"{API_URL}/user/3/group/7.json").mock(
            return_value=httpx.Response(200, json={'id': 1, 'user': 3, 'group': 7}))
        delete_route = respx.delete(f"{API_URL}/user/3/group/7.json").mock(
            return_value=httpx.Response(200, json={}))

        user_group = UserGroup(user=3, group=7).save()
        assert user_group.id == 1

        fetched = UserGroup.retrieve(3, 7)
        assert (fetched.user, fetched.group) == (3, 7)

        UserGroup.remove(3, 7)
        fetched.delete()
        assert delete_route.call_count == 2

    @respx.mock
    def test_update_not_allowed(self, session):
        user_group = UserGroup(id=1, user=3, group=7)

        with pytest.raises(OperationNotAllowedError):
            user_group.update()
        with pytest.raises(OperationNotAllowedError):
            user_group.save()
        assert respx.calls.call_count == 0

    def test_decode_requires_both_keys(self):
        with pytest.raises(InvalidResponseError):
            UserGroup.from_response({'id': 1, 'user': 3})

    @respx.mock
    def test_collection(self, session):
        respx.get(f"{API_URL}/user/3/group.json").mock(
            return_value=httpx.Response(200, json=collection_response([{'id': 1, 'user': 3, 'group': 7},
                                                                       {'id': 2, 'user': 3, 'group': 8}])))

        groups = UserGroupCollection.fetch_with_filter('user', 3)
        assert [g.group for g in groups] == [7, 8]

    def test_user_role_uri(self):
        assert UserRole(user=3, role=2).uri == 'user/3/role/2.json'
        assert UserRole.callback_identifier == 'secusersecrole'


class TestAnnotationTerm:
    @respx.mock
    def test_create_and_fetch(self, session):
        create_route = respx.post(f"{API_URL}/annotation/10/term/20.json").mock(
            return_value=httpx.Response(200, json={'annotationterm': {'annotation': 10, 'term': 20, 'user': 1}}))
        respx.get(f"{API_URL}/annotation/10/term/20.json").mock(
            return_value=httpx.Response(200, json={'annotation': 10, 'term': 20, 'user': 1}))

        annotation_term = AnnotationTerm(annotation=10, term=20).save()
        assert annotation_term.user == 1
        assert request_json(create_route.calls.last.request)['term'] == 20

        fetched = AnnotationTerm.retrieve(10, 20)
        assert isinstance(fetched, AnnotationTerm)
        assert fetched.user == 1

    @respx.mock
    def test_save_and_clear_previous(self, session):
        route = respx.post(f"{API_URL}/annotation/10/term/20/clearBefore.json").mock(
            return_value=httpx.Response(200, json={'annotationterm': {'annotation': 10, 'term': 20, 'user': 1}}))

        annotation_term = AnnotationTerm(annotation=10, term=20)
        result = annotation_term.save_and_clear_previous(clear_for_all_users=True)

        assert result is annotation_term
        assert annotation_term.user == 1
        assert request_json(route.calls.last.request) == {'clearForAll': True}

    @respx.mock
    def test_save_and_clear_previous_requires_keys(self, session):
        with pytest.raises(UsageError):
            AnnotationTerm(annotation=10).save_and_clear_previous()
        assert respx.calls.call_count == 0

    def test_update_not_allowed(self, session):
        with pytest.raises(OperationNotAllowedError) as exc_info:
            AnnotationTerm(annotation=10, term=20).update()
        assert str(exc_info.value) == 'A AnnotationTerm instance cannot be updated.'

    def test_algo_annotation_term(self, session):
        algo_term = AlgoAnnotationTerm.from_response({'algoannotationterm': {'annotation': 10, 'term': 20,
                                                                             'expectedTerm': 21, 'rate': 0.8}})
        assert algo_term.expected_term == 21
        assert algo_term.uri == 'annotation/10/term/20.json'
        assert session.api_for(AlgoAnnotationTerm) is not session.api_for(AnnotationTerm)

    def test_collection_uri(self):
        assert AnnotationTermCollection(filter_key='annotation', filter_value=10).uri == 'annotation/10/term.json'


class TestUserPosition:
    def test_uris(self):
        position = UserPosition(image=4, user=2)
        assert position.uri == 'imageinstance/4/position/2.json'
        assert UserPosition.uri_strategy.create_uri(UserPosition(image=4)) == 'imageinstance/4/position.json'

    @respx.mock
    def test_record_position(self, session):
        route = respx.post(f"{API_URL}/imageinstance/4/position.json").mock(
            return_value=httpx.Response(200, json={'userposition': {'id': 9, 'image': 4, 'user': 2, 'zoom': 3}}))

        position = UserPosition(image=4, zoom=3, x=100.0, y=50.0).save()

        assert position.user == 2
        assert request_json(route.calls.last.request)['zoom'] == 3

    def test_update_and_delete_not_allowed(self, session):
        position = UserPosition(id=9, image=4, user=2)
        with pytest.raises(OperationNotAllowedError):
            position.update()
        with pytest.raises(OperationNotAllowedError):
            position.delete()

    def test_collection_uri(self):
        collection = UserPositionCollection(filter_key='imageinstance', filter_value=4)
        assert collection.uri == 'imageinstance/4/positions.json'
