"""Shared helpers to mock the responses of the Cytomine server."""
import json
import httpx

TEST_HOST = 'https://cytomine.test'
API_URL = f'{TEST_HOST}/api'


def collection_response(items: list, size: int | None = None) -> dict:
    return {'collection': items, 'size': len(items) if size is None else size}


def paged_handler(items: list):
    """respx side effect serving `items` according to the offset/max query parameters."""

    def handler(request: httpx.Request) -> httpx.Response:
        offset = int(request.url.params.get('offset', 0))
        max_items = int(request.url.params.get('max', 0)) or len(items)
        return httpx.Response(200, json=collection_response(items[offset:offset + max_items], len(items)))

    return handler


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content)
