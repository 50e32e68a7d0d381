"""Pytest fixtures for storelogin tests."""
from collections import defaultdict
from unittest.mock import AsyncMock

import pytest

from storelogin.core.api import APIConfig, HTTPResponse, StoreAPIError


class PortalRouter:
    """
    Answers fake HTTP calls by (method, url).

    Queued results are consumed in order; the last one keeps being returned.
    A result that is an exception instance is raised instead.
    """

    def __init__(self):
        self._routes = defaultdict(list)

    def add(self, method, url, *results):
        self._routes[(method, url)].extend(results)
        return self

    async def dispatch(self, method, url, **kwargs):
        queue = self._routes.get((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request {method} {url}")
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, BaseException):
            raise result
        return result


def make_response(body=None, cookies=None, status=200, url='https://example.test/'):
    """Build a buffered HTTPResponse."""
    return HTTPResponse(status=status, url=url, body=body, cookies=cookies or {})


def portal_error(error_code, status=400, url='https://example.test/'):
    """StoreAPIError carrying an errorCode body."""
    return StoreAPIError(status, {'errorCode': error_code, 'message': 'error'}, url)


@pytest.fixture
def config():
    """Default config; endpoints keep their production URLs."""
    return APIConfig.default()


@pytest.fixture
def endpoints(config):
    return config.endpoints


@pytest.fixture
def router():
    return PortalRouter()


@pytest.fixture
def http_client(config, router):
    """AsyncMock HTTP client routed through the PortalRouter."""
    client = AsyncMock()
    client.config = config

    async def get(url, **kwargs):
        return await router.dispatch('GET', url, **kwargs)

    async def post(url, **kwargs):
        return await router.dispatch('POST', url, **kwargs)

    client.get = AsyncMock(side_effect=get)
    client.post = AsyncMock(side_effect=post)
    return client


@pytest.fixture
def csrf_ok(router, endpoints):
    """CSRF endpoint always sets XSRF-TOKEN=abc."""
    router.add('GET', endpoints.csrf, make_response(cookies={'XSRF-TOKEN': 'abc'}))
    return router


@pytest.fixture
def captcha_solver():
    solver = AsyncMock()
    solver.solve = AsyncMock(return_value='solved-token')
    return solver


def calls_to(mock, url):
    """Calls of an AsyncMock (get/post) made with a given URL."""
    return [c for c in mock.call_args_list if c.args and c.args[0] == url]


@pytest.fixture(name='make_response')
def make_response_fixture():
    return make_response


@pytest.fixture(name='portal_error')
def portal_error_fixture():
    return portal_error


@pytest.fixture(name='calls_to')
def calls_to_fixture():
    return calls_to
