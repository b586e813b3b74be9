"""Configure Test Suite.

Fixtures shared by the test modules of every subpackage.
"""
from contextlib import contextmanager

import pytest
import requests_mock

from simbadclient.io import plainxml
from simbadclient.utils import throttle


class ContextAdapter(requests_mock.Adapter):
    """
    requests_mock adapter where ``register_uri`` returns a context manager
    """
    @contextmanager
    def register_uri(self, *args, **kwargs):
        matcher = super().register_uri(*args, **kwargs)

        yield matcher

        self.remove_matcher(matcher)

    def remove_matcher(self, matcher):
        if matcher in self._matchers:
            self._matchers.remove(matcher)


@pytest.fixture(scope='function')
def mocker():
    with requests_mock.Mocker(
        adapter=ContextAdapter(case_sensitive=True)
    ) as mocker_ins:
        yield mocker_ins


@pytest.fixture(autouse=True)
def no_delay():
    """forget the request times recorded by other tests"""
    throttle.reset()
    yield
    throttle.reset()


@pytest.fixture(params=["expat", "sax"])
def backend(request):
    """each XML backend in turn"""
    return plainxml.make_backend(request.param)
