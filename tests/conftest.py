"""Shared fixtures: a fake stats API over httpx.MockTransport backed by tests/fixtures."""

import json
from pathlib import Path

import httpx
import pytest
from prometheus_client import CollectorRegistry

from edgecast_exporter.client import ServiceMetrics

FIXTURES = Path(__file__).parent / "fixtures"
ACCOUNT_ID = "ABCD"
TOKEN = "1234-5678"
API_URL = "https://api.edgecast.com"


def load_fixture(method: str):
    return json.loads((FIXTURES / f"{method}.json").read_text())


class FixtureAPI:
    """Answers every platform with the fixture for the requested method.

    `failures` maps (platform_id, method) to an exception to raise or an
    httpx.Response to return instead of the fixture.
    """

    def __init__(self):
        self.requests = []
        self.failures = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        platform_id, method = int(parts[-2]), parts[-1]

        failure = self.failures.get((platform_id, method))
        if isinstance(failure, Exception):
            raise failure
        if isinstance(failure, httpx.Response):
            return failure
        return httpx.Response(200, json=load_fixture(method))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fixture_api():
    return FixtureAPI()


@pytest.fixture
def metrics_registry():
    return CollectorRegistry()


@pytest.fixture
def service_metrics(metrics_registry):
    return ServiceMetrics(registry=metrics_registry)
