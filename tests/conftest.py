"""Shared test fixtures: a mocked Postcodes.io and a FastAPI test client."""

from typing import Optional

import httpx
import pytest

from ngr_lookup.main import app
from ngr_lookup.resolver import PostcodeResolver, get_resolver

# Real Postcodes.io values (OSTN15-derived lat/lon)
POSTCODES = {
    "SW1A1AA": {
        "postcode": "SW1A 1AA",
        "eastings": 529090,
        "northings": 179645,
        "latitude": 51.501009,
        "longitude": -0.141588,
        "country": "England",
    },
    "EH11RE": {
        "postcode": "EH1 1RE",
        "eastings": 325889,
        "northings": 673772,
        "latitude": 55.952401,
        "longitude": -3.188422,
        "country": "Scotland",
    },
    # Crown dependency postcodes come back without grid coordinates
    "JE24WD": {
        "postcode": "JE2 4WD",
        "eastings": None,
        "northings": None,
        "latitude": 49.188327,
        "longitude": -2.109508,
        "country": "Channel Islands",
    },
}


class FakePostcodesIO:
    """httpx handler that answers like Postcodes.io and records requests."""

    def __init__(self, records=None):
        self.records = dict(POSTCODES) if records is None else records
        self.requests: list[httpx.Request] = []
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        key = request.url.path.rsplit("/", 1)[-1].upper()
        record = self.records.get(key)
        if record is None:
            return httpx.Response(404, json={"status": 404, "error": "Invalid postcode"})
        return httpx.Response(200, json={"status": 200, "result": record})

    def fail_with(self, exc_type, message="boom"):
        self.error = exc_type(message, request=httpx.Request("GET", "https://api.postcodes.io/"))


@pytest.fixture()
def service():
    return FakePostcodesIO()


@pytest.fixture()
def resolver(service):
    """Resolver wired to the fake service; the host is treated as online."""
    http = httpx.Client(transport=httpx.MockTransport(service))
    r = PostcodeResolver(base_url="https://api.postcodes.io", client=http, connectivity_check=lambda: True)
    yield r
    http.close()


@pytest.fixture()
def offline_resolver(service):
    http = httpx.Client(transport=httpx.MockTransport(service))
    r = PostcodeResolver(base_url="https://api.postcodes.io", client=http, connectivity_check=lambda: False)
    yield r
    http.close()


@pytest.fixture()
def client(resolver):
    """FastAPI test client with the resolver dependency overridden."""
    from fastapi.testclient import TestClient

    from ngr_lookup.routers import postcodes

    postcodes.limiter.reset()
    app.dependency_overrides[get_resolver] = lambda: resolver
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def no_network(monkeypatch, service):
    """Resolvers built without a client hit the failing fake; the probe says offline."""
    from ngr_lookup import resolver as resolver_module

    real_client = httpx.Client
    service.fail_with(httpx.ConnectError)
    monkeypatch.setattr(httpx, "Client", lambda **kw: real_client(transport=httpx.MockTransport(service), **kw))
    monkeypatch.setattr(resolver_module, "is_online", lambda: False)
    return service
