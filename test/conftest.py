import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import app
from services.cache import FreshnessCache
from services.catalog import build_catalog

SWAPI = "https://swapi.dev/api"


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Resp:
    def __init__(self, data, status_code=200):
        self.status_code = status_code
        self._data = data

    def json(self):
        return self._data


class FakeSwapi:
    """
    Upstream falso: responde por URL e guarda cada chamada feita.
    - routes: url -> dict (200) ou Resp (status/corpo customizado) ou Exception
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls: list[str] = []

    def get(self, url, timeout=10):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return Resp({"detail": "Not found"}, status_code=404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, Resp):
            return route
        return Resp(route)

    def calls_to(self, url: str) -> int:
        return self.calls.count(url)


def people_pages(names: list[str], page_size: int = 10) -> dict[str, dict]:
    pages = [names[i:i + page_size] for i in range(0, len(names), page_size)] or [[]]
    routes = {}
    for n, chunk in enumerate(pages, start=1):
        routes[f"{SWAPI}/people?page={n}"] = {
            "count": len(names),
            "next": f"{SWAPI}/people?page={n + 1}" if n < len(pages) else None,
            "results": [{"name": name, "height": "1", "mass": "1"} for name in chunk],
        }
    return routes


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog(clock):
    """
    Catálogo novo por teste (cache zerado, relógio controlado).
    Sem isso o cache de um teste vaza para o próximo.
    """
    original = app.state.catalog
    app.state.catalog = build_catalog(Settings(), cache=FreshnessCache(ttl=300, clock=clock))
    yield app.state.catalog
    app.state.catalog = original


@pytest.fixture
def client(catalog):
    return TestClient(app)


@pytest.fixture
def swapi(monkeypatch):
    fake = FakeSwapi()
    import services.swapi_client as mod
    monkeypatch.setattr(mod.requests, "get", fake.get)
    return fake
