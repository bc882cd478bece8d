from typing import Any

from fastapi import Request

from config import MAX_CONCURRENT_REQUESTS, Settings
from services.cache import FreshnessCache
from services.collection import fetch_all, resolve_references
from services.swapi_client import SwapiClient

PEOPLE_KEY = "people"
PLANETS_KEY = "planets"


class CatalogService:
    """Entrega as coleções de people/planets; só vai ao SWAPI quando o cache não tem."""

    def __init__(
        self,
        client: SwapiClient,
        cache: FreshnessCache,
        max_workers: int = MAX_CONCURRENT_REQUESTS,
    ):
        self.client = client
        self.cache = cache
        self.max_workers = max_workers

    def _load_people(self) -> list[dict[str, Any]]:
        return fetch_all(self.client, "people", max_workers=self.max_workers)

    def _load_planets(self) -> list[dict[str, Any]]:
        planets = fetch_all(self.client, "planets", max_workers=self.max_workers)
        return resolve_references(self.client, planets, "residents", max_workers=self.max_workers)

    def people(self) -> list[dict[str, Any]]:
        return list(self.cache.get_or_load(PEOPLE_KEY, self._load_people))

    def planets(self) -> list[dict[str, Any]]:
        return list(self.cache.get_or_load(PLANETS_KEY, self._load_planets))


def build_catalog(settings: Settings, cache: FreshnessCache | None = None) -> CatalogService:
    client = SwapiClient(settings.swapi_host, settings.swapi_page_size)
    return CatalogService(client, cache or FreshnessCache())


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog
