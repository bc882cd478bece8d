import logging
from dataclasses import dataclass
from typing import Any

import requests

from config import UPSTREAM_TIMEOUT_SECONDS
from services.errors import ReferenceUnresolvable, UpstreamUnavailable

logger = logging.getLogger(__name__)


@dataclass
class PagedEnvelope:
    total_count: int
    items: list[dict[str, Any]]
    next_page: str | None = None


class SwapiClient:
    def __init__(self, host: str, page_size: int, timeout: float = UPSTREAM_TIMEOUT_SECONDS):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.host = host.rstrip("/")
        self.page_size = page_size
        self.timeout = timeout

    def page_url(self, resource: str, page: int) -> str:
        return f"{self.host}/api/{resource}?page={page}"

    def _get_json(self, url: str) -> Any:
        try:
            resp = requests.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise _UpstreamError(f"request failed: {exc}")

        if resp.status_code >= 400:
            raise _UpstreamError(f"upstream returned {resp.status_code}")

        try:
            return resp.json()
        except ValueError:
            raise _UpstreamError("invalid JSON body")

    def fetch_page(self, resource: str, page: int) -> PagedEnvelope:
        url = self.page_url(resource, page)
        try:
            data = self._get_json(url)
        except _UpstreamError as exc:
            raise UpstreamUnavailable(resource, page, str(exc))

        if not isinstance(data, dict):
            raise UpstreamUnavailable(resource, page, "envelope is not an object")

        count = data.get("count")
        results = data.get("results")
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise UpstreamUnavailable(resource, page, "envelope has no valid count")
        if not isinstance(results, list):
            raise UpstreamUnavailable(resource, page, "envelope has no results list")

        logger.debug("fetched %s page %d (%d items)", resource, page, len(results))
        return PagedEnvelope(total_count=count, items=results, next_page=data.get("next"))

    def fetch_record(self, url: str) -> dict[str, Any]:
        try:
            data = self._get_json(url)
        except _UpstreamError as exc:
            raise ReferenceUnresolvable(url, str(exc))

        if not isinstance(data, dict):
            raise ReferenceUnresolvable(url, "record is not an object")
        return data


class _UpstreamError(Exception):
    pass
