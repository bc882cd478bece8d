import logging
import math
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any

from config import MAX_CONCURRENT_REQUESTS
from services.errors import ReferenceUnresolvable, UpstreamUnavailable
from services.swapi_client import PagedEnvelope, SwapiClient

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def render_name(name: str | None) -> str:
    return UNKNOWN if name is None else name


def fetch_all(
    client: SwapiClient,
    resource: str,
    max_workers: int = MAX_CONCURRENT_REQUESTS,
) -> list[dict[str, Any]]:
    """
    Busca todas as páginas de um recurso.

    A página 1 vem primeiro (é ela que informa o `count`); as restantes são
    pedidas em paralelo e juntadas pela ordem das páginas, não pela ordem de
    chegada. Qualquer página com falha derruba a chamada inteira.
    """
    first = client.fetch_page(resource, 1)
    results = list(first.items)

    remaining_pages = math.ceil(first.total_count / client.page_size) - 1
    if remaining_pages <= 0:
        return results

    pages = range(2, remaining_pages + 2)
    aborted = threading.Event()

    def fetch_page(page: int) -> PagedEnvelope | None:
        # depois da primeira falha, páginas que ainda não começaram não vão ao SWAPI
        if aborted.is_set():
            return None
        try:
            return client.fetch_page(resource, page)
        except Exception:
            aborted.set()
            raise

    pool = ThreadPoolExecutor(max_workers=min(max_workers, remaining_pages))
    try:
        futures = [pool.submit(fetch_page, page) for page in pages]
        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

        failed = [f for f in futures if f in done and f.exception() is not None]
        if failed:
            for f in not_done:
                f.cancel()
            exc = failed[0].exception()
            if isinstance(exc, UpstreamUnavailable):
                logger.error(
                    "aborting %s fetch: page %d failed (%s)", resource, exc.page, exc.reason
                )
            raise exc

        for f in futures:
            results.extend(f.result().items)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    return results


def _lookup_name(client: SwapiClient, url: str, display_field: str) -> str | None:
    try:
        record = client.fetch_record(url)
    except ReferenceUnresolvable as exc:
        logger.warning("could not resolve reference %s: %s", exc.url, exc.reason)
        return None

    name = record.get(display_field)
    if not isinstance(name, str):
        logger.warning("could not resolve reference %s: no %r field", url, display_field)
        return None
    return name


def resolve_references(
    client: SwapiClient,
    records: list[dict[str, Any]],
    link_field: str,
    display_field: str = "name",
    max_workers: int = MAX_CONCURRENT_REQUESTS,
) -> list[dict[str, Any]]:
    """Troca os links de `link_field` pelos nomes.

    Cada link distinto é consultado uma vez só. Consulta que falha vira
    "Unknown" em todas as posições onde o link aparecia; a chamada nunca falha.
    """
    links: dict[str, None] = {}
    for record in records:
        value = record.get(link_field)
        if isinstance(value, list):
            links.update((url, None) for url in value if isinstance(url, str))

    resolved: dict[str, str | None] = {}
    if links:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(links))) as pool:
            names = pool.map(lambda url: _lookup_name(client, url, display_field), links)
            resolved = dict(zip(links, names))

    out: list[dict[str, Any]] = []
    for record in records:
        value = record.get(link_field)
        if not isinstance(value, list):
            out.append(record)
            continue
        rewritten = dict(record)
        rewritten[link_field] = [
            render_name(resolved.get(url) if isinstance(url, str) else None) for url in value
        ]
        out.append(rewritten)

    unresolved = sum(1 for name in resolved.values() if name is None)
    if unresolved:
        logger.info("%d of %d references left unresolved", unresolved, len(resolved))
    return out
