import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

Collection = tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class CacheEntry:
    collection: Collection
    expires_at: float


class FreshnessCache:
    """
    Cache em memória com TTL para coleções já montadas.
    - a entrada é trocada inteira, nunca alterada aos pedaços
    - expira na leitura (sem limpeza em background)
    - `get_or_load` faz misses simultâneos na mesma chave dividirem uma única carga
    """

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def get(self, key: str) -> Collection | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            # só remove se ninguém trocou a entrada nesse meio tempo
            if self._store.get(key) is entry:
                self._store.pop(key, None)
            return None
        return entry.collection

    def put(self, key: str, collection: list[dict[str, Any]], ttl: float | None = None) -> Collection:
        ttl = self.ttl if ttl is None else ttl
        entry = CacheEntry(collection=tuple(collection), expires_at=self._clock() + ttl)
        self._store[key] = entry
        return entry.collection

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._store.clear()
        else:
            self._store.pop(key, None)

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def get_or_load(self, key: str, loader: Callable[[], list[dict[str, Any]]]) -> Collection:
        cached = self.get(key)
        if cached is not None:
            return cached

        with self._lock_for(key):
            # outro request pode ter populado enquanto esperávamos o lock
            cached = self.get(key)
            if cached is not None:
                return cached

            logger.info("cache miss for %s, loading", key)
            collection = loader()
            stored = self.put(key, collection)
            logger.info("cached %d %s records for %ss", len(stored), key, self.ttl)
            return stored
