import os
from dataclasses import dataclass

CACHE_TTL_SECONDS = 300
UPSTREAM_TIMEOUT_SECONDS = 10
MAX_CONCURRENT_REQUESTS = 16

DEFAULT_SWAPI_HOST = "https://swapi.dev"
DEFAULT_SWAPI_PAGE_SIZE = 10
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    """
    Configuração lida do ambiente:
    - SWAPI_HOST: host do SWAPI (as rotas ficam em <host>/api/<resource>)
    - SWAPI_PAGE_SIZE: tamanho de página do upstream, usado para calcular o total de páginas
    - PORT: porta do servidor HTTP
    """

    swapi_host: str = DEFAULT_SWAPI_HOST
    swapi_page_size: int = DEFAULT_SWAPI_PAGE_SIZE
    port: int = DEFAULT_PORT


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings() -> Settings:
    host = (os.getenv("SWAPI_HOST") or DEFAULT_SWAPI_HOST).strip().rstrip("/")
    return Settings(
        swapi_host=host,
        swapi_page_size=_int_env("SWAPI_PAGE_SIZE", DEFAULT_SWAPI_PAGE_SIZE),
        port=_int_env("PORT", DEFAULT_PORT),
    )
