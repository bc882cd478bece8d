class CatalogError(Exception):
    """Base para os erros ao montar uma resposta do catálogo."""


class InvalidParameter(CatalogError):
    def __init__(self, parameter: str, value: str):
        self.parameter = parameter
        self.value = value
        super().__init__(f"Invalid {parameter} parameter")


class UpstreamUnavailable(CatalogError):
    """Não deu para buscar uma página necessária para montar a coleção inteira."""

    def __init__(self, resource: str, page: int, reason: str):
        self.resource = resource
        self.page = page
        self.reason = reason
        super().__init__(f"{resource} page {page}: {reason}")


class ReferenceUnresolvable(CatalogError):
    """Falhou a consulta de um link de referência. Nunca chega ao cliente."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")
