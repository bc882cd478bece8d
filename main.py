# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import load_settings
from routers.people_router import people_router
from routers.planets_router import planets_router
from services.catalog import build_catalog
from services.errors import InvalidParameter, UpstreamUnavailable

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = load_settings()

app = FastAPI(title="SWAPI Catalog")
app.state.catalog = build_catalog(settings)


@app.exception_handler(InvalidParameter)
async def invalid_parameter_handler(request: Request, exc: InvalidParameter):
    return JSONResponse(
        status_code=400,
        content={"error": "invalid_parameter", "detail": str(exc)},
    )


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    # detalhe do upstream fica só no log
    logger.error(
        "upstream unavailable on %s: resource=%s page=%d reason=%s",
        request.url.path, exc.resource, exc.page, exc.reason,
    )
    return JSONResponse(
        status_code=502,
        content={"error": "upstream_unavailable", "detail": "Upstream request failed"},
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("unexpected failure on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "detail": "Internal server error"},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(people_router)
app.include_router(planets_router)


if __name__ == "__main__":
    import uvicorn

    logger.info("Listening on http://localhost:%d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
