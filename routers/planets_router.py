from fastapi import APIRouter, Depends

from services.catalog import CatalogService, get_catalog

planets_router = APIRouter(prefix="/planets", tags=["Planets"])


@planets_router.get("")
def all_planets(catalog: CatalogService = Depends(get_catalog)):
    planets = catalog.planets()
    return {
        "count": len(planets),
        "results": planets,
    }
