from fastapi import APIRouter, Depends, Query

from services.catalog import CatalogService, get_catalog
from services.sorting import sort_by, validate_sort

people_router = APIRouter(prefix="/people", tags=["People"])


@people_router.get("")
def all_people(
    sort_field: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    catalog: CatalogService = Depends(get_catalog),
):
    # valida antes de qualquer chamada ao SWAPI
    validate_sort(sort_field, sort_order)

    people = sort_by(catalog.people(), sort_field, sort_order)
    return {
        "count": len(people),
        "results": people,
    }
