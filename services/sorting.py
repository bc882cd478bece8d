from typing import Any, Literal

from services.errors import InvalidParameter

SORT_FIELDS = ("name", "height", "mass")
SORT_ORDERS = ("asc", "desc")


def validate_sort(sort_by: str, sort_order: str) -> None:
    if sort_by not in SORT_FIELDS:
        raise InvalidParameter("sortBy", sort_by)
    if sort_order not in SORT_ORDERS:
        raise InvalidParameter("sortOrder", sort_order)


def sort_by(
    records: list[dict[str, Any]],
    field: str,
    direction: Literal["asc", "desc"] = "asc",
) -> list[dict[str, Any]]:
    # height/mass vêm como string do SWAPI ("172", "unknown"); a comparação é de string mesmo
    def key_fn(record: dict[str, Any]) -> str:
        value = record.get(field)
        return "" if value is None else str(value)

    return sorted(records, key=key_fn, reverse=direction == "desc")
