# catalog_api/query.py
"""
Query-string → store query translation for the list endpoint.

``translate`` turns the recognised parameters into a ``QuerySpec``:

- ``category``  equality on ``category`` (ignored when empty)
- ``minPrice``  ``price >= value``; a value that is not a finite number
                raises ``InvalidQuery`` instead of producing a filter that
                silently matches nothing
- ``fields``    comma separated projection; ``id`` selects the identifier
- ``sort``      only ``price`` (ascending) is recognised, anything else is
                ignored

Unknown parameters are ignored. The identifier never appears in a filter
built here.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from pymongo import ASCENDING

from .errors import InvalidQuery

ID_FIELD = "_id"
PUBLIC_ID_FIELD = "id"

SORTABLE_FIELDS = {"price": ("price", ASCENDING)}


@dataclass(frozen=True)
class Predicate:
    field: str
    op: str  # "eq" | "gte"
    value: Any

    def as_mongo(self) -> Any:
        if self.op == "eq":
            return self.value
        return {"$" + self.op: self.value}


@dataclass(frozen=True)
class QuerySpec:
    predicates: Tuple[Predicate, ...] = ()
    projection: FrozenSet[str] = field(default_factory=frozenset)
    sort: Optional[Tuple[str, int]] = None

    def mongo_filter(self) -> Dict[str, Any]:
        # one predicate per field, so the rendered dict does not depend on order
        return {p.field: p.as_mongo() for p in self.predicates}

    def mongo_projection(self) -> Optional[Dict[str, int]]:
        if not self.projection:
            return None
        proj = {name: 1 for name in sorted(self.projection)}
        # mongo returns _id unless told otherwise
        if ID_FIELD not in proj:
            proj[ID_FIELD] = 0
        return proj


def parse_min_price(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise InvalidQuery(f"minPrice must be a number, got {raw!r}")
    if not math.isfinite(value):
        raise InvalidQuery(f"minPrice must be a finite number, got {raw!r}")
    return value


def parse_fields(raw: str) -> FrozenSet[str]:
    names = set()
    for name in raw.split(","):
        name = name.strip()
        if not name:
            continue
        names.add(ID_FIELD if name == PUBLIC_ID_FIELD else name)
    return frozenset(names)


def translate(params: Mapping[str, Optional[str]]) -> QuerySpec:
    predicates = []

    category = params.get("category")
    if category:
        predicates.append(Predicate("category", "eq", category))

    min_price = params.get("minPrice")
    if min_price is not None and min_price.strip():
        predicates.append(Predicate("price", "gte", parse_min_price(min_price.strip())))

    fields = params.get("fields")
    projection = parse_fields(fields) if fields else frozenset()

    sort = SORTABLE_FIELDS.get(params.get("sort") or "")

    return QuerySpec(predicates=tuple(predicates), projection=projection, sort=sort)
