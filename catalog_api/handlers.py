# catalog_api/handlers.py
import logging
from typing import Any, Dict, Mapping, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder

from .database import ResourceStore
from .errors import EmptyPayload, InvalidIdentifier, MissingFields, NotFound
from .models import REQUIRED_FIELDS, parse_body
from .query import ID_FIELD, PUBLIC_ID_FIELD, translate

logger = logging.getLogger(__name__)

# Endpoint logic. Route functions in main.py only unpack the request and
# call into here. Every id-based operation validates the id first, then
# the body, and only then touches the store.


# ---------------------------
# Helpers
# ---------------------------
def parse_identifier(raw: str) -> ObjectId:
    if not ObjectId.is_valid(raw):
        raise InvalidIdentifier()
    return ObjectId(raw)


def check_required(doc: Dict[str, Any]) -> None:
    # price only has to be present: 0 is a valid price
    missing = []
    for name in REQUIRED_FIELDS:
        value = doc.get(name)
        if value is None or (name != "price" and value == ""):
            missing.append(name)
    if missing:
        raise MissingFields(missing)


def to_public(doc: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if ID_FIELD in doc:
        out[PUBLIC_ID_FIELD] = str(doc[ID_FIELD])
    out.update((k, v) for k, v in doc.items() if k != ID_FIELD)
    return jsonable_encoder(out, custom_encoder={ObjectId: str})


# ---------------------------
# Operations
# ---------------------------
async def list_resources_logic(store: ResourceStore, params: Mapping[str, Optional[str]]):
    spec = translate(params)
    docs = await store.find(spec)
    return {"count": len(docs), "resources": [to_public(d) for d in docs]}


async def get_resource_logic(store: ResourceStore, resource_id: str):
    oid = parse_identifier(resource_id)
    doc = await store.find_by_id(oid)
    if doc is None:
        raise NotFound()
    return to_public(doc)


async def create_resource_logic(store: ResourceStore, body: Any):
    doc = parse_body(body).supplied()
    check_required(doc)
    oid = await store.insert(doc)
    logger.info("created resource %s", oid)
    return {"message": "Resource created", "id": str(oid)}


async def replace_resource_logic(store: ResourceStore, resource_id: str, body: Any):
    oid = parse_identifier(resource_id)
    doc = parse_body(body).supplied()
    check_required(doc)
    # only the core fields are replaced; anything else on the document stays
    core = {name: doc[name] for name in REQUIRED_FIELDS}
    if not await store.merge(oid, core):
        raise NotFound()
    logger.info("replaced resource %s", oid)
    return {"message": "Resource updated", "id": str(oid)}


async def patch_resource_logic(store: ResourceStore, resource_id: str, body: Any):
    oid = parse_identifier(resource_id)
    fields = parse_body(body).supplied()
    if not fields:
        raise EmptyPayload()
    if not await store.merge(oid, fields):
        raise NotFound()
    logger.info("patched resource %s: %s", oid, sorted(fields))
    return {"message": "Resource updated", "id": str(oid)}


async def delete_resource_logic(store: ResourceStore, resource_id: str) -> None:
    oid = parse_identifier(resource_id)
    if not await store.delete(oid):
        raise NotFound()
    logger.info("deleted resource %s", oid)
