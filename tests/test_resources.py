# tests/test_resources.py
from bson import ObjectId
from fastapi.testclient import TestClient

from catalog_api.database import ResourceStore
from catalog_api.main import create_app
from tests.fakes import FakeCollection

BAD_IDS = ["123", "not-an-id", "zzzzzzzzzzzzzzzzzzzzzzzz", "64b7f0c2e1a2b3c4d5e6f7a"]


def make_client(docs=None):
    coll = FakeCollection(docs)
    client = TestClient(create_app(store=ResourceStore(coll, timeout=1.0)))
    return client, coll


def create(client, **body):
    r = client.post("/api/resources", json=body)
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_index_lists_endpoints():
    client, _ = make_client()
    r = client.get("/")
    assert r.status_code == 200
    assert "GET /api/resources/{id}" in r.json()["endpoints"]


def test_create_then_get_round_trip():
    client, _ = make_client()
    r = client.post("/api/resources", json={"name": "Pen", "price": 1.5, "category": "office"})
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Resource created"
    assert ObjectId.is_valid(body["id"])

    got = client.get(f"/api/resources/{body['id']}")
    assert got.status_code == 200
    assert got.json() == {"id": body["id"], "name": "Pen", "price": 1.5, "category": "office"}


def test_create_keeps_extra_fields_and_drops_client_id():
    client, coll = make_client()
    rid = create(client, name="Pen", price=2, category="office", color="blue", id="x", _id="y")
    stored = coll.raw(ObjectId(rid))
    assert stored["color"] == "blue"
    assert stored["_id"] == ObjectId(rid)
    assert "id" not in stored


def test_create_with_zero_price_succeeds():
    client, _ = make_client()
    rid = create(client, name="Sample", price=0, category="freebies")
    assert client.get(f"/api/resources/{rid}").json()["price"] == 0


def test_create_missing_fields():
    client, coll = make_client()
    r = client.post("/api/resources", json={"name": "", "price": None})
    assert r.status_code == 400
    assert r.json() == {
        "error": "Missing required fields",
        "code": "MissingFields",
        "fields": ["name", "price", "category"],
    }
    assert coll.calls == []


def test_create_rejects_non_numeric_price():
    client, coll = make_client()
    r = client.post("/api/resources", json={"name": "Pen", "price": "cheap", "category": "office"})
    assert r.status_code == 400
    assert r.json()["code"] == "InvalidPayload"
    assert coll.calls == []


def test_create_rejects_non_object_body():
    client, _ = make_client()
    r = client.post("/api/resources", json=["Pen", 1.5])
    assert r.status_code == 400
    assert r.json()["code"] == "InvalidPayload"


def test_get_unknown_id_is_not_found():
    client, _ = make_client()
    r = client.get(f"/api/resources/{ObjectId()}")
    assert r.status_code == 404
    assert r.json() == {"error": "Resource not found", "code": "NotFound"}


def test_malformed_ids_never_reach_the_store():
    client, coll = make_client()
    body = {"name": "Pen", "price": 1, "category": "office"}
    for bad in BAD_IDS:
        responses = [
            client.get(f"/api/resources/{bad}"),
            client.put(f"/api/resources/{bad}", json=body),
            client.patch(f"/api/resources/{bad}", json={"price": 2}),
            client.delete(f"/api/resources/{bad}"),
        ]
        for r in responses:
            assert r.status_code == 400
            assert r.json()["code"] == "InvalidIdentifier"
    assert coll.calls == []
    assert coll.database.pings == 0


def test_list_filters_sorts_and_counts():
    client, _ = make_client([
        {"name": "Desk", "price": 120, "category": "office"},
        {"name": "Pen", "price": 1.5, "category": "office"},
        {"name": "Clip", "price": 0.2, "category": "office"},
        {"name": "Mug", "price": 8, "category": "kitchen"},
    ])
    r = client.get("/api/resources", params={"category": "office", "minPrice": "1", "sort": "price"})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert [p["name"] for p in body["resources"]] == ["Pen", "Desk"]


def test_list_with_fields_hides_id_unless_asked():
    client, _ = make_client([{"name": "Pen", "price": 1.5, "category": "office"}])
    r = client.get("/api/resources", params={"fields": "name,price"})
    assert r.json()["resources"] == [{"name": "Pen", "price": 1.5}]

    r = client.get("/api/resources", params={"fields": "id,name"})
    (doc,) = r.json()["resources"]
    assert set(doc) == {"id", "name"}


def test_list_with_bad_min_price():
    client, coll = make_client()
    r = client.get("/api/resources", params={"minPrice": "abc"})
    assert r.status_code == 400
    assert r.json()["code"] == "InvalidQuery"
    assert coll.calls == []


def test_list_ignores_unknown_sort_and_params():
    client, _ = make_client([{"name": "Pen", "price": 1.5, "category": "office"}])
    r = client.get("/api/resources", params={"sort": "name", "page": "2"})
    assert r.status_code == 200
    assert r.json()["count"] == 1


def test_put_replaces_core_fields_and_keeps_the_rest():
    client, coll = make_client()
    rid = create(client, name="Pen", price=1.5, category="office", stock=40)
    client.patch(f"/api/resources/{rid}", json={"color": "blue"})

    r = client.put(f"/api/resources/{rid}", json={"name": "Pencil", "price": 0, "category": "school"})
    assert r.status_code == 200
    assert r.json() == {"message": "Resource updated", "id": rid}
    assert client.get(f"/api/resources/{rid}").json() == {
        "id": rid, "name": "Pencil", "price": 0, "category": "school", "stock": 40, "color": "blue",
    }
    assert coll.calls[-2:] == ["update_one", "find_one"]


def test_put_requires_core_fields():
    client, _ = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    r = client.put(f"/api/resources/{rid}", json={"name": "Pencil"})
    assert r.status_code == 400
    assert r.json()["fields"] == ["price", "category"]


def test_put_unknown_id_is_not_found():
    client, _ = make_client()
    r = client.put(f"/api/resources/{ObjectId()}", json={"name": "Pen", "price": 1, "category": "office"})
    assert r.status_code == 404


def test_patch_merges_only_supplied_fields():
    client, _ = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    r = client.patch(f"/api/resources/{rid}", json={"price": 2})
    assert r.status_code == 200
    doc = client.get(f"/api/resources/{rid}").json()
    assert doc == {"id": rid, "name": "Pen", "price": 2, "category": "office"}


def test_patch_can_add_extra_fields():
    client, _ = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    client.patch(f"/api/resources/{rid}", json={"stock": 40})
    assert client.get(f"/api/resources/{rid}").json()["stock"] == 40


def test_patch_empty_payload_is_rejected():
    client, coll = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    coll.calls.clear()
    for body in ({}, {"id": "abc"}, {"_id": "abc"}):
        r = client.patch(f"/api/resources/{rid}", json=body)
        assert r.status_code == 400
        assert r.json() == {"error": "Update payload is empty", "code": "EmptyPayload"}
    assert coll.calls == []


def test_patch_unknown_id_is_not_found():
    client, _ = make_client()
    r = client.patch(f"/api/resources/{ObjectId()}", json={"price": 3})
    assert r.status_code == 404


def test_delete_then_get_is_not_found():
    client, _ = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    r = client.delete(f"/api/resources/{rid}")
    assert r.status_code == 204
    assert r.content == b""
    assert client.get(f"/api/resources/{rid}").status_code == 404
    assert client.delete(f"/api/resources/{rid}").status_code == 404


def test_unmatched_route():
    client, _ = make_client()
    for r in (client.get("/api/nope"), client.post("/api/resources/extra/path", json={})):
        assert r.status_code == 404
        assert r.json() == {"error": "API endpoint not found"}


def test_unsupported_method_on_known_path():
    client, _ = make_client()
    r = client.delete("/api/resources")
    assert r.status_code == 404
    assert r.json() == {"error": "API endpoint not found"}


def test_pen_walkthrough():
    client, _ = make_client([{"name": "Lamp", "price": 30, "category": "office"}])
    rid = create(client, name="Pen", price=1.5, category="office")

    listed = client.get("/api/resources?category=office&minPrice=1&sort=price").json()
    assert [p["id"] for p in listed["resources"]][0] == rid

    client.patch(f"/api/resources/{rid}", json={"price": 2})
    doc = client.get(f"/api/resources/{rid}").json()
    assert doc["price"] == 2
    assert doc["name"] == "Pen"
    assert doc["category"] == "office"


def test_non_finite_prices_are_rejected():
    client, coll = make_client()
    headers = {"Content-Type": "application/json"}
    for raw in ("NaN", "Infinity", "-Infinity", "1e400"):
        body = '{"name": "Pen", "price": %s, "category": "office"}' % raw
        r = client.post("/api/resources", content=body, headers=headers)
        assert r.status_code == 400, raw
        assert r.json()["code"] == "InvalidPayload"
    assert coll.calls == []


def test_non_finite_price_on_update_is_rejected():
    client, coll = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    headers = {"Content-Type": "application/json"}
    r = client.patch(f"/api/resources/{rid}", content='{"price": NaN}', headers=headers)
    assert r.status_code == 400
    r = client.put(f"/api/resources/{rid}", content='{"name": "Pen", "price": 1e400, "category": "office"}',
                   headers=headers)
    assert r.status_code == 400
    assert client.get(f"/api/resources/{rid}").json()["price"] == 1.5


def test_malformed_id_wins_over_malformed_body():
    client, coll = make_client()
    for method in ("put", "patch"):
        for body in (["not", "an", "object"], {"price": "cheap"}, None):
            r = client.request(method.upper(), "/api/resources/not-an-id", json=body)
            assert r.status_code == 400
            assert r.json()["code"] == "InvalidIdentifier"
    assert coll.calls == []


def test_valid_id_with_malformed_body():
    client, _ = make_client()
    rid = create(client, name="Pen", price=1.5, category="office")
    r = client.patch(f"/api/resources/{rid}", json={"price": True})
    assert r.status_code == 400
    assert r.json()["code"] == "InvalidPayload"
    r = client.put(f"/api/resources/{rid}")
    assert r.status_code == 400
    assert r.json()["code"] == "InvalidPayload"
