import httpx


async def test_item_crud(client: httpx.AsyncClient):
    resp = await client.post(
        "/v1/items",
        json={"category": "tops", "name": "Linen shirt", "colors": ["White", "Navy ", "white"], "tags": ["Boho Chic"]},
    )
    assert resp.status_code == 200
    item = resp.json()
    assert item["colors"] == ["white", "navy"]
    assert item["tags"] == ["boho-chic"]
    assert item["usage_count"] == 0

    listed = await client.get("/v1/items")
    assert [i["id"] for i in listed.json()] == [item["id"]]

    patched = await client.patch(f"/v1/items/{item['id']}", json={"brand": "Acme", "purchase_price": 45.5})
    assert patched.status_code == 200
    assert patched.json()["brand"] == "Acme"
    assert patched.json()["purchase_price"] == 45.5

    deleted = await client.delete(f"/v1/items/{item['id']}")
    assert deleted.status_code == 204
    missing = await client.get(f"/v1/items/{item['id']}")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "item_not_found"


async def test_last_worn_implies_a_wear(client: httpx.AsyncClient):
    resp = await client.post("/v1/items", json={"category": "shoes", "last_worn": "2026-01-10"})
    assert resp.json()["usage_count"] == 1


async def test_wear_log_moves_last_worn_forward(client: httpx.AsyncClient):
    item = (await client.post("/v1/items", json={"category": "bottoms"})).json()

    resp = await client.post(f"/v1/items/{item['id']}/wear-log", json={"worn_date": "2026-03-01"})
    assert resp.status_code == 200
    assert resp.json()["usage_count"] == 1
    assert resp.json()["last_worn"] == "2026-03-01"

    resp = await client.post(f"/v1/items/{item['id']}/wear-log", json={"worn_date": "2026-02-01"})
    assert resp.json()["usage_count"] == 2
    assert resp.json()["last_worn"] == "2026-03-01"


async def test_rejects_bad_input(client: httpx.AsyncClient):
    assert (await client.post("/v1/items", json={"category": "hats"})).status_code == 422
    assert (await client.post("/v1/items", json={"category": "tops", "purchase_price": -1})).status_code == 422
    resp = await client.post("/v1/items", json={"category": "tops", "tags": ["x" * 30]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_length"


async def test_other_users_items_are_hidden(client: httpx.AsyncClient, make_item):
    theirs = await make_item(user_id="someone-else")
    resp = await client.get(f"/v1/items/{theirs.id}")
    assert resp.status_code == 404
    assert (await client.get("/v1/items")).json() == []
