import httpx

from closet.core.timeutil import local_today


async def _item(client, **body):
    resp = await client.post("/v1/items", json=body)
    assert resp.status_code == 200
    return resp.json()


async def test_rated_outfits_count_as_wears(client: httpx.AsyncClient):
    item = await _item(client, category="tops", purchase_price=60)
    for rating in (2, 4, 5):
        await client.post("/v1/feedback", json={"confidence_rating": rating, "item_ids": [item["id"]]})

    current = (await client.get(f"/v1/items/{item['id']}")).json()
    assert current["usage_count"] == 3
    assert current["last_worn"] == str(local_today())

    neglected = (await client.get("/v1/closet/neglected")).json()
    assert item["id"] not in [i["id"] for i in neglected]

    cpw = (await client.get(f"/v1/closet/cost-per-wear/{item['id']}")).json()
    assert cpw["total_wears"] == 3
    assert cpw["cost_per_wear"] == 20.0


async def test_challenge_wear_counts_for_cost_per_wear(client: httpx.AsyncClient):
    item = await _item(client, category="tops", purchase_price=40)
    challenge = (await client.post("/v1/challenges")).json()["challenge"]
    await client.post(f"/v1/challenges/{challenge['id']}/items/{item['id']}/worn")

    current = (await client.get(f"/v1/items/{item['id']}")).json()
    assert current["usage_count"] == 1
    assert current["last_worn"] == str(local_today())

    cpw = (await client.get(f"/v1/closet/cost-per-wear/{item['id']}")).json()
    assert cpw["total_wears"] == 1
    assert cpw["cost_per_wear"] == 40.0


async def test_manual_wear_log_counts_for_cost_per_wear(client: httpx.AsyncClient):
    item = await _item(client, category="shoes", purchase_price=90)
    await client.post(f"/v1/items/{item['id']}/wear-log", json={"worn_date": "2026-03-01"})
    await client.post(f"/v1/items/{item['id']}/wear-log", json={"worn_date": "2026-03-02"})

    cpw = (await client.get(f"/v1/closet/cost-per-wear/{item['id']}")).json()
    assert cpw["total_wears"] == 2
    assert cpw["cost_per_wear"] == 45.0


async def test_last_worn_on_capture_is_a_wear_event(client: httpx.AsyncClient):
    item = await _item(client, category="outerwear", purchase_price=100, last_worn="2026-02-14")
    cpw = (await client.get(f"/v1/closet/cost-per-wear/{item['id']}")).json()
    assert item["usage_count"] == 1
    assert cpw["total_wears"] == 1
