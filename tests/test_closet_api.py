import uuid
from datetime import timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from closet.core.db import Base, get_session
from closet.core.state import get_event_sink
from closet.core.timeutil import local_today
from closet.events.providers import DatabaseEventSink
from closet.events.store import write_event
from closet.events.types import AnalyticsEvent, CHALLENGE_COMPLETED, CHALLENGE_CREATED, RECOMMENDATION_GENERATED
from closet.main import app
from closet.services.anti_consumption.recommendations import NO_SIMILAR_ITEMS_MESSAGE


async def _item(client, **body):
    resp = await client.post("/v1/items", json=body)
    assert resp.status_code == 200
    return resp.json()


async def test_health(client: httpx.AsyncClient):
    resp = await client.get("/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


async def test_shop_your_closet(client: httpx.AsyncClient, sink):
    a = await _item(client, category="tops", colors=["blue", "white"])
    b = await _item(client, category="tops", colors=["blue", "navy"])

    resp = await client.post(
        "/v1/closet/shop-your-closet",
        json={"description": "blue oxford shirt", "category": "tops", "colors": ["blue"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert {i["id"] for i in body["similar_owned_items"]} == {a["id"], b["id"]}
    assert body["confidence_score"] == pytest.approx(0.667, abs=0.001)
    assert body["reasoning"][0] == "You already own 2 similar tops items"
    assert body["message"] is None
    assert sink.kinds() == [RECOMMENDATION_GENERATED]
    assert sink.events[0].payload["recommendation_id"] == body["id"]


async def test_shop_your_closet_nothing_similar(client: httpx.AsyncClient):
    await _item(client, category="tops", colors=["blue"])
    resp = await client.post(
        "/v1/closet/shop-your-closet",
        json={"description": "summer dress", "category": "dresses", "colors": ["blue"]},
    )
    body = resp.json()
    assert body["similar_owned_items"] == []
    assert body["confidence_score"] == 0.0
    assert body["reasoning"] == []
    assert body["message"] == NO_SIMILAR_ITEMS_MESSAGE


async def test_feedback_and_cost_per_wear(client: httpx.AsyncClient):
    item = await _item(client, category="outerwear", purchase_price=50)
    for rating in (3, 4, 5):
        resp = await client.post("/v1/feedback", json={"confidence_rating": rating, "item_ids": [item["id"]]})
        assert resp.status_code == 200
        assert resp.json()["item_ids"] == [item["id"]]

    assert len((await client.get("/v1/feedback")).json()) == 3

    resp = await client.get(f"/v1/closet/cost-per-wear/{item['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_wears"] == 3
    assert body["cost_per_wear"] == 16.67


async def test_cost_per_wear_unworn(client: httpx.AsyncClient):
    item = await _item(client, category="shoes", purchase_price=80)
    body = (await client.get(f"/v1/closet/cost-per-wear/{item['id']}")).json()
    assert body["total_wears"] == 0
    assert body["cost_per_wear"] == 80.0
    assert body["projected_cost_per_wear"] == 80.0


async def test_feedback_rejects_foreign_items(client: httpx.AsyncClient, make_item):
    theirs = await make_item(user_id="someone-else")
    resp = await client.post("/v1/feedback", json={"confidence_rating": 4, "item_ids": [str(theirs.id)]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_item_ids"
    resp = await client.post("/v1/feedback", json={"confidence_rating": 6, "item_ids": []})
    assert resp.status_code == 422


async def test_neglected_listing(client: httpx.AsyncClient):
    never = await _item(client, category="tops")
    await _item(client, category="tops", last_worn=str(local_today() - timedelta(days=1)))
    resp = await client.get("/v1/closet/neglected")
    assert [i["id"] for i in resp.json()] == [never["id"]]


async def test_challenge_flow(client: httpx.AsyncClient, sink):
    item = await _item(client, category="accessories")

    resp = await client.post("/v1/challenges")
    assert resp.status_code == 200
    challenge = resp.json()["challenge"]
    assert challenge["total_items"] == 1
    assert challenge["progress"] == 0
    assert challenge["status"] == "active"
    assert challenge["challenge_type"] == "neglected_items"
    assert challenge["target_items"][0]["id"] == item["id"]

    active = (await client.get("/v1/challenges/active")).json()["challenge"]
    assert active["id"] == challenge["id"]

    url = f"/v1/challenges/{challenge['id']}/items/{item['id']}/worn"
    done = (await client.post(url)).json()
    assert done["progress"] == 1
    assert done["status"] == "completed"
    again = (await client.post(url)).json()
    assert again["progress"] == 1

    assert sink.kinds() == [CHALLENGE_CREATED, CHALLENGE_COMPLETED]
    assert (await client.get("/v1/challenges/active")).json()["challenge"] is None
    assert len((await client.get("/v1/challenges")).json()) == 1


async def test_challenge_errors(client: httpx.AsyncClient):
    item = await _item(client, category="tops")
    challenge = (await client.post("/v1/challenges")).json()["challenge"]
    other = await _item(client, category="tops", last_worn=str(local_today()))

    resp = await client.post(f"/v1/challenges/{challenge['id']}/items/{other['id']}/worn")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_challenge_item"

    missing = "00000000-0000-0000-0000-000000000000"
    resp = await client.post(f"/v1/challenges/{missing}/items/{item['id']}/worn")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "challenge_not_found"


async def test_no_challenge_without_neglected_items(client: httpx.AsyncClient):
    await _item(client, category="tops", last_worn=str(local_today()))
    resp = await client.post("/v1/challenges")
    assert resp.status_code == 200
    assert resp.json()["challenge"] is None


async def test_monthly_insights(client: httpx.AsyncClient):
    item = await _item(client, category="tops")
    await client.post("/v1/feedback", json={"confidence_rating": 4, "item_ids": [item["id"]]})
    await client.post("/v1/feedback", json={"confidence_rating": 5, "item_ids": [item["id"]]})

    resp = await client.get("/v1/insights/monthly")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_outfits_rated"] == 2
    assert body["average_confidence_rating"] == 4.5
    assert body["wardrobe_utilization"] == 100.0
    assert body["most_confident_items"][0]["id"] == item["id"]

    assert (await client.get("/v1/insights/monthly", params={"month": 13, "year": 2026})).status_code == 400


async def test_shopping_insights(client: httpx.AsyncClient):
    today = local_today()
    await _item(client, category="tops", purchase_price=25, purchase_date=str(today))
    body = (await client.get("/v1/insights/shopping")).json()
    assert body["monthly_purchases"] == 1
    assert body["monthly_spend"] == 25.0
    assert body["streak_days"] == 0


async def test_recommendation_status(client: httpx.AsyncClient, session):
    rec_id = str(uuid.uuid4())
    event = AnalyticsEvent(
        kind=RECOMMENDATION_GENERATED,
        user_id="test-user",
        payload={
            "recommendation_id": rec_id,
            "target_item": {"description": "tee", "category": "tops", "colors": [], "style": None},
            "similar_item_ids": [],
            "confidence_score": 0.0,
            "reasoning": [],
        },
    )
    await write_event(session, event)

    viewed = (await client.post(f"/v1/closet/recommendations/{rec_id}/status", json={})).json()
    assert viewed["viewed_at"] is not None
    assert viewed["acted_upon"] is False

    acted = (await client.post(f"/v1/closet/recommendations/{rec_id}/status", json={"acted_upon": True})).json()
    assert acted["acted_upon"] is True
    assert acted["viewed_at"] == viewed["viewed_at"]

    resp = await client.post(f"/v1/closet/recommendations/{uuid.uuid4()}/status", json={})
    assert resp.status_code == 404


async def test_monthly_insights_rejects_out_of_range_year(client: httpx.AsyncClient):
    for year in (0, 1, 10000):
        resp = await client.get("/v1/insights/monthly", params={"month": 1, "year": year})
        assert resp.status_code == 422
    resp = await client.get("/v1/insights/monthly", params={"month": 12, "year": 9999})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_month"


async def test_shop_your_closet_category_is_case_insensitive(client: httpx.AsyncClient):
    owned = await _item(client, category="Tops", colors=["blue"])
    assert owned["category"] == "tops"
    resp = await client.post(
        "/v1/closet/shop-your-closet",
        json={"description": "blue tee", "category": " Tops ", "colors": ["Blue"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["target_item"]["category"] == "tops"
    assert [i["id"] for i in body["similar_owned_items"]] == [owned["id"]]


async def test_recommendation_logged_through_database_sink(client: httpx.AsyncClient, tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'closet.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    db_sink = DatabaseEventSink(factory)

    async def _session():
        async with factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_event_sink] = lambda: db_sink
    try:
        await _item(client, category="tops", colors=["blue"])
        rec = (
            await client.post(
                "/v1/closet/shop-your-closet",
                json={"description": "blue tee", "category": "tops", "colors": ["blue"]},
            )
        ).json()
        await db_sink.drain()

        resp = await client.post(f"/v1/closet/recommendations/{rec['id']}/status", json={"acted_upon": True})
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == rec["id"]
        assert body["acted_upon"] is True
        assert body["viewed_at"] is not None
    finally:
        await engine.dispose()
