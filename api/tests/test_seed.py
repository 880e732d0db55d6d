"""Sample collection loader."""
import asyncio

from pipe_catalog.seed import SAMPLE_PIPES, seed


def test_seed_is_idempotent(engine, sessions):
    first = asyncio.run(seed(sessions, engine))
    assert first == {"pipes": 2, "tobaccos": 2, "accessories": 1, "ratings": 3, "images": 2}

    second = asyncio.run(seed(sessions, engine))
    assert second == {"pipes": 0, "tobaccos": 0, "accessories": 0, "ratings": 0, "images": 0}


def test_seeded_catalog_is_searchable(engine, sessions, client):
    asyncio.run(seed(sessions, engine))
    data = client.get("/api/search", params={"q": "Peterson"}).json()
    assert data["total"] == 2
    by_type = {r["type"]: r for r in data["results"]}
    assert set(by_type) == {"pipe", "accessory"}

    pipe = by_type["pipe"]
    assert pipe["name"] == SAMPLE_PIPES[0]["name"]
    assert pipe["averageRating"] == 4.5
    assert pipe["totalRatings"] == 2
    assert pipe["images"] == ["/api/images/peterson-bent.jpg"]
    assert by_type["accessory"]["manufacturer"] == "Peterson"
