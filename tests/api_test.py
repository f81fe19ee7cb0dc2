"""HTTP surface: status codes, camelCase payloads and error bodies"""

from datetime import date, timedelta
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

from streamshelf.api import create_app
from streamshelf.config import Settings
from tests.factories import content_payload, upcoming_payload


@pytest_asyncio.fixture
async def client(db_pool):
    app = create_app(Settings(db_name="test_db"), manage_pool=False)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestUpcomingApi:
    @pytest.mark.asyncio
    async def test_create_returns_camel_case(self, client):
        response = await client.post("/api/upcoming-content", json=upcoming_payload(2))

        assert response.status_code == 201
        body = response.json()
        assert body["sectionOrder"] == 2
        assert body["releaseDate"] == upcoming_payload(2)["releaseDate"]
        assert "id" in body

    @pytest.mark.asyncio
    async def test_insert_shifts_and_lists_in_order(self, client):
        for order in (1, 2):
            await client.post("/api/upcoming-content", json=upcoming_payload(order))
        await client.post("/api/upcoming-content", json=upcoming_payload(1, title="front"))

        listed = (await client.get("/api/upcoming-content")).json()

        assert [(e["title"], e["sectionOrder"]) for e in listed] == [
            ("front", 1),
            ("Upcoming 1", 2),
            ("Upcoming 2", 3),
        ]

    @pytest.mark.asyncio
    async def test_invalid_body_is_400(self, client):
        response = await client.post(
            "/api/upcoming-content", json=upcoming_payload(1, sectionOrder=0)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid data"
        assert response.json()["details"]

    @pytest.mark.asyncio
    async def test_capacity_is_409(self, client):
        for order in range(1, 21):
            await client.post("/api/upcoming-content", json=upcoming_payload(order))

        response = await client.post("/api/upcoming-content", json=upcoming_payload(5))

        assert response.status_code == 409
        assert response.json() == {
            "error": "Maximum of 20 upcoming content items allowed. Please delete some items first."
        }

    @pytest.mark.asyncio
    async def test_update_get_delete(self, client):
        created = (
            await client.post("/api/upcoming-content", json=upcoming_payload(1))
        ).json()
        url = f"/api/upcoming-content/{created['id']}"

        updated = await client.put(url, json={"title": "Renamed"})
        fetched = await client.get(url)
        deleted = await client.delete(url)
        missing = await client.get(url)

        assert updated.status_code == 200
        assert fetched.json()["title"] == "Renamed"
        assert deleted.status_code == 204
        assert missing.status_code == 404
        assert missing.json() == {"error": "Upcoming content not found"}

    @pytest.mark.asyncio
    async def test_display(self, client):
        past = (date.today() - timedelta(days=3)).isoformat()
        await client.post(
            "/api/upcoming-content", json=upcoming_payload(1, title="out", releaseDate=past)
        )
        await client.post("/api/upcoming-content", json=upcoming_payload(2, title="in"))

        shown = (await client.get("/api/upcoming-content/display")).json()

        assert [entry["title"] for entry in shown] == ["in"]


class TestContentApi:
    @pytest.mark.asyncio
    async def test_crud(self, client):
        created = await client.post("/api/content", json=content_payload())
        content_id = created.json()["id"]

        listed = await client.get("/api/content")
        updated = await client.put(f"/api/content/{content_id}", json={"views": "10K"})
        deleted = await client.delete(f"/api/content/{content_id}")

        assert created.status_code == 201
        assert [item["id"] for item in listed.json()] == [content_id]
        assert updated.json()["views"] == "10K"
        assert deleted.status_code == 204

    @pytest.mark.asyncio
    async def test_submit_draft(self, client):
        draft = {
            "contentType": "movie",
            "title": "Heat",
            "thumbnailUrl": "https://img/heat.jpg",
            "videoUrl": "https://video/heat.mp4",
            "genres": ["Crime", ""],
            "year": "1995",
            "duration": "2h 50m",
            "rating": "R",
        }

        created = await client.post("/api/content/drafts", json=draft)
        incomplete = await client.post("/api/content/drafts", json={"title": "Heat"})

        assert created.status_code == 201
        assert created.json()["genres"] == ["Crime"]
        assert created.json()["releaseYear"] == 1995
        assert incomplete.status_code == 400
        assert incomplete.json() == {"error": "Please fill in all required fields"}

    @pytest.mark.asyncio
    async def test_unknown_id(self, client):
        response = await client.get(f"/api/content/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Content not found"}

    @pytest.mark.asyncio
    async def test_shelves(self, client):
        await client.post("/api/content", json=content_payload(genres=["Comedy"]))

        shelves = (await client.get("/api/shelves")).json()

        by_title = {shelf["title"]: shelf["items"] for shelf in shelves}
        assert len(by_title["Comedy"]) == 1
        assert by_title["Drama"] == []
        assert by_title["Comedy"][0]["releaseYear"] == 2023
