"""Gallery, Meet-up and Book Tests"""

from datetime import datetime, timedelta, timezone

import pytest

from tests.factories import create_meetup, gallery_create_request, meetup_create_request


class TestGallery:
    """Test gallery items"""

    @pytest.mark.asyncio
    async def test_member_adds_item_appended_last(self, test_client, member_headers):
        first = await test_client.post("/api/gallery", headers=member_headers, json=gallery_create_request())
        second = await test_client.post(
            "/api/gallery",
            headers=member_headers,
            json=gallery_create_request(title="Second")
        )

        assert first.status_code == 200
        assert first.json()["order_index"] == 1
        assert second.json()["order_index"] == 2

        listing = await test_client.get("/api/gallery")
        assert [g["title"] for g in listing.json()] == ["February Meet-up", "Second"]

    @pytest.mark.asyncio
    async def test_anonymous_cannot_add(self, test_client):
        response = await test_client.post("/api/gallery", json=gallery_create_request())

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_type(self, test_client, member_headers):
        response = await test_client.post(
            "/api/gallery",
            headers=member_headers,
            json={**gallery_create_request(), "type": "audio"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_member_cannot_delete(self, test_client, db, member_headers):
        item = db.insert_row("gallery", gallery_create_request())

        response = await test_client.delete(f"/api/gallery?id={item['id']}", headers=member_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_updates_and_deletes(self, test_client, db, admin_headers):
        item = db.insert_row("gallery", gallery_create_request())

        updated = await test_client.put(
            "/api/gallery",
            headers=admin_headers,
            json={"id": item["id"], "title": "Renamed"}
        )
        deleted = await test_client.delete(f"/api/gallery?id={item['id']}", headers=admin_headers)

        assert updated.json()["title"] == "Renamed"
        assert deleted.status_code == 200
        assert db.list_gallery() == []


class TestMeetups:
    """Test meet-ups"""

    @pytest.mark.asyncio
    async def test_drafts_only_listed_for_admins(self, test_client, db, admin_headers, member_headers):
        create_meetup(db, title="Published")
        create_meetup(db, title="Draft", is_published=False)

        public = await test_client.get("/api/meetups")
        member = await test_client.get("/api/meetups", headers=member_headers)
        admin = await test_client.get("/api/meetups", headers=admin_headers)

        assert [m["title"] for m in public.json()] == ["Published"]
        assert [m["title"] for m in member.json()] == ["Published"]
        assert {m["title"] for m in admin.json()} == {"Published", "Draft"}

    @pytest.mark.asyncio
    async def test_upcoming(self, test_client, db):
        now = datetime.now(timezone.utc)
        create_meetup(db, title="Past", event_date=now - timedelta(days=3))
        create_meetup(db, title="Later", event_date=now + timedelta(days=30))
        create_meetup(db, title="Soon", event_date=now + timedelta(days=2))

        response = await test_client.get("/api/meetups/upcoming")

        assert [m["title"] for m in response.json()] == ["Soon", "Later"]

    @pytest.mark.asyncio
    async def test_create_defaults_period_from_date(self, test_client, admin_headers):
        response = await test_client.post("/api/meetups", headers=admin_headers, json=meetup_create_request())

        assert response.status_code == 200
        data = response.json()
        assert data["month"] == 4
        assert data["year"] == 2025
        assert data["city"] == "Lagos"
        assert data["is_published"] is False
        assert data["event_date"] == "2025-04-05T16:00:00+00:00"

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, test_client, admin_headers):
        response = await test_client.post(
            "/api/meetups",
            headers=admin_headers,
            json=meetup_create_request(end_time="2025-04-05T15:00:00Z")
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_venue(self, test_client, admin_headers):
        response = await test_client.post(
            "/api/meetups",
            headers=admin_headers,
            json=meetup_create_request(venue_name="")
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_member_cannot_create(self, test_client, member_headers):
        response = await test_client.post("/api/meetups", headers=member_headers, json=meetup_create_request())

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_publish_and_delete(self, test_client, db, admin_headers):
        meetup = create_meetup(db, is_published=False)

        published = await test_client.put(
            "/api/meetups",
            headers=admin_headers,
            json={"id": meetup["id"], "is_published": True}
        )
        deleted = await test_client.delete(f"/api/meetups?id={meetup['id']}", headers=admin_headers)
        missing = await test_client.put(
            "/api/meetups",
            headers=admin_headers,
            json={"id": meetup["id"], "is_published": False}
        )

        assert published.json()["is_published"] is True
        assert deleted.status_code == 200
        assert missing.status_code == 404


class TestBooks:
    """Test books"""

    @pytest.mark.asyncio
    async def test_admin_adds_book_and_lists(self, test_client, admin_headers):
        body = {"title": "Half of a Yellow Sun", "author": "Adichie", "category": "fiction", "month": 3, "year": 2025}

        created = await test_client.post("/api/books", headers=admin_headers, json={**body, "is_selected": True})
        await test_client.post("/api/books", headers=admin_headers, json={**body, "title": "Runner-up"})

        assert created.status_code == 200
        selected = await test_client.get("/api/books?category=fiction&month=3&year=2025")
        everything = await test_client.get("/api/books?selected=false")
        assert [b["title"] for b in selected.json()] == ["Half of a Yellow Sun"]
        assert [b["title"] for b in everything.json()] == ["Runner-up"]

    @pytest.mark.asyncio
    async def test_featured(self, test_client, db):
        db.insert_row("books", {"title": "Fic", "author": "A", "category": "fiction", "month": 3, "year": 2025, "is_selected": True})
        db.insert_row("books", {"title": "NonFic", "author": "B", "category": "non-fiction", "month": 1, "year": 2025, "is_selected": True})

        response = await test_client.get("/api/books/featured?month=3&year=2025")

        assert [b["title"] for b in response.json()] == ["Fic", "NonFic"]

    @pytest.mark.asyncio
    async def test_delete_missing_book(self, test_client, admin_headers):
        response = await test_client.delete("/api/books?id=missing", headers=admin_headers)

        assert response.status_code == 404


class TestUpdateNulls:
    """Explicit nulls cannot clear required fields, so listings keep working"""

    @pytest.mark.asyncio
    async def test_meetup_event_date_null(self, test_client, db, admin_headers):
        meetup = create_meetup(db)

        response = await test_client.put(
            "/api/meetups",
            headers=admin_headers,
            json={"id": meetup["id"], "event_date": None}
        )

        assert response.status_code == 400
        assert (await test_client.get("/api/meetups")).status_code == 200
        assert (await test_client.get("/api/meetups/upcoming")).status_code == 200

    @pytest.mark.asyncio
    async def test_meetup_end_time_can_be_cleared(self, test_client, db, admin_headers):
        meetup = create_meetup(db)

        response = await test_client.put(
            "/api/meetups",
            headers=admin_headers,
            json={"id": meetup["id"], "end_time": None}
        )

        assert response.status_code == 200
        assert response.json()["end_time"] is None

    @pytest.mark.asyncio
    async def test_book_year_null(self, test_client, db, admin_headers):
        book = db.insert_row("books", {"title": "A", "author": "B", "category": "fiction", "month": 1, "year": 2025, "is_selected": True})
        db.insert_row("books", {"title": "C", "author": "D", "category": "fiction", "month": 2, "year": 2025, "is_selected": True})

        response = await test_client.put(
            "/api/books",
            headers=admin_headers,
            json={"id": book["id"], "year": None}
        )

        assert response.status_code == 400
        listing = await test_client.get("/api/books")
        assert listing.status_code == 200
        assert len(listing.json()) == 2

    @pytest.mark.asyncio
    async def test_gallery_title_null(self, test_client, db, admin_headers):
        item = db.insert_row("gallery", gallery_create_request())

        response = await test_client.put(
            "/api/gallery",
            headers=admin_headers,
            json={"id": item["id"], "title": None}
        )

        assert response.status_code == 400
        assert db.get_row("gallery", item["id"])["title"] == "February Meet-up"


class TestMeetupPeriod:
    """Default month and year follow the stored UTC event date"""

    @pytest.mark.asyncio
    async def test_offset_date_crossing_year(self, test_client, admin_headers):
        response = await test_client.post(
            "/api/meetups",
            headers=admin_headers,
            json=meetup_create_request(event_date="2025-01-01T00:30:00+01:00")
        )

        data = response.json()
        assert data["event_date"] == "2024-12-31T23:30:00+00:00"
        assert data["month"] == 12
        assert data["year"] == 2024

    @pytest.mark.asyncio
    async def test_explicit_period_kept(self, test_client, admin_headers):
        response = await test_client.post(
            "/api/meetups",
            headers=admin_headers,
            json=meetup_create_request(event_date="2025-03-01T00:30:00+01:00", month=3, year=2025)
        )

        assert response.json()["month"] == 3
