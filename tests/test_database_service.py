"""Database Service Tests

Tests for the atomic check-and-write operations.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from tests.factories import create_member, create_profile, create_suggestion


class TestProfiles:
    """Test profile storage"""

    def test_email_is_normalised_and_unique(self, db):
        first = create_profile(db, email="Mixed@BookClub.org")
        duplicate = create_profile(db, email="mixed@bookclub.org")

        assert first["email"] == "mixed@bookclub.org"
        assert duplicate is None

    def test_consume_reset_token_once(self, db):
        profile = create_profile(db, email="reset@bookclub.org")
        db.update_profile(profile["id"], {"reset_token": "abc"})

        assert db.consume_reset_token(profile["id"], "abc", "hash-1") is True
        assert db.consume_reset_token(profile["id"], "abc", "hash-2") is False
        assert db.get_profile_by_id(profile["id"])["password_hash"] == "hash-1"

    def test_returned_rows_are_copies(self, db):
        profile = create_profile(db, email="copy@bookclub.org")
        fetched = db.get_profile_by_id(profile["id"])
        fetched["role"] = "admin"

        assert db.get_profile_by_id(profile["id"])["role"] == "member"


class TestSuggestionQuota:
    """Test the suggestion quota"""

    def test_quota_enforced(self, db):
        data = {"user_id": "u1", "title": "T", "author": "A", "category": "fiction", "month": 5, "year": 2025}

        created = [db.create_suggestion_within_quota(dict(data), limit=3) for _ in range(4)]

        assert all(created[:3])
        assert created[3] is None

    def test_concurrent_submissions_respect_quota(self, db):
        data = {"user_id": "u1", "title": "T", "author": "A", "category": "fiction", "month": 5, "year": 2025}

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: db.create_suggestion_within_quota(dict(data), limit=3), range(10)))

        assert sum(1 for r in results if r) == 3
        assert db.count_user_suggestions("u1", 5, 2025, "fiction") == 3


class TestVotes:
    """Test vote recording"""

    def test_concurrent_votes_counted_once(self, db):
        suggestion = create_suggestion(db, user_id="author")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: db.create_vote("voter", suggestion["id"]), range(10)))

        assert results.count(1) == 1
        assert results.count(None) == 9
        assert db.get_row("suggestions", suggestion["id"])["vote_count"] == 1
        assert db.count("votes") == 1

    def test_missing_suggestion(self, db):
        with pytest.raises(LookupError):
            db.create_vote("voter", "missing")


class TestMemberLinking:
    """Test member/profile linking"""

    def test_link_missing_member(self, db):
        assert db.link_member_to_profile("missing", "p1") is None

    def test_relinking_same_pair_is_allowed(self, db):
        member = create_member(db, profile_id="p1")

        assert db.link_member_to_profile(member["id"], "p1")["profile_id"] == "p1"

    def test_profile_linked_to_one_member(self, db):
        create_member(db, name="A", profile_id="p1")
        other = create_member(db, name="B")

        with pytest.raises(ValueError):
            db.link_member_to_profile(other["id"], "p1")

    def test_delete_profile_unlinks(self, db):
        profile = create_profile(db, email="bye@bookclub.org")
        member = create_member(db, profile_id=profile["id"])

        assert db.delete_profile(profile["id"]) is True
        assert db.get_row("members", member["id"])["profile_id"] is None


class TestPortalStatus:
    """Test portal status upsert"""

    def test_upsert_keeps_one_record(self, db):
        db.upsert_portal_status(6, 2025, "fiction", {"is_voting_open": True})
        db.upsert_portal_status(6, 2025, "fiction", {"is_suggestion_open": True})

        status = db.get_portal_status(6, 2025, "fiction")
        assert status["is_voting_open"] is True
        assert status["is_suggestion_open"] is True
        assert db.count("portal_status") == 1
