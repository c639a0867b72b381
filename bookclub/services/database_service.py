"""TinyDB database service"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List

from fastapi import Request
from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

logger = logging.getLogger(__name__)

TABLES = (
    "profiles",
    "members",
    "books",
    "suggestions",
    "votes",
    "gallery",
    "meetups",
    "portal_status",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp() -> str:
    return utcnow().isoformat()


def _copy(doc) -> Optional[dict]:
    # TinyDB caches query results; hand out copies so callers can't mutate them
    return dict(doc) if doc is not None else None


class DatabaseService:
    """TinyDB database service for book club data

    One instance is created on application startup and closed on shutdown.
    Check-then-write sequences (suggestion quota, vote uniqueness, member
    linking, reset token consumption) run under a single lock so they are
    atomic with respect to each other.
    """

    def __init__(self, db_path: Optional[str] = None, in_memory: bool = False):
        self.db: Optional[TinyDB] = None
        self._db_path: Optional[Path] = Path(db_path) if db_path else None
        self._in_memory = in_memory
        self._lock = threading.RLock()

    def connect(self):
        """Open the database (file storage, or memory storage for tests)"""
        if self.db is not None:
            return
        if self._in_memory:
            self.db = TinyDB(storage=MemoryStorage)
            logger.info("Database connected: in-memory")
        else:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self.db = TinyDB(str(self._db_path))
            logger.info(f"Database connected: {self._db_path}")

    def close(self):
        if self.db is not None:
            self.db.close()
            self.db = None
            logger.info("Database connection closed")

    def table(self, name: str):
        if name not in TABLES:
            raise ValueError(f"Unknown table: {name}")
        self.connect()
        return self.db.table(name)

    @property
    def profiles(self):
        return self.table("profiles")

    @property
    def members(self):
        return self.table("members")

    @property
    def books(self):
        return self.table("books")

    @property
    def suggestions(self):
        return self.table("suggestions")

    @property
    def votes(self):
        return self.table("votes")

    @property
    def gallery(self):
        return self.table("gallery")

    @property
    def meetups(self):
        return self.table("meetups")

    @property
    def portal_status(self):
        return self.table("portal_status")

    # =========================================================================
    # Generic Row Operations
    # =========================================================================

    def get_row(self, table_name: str, row_id: str) -> Optional[dict]:
        Row = Query()
        return _copy(self.table(table_name).get(Row.id == row_id))

    def insert_row(self, table_name: str, data: dict) -> dict:
        row = {"id": str(uuid.uuid4()), "created_at": timestamp(), **data}
        self.table(table_name).insert(row)
        logger.debug(f"Inserted {table_name} row {row['id']}")
        return dict(row)

    def update_row(self, table_name: str, row_id: str, updates: dict) -> Optional[dict]:
        """Update a row and return it, or None if no row has that id"""
        Row = Query()
        updated = self.table(table_name).update(updates, Row.id == row_id)
        if not updated:
            return None
        return self.get_row(table_name, row_id)

    def delete_row(self, table_name: str, row_id: str) -> bool:
        Row = Query()
        return bool(self.table(table_name).remove(Row.id == row_id))

    def count(self, table_name: str) -> int:
        # Called from worker threads; file storage shares one handle
        with self._lock:
            return len(self.table(table_name))

    def next_order_index(self, table_name: str) -> int:
        """One past the highest order_index in the table (1 for an empty table)"""
        indexes = [row.get("order_index") or 0 for row in self.table(table_name).all()]
        return max(indexes, default=0) + 1

    # =========================================================================
    # Profile Operations
    # =========================================================================

    def get_profile_by_id(self, profile_id: str) -> Optional[dict]:
        return self.get_row("profiles", profile_id)

    def get_profile_by_email(self, email: str) -> Optional[dict]:
        Profile = Query()
        return _copy(self.profiles.get(Profile.email == email.strip().lower()))

    def get_profile_by_reset_token(self, token: str) -> Optional[dict]:
        Profile = Query()
        return _copy(self.profiles.get(Profile.reset_token == token))

    def list_profiles(self) -> List[dict]:
        """All profiles, newest first"""
        profiles = [dict(p) for p in self.profiles.all()]
        return sorted(profiles, key=lambda p: p.get("created_at", ""), reverse=True)

    def create_profile(self, profile_data: dict) -> Optional[dict]:
        """Create a profile, or return None if the email is already taken"""
        with self._lock:
            email = profile_data["email"].strip().lower()
            if self.get_profile_by_email(email):
                return None
            profile = self.insert_row("profiles", {
                "password_hash": None,
                "role": "member",
                "is_active": True,
                "avatar_url": None,
                "reset_token": None,
                "reset_token_expiry": None,
                **profile_data,
                "email": email,
                "updated_at": timestamp(),
            })
        logger.info(f"Profile created: {profile['id']}")
        return profile

    def update_profile(self, profile_id: str, updates: dict) -> Optional[dict]:
        return self.update_row("profiles", profile_id, {**updates, "updated_at": timestamp()})

    def delete_profile(self, profile_id: str) -> bool:
        """Delete a profile and detach any member linked to it"""
        Member = Query()
        with self._lock:
            self.members.update({"profile_id": None}, Member.profile_id == profile_id)
            deleted = self.delete_row("profiles", profile_id)
        if deleted:
            logger.info(f"Profile deleted: {profile_id}")
        return deleted

    def set_reset_token(self, profile_id: str, token: str, expires_at: datetime) -> Optional[dict]:
        return self.update_profile(profile_id, {
            "reset_token": token,
            "reset_token_expiry": expires_at.isoformat(),
        })

    def consume_reset_token(self, profile_id: str, token: str, password_hash: str) -> bool:
        """Store a new password hash if the profile still holds this token

        The token is cleared in the same write so it can only be used once.
        """
        Profile = Query()
        with self._lock:
            updated = self.profiles.update(
                {
                    "password_hash": password_hash,
                    "reset_token": None,
                    "reset_token_expiry": None,
                    "updated_at": timestamp(),
                },
                (Profile.id == profile_id) & (Profile.reset_token == token),
            )
        return bool(updated)

    # =========================================================================
    # Member Operations
    # =========================================================================

    def list_members(self, visible_only: bool = False) -> List[dict]:
        Member = Query()
        if visible_only:
            members = self.members.search(Member.is_visible == True)  # noqa: E712
        else:
            members = self.members.all()
        return sorted((dict(m) for m in members), key=lambda m: m.get("order_index") or 0)

    def list_unlinked_members(self) -> List[dict]:
        return [m for m in self.list_members() if not m.get("profile_id")]

    def get_member_by_profile_id(self, profile_id: str) -> Optional[dict]:
        Member = Query()
        return _copy(self.members.get(Member.profile_id == profile_id))

    def create_member(self, member_data: dict) -> dict:
        with self._lock:
            if member_data.get("order_index") is None:
                member_data = {**member_data, "order_index": self.next_order_index("members")}
            member = self.insert_row("members", {
                "profile_id": None,
                "role": None,
                "bio": None,
                "image_url": None,
                "social_links": {},
                "is_visible": True,
                **member_data,
                "updated_at": timestamp(),
            })
        logger.info(f"Member created: {member['id']}")
        return member

    def update_member(self, member_id: str, updates: dict) -> Optional[dict]:
        return self.update_row("members", member_id, {**updates, "updated_at": timestamp()})

    def link_member_to_profile(self, member_id: str, profile_id: str) -> Optional[dict]:
        """Point an existing member at a profile

        Returns None if the member does not exist. Raises ValueError if either
        side is already linked elsewhere.
        """
        with self._lock:
            member = self.get_row("members", member_id)
            if not member:
                return None
            if member.get("profile_id") and member["profile_id"] != profile_id:
                raise ValueError("Member is already linked to another account")
            existing = self.get_member_by_profile_id(profile_id)
            if existing and existing["id"] != member_id:
                raise ValueError("This account is already linked to a member")
            linked = self.update_member(member_id, {"profile_id": profile_id})
        logger.info(f"Member {member_id} linked to profile {profile_id}")
        return linked

    def create_member_for_profile(self, profile: dict) -> dict:
        """Create a roster entry from a profile and link it"""
        with self._lock:
            if self.get_member_by_profile_id(profile["id"]):
                raise ValueError("This account is already linked to a member")
            name = profile.get("full_name") or profile["email"].split("@")[0]
            return self.create_member({
                "profile_id": profile["id"],
                "name": name,
                "role": "Member",
                "is_visible": True,
            })

    # =========================================================================
    # Book Operations
    # =========================================================================

    def list_books(
        self,
        category: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        selected: Optional[bool] = None,
    ) -> List[dict]:
        """Books matching the filters, most recent period first"""
        books = [dict(b) for b in self.books.all()]
        if category:
            books = [b for b in books if b.get("category") == category]
        if month:
            books = [b for b in books if b.get("month") == month]
        if year:
            books = [b for b in books if b.get("year") == year]
        if selected is not None:
            books = [b for b in books if bool(b.get("is_selected")) == selected]
        return sorted(books, key=lambda b: (b.get("year", 0), b.get("month", 0)), reverse=True)

    # =========================================================================
    # Suggestion & Vote Operations
    # =========================================================================

    def list_suggestions(self, month: int, year: int, category: str) -> List[dict]:
        """Suggestions for a period, most votes first"""
        Suggestion = Query()
        suggestions = self.suggestions.search(
            (Suggestion.month == month) & (Suggestion.year == year) & (Suggestion.category == category)
        )
        return sorted((dict(s) for s in suggestions), key=lambda s: s.get("vote_count", 0), reverse=True)

    def count_user_suggestions(self, user_id: str, month: int, year: int, category: str) -> int:
        Suggestion = Query()
        return self.suggestions.count(
            (Suggestion.user_id == user_id)
            & (Suggestion.month == month)
            & (Suggestion.year == year)
            & (Suggestion.category == category)
        )

    def create_suggestion_within_quota(self, suggestion_data: dict, limit: int) -> Optional[dict]:
        """Insert a suggestion unless the user already has `limit` for the period

        Returns None when the quota is reached.
        """
        with self._lock:
            current = self.count_user_suggestions(
                suggestion_data["user_id"],
                suggestion_data["month"],
                suggestion_data["year"],
                suggestion_data["category"],
            )
            if current >= limit:
                return None
            suggestion = self.insert_row("suggestions", {**suggestion_data, "vote_count": 0})
        logger.info(f"Suggestion {suggestion['id']} created by {suggestion['user_id']}")
        return suggestion

    def get_vote(self, user_id: str, suggestion_id: str) -> Optional[dict]:
        Vote = Query()
        return _copy(self.votes.get((Vote.user_id == user_id) & (Vote.suggestion_id == suggestion_id)))

    def create_vote(self, user_id: str, suggestion_id: str) -> Optional[int]:
        """Record a vote and bump the suggestion's vote count

        Returns the updated vote count, or None if the user already voted
        for this suggestion.
        """
        Suggestion = Query()
        with self._lock:
            if self.get_vote(user_id, suggestion_id):
                return None
            suggestion = self.get_row("suggestions", suggestion_id)
            if not suggestion:
                raise LookupError(f"Suggestion not found: {suggestion_id}")
            self.insert_row("votes", {"user_id": user_id, "suggestion_id": suggestion_id})
            vote_count = (suggestion.get("vote_count") or 0) + 1
            self.suggestions.update({"vote_count": vote_count}, Suggestion.id == suggestion_id)
        logger.info(f"Vote recorded: user {user_id} -> suggestion {suggestion_id} ({vote_count})")
        return vote_count

    # =========================================================================
    # Gallery & Meetup Operations
    # =========================================================================

    def list_gallery(self) -> List[dict]:
        return sorted((dict(g) for g in self.gallery.all()), key=lambda g: g.get("order_index") or 0)

    def list_meetups(self, published_only: bool = False) -> List[dict]:
        """Meetups, latest event first"""
        meetups = [dict(m) for m in self.meetups.all()]
        if published_only:
            meetups = [m for m in meetups if m.get("is_published")]
        return sorted(meetups, key=lambda m: m.get("event_date", ""), reverse=True)

    # =========================================================================
    # Portal Status Operations
    # =========================================================================

    def get_portal_status(self, month: int, year: int, category: str) -> Optional[dict]:
        Status = Query()
        return _copy(self.portal_status.get(
            (Status.month == month) & (Status.year == year) & (Status.category == category)
        ))

    def upsert_portal_status(self, month: int, year: int, category: str, flags: dict) -> dict:
        with self._lock:
            existing = self.get_portal_status(month, year, category)
            if existing:
                return self.update_row("portal_status", existing["id"], {**flags, "updated_at": timestamp()})
            return self.insert_row("portal_status", {
                "month": month,
                "year": year,
                "category": category,
                "is_suggestion_open": False,
                "is_voting_open": False,
                **flags,
                "updated_at": timestamp(),
            })


def get_db(request: Request) -> DatabaseService:
    """FastAPI dependency: the database service owned by the running app"""
    return request.app.state.db
