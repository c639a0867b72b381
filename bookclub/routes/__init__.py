"""API Routes"""

from bookclub.routes import (
    admin,
    auth,
    books,
    calendar,
    gallery,
    meetups,
    member_profile,
    members,
    portal_status,
    suggestions,
    votes,
)

__all__ = [
    "admin",
    "auth",
    "books",
    "calendar",
    "gallery",
    "meetups",
    "member_profile",
    "members",
    "portal_status",
    "suggestions",
    "votes",
]
