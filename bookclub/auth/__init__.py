"""Authentication module"""

from bookclub.auth.credentials import AuthenticationError, authenticate
from bookclub.auth.jwt import (
    SessionUser,
    create_session_token,
    verify_session_token,
    get_current_session,
    get_optional_session,
    require_roles,
    require_admin,
)
from bookclub.auth.middleware import AuthRedirectMiddleware, route_decision

__all__ = [
    "AuthenticationError",
    "authenticate",
    "SessionUser",
    "create_session_token",
    "verify_session_token",
    "get_current_session",
    "get_optional_session",
    "require_roles",
    "require_admin",
    "AuthRedirectMiddleware",
    "route_decision",
]
