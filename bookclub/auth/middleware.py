"""Page-routing authorization middleware

API paths are not checked here; every API handler authorizes itself.
"""

import logging
import re
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from bookclub.auth.jwt import ADMIN_ROLES, SESSION_COOKIE, verify_session_token

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
HOME_PATH = "/"
RESET_PASSWORD_PATH = "/auth/reset-password"

# Static assets never go through the decision table
EXCLUDED_PATHS = re.compile(
    r"^/(_next/static|_next/image|favicon\.ico)|\.(svg|png|jpg|jpeg|gif|webp)$",
    re.IGNORECASE,
)


def route_decision(path: str, is_logged_in: bool, role: Optional[str] = None) -> Optional[str]:
    """Where to redirect a page request, or None to let it through"""
    if path.startswith("/api"):
        return None

    if path.startswith("/auth") and is_logged_in:
        # Reset page stays reachable for changing the password
        if path == RESET_PASSWORD_PATH:
            return None
        return HOME_PATH

    if path.startswith("/admin"):
        if not is_logged_in:
            return LOGIN_PATH
        if role not in ADMIN_ROLES:
            return HOME_PATH

    return None


def _session_claims(request: Request) -> Optional[dict]:
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        auth_header = request.headers.get("authorization", "")
        scheme, _, value = auth_header.partition(" ")
        if scheme.lower() == "bearer" and value:
            token = value.strip()
    if not token:
        return None
    return verify_session_token(token)


class AuthRedirectMiddleware(BaseHTTPMiddleware):
    """Redirects page requests according to `route_decision`"""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if EXCLUDED_PATHS.search(path):
            return await call_next(request)

        claims = _session_claims(request)
        target = route_decision(
            path,
            is_logged_in=claims is not None,
            role=claims.get("role") if claims else None,
        )
        if target is not None:
            logger.debug(f"Redirecting {path} -> {target}")
            return RedirectResponse(url=target, status_code=307)

        return await call_next(request)
