"""JWT session tokens and request authentication"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from bookclub.config import settings
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)

# Security scheme - optional so the session cookie can be used instead
security = HTTPBearer(auto_error=False)

# JWT Configuration
ALGORITHM = "HS256"
SESSION_COOKIE = "session_token"

ADMIN_ROLES = ("admin", "super_admin")
ROLES = ("member",) + ADMIN_ROLES


@dataclass
class SessionUser:
    """Identity attached to an authenticated request"""
    id: str
    email: str
    name: Optional[str]
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def create_session_token(identity: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token carrying id and role"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.session_max_age_days)
    )
    to_encode = {
        "sub": identity["id"],
        "email": identity.get("email"),
        "name": identity.get("name"),
        "role": identity.get("role", "member"),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def verify_session_token(token: str) -> Optional[dict]:
    """Verify and decode a session token"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


def _session_from_token(db: DatabaseService, token: Optional[str]) -> Optional[SessionUser]:
    if not token:
        return None

    payload = verify_session_token(token)
    if payload is None or not payload.get("sub"):
        return None

    profile = db.get_profile_by_id(payload["sub"])
    if profile is None or profile.get("is_active") is False:
        return None

    return SessionUser(
        id=profile["id"],
        email=profile["email"],
        name=profile.get("full_name"),
        role=profile.get("role", "member"),
    )


async def get_current_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: DatabaseService = Depends(get_db),
) -> SessionUser:
    """Get the logged-in user, or fail with 401"""
    token = extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session = _session_from_token(db, token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_optional_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: DatabaseService = Depends(get_db),
) -> Optional[SessionUser]:
    """Get the logged-in user if there is one, None otherwise"""
    return _session_from_token(db, extract_token(request, credentials))


def require_roles(*roles: str):
    """
    Dependency factory that requires the session role to be one of `roles`.

    Missing session: 401. Wrong role: 403.
    """
    async def check_role(session: SessionUser = Depends(get_current_session)) -> SessionUser:
        if session.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return session
    return check_role


require_admin = require_roles(*ADMIN_ROLES)
