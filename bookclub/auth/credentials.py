"""Email/password credential check"""

import logging

from bookclub.auth.passwords import verify_password
from bookclub.services.database_service import DatabaseService

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Credentials were rejected; the message is safe to show the user"""


def authenticate(db: DatabaseService, email: str, password: str) -> dict:
    """Check credentials and return the identity to embed in a session

    Raises AuthenticationError when the profile is missing, deactivated,
    has no password yet, or the password does not match.
    """
    if not email or not password:
        raise AuthenticationError("Email and password are required")

    profile = db.get_profile_by_email(email)
    if not profile:
        raise AuthenticationError("Invalid email or password")

    if profile.get("is_active") is False:
        logger.warning(f"Login attempt for deactivated profile {profile['id']}")
        raise AuthenticationError("Your account has been deactivated")

    if not profile.get("password_hash"):
        raise AuthenticationError("Please set your password using the forgot password link")

    if not verify_password(password, profile["password_hash"]):
        raise AuthenticationError("Invalid email or password")

    return {
        "id": profile["id"],
        "email": profile["email"],
        "name": profile.get("full_name"),
        "role": profile.get("role", "member"),
        "image": profile.get("avatar_url"),
    }
