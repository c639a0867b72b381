"""Password hashing, strength rules and reset tokens"""

import re
import secrets
from typing import Optional

from passlib.context import CryptContext

from bookclub.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Malformed hash in the store
        return False


def validate_password_strength(password: str) -> Optional[str]:
    """Return an error message if the password is too weak, else None"""
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter."
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter."
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number."
    return None


def generate_reset_token() -> str:
    """256-bit random token, hex encoded"""
    return secrets.token_hex(32)
