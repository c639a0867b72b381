"""Authentication routes: login, session, password reset"""

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Response

from bookclub.auth.credentials import AuthenticationError, authenticate
from bookclub.auth.jwt import SESSION_COOKIE, SessionUser, create_session_token, get_current_session
from bookclub.auth.passwords import (
    generate_reset_token,
    hash_password,
    validate_password_strength,
)
from bookclub.config import settings
from bookclub.models import ForgotPasswordRequest, LoginRequest, ResetPasswordRequest
from bookclub.services.database_service import DatabaseService, get_db
from bookclub.services.email_service import EmailService, get_email_service

logger = logging.getLogger(__name__)
router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account exists with this email, you will receive a password reset link."


def reset_password_url(token: str) -> str:
    return f"{settings.app_url.rstrip('/')}/auth/reset-password?token={token}"


@router.post("/login")
async def login(
    payload: LoginRequest,
    response: Response,
    db: DatabaseService = Depends(get_db),
):
    """
    Check email/password and start a session.
    The token is returned in the body and set as an httpOnly cookie.
    """
    try:
        identity = authenticate(db, payload.email, payload.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))

    token = create_session_token(identity)
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.session_max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
    )

    logger.info(f"Login success for profile {identity['id']}")
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": identity,
    }


@router.post("/logout")
async def logout(response: Response):
    """
    Logout user.
    Sessions are stateless tokens; this clears the session cookie.
    """
    response.delete_cookie(SESSION_COOKIE)
    return {"message": "Logged out successfully"}


@router.get("/session")
async def get_session(session: SessionUser = Depends(get_current_session)):
    """Current session identity"""
    return {
        "user": {
            "id": session.id,
            "email": session.email,
            "name": session.name,
            "role": session.role,
        }
    }


@router.post("/forgot-password")
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: DatabaseService = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Email a one-hour reset link. Responds the same way for unknown emails."""
    profile = db.get_profile_by_email(payload.email)
    if not profile:
        return {"message": FORGOT_PASSWORD_MESSAGE}

    token = generate_reset_token()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_token_expire_minutes)
    db.set_reset_token(profile["id"], token, expires_at)

    email_service.send_password_reset_email(
        to_email=profile["email"],
        full_name=profile.get("full_name"),
        reset_url=reset_password_url(token),
    )

    logger.info(f"Password reset requested for profile {profile['id']}")
    return {"message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password")
async def reset_password(
    payload: ResetPasswordRequest,
    db: DatabaseService = Depends(get_db),
):
    """Set a new password using a reset or invite token (single use)"""
    weakness = validate_password_strength(payload.password)
    if weakness:
        raise HTTPException(status_code=400, detail=weakness)

    profile = db.get_profile_by_reset_token(payload.token)
    if not profile:
        raise HTTPException(
            status_code=400,
            detail="This reset link is invalid or has already been used. Please request a new one."
        )

    expiry = profile.get("reset_token_expiry")
    if not expiry or datetime.fromisoformat(expiry) < datetime.now(timezone.utc):
        raise HTTPException(
            status_code=400,
            detail="This reset link has expired. Please request a new one."
        )

    if not db.consume_reset_token(profile["id"], payload.token, hash_password(payload.password)):
        # Another request used the token first
        raise HTTPException(
            status_code=400,
            detail="This reset link is invalid or has already been used. Please request a new one."
        )

    logger.info(f"Password updated for profile {profile['id']}")
    return {"message": "Password updated successfully"}
