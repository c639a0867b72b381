"""Admin dashboard routes: stats and user management"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, require_admin
from bookclub.auth.passwords import generate_reset_token, hash_password, validate_password_strength
from bookclub.config import settings
from bookclub.models import ProfileResponse, UserCreateRequest, UserUpdateRequest
from bookclub.routes.auth import reset_password_url
from bookclub.services.database_service import DatabaseService, get_db
from bookclub.services.email_service import EmailService, get_email_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/stats")
async def get_stats(
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Dashboard counts, queried concurrently"""
    books, members, suggestions, gallery = await asyncio.gather(
        asyncio.to_thread(db.count, "books"),
        asyncio.to_thread(db.count, "profiles"),
        asyncio.to_thread(db.count, "suggestions"),
        asyncio.to_thread(db.count, "gallery"),
    )
    return {
        "books": books,
        "members": members,
        "suggestions": suggestions,
        "gallery": gallery,
    }


@router.get("/users", response_model=list[ProfileResponse])
async def list_users(
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """All login accounts, newest first"""
    return [ProfileResponse.from_row(p) for p in db.list_profiles()]


@router.post("/users")
async def create_user(
    payload: UserCreateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Create a member account.

    With a password the user gets a welcome email with their credentials;
    without one they get an invite link to set a password (valid 7 days).
    """
    password_hash = None
    reset_token = None
    reset_token_expiry = None

    if payload.password:
        weakness = validate_password_strength(payload.password)
        if weakness:
            raise HTTPException(status_code=400, detail=weakness)
        password_hash = hash_password(payload.password)
    else:
        reset_token = generate_reset_token()
        reset_token_expiry = (
            datetime.now(timezone.utc) + timedelta(days=settings.invite_token_expire_days)
        ).isoformat()

    profile = db.create_profile({
        "email": payload.email,
        "full_name": payload.full_name,
        "password_hash": password_hash,
        "reset_token": reset_token,
        "reset_token_expiry": reset_token_expiry,
        "role": "member",
    })
    if profile is None:
        raise HTTPException(status_code=400, detail="A user with this email already exists")

    if payload.password:
        email_service.send_welcome_email(
            to_email=profile["email"],
            full_name=payload.full_name,
            password=payload.password,
            login_url=f"{settings.app_url.rstrip('/')}/auth/login",
        )
    else:
        email_service.send_invite_email(
            to_email=profile["email"],
            full_name=payload.full_name,
            set_password_url=reset_password_url(reset_token),
            expires_days=settings.invite_token_expire_days,
        )

    logger.info(f"User {profile['id']} created by {session.id}")
    return {
        "message": "User created successfully",
        "user": {
            "id": profile["id"],
            "email": profile["email"],
            "full_name": profile["full_name"],
        },
    }


@router.put("/users", response_model=ProfileResponse)
async def update_user(
    payload: UserUpdateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Update name, role, active flag or avatar of an account"""
    updates = payload.model_dump(exclude_unset=True, exclude={"id"})
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    if payload.id == session.id and (
        updates.get("is_active") is False or updates.get("role", session.role) != session.role
    ):
        raise HTTPException(status_code=400, detail="You cannot change your own role or deactivate yourself")

    updated = db.update_profile(payload.id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    if "role" in updates:
        logger.info(f"Role of {payload.id} set to {updates['role']} by {session.id}")
    return ProfileResponse.from_row(updated)


@router.delete("/users")
async def delete_user(
    id: str = Query(..., min_length=1, description="Profile ID"),
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Delete an account; a linked member stays on the roster, unlinked"""
    if id == session.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    if not db.delete_profile(id):
        raise HTTPException(status_code=404, detail="User not found")

    logger.info(f"User {id} deleted by {session.id}")
    return {"success": True}
