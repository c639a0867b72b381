"""Member roster routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, require_admin
from bookclub.models import MemberCreateRequest, MemberUpdateRequest
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()


def _clean(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


@router.get("")
async def list_members(
    visible_only: bool = Query(False, description="Only members shown on the public roster"),
    db: DatabaseService = Depends(get_db),
):
    """Roster members in display order (public)"""
    return db.list_members(visible_only=visible_only)


@router.post("")
async def create_member(
    payload: MemberCreateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Add a roster member (admin only)"""
    member = db.create_member({
        "name": payload.name,
        "role": _clean(payload.role),
        "bio": _clean(payload.bio),
        "image_url": _clean(payload.image_url),
        "social_links": payload.social_links,
        "order_index": payload.order_index,
        "is_visible": payload.is_visible,
    })
    return member


@router.put("")
async def update_member(
    payload: MemberUpdateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Update a roster member (admin only)"""
    updates = payload.model_dump(exclude_unset=True, exclude={"id"})
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    member = db.update_member(payload.id, updates)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


@router.delete("")
async def delete_member(
    id: str = Query(..., min_length=1, description="Member ID"),
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Remove a roster member (admin only)"""
    if not db.delete_row("members", id):
        raise HTTPException(status_code=404, detail="Member not found")

    logger.info(f"Member {id} deleted by {session.id}")
    return {"success": True}
