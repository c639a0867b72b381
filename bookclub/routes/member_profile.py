"""Member self-service profile and account linking routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, get_current_session, require_admin
from bookclub.models import MemberLinkRequest, MemberProfileUpdateRequest
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()

SELF_EDITABLE_FIELDS = ("name", "bio", "image_url", "social_links")
ADMIN_EDITABLE_FIELDS = SELF_EDITABLE_FIELDS + ("role", "is_visible")


@router.get("/profile")
async def get_member_profile(
    member_id: Optional[str] = Query(None, alias="memberId"),
    profile_id: Optional[str] = Query(None, alias="profileId"),
    session: SessionUser = Depends(get_current_session),
    db: DatabaseService = Depends(get_db),
):
    """
    Roster entry linked to the current account.
    Admins may look up any member by memberId or profileId.
    """
    if member_id and session.is_admin:
        member = db.get_row("members", member_id)
        if not member:
            raise HTTPException(status_code=404, detail="Member not found")
        return {"member": member}

    target_profile_id = profile_id if profile_id and session.is_admin else session.id
    return {"member": db.get_member_by_profile_id(target_profile_id)}


@router.put("/profile")
async def update_member_profile(
    payload: MemberProfileUpdateRequest,
    session: SessionUser = Depends(get_current_session),
    db: DatabaseService = Depends(get_db),
):
    """Edit a roster entry: owners edit their own details, admins any entry"""
    member = db.get_row("members", payload.member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    if not session.is_admin and member.get("profile_id") != session.id:
        raise HTTPException(status_code=403, detail="You can only edit your own profile")

    allowed = ADMIN_EDITABLE_FIELDS if session.is_admin else SELF_EDITABLE_FIELDS
    submitted = payload.model_dump(exclude_unset=True)
    updates = {field: submitted[field] for field in allowed if field in submitted}

    updated = db.update_member(member["id"], updates)
    return {"member": updated, "message": "Profile updated successfully"}


@router.post("/profile")
async def link_member_profile(
    payload: MemberLinkRequest,
    session: SessionUser = Depends(get_current_session),
    db: DatabaseService = Depends(get_db),
):
    """
    Link an account to the roster (admin only).

    With memberId the existing unlinked member is linked; without it a new
    member is created from the account's name and linked.
    """
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Only admins can link profiles to members")

    profile = db.get_profile_by_id(payload.profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    try:
        if payload.member_id:
            member = db.link_member_to_profile(payload.member_id, profile["id"])
            if member is None:
                raise HTTPException(status_code=404, detail="Member not found")
            message = "Member linked to profile successfully"
        else:
            member = db.create_member_for_profile(profile)
            message = "Member created and linked successfully"
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Profile {profile['id']} linked to member {member['id']} by {session.id}")
    return {"member": member, "message": message}


@router.get("/unlinked")
async def list_unlinked_members(
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Roster members not yet linked to an account (admin only)"""
    return db.list_unlinked_members()
