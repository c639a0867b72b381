"""Meet-up routes"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, get_optional_session, require_admin
from bookclub.models import MeetupCreateRequest, MeetupUpdateRequest
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return _as_utc(value).isoformat()


@router.get("")
async def list_meetups(
    session: Optional[SessionUser] = Depends(get_optional_session),
    db: DatabaseService = Depends(get_db),
):
    """Meet-ups, latest first. Drafts are only listed for admins."""
    published_only = not (session and session.is_admin)
    return db.list_meetups(published_only=published_only)


@router.get("/upcoming")
async def upcoming_meetups(db: DatabaseService = Depends(get_db)):
    """Published meet-ups that have not started yet, soonest first"""
    now = _to_utc_iso(datetime.now(timezone.utc))
    meetups = [m for m in db.list_meetups(published_only=True) if m["event_date"] >= now]
    return sorted(meetups, key=lambda m: m["event_date"])


@router.post("")
async def create_meetup(
    payload: MeetupCreateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Create a meet-up (admin only); month and year default from the UTC event date"""
    if payload.end_time and _as_utc(payload.end_time) <= _as_utc(payload.event_date):
        raise HTTPException(status_code=400, detail="End time must be after the start time")

    event_date = _as_utc(payload.event_date)
    data = payload.model_dump()
    data["event_date"] = event_date.isoformat()
    data["end_time"] = _to_utc_iso(payload.end_time)
    data["month"] = payload.month or event_date.month
    data["year"] = payload.year or event_date.year

    meetup = db.insert_row("meetups", {**data, "updated_at": _to_utc_iso(datetime.now(timezone.utc))})
    logger.info(f"Meetup {meetup['id']} created by {session.id}")
    return meetup


@router.put("")
async def update_meetup(
    payload: MeetupUpdateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Update or (un)publish a meet-up (admin only)"""
    updates = payload.model_dump(exclude_unset=True, exclude={"id"})
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    for field in ("event_date", "end_time"):
        if field in updates:
            updates[field] = _to_utc_iso(updates[field])

    updates["updated_at"] = _to_utc_iso(datetime.now(timezone.utc))
    meetup = db.update_row("meetups", payload.id, updates)
    if not meetup:
        raise HTTPException(status_code=404, detail="Meetup not found")
    return meetup


@router.delete("")
async def delete_meetup(
    id: str = Query(..., min_length=1, description="Meetup ID"),
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Delete a meet-up (admin only)"""
    if not db.delete_row("meetups", id):
        raise HTTPException(status_code=404, detail="Meetup not found")

    logger.info(f"Meetup {id} deleted by {session.id}")
    return {"success": True}
