"""Calendar (.ics) export routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from bookclub.auth.jwt import SessionUser, get_optional_session
from bookclub.services.calendar_service import build_meetup_ics, ics_filename, parse_datetime
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()

DEFAULT_TITLE = "Book Club Meet-up"


def _ics_response(content: str, title: str) -> Response:
    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{ics_filename(title)}"'},
    )


@router.get("/calendar")
async def export_calendar(
    title: str = Query(DEFAULT_TITLE),
    description: str = Query(""),
    venue: str = Query(""),
    address: str = Query(""),
    start: str = Query(""),
    end: str = Query(""),
):
    """Build a calendar file from query parameters (end defaults to start + 3h)"""
    if not start:
        raise HTTPException(status_code=400, detail="Start date is required")

    title = title.strip() or DEFAULT_TITLE

    try:
        start_at = parse_datetime(start)
        end_at = parse_datetime(end) if end else None
    except ValueError:
        raise HTTPException(status_code=400, detail="Dates must be ISO-8601 timestamps")

    content = build_meetup_ics(
        title=title,
        start=start_at,
        end=end_at,
        description=description,
        venue=venue,
        address=address,
    )
    return _ics_response(content, title)


@router.get("/meetups/{meetup_id}/calendar")
async def export_meetup_calendar(
    meetup_id: str,
    session: SessionUser = Depends(get_optional_session),
    db: DatabaseService = Depends(get_db),
):
    """Calendar file for a stored meet-up"""
    meetup = db.get_row("meetups", meetup_id)
    if not meetup or (not meetup.get("is_published") and not (session and session.is_admin)):
        raise HTTPException(status_code=404, detail="Meetup not found")

    content = build_meetup_ics(
        title=meetup["title"],
        start=parse_datetime(meetup["event_date"]),
        end=parse_datetime(meetup["end_time"]) if meetup.get("end_time") else None,
        description=meetup.get("description") or "",
        venue=meetup.get("venue_name") or "",
        address=meetup.get("address") or "",
    )
    return _ics_response(content, meetup["title"])
