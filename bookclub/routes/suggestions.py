"""Book suggestion routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, get_current_session, get_optional_session
from bookclub.models import SuggestionCreateRequest
from bookclub.models.common import Category
from bookclub.routes.portal_status import portal_is_open
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()

SUGGESTIONS_PER_PERIOD = 3


@router.get("")
async def list_suggestions(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(...),
    category: Category = Query(...),
    session: Optional[SessionUser] = Depends(get_optional_session),
    db: DatabaseService = Depends(get_db),
):
    """Suggestions for a period, most votes first, with the submitter's name"""
    suggestions = db.list_suggestions(month, year, category)

    names = {}
    for suggestion in suggestions:
        user_id = suggestion.get("user_id")
        if user_id not in names:
            profile = db.get_profile_by_id(user_id) if user_id else None
            names[user_id] = profile.get("full_name") if profile else None
        suggestion["submitted_by"] = names[user_id]

    user_count = 0
    if session:
        user_count = sum(1 for s in suggestions if s.get("user_id") == session.id)

    return {
        "suggestions": suggestions,
        "user_suggestion_count": user_count,
        "limit": SUGGESTIONS_PER_PERIOD,
    }


@router.post("")
async def create_suggestion(
    payload: SuggestionCreateRequest,
    session: SessionUser = Depends(get_current_session),
    db: DatabaseService = Depends(get_db),
):
    """Suggest a book; at most three per member per month and category"""
    if not portal_is_open(db, payload.month, payload.year, payload.category, "is_suggestion_open"):
        raise HTTPException(status_code=400, detail="Suggestions are closed for this period")

    suggestion = db.create_suggestion_within_quota(
        {
            "user_id": session.id,
            "title": payload.title,
            "author": payload.author,
            "synopsis": payload.synopsis,
            "image_url": (payload.image_url or "").strip() or None,
            "category": payload.category,
            "month": payload.month,
            "year": payload.year,
        },
        limit=SUGGESTIONS_PER_PERIOD,
    )
    if suggestion is None:
        raise HTTPException(
            status_code=400,
            detail=f"You can only suggest {SUGGESTIONS_PER_PERIOD} books per month"
        )
    return suggestion
