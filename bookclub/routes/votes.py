"""Voting routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from bookclub.auth.jwt import SessionUser, get_current_session
from bookclub.models import VoteCreateRequest
from bookclub.routes.portal_status import portal_is_open
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("")
async def create_vote(
    payload: VoteCreateRequest,
    session: SessionUser = Depends(get_current_session),
    db: DatabaseService = Depends(get_db),
):
    """Vote for a suggestion once; returns the updated vote count"""
    suggestion = db.get_row("suggestions", payload.suggestion_id)
    if not suggestion:
        raise HTTPException(status_code=404, detail="Suggestion not found")

    if not portal_is_open(db, suggestion["month"], suggestion["year"], suggestion["category"], "is_voting_open"):
        raise HTTPException(status_code=400, detail="Voting is closed for this period")

    try:
        vote_count = db.create_vote(session.id, payload.suggestion_id)
    except LookupError:
        # Deleted between the lookup and the vote
        raise HTTPException(status_code=404, detail="Suggestion not found")

    if vote_count is None:
        raise HTTPException(status_code=400, detail="You have already voted for this book")

    return {"success": True, "vote_count": vote_count}
