"""Portal status routes: which feature (suggest/vote) is open for a period"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, require_admin
from bookclub.models import PortalStatusUpdateRequest
from bookclub.models.common import Category
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()


def portal_is_open(db: DatabaseService, month: int, year: int, category: str, flag: str) -> bool:
    """A period with no status record is open"""
    status = db.get_portal_status(month, year, category)
    if status is None:
        return True
    return bool(status.get(flag))


@router.get("")
async def get_portal_status(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(...),
    category: Category = Query(...),
    db: DatabaseService = Depends(get_db),
):
    """Status record for a period, or null (public)"""
    return db.get_portal_status(month, year, category)


@router.put("")
async def update_portal_status(
    payload: PortalStatusUpdateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Open or close suggestions/voting for a period (admin only)"""
    flags = payload.model_dump(include={"is_suggestion_open", "is_voting_open"}, exclude_none=True)
    if not flags:
        raise HTTPException(status_code=400, detail="No updates provided")

    status = db.upsert_portal_status(payload.month, payload.year, payload.category, flags)
    logger.info(
        f"Portal status {payload.category} {payload.month}/{payload.year} set to {flags} by {session.id}"
    )
    return status
