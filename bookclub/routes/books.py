"""Book routes"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, require_admin
from bookclub.models import BookCreateRequest, BookUpdateRequest
from bookclub.models.common import Category
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def list_books(
    category: Optional[Category] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = None,
    selected: Optional[bool] = Query(True, description="Only books picked for their month"),
    db: DatabaseService = Depends(get_db),
):
    """Books, most recent month first (public)"""
    return db.list_books(category=category, month=month, year=year, selected=selected)


@router.get("/featured")
async def featured_books(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = None,
    db: DatabaseService = Depends(get_db),
):
    """This month's fiction pick plus the latest non-fiction pick"""
    now = datetime.now(timezone.utc)
    month = month or now.month
    year = year or now.year

    fiction = db.list_books(category="fiction", month=month, year=year, selected=True)[:1]
    # Non-fiction runs bi-monthly, so take the most recent pick
    non_fiction = db.list_books(category="non-fiction", selected=True)[:1]
    return fiction + non_fiction


@router.post("")
async def create_book(
    payload: BookCreateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Add a book (admin only)"""
    book = db.insert_row("books", payload.model_dump())
    logger.info(f"Book {book['id']} added by {session.id}")
    return book


@router.put("")
async def update_book(
    payload: BookUpdateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Update a book (admin only)"""
    updates = payload.model_dump(exclude_unset=True, exclude={"id"})
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    book = db.update_row("books", payload.id, updates)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.delete("")
async def delete_book(
    id: str = Query(..., min_length=1, description="Book ID"),
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Delete a book (admin only)"""
    if not db.delete_row("books", id):
        raise HTTPException(status_code=404, detail="Book not found")
    return {"success": True}
