"""Gallery routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from bookclub.auth.jwt import SessionUser, get_current_session, require_admin
from bookclub.models import GalleryCreateRequest, GalleryUpdateRequest
from bookclub.services.database_service import DatabaseService, get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def list_gallery(db: DatabaseService = Depends(get_db)):
    """Gallery items in display order (public)"""
    return db.list_gallery()


@router.post("")
async def create_gallery_item(
    payload: GalleryCreateRequest,
    session: SessionUser = Depends(get_current_session),
    db: DatabaseService = Depends(get_db),
):
    """Add a gallery item (any logged-in user); appended last unless an order is given"""
    order_index = payload.order_index
    if order_index is None:
        order_index = db.next_order_index("gallery")

    item = db.insert_row("gallery", {
        "type": payload.type,
        "url": payload.url,
        "title": payload.title,
        "description": (payload.description or "").strip() or None,
        "month": payload.month,
        "year": payload.year,
        "order_index": order_index,
    })
    logger.info(f"Gallery item {item['id']} added by {session.id}")
    return item


@router.put("")
async def update_gallery_item(
    payload: GalleryUpdateRequest,
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Update a gallery item (admin only)"""
    updates = payload.model_dump(exclude_unset=True, exclude={"id"})
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    item = db.update_row("gallery", payload.id, updates)
    if not item:
        raise HTTPException(status_code=404, detail="Gallery item not found")
    return item


@router.delete("")
async def delete_gallery_item(
    id: str = Query(..., min_length=1, description="Gallery item ID"),
    session: SessionUser = Depends(require_admin),
    db: DatabaseService = Depends(get_db),
):
    """Delete a gallery item (admin only)"""
    if not db.delete_row("gallery", id):
        raise HTTPException(status_code=404, detail="Gallery item not found")

    logger.info(f"Gallery item {id} deleted by {session.id}")
    return {"success": True}
