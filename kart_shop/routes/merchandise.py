"""Merchandise API routes"""

from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.config import settings
from ..models.merchandise import (
    Merchandise,
    MerchandiseCategory,
    MerchandiseSearchResponse,
    MerchandiseSortField,
    MerchandiseUpdateRequest,
    RatingRequest,
    RestockRequest,
    SortOrder,
)
from ..database.merchandise import merchandise_db
from ..security.identity import require_admin, require_user

router = APIRouter(prefix="/api/merchandise", tags=["Merchandise"])


@router.get("", response_model=MerchandiseSearchResponse)
async def search_merchandise(
    query: Optional[str] = Query(None, description="Search query"),
    category: Optional[MerchandiseCategory] = Query(None, description="Filter by category"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price"),
    in_stock_only: bool = Query(True, description="Only show in-stock items"),
    sort_by: Optional[MerchandiseSortField] = Query(None, description="Sort field"),
    sort_order: SortOrder = Query(SortOrder.ASC, description="Sort direction"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Search the merchandise catalog"""
    items, total = merchandise_db.search(
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=in_stock_only,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )

    return MerchandiseSearchResponse(
        items=items,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/categories", response_model=list[str])
async def list_categories():
    """List all merchandise categories"""
    return [c.value for c in MerchandiseCategory]


@router.get("/low-stock", response_model=list[Merchandise])
async def low_stock(threshold: Optional[int] = Query(None, ge=0)):
    """Items running low, lowest stock first"""
    if threshold is None:
        threshold = settings.low_stock_threshold
    return merchandise_db.get_low_stock(threshold)


@router.get("/{merchandise_id}", response_model=Merchandise)
async def get_merchandise(merchandise_id: str):
    """Get a merchandise item by ID"""
    item = merchandise_db.get_merchandise(merchandise_id)
    if not item:
        raise HTTPException(status_code=404, detail="Merchandise not found")
    return item


@router.patch("/{merchandise_id}", response_model=Merchandise)
async def update_merchandise(
    merchandise_id: str,
    request: MerchandiseUpdateRequest,
    admin: str = Depends(require_admin),
):
    """Update price, stock, availability or description of an item (admin)"""
    item = merchandise_db.update_merchandise(
        merchandise_id, **request.model_dump(exclude_unset=True)
    )
    if not item:
        raise HTTPException(status_code=404, detail="Merchandise not found")
    return item


@router.post("/{merchandise_id}/ratings", response_model=Merchandise)
async def rate_merchandise(
    merchandise_id: str,
    request: RatingRequest,
    user: str = Depends(require_user),
):
    """Add a 1-5 star rating"""
    item = merchandise_db.add_rating(merchandise_id, request.rating)
    if not item:
        raise HTTPException(status_code=404, detail="Merchandise not found")
    return item


@router.post("/{merchandise_id}/restock", response_model=Merchandise)
async def restock_merchandise(
    merchandise_id: str,
    request: RestockRequest,
    admin: str = Depends(require_admin),
):
    """Add units to stock (admin)"""
    if not merchandise_db.restock(merchandise_id, request.quantity):
        raise HTTPException(status_code=404, detail="Merchandise not found")
    return merchandise_db.get_merchandise(merchandise_id)
