from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.core.config import settings
from marketplace.crud import catalog as crud_catalog
from marketplace.schemas.product import Product

router = APIRouter()

@router.get("", response_model=List[Product])
async def get_products(
    db: Session = Depends(deps.get_db),
    category: Optional[str] = None,
    search: Optional[str] = None,
    trending: bool = False,
    limit: int = Query(settings.PRODUCT_LIST_LIMIT, ge=1, le=crud_catalog.MAX_PRODUCT_LIMIT)
):
    """Get active products with filtering"""
    return crud_catalog.list_products(
        db,
        category=category,
        search=search,
        trending=trending,
        limit=limit
    )

@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: int,
    db: Session = Depends(deps.get_db)
):
    """
    Get product by ID
    """
    return crud_catalog.get_product(db, product_id)
