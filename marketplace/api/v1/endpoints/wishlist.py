import logging
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.core.errors import StoreError
from marketplace.crud import wishlist as crud_wishlist
from marketplace.models.user import User as UserModel
from marketplace.schemas.product import Product
from marketplace.schemas.wishlist import WishlistProduct, WishlistStatus, WishlistToggle

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[WishlistProduct])
async def get_wishlist(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """Products in the current user's wishlist"""
    rows = crud_wishlist.list_items(db, user_id=current_user.id)
    return [
        WishlistProduct(
            **Product.model_validate(row.product).model_dump(),
            added_at=row.created_at
        )
        for row in rows
    ]

@router.post("/toggle", response_model=WishlistStatus)
async def toggle_wishlist(
    item: WishlistToggle,
    response: Response,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Add the product to the wishlist, or remove it when already there
    """
    try:
        added = crud_wishlist.toggle(db, user_id=current_user.id, product_id=item.product_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to toggle product %s in wishlist", item.product_id)
        raise StoreError("Failed to update wishlist")

    if added:
        response.status_code = status.HTTP_201_CREATED
        return {"message": "Added to wishlist", "in_wishlist": True}
    return {"message": "Removed from wishlist", "in_wishlist": False}

@router.get("/{product_id}", response_model=WishlistStatus)
async def check_wishlist(
    product_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """Whether a product is in the current user's wishlist"""
    return {"in_wishlist": crud_wishlist.is_member(db, user_id=current_user.id, product_id=product_id)}
