import logging
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.core.errors import StoreError
from marketplace.crud import cart as crud_cart
from marketplace.models.user import User as UserModel
from marketplace.schemas.cart import (
    CartItem,
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartTotal
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[CartItem])
async def get_cart(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """Get current user's cart items"""
    try:
        return crud_cart.get_items(db, user_id=current_user.id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to fetch cart for user %s", current_user.id)
        raise StoreError("Failed to fetch cart items")

@router.get("/total", response_model=CartTotal)
async def get_cart_total(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """Subtotal and unit count of the current user's cart"""
    try:
        subtotal, item_count = crud_cart.get_total(db, user_id=current_user.id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to compute cart total for user %s", current_user.id)
        raise StoreError("Failed to calculate cart total")
    return {"subtotal": subtotal, "item_count": item_count}

@router.post("/add", response_model=CartItemResponse)
async def add_to_cart(
    item: CartItemCreate,
    response: Response,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Add item to cart, merging with an existing line for the same product
    """
    try:
        cart_item, created = crud_cart.add_item(
            db,
            user_id=current_user.id,
            product_id=item.product_id,
            quantity=item.quantity
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to add product %s to cart of user %s", item.product_id, current_user.id)
        raise StoreError("Failed to add item to cart")

    if created:
        response.status_code = status.HTTP_201_CREATED
        return {"message": "Item added to cart", "item": cart_item}
    return {"message": "Cart updated", "item": cart_item}

@router.put("/{item_id}")
async def update_cart_item(
    item_id: int,
    item: CartItemUpdate,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Set the quantity of a cart item. Zero or less removes it.
    """
    try:
        affected = crud_cart.update_quantity(
            db,
            user_id=current_user.id,
            item_id=item_id,
            quantity=item.quantity
        )
        if item.quantity <= 0:
            return {"message": "Item removed from cart"}
        cart_item = None
        if affected:
            cart_item = crud_cart.get_item(db, user_id=current_user.id, item_id=item_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update cart item %s", item_id)
        raise StoreError("Failed to update cart item")

    if not affected:
        logger.debug("Cart item %s not owned by user %s", item_id, current_user.id)
    return CartItemResponse.model_validate({"message": "Cart item updated", "item": cart_item})

@router.delete("/product/{product_id}")
async def remove_product_from_cart(
    product_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Remove every line for a product from the cart
    """
    try:
        affected = crud_cart.remove_by_product(db, user_id=current_user.id, product_id=product_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to remove product %s from cart", product_id)
        raise StoreError("Failed to remove item")

    if not affected:
        logger.debug("Nothing to remove from cart of user %s", current_user.id)
    return {"message": "Item removed from cart"}

@router.delete("/{item_id}")
async def remove_cart_item(
    item_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Remove item from cart
    """
    try:
        affected = crud_cart.remove_item(db, user_id=current_user.id, item_id=item_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to remove cart item %s", item_id)
        raise StoreError("Failed to remove item")

    if not affected:
        logger.debug("Nothing to remove from cart of user %s", current_user.id)
    return {"message": "Item removed from cart"}

@router.delete("")
async def clear_cart(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Clear all items from cart
    """
    try:
        crud_cart.clear(db, user_id=current_user.id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to clear cart of user %s", current_user.id)
        raise StoreError("Failed to clear cart")
    return {"message": "Cart cleared successfully"}
