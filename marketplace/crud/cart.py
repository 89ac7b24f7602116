"""
Per-user cart lines.

At most one row exists per (user, product): the table carries a unique
constraint, merges are a single ``quantity = quantity + n`` UPDATE, and an
insert that loses a race against a concurrent insert falls back to that
UPDATE.
"""
import logging
from datetime import datetime
from typing import List, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager
from sqlalchemy.sql import or_
from marketplace.core.errors import NotFound, ValidationError
from marketplace.crud.catalog import PRODUCT_NOT_FOUND, get_active_product
from marketplace.models.cart import CartItem
from marketplace.models.product import Product

logger = logging.getLogger(__name__)

def _owned(db: Session, user_id: int):
    return db.query(CartItem).filter(CartItem.user_id == user_id)

def _increment(db: Session, user_id: int, product_id: int, quantity: int) -> int:
    return _owned(db, user_id).filter(CartItem.product_id == product_id).update(
        {
            CartItem.quantity: CartItem.quantity + quantity,
            CartItem.updated_at: datetime.utcnow()
        },
        synchronize_session=False
    )

def add_item(db: Session, *, user_id: int, product_id: int, quantity: int = 1) -> Tuple[CartItem, bool]:
    """
    Add ``quantity`` units of a product, merging into an existing line.

    Returns the resulting row and whether it was newly created.
    """
    if quantity <= 0:
        raise ValidationError("Quantity must be a positive integer")
    if not get_active_product(db, product_id):
        raise NotFound(PRODUCT_NOT_FOUND)

    created = False
    if _increment(db, user_id, product_id, quantity):
        db.commit()
    else:
        db.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
        try:
            db.commit()
            created = True
        except IntegrityError:
            # A concurrent request inserted the line first
            db.rollback()
            _increment(db, user_id, product_id, quantity)
            db.commit()

    item = _owned(db, user_id).filter(CartItem.product_id == product_id).one()
    return item, created

def update_quantity(db: Session, *, user_id: int, item_id: int, quantity: int) -> int:
    """
    Replace the quantity of a line. Zero or less removes it.

    Returns the number of rows affected, 0 when the line is not the user's.
    """
    if quantity <= 0:
        return remove_item(db, user_id=user_id, item_id=item_id)

    affected = _owned(db, user_id).filter(CartItem.id == item_id).update(
        {CartItem.quantity: quantity, CartItem.updated_at: datetime.utcnow()},
        synchronize_session=False
    )
    db.commit()
    return affected

def get_item(db: Session, *, user_id: int, item_id: int):
    return _owned(db, user_id).filter(CartItem.id == item_id).first()

def remove_item(db: Session, *, user_id: int, item_id: int) -> int:
    affected = _owned(db, user_id).filter(CartItem.id == item_id).delete(synchronize_session=False)
    db.commit()
    return affected

def remove_by_product(db: Session, *, user_id: int, product_id: int) -> int:
    affected = _owned(db, user_id).filter(CartItem.product_id == product_id).delete(synchronize_session=False)
    db.commit()
    return affected

def clear(db: Session, *, user_id: int) -> int:
    affected = _owned(db, user_id).delete(synchronize_session=False)
    db.commit()
    return affected

def prune_stale_items(db: Session, *, user_id: int) -> int:
    """Delete lines whose product no longer exists or is inactive."""
    stale_ids = [
        row.id for row in db.query(CartItem.id)
        .outerjoin(Product, CartItem.product_id == Product.id)
        .filter(
            CartItem.user_id == user_id,
            or_(Product.id.is_(None), Product.is_active.is_(False))
        )
        .all()
    ]
    if not stale_ids:
        return 0

    db.query(CartItem).filter(CartItem.id.in_(stale_ids)).delete(synchronize_session=False)
    db.commit()
    logger.info("Pruned %d stale cart items for user %s", len(stale_ids), user_id)
    return len(stale_ids)

def get_items(db: Session, *, user_id: int) -> List[CartItem]:
    """
    Cart lines joined with live product data, newest first.

    Lines pointing at a missing or inactive product are deleted as part of
    the listing.
    """
    prune_stale_items(db, user_id=user_id)
    return (
        _owned(db, user_id)
        .join(Product, CartItem.product_id == Product.id)
        .options(contains_eager(CartItem.product))
        .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        .all()
    )

def get_total(db: Session, *, user_id: int) -> Tuple[float, int]:
    """Return ``(subtotal, item_count)`` over lines with an active product."""
    subtotal, item_count = (
        db.query(
            func.coalesce(func.sum(Product.price * CartItem.quantity), 0),
            func.coalesce(func.sum(CartItem.quantity), 0)
        )
        .join(Product, CartItem.product_id == Product.id)
        .filter(CartItem.user_id == user_id, Product.is_active.is_(True))
        .one()
    )
    return round(float(subtotal), 2), int(item_count)
