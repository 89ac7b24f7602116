from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager
from marketplace.core.errors import NotFound
from marketplace.crud.catalog import PRODUCT_NOT_FOUND, get_active_product
from marketplace.models.product import Product
from marketplace.models.wishlist import WishlistItem

def _membership(db: Session, user_id: int, product_id: int):
    return db.query(WishlistItem).filter(
        WishlistItem.user_id == user_id,
        WishlistItem.product_id == product_id
    )

def add(db: Session, *, user_id: int, product_id: int) -> bool:
    """Insert-or-ignore. Returns False when the row already existed."""
    db.add(WishlistItem(user_id=user_id, product_id=product_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True

def remove(db: Session, *, user_id: int, product_id: int) -> bool:
    affected = _membership(db, user_id, product_id).delete(synchronize_session=False)
    db.commit()
    return affected > 0

def toggle(db: Session, *, user_id: int, product_id: int) -> bool:
    """
    Flip membership of a product. Returns True when the product is now in
    the wishlist.
    """
    if remove(db, user_id=user_id, product_id=product_id):
        return False
    if not get_active_product(db, product_id):
        raise NotFound(PRODUCT_NOT_FOUND)
    # Losing an insert race to a concurrent toggle still leaves it added
    add(db, user_id=user_id, product_id=product_id)
    return True

def is_member(db: Session, *, user_id: int, product_id: int) -> bool:
    return bool(db.query(_membership(db, user_id, product_id).exists()).scalar())

def list_items(db: Session, *, user_id: int) -> List[WishlistItem]:
    return (
        db.query(WishlistItem)
        .join(Product, WishlistItem.product_id == Product.id)
        .options(contains_eager(WishlistItem.product))
        .filter(WishlistItem.user_id == user_id, Product.is_active.is_(True))
        .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
        .all()
    )
