"""
Vendor listing and follow state.

The follow row and the vendor's denormalized ``followers`` counter are
written in the same transaction, with the counter computed in SQL.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload
from marketplace.core.config import settings
from marketplace.core.errors import NotFound
from marketplace.models.product import Product
from marketplace.models.vendor import Vendor, VendorFollower

logger = logging.getLogger(__name__)

VENDOR_NOT_FOUND = "Vendor not found"

def list_vendors(db: Session) -> List[Vendor]:
    return (
        db.query(Vendor)
        .options(joinedload(Vendor.user))
        .order_by(Vendor.rating.desc(), Vendor.id)
        .all()
    )

def get_vendor(db: Session, vendor_id: int) -> Vendor:
    vendor = db.query(Vendor).options(joinedload(Vendor.user)).filter(Vendor.id == vendor_id).first()
    if not vendor:
        raise NotFound(VENDOR_NOT_FOUND)
    return vendor

def get_for_user(db: Session, user_id: int) -> Optional[Vendor]:
    return db.query(Vendor).filter(Vendor.user_id == user_id).first()

def _follows(db: Session, user_id: int, vendor_id: int):
    return db.query(VendorFollower).filter(
        VendorFollower.user_id == user_id,
        VendorFollower.vendor_id == vendor_id
    )

def _is_following(db: Session, user_id: int, vendor_id: int) -> bool:
    return bool(db.query(_follows(db, user_id, vendor_id).exists()).scalar())

def toggle_follow(db: Session, *, user_id: int, vendor_id: int) -> bool:
    """
    Follow or unfollow a vendor. Returns True when the user now follows it.
    """
    get_vendor(db, vendor_id)
    counter = db.query(Vendor).filter(Vendor.id == vendor_id)

    if _is_following(db, user_id, vendor_id):
        # A concurrent unfollow may already have removed the row
        if _follows(db, user_id, vendor_id).delete(synchronize_session=False):
            counter.filter(Vendor.followers > 0).update(
                {Vendor.followers: Vendor.followers - 1},
                synchronize_session=False
            )
        db.commit()
        logger.info("User %s unfollowed vendor %s", user_id, vendor_id)
        return False

    db.add(VendorFollower(user_id=user_id, vendor_id=vendor_id))
    counter.update({Vendor.followers: Vendor.followers + 1}, synchronize_session=False)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request created the follow and counted it
        db.rollback()
        return True
    logger.info("User %s followed vendor %s", user_id, vendor_id)
    return True

def list_followed_with_stories(db: Session, *, user_id: int) -> List[Dict[str, Any]]:
    """
    Followed vendors with ``has_new_story`` (an unexpired story exists) and
    the stories posted within the story lifetime window.
    """
    now = datetime.utcnow()
    since = now - timedelta(hours=settings.STORY_TTL_HOURS)
    vendors = (
        db.query(Vendor)
        .join(VendorFollower, VendorFollower.vendor_id == Vendor.id)
        .filter(VendorFollower.user_id == user_id)
        .options(joinedload(Vendor.user), selectinload(Vendor.stories))
        .order_by(VendorFollower.created_at.desc(), VendorFollower.id.desc())
        .all()
    )

    followed = []
    for vendor in vendors:
        live = [s for s in vendor.stories if s.is_active and s.expires_at > now]
        followed.append({
            "id": vendor.id,
            "name": vendor.name,
            "avatar": vendor.avatar,
            "verified": vendor.verified,
            "has_new_story": bool(live),
            "stories": [s for s in vendor.stories if s.is_active and s.created_at > since],
        })
    return followed

def list_followed_products(
    db: Session,
    *,
    user_id: int,
    limit: int = settings.FOLLOWED_PRODUCTS_LIMIT
) -> List[Product]:
    followed_ids = db.query(VendorFollower.vendor_id).filter(VendorFollower.user_id == user_id)
    return (
        db.query(Product)
        .options(
            joinedload(Product.vendor).joinedload(Vendor.user),
            joinedload(Product.category),
            selectinload(Product.product_images),
            selectinload(Product.product_tags),
        )
        .filter(Product.is_active.is_(True), Product.vendor_id.in_(followed_ids))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )
