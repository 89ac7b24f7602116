import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.api.deps import cache_response
from marketplace.core.cache import clear_cache_pattern
from marketplace.core.errors import StoreError
from marketplace.crud import vendor as crud_vendor
from marketplace.models.user import User as UserModel
from marketplace.schemas.product import Product
from marketplace.schemas.vendor import FollowedVendor, FollowToggle, Vendor

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[Vendor])
@cache_response(key_prefix="vendors")
async def get_vendors(db: Session = Depends(deps.get_db)):
    """
    Retrieve all vendors, best rated first.
    """
    return [Vendor.model_validate(v) for v in crud_vendor.list_vendors(db)]

@router.get("/following", response_model=List[FollowedVendor])
async def get_followed_vendors(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Vendors the current user follows, with their recent stories.
    """
    return crud_vendor.list_followed_with_stories(db, user_id=current_user.id)

@router.get("/following/products", response_model=List[Product])
async def get_followed_vendor_products(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Latest products from vendors the current user follows.
    """
    return crud_vendor.list_followed_products(db, user_id=current_user.id)

@router.get("/{vendor_id}", response_model=Vendor)
async def get_vendor(
    vendor_id: int,
    db: Session = Depends(deps.get_db)
):
    """
    Get details of a specific vendor.
    """
    return crud_vendor.get_vendor(db, vendor_id)

@router.post("/{vendor_id}/follow", response_model=FollowToggle)
async def toggle_follow(
    vendor_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Follow the vendor, or unfollow it when already following.
    """
    try:
        following = crud_vendor.toggle_follow(db, user_id=current_user.id, vendor_id=vendor_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to toggle follow of vendor %s", vendor_id)
        raise StoreError("Failed to update follow status")

    # Follower counts are part of the cached vendor list
    clear_cache_pattern("vendors:*")

    if following:
        return {"message": "Vendor followed", "following": True}
    return {"message": "Vendor unfollowed", "following": False}
