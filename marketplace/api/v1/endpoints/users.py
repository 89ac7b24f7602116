import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.core.errors import StoreError
from marketplace.crud import user as crud_user
from marketplace.models.user import User as UserModel
from marketplace.schemas.user import User, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[User])
async def get_users(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_admin,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
):
    """Get all users (admin only)"""
    return crud_user.list_users(db, skip=skip, limit=limit)

@router.put("/me", response_model=User)
async def update_me(
    user_in: UserUpdate,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """Update the current user's profile"""
    try:
        return crud_user.update_profile(db, current_user, user_in)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update profile of user %s", current_user.id)
        raise StoreError("Failed to update profile")

@router.post("/{user_id}/deactivate", response_model=User)
async def deactivate_user(
    user_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_admin
):
    """Deactivate a user account (admin only). Accounts are never deleted."""
    try:
        return crud_user.deactivate(db, user_id=user_id, acting_user=current_user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to deactivate user %s", user_id)
        raise StoreError("Failed to deactivate user")
