import time
import logging
from typing import Any
from fastapi import APIRouter, Depends, status
from jose import JWTError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.api import deps
from marketplace.core.cache import blacklist_token, clear_cache_pattern, is_token_blacklisted
from marketplace.core.errors import Forbidden, StoreError, Unauthorized
from marketplace.core.security import (
    create_access_token,
    create_refresh_token,
    get_token_payload
)
from marketplace.crud import user as crud_user
from marketplace.models.user import User as UserModel, UserRole
from marketplace.schemas.auth import AuthResponse, RefreshToken, Token, UserLogin
from marketplace.schemas.user import UserCreate, User as UserSchema

logger = logging.getLogger(__name__)

router = APIRouter()

def _issue_tokens(user: UserModel) -> dict:
    claims = {"sub": str(user.id), "role": user.role.value}
    return {
        "access_token": create_access_token(data=claims),
        "refresh_token": create_refresh_token(data=claims),
        "token_type": "bearer"
    }

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_in: UserCreate,
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    Register a new buyer or vendor account.
    """
    try:
        user = crud_user.create(db, user_in)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to register %s", user_in.email)
        raise StoreError("Failed to create user")

    if user.role == UserRole.VENDOR:
        clear_cache_pattern("vendors:*")

    tokens = _issue_tokens(user)
    return {
        "message": "User created successfully",
        "user": user,
        "token": tokens["access_token"],
        "refresh_token": tokens["refresh_token"]
    }

@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    Exchange email and password for an access token
    """
    user = crud_user.authenticate(db, credentials.email, credentials.password)
    tokens = _issue_tokens(user)
    return {
        "message": "Login successful",
        "user": user,
        "token": tokens["access_token"],
        "refresh_token": tokens["refresh_token"]
    }

@router.post("/refresh", response_model=Token)
def refresh_token(
    refresh_token_data: RefreshToken,
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    Refresh access token using refresh token
    """
    try:
        payload = get_token_payload(refresh_token_data.refresh_token)
    except JWTError:
        raise Unauthorized("Could not validate refresh token")

    if not payload.get("refresh") or not payload.get("sub"):
        raise Unauthorized("Invalid refresh token")

    if is_token_blacklisted(refresh_token_data.refresh_token):
        raise Unauthorized("Token has been invalidated")

    user = crud_user.get(db, int(payload["sub"]))
    if not user:
        raise Unauthorized("User no longer exists")
    if not user.is_active:
        raise Forbidden("Account has been deactivated")

    return _issue_tokens(user)

@router.post("/logout")
async def logout(
    token: str = Depends(deps.get_token),
    current_user: UserModel = deps.require_auth
) -> dict:
    """
    Invalidate the current token by adding it to the blacklist
    """
    payload = get_token_payload(token)
    ttl = max(int(payload.get("exp", 0)) - int(time.time()), 0)
    blacklist_token(token, ttl)
    return {"message": "Successfully logged out"}

@router.get("/me", response_model=UserSchema)
async def read_users_me(current_user: UserModel = deps.require_auth) -> Any:
    """
    Get current user information
    """
    return current_user
