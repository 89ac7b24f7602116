import json
import logging
from typing import Callable, Optional
from functools import wraps
from fastapi import Depends, Security
from fastapi.encoders import jsonable_encoder
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from marketplace.core.cache import get_cache, set_cache, is_token_blacklisted
from marketplace.core.config import settings
from marketplace.core.errors import Forbidden, Unauthorized
from marketplace.core.security import get_token_payload
from marketplace.crud import user as crud_user
from marketplace.db.session import get_db
from marketplace.models.user import User as UserModel
from marketplace.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)

# Missing credentials are reported as 401 by get_current_user
security = HTTPBearer(auto_error=False)

def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("No token provided")
    return credentials.credentials

async def get_current_user(
    token: str = Depends(get_token),
    db: Session = Depends(get_db)
) -> UserModel:
    """Resolve the bearer token to an active user"""
    try:
        payload = TokenPayload(**get_token_payload(token))
    except (JWTError, ValueError):
        raise Unauthorized("Invalid token")

    if payload.refresh or not payload.sub:
        raise Unauthorized("Invalid token")

    if is_token_blacklisted(token):
        raise Unauthorized("Token has been invalidated")

    try:
        user_id = int(payload.sub)
    except ValueError:
        raise Unauthorized("Invalid token")

    user = crud_user.get(db, user_id)
    if not user:
        raise Unauthorized("User no longer exists")
    if not user.is_active:
        raise Forbidden("Account has been deactivated")
    return user

async def get_current_admin(
    current_user: UserModel = Security(get_current_user)
) -> UserModel:
    if not current_user.is_admin:
        raise Forbidden("Admin privileges required")
    return current_user

def cache_response(expire: int = settings.CACHE_EXPIRE_SECONDS, key_prefix: str = "") -> Callable:
    """
    Cache decorator for public API responses
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            cache_kwargs = {
                k: v for k, v in kwargs.items()
                if k not in ['db', 'current_user', 'credentials', 'token']
            }

            cache_key = f"{key_prefix}:{func.__name__}"
            if cache_kwargs:
                cache_key += f":{json.dumps(cache_kwargs, sort_keys=True, default=str)}"

            cached_response = get_cache(cache_key)
            if cached_response is not None:
                return cached_response

            response = await func(*args, **kwargs)
            set_cache(cache_key, jsonable_encoder(response), expire=expire)
            return response

        return wrapper
    return decorator

# Callable dependencies for router use
require_auth = Security(get_current_user)
require_admin = Security(get_current_admin)
