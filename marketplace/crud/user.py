import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from marketplace.core.errors import Forbidden, NotFound, Unauthorized, ValidationError
from marketplace.core.security import get_password_hash, verify_password
from marketplace.models.user import User, UserRole
from marketplace.models.vendor import Vendor
from marketplace.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
EMAIL_IN_USE = "User already exists with this email"
INVALID_CREDENTIALS = "Invalid email or password"

def get(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()

def create(db: Session, user_in: UserCreate) -> User:
    """
    Register a user. Vendor accounts get their storefront row in the
    same transaction.
    """
    if user_in.role == UserRole.ADMIN:
        raise ValidationError("Admin accounts cannot be self-registered")
    if get_by_email(db, user_in.email):
        raise ValidationError(EMAIL_IN_USE)

    user = User(
        name=user_in.name,
        email=user_in.email.lower(),
        hashed_password=get_password_hash(user_in.password),
        phone=user_in.phone,
        address=user_in.address,
        role=user_in.role,
        is_active=True
    )
    db.add(user)
    if user.role == UserRole.VENDOR:
        user.vendor = Vendor(name=user.name, description=f"{user.name}'s Store")
    db.commit()
    db.refresh(user)
    logger.info("Registered %s user %s", user.role.value, user.id)
    return user

def create_admin(db: Session, *, email: str, password: str, name: str = "Administrator") -> User:
    user = User(
        name=name,
        email=email.lower(),
        hashed_password=get_password_hash(password),
        role=UserRole.ADMIN,
        verified=True,
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def authenticate(db: Session, email: str, password: str) -> User:
    user = get_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise Unauthorized(INVALID_CREDENTIALS)
    if not user.is_active:
        raise Forbidden("Account has been deactivated")
    return user

def update_profile(db: Session, user: User, user_in: UserUpdate) -> User:
    for key, value in user_in.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user

def list_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()

def deactivate(db: Session, *, user_id: int, acting_user: User) -> User:
    """Soft-delete: users are never removed, only deactivated."""
    if user_id == acting_user.id:
        raise ValidationError("You cannot deactivate your own account")
    user = get(db, user_id)
    if not user:
        raise NotFound(USER_NOT_FOUND)
    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info("User %s deactivated by admin %s", user.id, acting_user.id)
    return user
