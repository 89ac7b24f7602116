from typing import Optional
from datetime import datetime
from pydantic import EmailStr, constr
from marketplace.models.user import UserRole
from marketplace.schemas.base import CamelModel

class UserBase(CamelModel):
    email: EmailStr
    name: constr(strip_whitespace=True, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None

class UserCreate(UserBase):
    password: constr(min_length=6)
    role: UserRole = UserRole.BUYER

class UserUpdate(CamelModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar_url: Optional[str] = None

class User(UserBase):
    id: int
    role: UserRole
    avatar_url: Optional[str] = None
    verified: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
