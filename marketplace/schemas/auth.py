from pydantic import EmailStr
from marketplace.schemas.base import CamelModel
from marketplace.schemas.user import User

class UserLogin(CamelModel):
    email: EmailStr
    password: str

class RefreshToken(CamelModel):
    refresh_token: str

class Token(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class AuthResponse(CamelModel):
    message: str
    user: User
    token: str
    refresh_token: str
    token_type: str = "bearer"

class TokenPayload(CamelModel):
    sub: str | None = None
    refresh: bool = False
