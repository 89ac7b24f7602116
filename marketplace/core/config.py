from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import validator

class Settings(BaseSettings):
    # API Settings
    PROJECT_NAME: str = "Congo Marketplace API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Database Settings
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./marketplace.db"

    # JWT Settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    PASSWORD_HASH_ROUNDS: int = 12

    # CORS Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Redis Settings (cache and token blacklist are disabled without a host)
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    CACHE_EXPIRE_SECONDS: int = 300

    # Bootstrap admin
    FIRST_ADMIN_EMAIL: Optional[str] = None
    FIRST_ADMIN_PASSWORD: Optional[str] = None

    # Marketplace Settings
    STORY_TTL_HOURS: int = 24
    STORY_FEED_LIMIT: int = 50
    PRODUCT_LIST_LIMIT: int = 50
    FOLLOWED_PRODUCTS_LIMIT: int = 20

    @property
    def DATABASE_URL(self) -> str:
        """Get full database URL."""
        return self.SQLALCHEMY_DATABASE_URI

    @property
    def REDIS_URL(self) -> Optional[str]:
        """Get full Redis URL."""
        if not self.REDIS_HOST:
            return None
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
