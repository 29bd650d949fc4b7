from pydantic_settings import BaseSettings
from typing import List, Union
from pydantic import field_validator

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./blogcms.db"
    DATABASE_ECHO: bool = False

    # Application
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:5173"]

    # Tokens
    TOKEN_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = 30  # No refresh tokens; expiry forces re-login

    # Registration gate
    REGISTRATION_OPEN: bool = False  # First account may always register
    ADMIN_EMAILS: Union[List[str], str] = []
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_HASH_ROUNDS: int = 12  # bcrypt cost factor, 4..31

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    DEFAULT_RATE_LIMIT: str = "100/minute"
    AUTH_RATE_LIMIT: str = "10/minute"

    # Security headers
    ENABLE_HSTS: bool = True
    HSTS_MAX_AGE: int = 31536000  # 1 year in seconds

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("ADMIN_EMAILS", mode="before")
    @classmethod
    def parse_admin_emails(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        return [email.strip().lower() for email in v if email and email.strip()]

    @property
    def is_production(self) -> bool:
        """Production means not DEBUG and running with a real secret."""
        return not self.DEBUG and self.SECRET_KEY != DEFAULT_SECRET_KEY

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
