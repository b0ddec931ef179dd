"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token signing
        algorithm: Algorithm used for JWT signing (typically HS256)
        access_token_expire_minutes: Access token lifetime in minutes (24h default)
        bcrypt_rounds: bcrypt work factor used for password hashing

        # Frontend settings
        cors_origins: Frontend origins allowed by the CORS middleware

        # Bootstrap admin settings (optional)
        bootstrap_admin_name: Login name of the seeded admin
        bootstrap_admin_email: Email of the seeded admin
        bootstrap_admin_phone: Phone of the seeded admin
        bootstrap_admin_password: Password of the seeded admin
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database settings
    database_url: str = "sqlite:///./aarogya.db"

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=24 * 60, gt=0)

    # Password hashing
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Frontend settings
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_name: str = "Admin"
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_phone: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None


# Create settings instance
settings = Settings()
