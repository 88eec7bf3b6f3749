"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List

# Value shipped in old sample .env files; never accepted as a signing key
PLACEHOLDER_SECRET_KEY = "your-super-secret-jwt-key-change-this-in-production"


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string for the credential store
        secret_key: Secret key for JWT signing (required, never defaulted)
        algorithm: Algorithm used for JWT encoding (HS256)
        access_token_expire_hours: Access token lifetime in hours
        refresh_token_expire_days: Refresh token lifetime in days
        bcrypt_rounds: bcrypt cost factor for password hashing

        # Connection pool settings
        db_max_idle_conns: Connections kept open in the pool
        db_max_open_conns: Upper bound of open connections (pool + overflow)
        db_conn_max_lifetime_seconds: Connections older than this are recycled

        cors_origins: Origins allowed by the CORS middleware
        log_level: Root logging level
    """
    # Database settings
    database_url: str

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_hours: int = 24
    refresh_token_expire_days: int = 7

    # Password hashing
    bcrypt_rounds: int = 12

    # Connection pool settings
    db_max_idle_conns: int = 5
    db_max_open_conns: int = 25
    db_conn_max_lifetime_seconds: int = 300

    # Frontend settings
    cors_origins: List[str] = ["http://localhost:3000"]

    log_level: str = "INFO"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    @field_validator("secret_key")
    @classmethod
    def secret_key_must_be_set(cls, value: str) -> str:
        """Reject empty and placeholder signing keys so startup aborts."""
        value = value.strip()
        if not value:
            raise ValueError("SECRET_KEY must not be empty")
        if value == PLACEHOLDER_SECRET_KEY:
            raise ValueError("SECRET_KEY is still set to the sample placeholder value")
        return value

    @field_validator("db_max_open_conns")
    @classmethod
    def open_conns_cover_idle(cls, value: int, info) -> int:
        idle = info.data.get("db_max_idle_conns")
        if idle is not None and value < idle:
            raise ValueError("DB_MAX_OPEN_CONNS must be >= DB_MAX_IDLE_CONNS")
        return value


# Create settings instance
settings = Settings()
