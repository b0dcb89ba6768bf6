"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that work for local development and tests

Collaborators:
  - api/main.py: reads settings for CORS, pool and startup validation
  - container.py: selects the user store backend
  - identity/auth_users.py: JWT secret, TTL and cookie settings
  - interfaces/api/http/schemas/users.py: password policy

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

USER_STORE_BACKENDS = {"memory", "postgres"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (local/development/test/production)
        database_url: PostgreSQL connection string (postgres backend only)
        user_store_backend: memory|postgres (default: memory)
        db_slow_query_seconds: Log queries slower than this (seconds)
        db_healthcheck_on_acquire: Run SELECT 1 when a connection is acquired
        allowed_origins: Comma-separated CORS origins
        cors_allow_credentials: Allow cookies cross-origin (default: False)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON logs (default: True)
        metrics_require_auth: Require an admin token for /metrics
        jwt_secret: Secret for signing JWT access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes
        jwt_cookie_name: Cookie name for access token
        jwt_cookie_secure: Set Secure on auth cookies
        password_min_length: Minimum accepted password length (default: 6)
    """

    # Environment
    app_env: str = "development"

    # Storage
    database_url: str = ""
    user_store_backend: str = "memory"

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds
    db_slow_query_seconds: float = 0.25
    db_healthcheck_on_acquire: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Observability
    metrics_require_auth: bool = False

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 30
    jwt_cookie_name: str = "access_token"
    jwt_cookie_secure: bool = False

    # Security - Password policy
    password_min_length: int = 6

    # Dev Tools (Backend Safe)
    dev_seed_admin: bool = False
    dev_seed_admin_email: str = "admin@local.dev"
    dev_seed_admin_username: str = "admin"
    dev_seed_admin_password: str = "admin123"
    dev_seed_admin_force_reset: bool = False

    @field_validator("user_store_backend")
    @classmethod
    def user_store_backend_valid(cls, v: str) -> str:
        backend = (v or "memory").strip().lower()
        if backend not in USER_STORE_BACKENDS:
            raise ValueError("user_store_backend must be memory or postgres")
        return backend

    @field_validator("password_min_length")
    @classmethod
    def password_min_length_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("password_min_length must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_database_requirements(self):
        if self.user_store_backend == "postgres" and not self.database_url.strip():
            raise ValueError("DATABASE_URL is required when USER_STORE_BACKEND=postgres")
        return self

    def validate_security_requirements(self) -> None:
        """
        Production guard rails.
        Called explicitly at startup (lifespan), not at import time.
        """
        if not self.is_production():
            return

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if not self.jwt_cookie_secure:
            raise ValueError("JWT_COOKIE_SECURE must be true in production")
        if self.user_store_backend != "postgres":
            raise ValueError("USER_STORE_BACKEND must be postgres in production")

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
