"""Application configuration loaded from environment variables.

Settings for database, token signing, refresh cookie and logging.
Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "pomodoro_dev_password"  # nosec B105

# Minimum length for JWT_SECRET in production (256 bits = 32 bytes)
_MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "pomodoro"
    database_user: str = "pomodoro_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # Full URL override (e.g. sqlite+aiosqlite:// for local runs)
    database_url_override: str = ""

    # CORS
    # CRITICAL: Never set to ["*"], the refresh cookie needs credentials
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    # "prod" turns on secure cookies and hides the interactive docs
    env_mode: Literal["dev", "prod"] = "dev"
    app_host: str = "localhost"
    log_level: str = "INFO"

    # Tokens
    jwt_secret: SecretStr = SecretStr("")
    access_token_ttl_minutes: int = 60
    refresh_token_ttl_days: int = 7
    refresh_cookie_name: str = "refreshToken"
    refresh_cookie_ttl_days: int = 1

    # Hashing
    bcrypt_rounds: int = 12

    # Mail
    mail_from: str = "noreply@pomodoro.local"

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production mode."""
        return self.env_mode == "prod"

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate production security requirements.

        Checks:
        - Token lifetimes must be positive (all environments)
        - CORS must not use wildcard origin (incompatible with credentials)
        - Database password must not be the default in production
        - JWT_SECRET must be set and >= 32 chars in production
        """
        if self.access_token_ttl_minutes <= 0 or self.refresh_token_ttl_days <= 0:
            msg = "Token lifetimes must be positive."
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "The refresh cookie requires credentials, which are "
                "incompatible with wildcard CORS origins."
            )
            raise ValueError(msg)

        if self.is_production:
            if (
                not self.database_url_override
                and self.database_password == _INSECURE_DEFAULT_PASSWORD
            ):
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            secret_value = self.jwt_secret.get_secret_value()
            if len(secret_value) < _MIN_JWT_SECRET_LENGTH:
                msg = (
                    f"JWT_SECRET must be at least {_MIN_JWT_SECRET_LENGTH} "
                    'characters in production. Generate with: python -c "import '
                    'secrets; print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)

        return self


settings = Settings()
