"""Application configuration loaded from environment variables.

Settings for database, API, PM session tokens, OTP issuance, and email.
Uses pydantic-settings for validation and .env file support.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure defaults that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "portal_dev_password"  # nosec B105
_INSECURE_DEFAULT_SECRET = "portal-dev-secret-do-not-use-in-production"  # nosec B105

# Minimum length for AUTH_SECRET in production (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32


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
    database_name: str = "service_portal"
    database_user: str = "portal_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD

    # CORS
    # Bearer tokens only, no cookies, so any origin may call the API.
    allowed_origins: list[str] = ["*"]

    # Application
    environment: str = "development"

    # PM session tokens
    auth_secret: SecretStr = SecretStr(_INSECURE_DEFAULT_SECRET)
    auth_issuer: str = "service-portal"
    pm_session_ttl_minutes: int = 480

    # Admin dashboard
    # Empty key disables every admin endpoint (401).
    admin_api_key: SecretStr = SecretStr("")

    # OTP issuance
    otp_ttl_minutes: int = 10
    otp_length: int = 6

    # Email
    email_from: str = "noreply@serviceportal.dev"
    resend_api_key: SecretStr = SecretStr("")

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate configuration invariants.

        Checks:
        - OTP length and TTL must be positive (all environments)
        - PM session TTL must be positive (all environments)
        - Database password must not be the default in production
        - AUTH_SECRET must not be the default and must be >= 32 chars in production
        - ADMIN_API_KEY must be set in production
        """
        if self.otp_length < 4:
            msg = f"OTP_LENGTH must be at least 4 digits. Got: {self.otp_length}"
            raise ValueError(msg)
        if self.otp_ttl_minutes <= 0:
            msg = f"OTP_TTL_MINUTES must be positive. Got: {self.otp_ttl_minutes}"
            raise ValueError(msg)
        if self.pm_session_ttl_minutes <= 0:
            msg = (
                "PM_SESSION_TTL_MINUTES must be positive. "
                f"Got: {self.pm_session_ttl_minutes}"
            )
            raise ValueError(msg)

        if self.environment == "production":
            if self.database_password == _INSECURE_DEFAULT_PASSWORD:
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            secret_value = self.auth_secret.get_secret_value()
            if secret_value == _INSECURE_DEFAULT_SECRET:
                msg = (
                    "AUTH_SECRET must be set in production. "
                    'Generate with: python -c "import secrets; '
                    'print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)
            if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters for adequate security."
                )
                raise ValueError(msg)

            if not self.admin_api_key.get_secret_value():
                msg = "ADMIN_API_KEY must be set in production."
                raise ValueError(msg)

        return self


settings = Settings()
