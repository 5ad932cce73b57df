"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (chat platform URL and admin credentials,
internal access token, hashing salts) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.exceptions import ConfigurationError

# Chat platforms with an adapter implementation (see ChatAdapterFactory).
SUPPORTED_CHAT_PLATFORMS = ("rocketchat",)


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (chat platform connection, internal access token,
    username and password hash salts).
    """

    # App
    app_name: str = "communications"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy + Alembic, PostgreSQL via asyncpg)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Chat platform
    chat_platform: str = "rocketchat"
    chat_platform_url: str = ""
    chat_platform_access_token: SecretStr = SecretStr("")
    chat_platform_admin_user_id: str = ""
    chat_platform_admin_email: str = ""
    chat_platform_admin_password: SecretStr = SecretStr("")
    # Bounded timeout for every outbound call (seconds).
    chat_platform_timeout_seconds: float = 10.0

    # Security: callers must send this in the internal-access-token header.
    internal_access_token: SecretStr = SecretStr("")
    internal_access_token_header: str = "internal-access-token"

    # Credential derivation (see CredentialHasher). Lengths are hex characters.
    username_hash_salt: SecretStr = SecretStr("")
    password_hash_salt: SecretStr = SecretStr("")
    username_hash_length: int = 8
    password_hash_length: int = 8

    # Tenant
    default_tenant_code: str = "default"
    tenant_header_name: str = "X-Tenant-Code"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env for the chat platform, API access and hashing.

        Missing salts raise ConfigurationError (a ValueError) so the service
        refuses to start rather than deriving credentials from an empty salt.
        """
        if self.chat_platform.lower() not in SUPPORTED_CHAT_PLATFORMS:
            raise ValueError(
                f"chat_platform must be one of {SUPPORTED_CHAT_PLATFORMS}, "
                f"got: {self.chat_platform!r}"
            )
        if not self.chat_platform_url:
            raise ValueError(
                "CHAT_PLATFORM_URL is required. Set in environment or .env file."
            )
        if not self.chat_platform_access_token.get_secret_value():
            raise ValueError(
                "CHAT_PLATFORM_ACCESS_TOKEN is required (admin personal access token)."
            )
        if not self.chat_platform_admin_user_id:
            raise ValueError(
                "CHAT_PLATFORM_ADMIN_USER_ID is required (user id owning the access token)."
            )
        if not self.internal_access_token.get_secret_value():
            raise ValueError(
                "INTERNAL_ACCESS_TOKEN is required. Generate with: openssl rand -hex 32."
            )
        if not self.username_hash_salt.get_secret_value():
            raise ConfigurationError("USERNAME_HASH_SALT is required.")
        if not self.password_hash_salt.get_secret_value():
            raise ConfigurationError("PASSWORD_HASH_SALT is required.")
        for name in ("username_hash_length", "password_hash_length"):
            value = getattr(self, name)
            if not 1 <= value <= 128:
                raise ValueError(f"{name.upper()} must be between 1 and 128, got: {value}")
        if self.chat_platform_timeout_seconds <= 0:
            raise ValueError("CHAT_PLATFORM_TIMEOUT_SECONDS must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
