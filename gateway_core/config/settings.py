"""Settings using Pydantic for environment-based configuration."""
from functools import lru_cache
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings loaded from GATEWAY_CORE_* environment variables."""

    # Application Configuration
    app_name: str = Field(default="gateway-core", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log output format (json/console)")

    # HTTP Transport
    http_open_timeout: float = Field(default=60.0, description="Connect timeout (seconds)")
    http_read_timeout: float = Field(default=60.0, description="Read timeout (seconds)")
    ssl_verify: bool = Field(default=True, description="Verify processor TLS certificates")

    # Gateway Defaults
    test_mode: bool = Field(default=True, description="Default adapters to test endpoints")

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_CORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in ("json", "console"):
            raise ValueError("Invalid log format. Must be 'json' or 'console'")
        return v.lower()

    @field_validator("http_open_timeout", "http_read_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


class GatewayConfig(BaseModel):
    """
    Immutable per-adapter configuration.

    Passed into each adapter's constructor; adapters never read credentials
    from class attributes or globals.
    """

    model_config = ConfigDict(frozen=True)

    credentials: Dict[str, str] = Field(default_factory=dict)
    test: bool = True
    test_url: Optional[str] = None
    live_url: Optional[str] = None

    @property
    def endpoint(self) -> Optional[str]:
        """URL for the configured mode."""
        return self.test_url if self.test else self.live_url

    def require(self, *names: str) -> None:
        """
        Check that credentials are present.

        Raises:
            ValueError: Naming the first missing credential
        """
        for name in names:
            if not self.credentials.get(name):
                raise ValueError(f"Missing required parameter: {name}")

    def credential(self, name: str) -> str:
        self.require(name)
        return self.credentials[name]

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs: object) -> "GatewayConfig":
        """Build a config whose test flag defaults to settings.test_mode."""
        kwargs.setdefault("test", settings.test_mode)
        return cls(**kwargs)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
