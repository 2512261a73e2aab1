"""
Shared configuration management for the Azure AD token verifier.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


HALF_A_DAY_MS = 12 * 60 * 60 * 1000


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_AUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"


class VerifierSettings(BaseConfig):
    """Settings for token verification against Azure AD signing keys."""

    # Token expectations
    audience: Optional[str] = None
    issuer: Optional[str] = None
    nonce: Optional[str] = None
    ignore_nonce: bool = False
    algorithms: List[str] = Field(default_factory=lambda: ["RS256"])

    # Key discovery
    authority_url: str = "https://login.windows.net"
    cache_duration_ms: int = HALF_A_DAY_MS
    http_timeout: float = 10.0

    # Service
    service_name: str = "azure-auth"
    host: str = "0.0.0.0"
    port: int = 8010


def get_settings(**overrides) -> VerifierSettings:
    """Get verifier settings from the environment, with explicit overrides."""
    return VerifierSettings(**overrides)
