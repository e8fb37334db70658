"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from shopify_auth.credentials import ApiCredentials
from shopify_auth.scopes import Scopes


class Settings(BaseSettings):
    """Shopify app settings loaded from ``SHOPIFY_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHOPIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App credentials (Partner dashboard "Client ID" / "Client secret")
    api_key: str = ""
    api_secret: str = ""

    # OAuth
    redirect_url: str = "http://localhost:8000/auth/callback"
    scopes: str = "read_products"
    optional_scopes: str = ""
    nonce_cookie_name: str = "shopify_oauth_state"

    # Admin API
    api_version: str = "2025-01"
    timeout: float = 30.0

    def credentials(self) -> ApiCredentials:
        """Build validated API credentials."""
        return ApiCredentials.create(self.api_key, self.api_secret)

    def required_scopes(self) -> Scopes:
        """Parse the required scope list."""
        return Scopes.from_string(self.scopes)

    def optional_scopes_set(self) -> Scopes | None:
        """Parse the optional scope list, or ``None`` if it is blank."""
        if not self.optional_scopes.strip():
            return None
        return Scopes.from_string(self.optional_scopes)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
