"""
Centralized configuration for the SubVault backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, SIWE_*).
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


# Chain IDs accepted in Sign-In-With-Ethereum messages and on vaults
BASE_MAINNET_CHAIN_ID = 8453
BASE_SEPOLIA_CHAIN_ID = 84532


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SubVault API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # Direct Postgres URL, used by run_migrations.py

    # Sign-In-With-Ethereum
    password_secret: str = ""  # HMAC key for the per-address pseudo-credential
    siwe_domain: Optional[str] = None  # When set, messages must name this domain
    siwe_email_domain: str = "siwe.subvault.xyz"
    nonce_ttl_seconds: int = 300

    # Chain RPC endpoints (used for smart-account signature checks)
    base_rpc_url: str = "https://mainnet.base.org"
    base_sepolia_rpc_url: str = "https://sepolia.base.org"
    rpc_timeout_seconds: float = 10.0

    # Vault handles
    handle_max_length: int = 50
    handle_max_attempts: int = 10

    def rpc_url_for_chain(self, chain_id: int) -> Optional[str]:
        """Return the RPC endpoint for a supported chain, or None."""
        return {
            BASE_MAINNET_CHAIN_ID: self.base_rpc_url,
            BASE_SEPOLIA_CHAIN_ID: self.base_sepolia_rpc_url,
        }.get(chain_id)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
