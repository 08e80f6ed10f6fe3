"""
Configuration module for ContentCraft backend.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env", override=False)

DEFAULT_GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1/models/gemini-pro:generateContent"
)


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.getenv("APP_NAME", "ContentCraft")
        self.api_version: str = os.getenv("API_VERSION", "v1")
        self.debug: bool = _as_bool(os.getenv("DEBUG", "true"))
        self.environment: str = os.getenv("ENVIRONMENT", "development")

        # CORS
        cors_raw = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [s.strip() for s in cors_raw.split(",")]

        # Generative provider
        self.gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
        self.gemini_endpoint: str = os.getenv("GEMINI_ENDPOINT", DEFAULT_GEMINI_ENDPOINT)
        self.gemini_timeout: float = float(os.getenv("GEMINI_TIMEOUT", "60"))

        # Identity provider: local | supabase | firebase (empty = auto-detect)
        self.identity_provider: str = os.getenv("IDENTITY_PROVIDER", "").strip().lower()
        self.supabase_url: str = os.getenv("SUPABASE_URL", "").rstrip("/")
        self.supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
        self.firebase_credentials_path: str = os.getenv("FIREBASE_CREDENTIALS_PATH", "")

        # Payment provider
        self.stripe_secret_key: str = os.getenv("STRIPE_SECRET_KEY", "")
        self.stripe_pro_price_id: str = os.getenv(
            "STRIPE_PRO_PRICE_ID", "price_1QkAcgFNHBx0nIBtxSnVHApt"
        ).strip()
        self.stripe_enterprise_price_id: str = os.getenv(
            "STRIPE_ENTERPRISE_PRICE_ID", "price_1QkAdoFNHBx0nIBtzoKXu46A"
        ).strip()
        # Used for checkout return URLs when the request carries no Origin header
        self.public_app_url: Optional[str] = os.getenv("PUBLIC_APP_URL") or None

        # Quotas
        self.generation_quota_limit: int = int(os.getenv("GENERATION_QUOTA_LIMIT", "10"))
        self.quota_store: str = os.getenv("QUOTA_STORE", "memory").strip().lower()
        self.quota_data_dir: str = os.getenv("QUOTA_DATA_DIR", "./data")

    def resolved_identity_provider(self) -> str:
        """Return the configured identity provider, auto-detecting when unset."""
        if self.identity_provider:
            return self.identity_provider
        if self.supabase_url and self.supabase_anon_key:
            return "supabase"
        if self.firebase_credentials_path and os.path.exists(self.firebase_credentials_path):
            return "firebase"
        return "local"


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
