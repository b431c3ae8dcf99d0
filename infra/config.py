"""
Infrastructure configuration system.

Environment-based configuration, loaded from .env when present.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


DEFAULT_API_URL = "https://api.watsonwork.ibm.com"

REQUIRED_ENV = {
    "app_id": "COMPANYINFO_APP_ID",
    "app_secret": "COMPANYINFO_APP_SECRET",
    "webhook_secret": "COMPANYINFO_WEBHOOK_SECRET",
    "fr_user_id": "COMPANYINFO_FR_USER_ID",
    "fr_key": "COMPANYINFO_FR_KEY",
    "recognition_url": "COMPANYINFO_FR_ER_URL",
    "metadata_url": "COMPANYINFO_FR_METADATA_URL",
}


@dataclass
class AppConfig:
    """Company info app configuration from environment."""

    # Platform app credentials
    app_id: str
    app_secret: str
    webhook_secret: str

    # Entity recognition / metadata services
    fr_user_id: str
    fr_key: str
    recognition_url: str
    metadata_url: str  # %s placeholder for the entity id

    api_url: str = DEFAULT_API_URL

    # Server
    port: Optional[int] = None   # plain HTTP behind a TLS reverse proxy
    ssl_port: int = 443
    ssl_cert: Optional[str] = None
    ssl_key: Optional[str] = None

    http_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Load configuration from environment variables.

        Required values default to "" so that validate() can report them all.
        """
        port = os.getenv("PORT")
        return cls(
            app_id=os.getenv("COMPANYINFO_APP_ID", ""),
            app_secret=os.getenv("COMPANYINFO_APP_SECRET", ""),
            webhook_secret=os.getenv("COMPANYINFO_WEBHOOK_SECRET", ""),
            fr_user_id=os.getenv("COMPANYINFO_FR_USER_ID", ""),
            fr_key=os.getenv("COMPANYINFO_FR_KEY", ""),
            recognition_url=os.getenv("COMPANYINFO_FR_ER_URL", ""),
            metadata_url=os.getenv("COMPANYINFO_FR_METADATA_URL", ""),
            api_url=os.getenv("WATSONWORK_API_URL", DEFAULT_API_URL).rstrip("/"),
            port=int(port) if port else None,
            ssl_port=int(os.getenv("SSLPORT", "443")),
            ssl_cert=os.getenv("SSLCERT") or None,
            ssl_key=os.getenv("SSLKEY") or None,
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Names of required environment variables that are not set."""
        return [env for field, env in REQUIRED_ENV.items() if not getattr(self, field)]


def get_config() -> AppConfig:
    """Get app configuration from the environment."""
    return AppConfig.from_env()
