"""
Infrastructure initialization and bootstrap.

Builds the application context once at startup: shared HTTP client,
OAuth token, and the service clients that use them.
"""

import logging
from typing import Optional

import httpx

from services.company import EntityRecognizer, MetadataFetcher
from transport.watsonwork.errors import StartupError
from transport.watsonwork.oauth import TokenProvider
from transport.watsonwork.sender import MessageSender

from .config import AppConfig, get_config

logger = logging.getLogger(__name__)


class AppContext:
    """
    Everything outbound calls need, built once per process.

    Passed explicitly to the webhook (via app.state) instead of globals.
    """

    def __init__(self, config: AppConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=config.http_timeout)
        self.tokens = TokenProvider(
            self.client, config.api_url, config.app_id, config.app_secret
        )
        self.recognizer = EntityRecognizer(self.client, config.recognition_url)
        self.fetcher = MetadataFetcher(
            self.client, config.metadata_url, config.fr_user_id, config.fr_key
        )
        self.sender = MessageSender(self.client, config.api_url, self.tokens)

    async def start(self) -> None:
        """
        Validate configuration and acquire the OAuth token.

        Raises:
            StartupError: Missing configuration or token unavailable
        """
        missing = self.config.validate()
        if missing:
            raise StartupError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        await self.tokens.start()

    async def close(self) -> None:
        await self.client.aclose()

    def __repr__(self) -> str:
        return (
            f"AppContext(app_id={self.config.app_id}, "
            f"api_url={self.config.api_url}, "
            f"token={'acquired' if self.tokens.acquired else 'missing'})"
        )


async def bootstrap_context(
    config: Optional[AppConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> AppContext:
    """
    Build and start the application context.

    Args:
        config: Optional custom configuration (defaults to environment)
        client: Optional HTTP client (tests inject a mock transport)

    Returns:
        Started AppContext
    """
    context = AppContext(config or get_config(), client)
    try:
        await context.start()
    except StartupError:
        await context.close()
        raise
    logger.info(f"Bootstrapped {context!r}")
    return context
