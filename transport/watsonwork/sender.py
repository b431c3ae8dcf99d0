"""
Watson Work Message Sender

Formats company metadata and posts it to a space as an app message.
No retries. Failures raise; the dispatcher only logs them.
"""

import logging

import httpx

from .errors import ServiceError, TransportError
from .oauth import TokenProvider
from .schemas import Annotation, AppMessage, CompanyMetadata

logger = logging.getLogger(__name__)


def compose_message(info: CompanyMetadata) -> str:
    """
    Render company metadata as the markdown card text.

    Example:
        *Company*
        The Acme company
        *Industries*
        Test industry
        ...
    """
    return (
        f"*Company*\n{info.name}\n"
        f"*Industries*\n{', '.join(i.name for i in info.industries)}\n"
        f"*Sectors*\n{', '.join(s.name for s in info.sectors)}\n"
        f"*Segments*\n{', '.join(s.name for s in info.segments)}\n"
    )


class MessageSender:
    """Posts app messages to the conversation in a space."""

    def __init__(self, client: httpx.AsyncClient, api_url: str, tokens: TokenProvider):
        self.client = client
        self.api_url = api_url
        self.tokens = tokens

    async def send(self, space_id: str, text: str) -> dict:
        """
        Send an app message to a space.

        Args:
            space_id: Target space
            text: Markdown text of the annotation

        Returns:
            Response body from the platform

        Raises:
            ServiceError: Platform returned anything but 201
            TransportError: Request never completed
        """

        token = await self.tokens.get_token()
        message = AppMessage(annotations=[Annotation(text=text)])

        try:
            response = await self.client.post(
                f"{self.api_url}/v1/spaces/{space_id}/messages",
                json=message.model_dump(),
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.RequestError as e:
            logger.error(f"Error sending message: {e}", extra={"space_id": space_id})
            raise TransportError(f"HTTP request failed: {e}") from e

        if response.status_code != 201:
            logger.error(
                f"Error sending message: {response.status_code}",
                extra={"space_id": space_id, "status_code": response.status_code},
            )
            raise ServiceError(
                f"Message send returned {response.status_code}",
                status_code=response.status_code,
            )

        logger.info(f"Sent message to space {space_id}")
        try:
            return response.json()
        except ValueError:
            return {}
