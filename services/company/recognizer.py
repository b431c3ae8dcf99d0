"""
Company entity recognition client.

Role: message text -> candidate company mentions with relevance scores.

Rules:
- One request per message, no retries
- Transport failure -> TransportError
- Non-200 -> ServiceError
- Missing result fields -> no entities
"""

import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Optional

import httpx

from transport.watsonwork.errors import ServiceError, TransportError
from transport.watsonwork.schemas import RecognizedEntity

logger = logging.getLogger(__name__)


def format_timestamp(time_ms: Optional[int]) -> str:
    """Epoch milliseconds as an RFC 1123 GMT date (now if missing or out of range)."""
    moment = datetime.now(timezone.utc)
    if time_ms is not None:
        try:
            moment = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Message time out of range: {time_ms}")
    return format_datetime(moment, usegmt=True)


def parse_entities(body: Any) -> list[RecognizedEntity]:
    """Map result.entity[] to RecognizedEntity, skipping unusable entries."""
    result = body.get("result") if isinstance(body, dict) else None
    raw_entities = result.get("entity") if isinstance(result, dict) else None

    entities = []
    for raw in raw_entities or []:
        if not isinstance(raw, dict) or not raw.get("searchToken"):
            continue
        try:
            entities.append(RecognizedEntity(
                id=raw["searchToken"],
                score=raw.get("relevanceScore", 0),
            ))
        except ValueError:
            logger.warning(f"Skipping malformed entity: {raw}")
    return entities


class EntityRecognizer:
    """Client for the external company entity recognition service."""

    def __init__(self, client: httpx.AsyncClient, url: str):
        self.client = client
        self.url = url

    async def recognize(
        self,
        text: str,
        space_id: Optional[str],
        message_id: Optional[str],
        time_ms: Optional[int],
        user_id: Optional[str],
        user_name: Optional[str],
    ) -> list[RecognizedEntity]:
        """
        Recognize company entities mentioned in a message.

        Args:
            text: Message content
            space_id: Conversation (thread) id
            message_id: Message (post) id
            time_ms: Message time, epoch milliseconds
            user_id: Author id
            user_name: Author display name

        Returns:
            Recognized entities, possibly empty

        Raises:
            TransportError: Service unreachable
            ServiceError: Service returned non-200
        """

        payload = {
            "postedBy": {
                "id": user_id,
                "name": user_name,
            },
            "timeStamp": format_timestamp(time_ms),
            "threadId": space_id,
            "postId": message_id,
            "postText": text,
        }

        try:
            response = await self.client.post(self.url, json=payload)
        except httpx.RequestError as e:
            logger.error(f"Error calling entity recognition service: {e}")
            raise TransportError(f"Entity recognition request failed: {e}") from e

        logger.debug(f"Entity recognition response code {response.status_code}")
        if response.status_code != 200:
            raise ServiceError(
                "Couldn't extract entities from text",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            body = None

        entities = parse_entities(body)
        logger.debug(f"Recognized company entities {entities}")
        return entities
