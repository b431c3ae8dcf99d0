"""
Company metadata client.

Role: company entity id -> name, industries, sectors, segments.
Authenticated with the recognition service user id/key, not the bearer token.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from transport.watsonwork.errors import ServiceError, TransportError
from transport.watsonwork.schemas import CompanyMetadata

logger = logging.getLogger(__name__)


def _category_list(entity_map: dict, key: str) -> list:
    items = entity_map.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict) and isinstance(item.get("name"), str)]


def parse_metadata(body: Any) -> Optional[CompanyMetadata]:
    """
    Extract company metadata from a lookup response.

    Missing result -> None. Missing nested lists -> empty lists.
    Entries without a string name are dropped.

    Raises:
        ServiceError: Result cannot be read as company metadata
    """
    result = body.get("result") if isinstance(body, dict) else None
    if not isinstance(result, dict):
        return None

    data = result.get("data")
    entity_map = data.get("entityMap") if isinstance(data, dict) else None
    if not isinstance(entity_map, dict):
        entity_map = {}

    try:
        return CompanyMetadata(
            name=str(result.get("name") or ""),
            languages=_category_list(entity_map, "language"),
            industries=_category_list(entity_map, "industry"),
            sectors=_category_list(entity_map, "sector"),
            segments=_category_list(entity_map, "segment"),
        )
    except ValidationError as e:
        raise ServiceError(f"Unreadable entity information: {e}") from e


class MetadataFetcher:
    """Client for the external company metadata service."""

    def __init__(self, client: httpx.AsyncClient, url_template: str, user_id: str, key: str):
        self.client = client
        self.url_template = url_template
        self.user_id = user_id
        self.key = key

    def url_for(self, entity_id: str) -> str:
        # Only the first %s is substituted; other % sequences stay as-is
        return self.url_template.replace("%s", entity_id, 1)

    async def fetch(self, entity_id: str) -> Optional[CompanyMetadata]:
        """
        Retrieve metadata for one company entity.

        Raises:
            TransportError: Service unreachable
            ServiceError: Service returned non-200
        """

        try:
            response = await self.client.get(
                self.url_for(entity_id),
                headers={
                    "frUserId": self.user_id,
                    "authKey": self.key,
                },
            )
        except httpx.RequestError as e:
            logger.error(f"Error calling entity information service: {e}")
            raise TransportError(f"Entity information request failed: {e}") from e

        logger.debug(f"Entity information response code {response.status_code}")
        if response.status_code != 200:
            raise ServiceError(
                "Couldn't retrieve entity information",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            body = None

        info = parse_metadata(body)
        logger.debug(f"Company info {info}", extra={"entity_id": entity_id})
        return info
