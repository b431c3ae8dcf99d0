"""
Watson Work Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Contract between the platform webhook, the company services and the sender.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# Entities below this relevance score are never looked up
SCORE_THRESHOLD = 60

MESSAGE_CREATED = "message-created"
VERIFICATION = "verification"


# ============================================================================
# INBOUND WEBHOOK EVENT
# ============================================================================

class WebhookEvent(BaseModel):
    """
    Event posted by the platform to the app webhook.

    Only `message-created` and `verification` are acted on.
    """

    type: Optional[str] = Field(None, description="Event type, e.g. message-created")
    user_id: Optional[str] = Field(None, alias="userId")
    user_name: Optional[str] = Field(None, alias="userName")
    space_id: Optional[str] = Field(None, alias="spaceId")
    message_id: Optional[str] = Field(None, alias="messageId")
    time: Optional[int] = Field(None, description="Epoch milliseconds")
    content: Optional[str] = None
    challenge: Optional[Any] = Field(None, description="Verification challenge, echoed as-is")

    class Config:
        """Pydantic config."""
        frozen = True  # Immutable - events are never mutated
        extra = "allow"  # Platform may add fields
        populate_by_name = True


# ============================================================================
# COMPANY SERVICES (RECOGNITION + METADATA)
# ============================================================================

class RecognizedEntity(BaseModel):
    """A company mention candidate."""

    id: str = Field(..., description="Opaque company identifier (searchToken)")
    score: float = Field(..., description="Relevance score, 0-100")

    class Config:
        frozen = True

    @property
    def qualifies(self) -> bool:
        return self.score >= SCORE_THRESHOLD


class CategoryItem(BaseModel):
    """Industry, sector, segment or language entry."""

    name: str

    class Config:
        extra = "allow"


class CompanyMetadata(BaseModel):
    """Descriptive metadata for one company."""

    name: str
    languages: list[CategoryItem] = Field(default_factory=list)
    industries: list[CategoryItem] = Field(default_factory=list)
    sectors: list[CategoryItem] = Field(default_factory=list)
    segments: list[CategoryItem] = Field(default_factory=list)


# ============================================================================
# OUTBOUND APP MESSAGE
# ============================================================================

class Annotation(BaseModel):
    """Generic annotation rendered as a colored card."""

    type: str = "generic"
    version: float = 1.0
    color: str = "#6CB7FB"
    text: str


class AppMessage(BaseModel):
    """Body posted to /v1/spaces/{spaceId}/messages."""

    type: str = "appMessage"
    version: float = 1.0
    annotations: list[Annotation]
