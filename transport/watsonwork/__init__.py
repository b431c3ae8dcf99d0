"""Watson Work Transport Layer - Module Exports"""

from .errors import (
    AuthenticationError,
    CompanyInfoError,
    ServiceError,
    StartupError,
    TransportError,
)
from .oauth import TokenProvider, acquire_token
from .schemas import (
    SCORE_THRESHOLD,
    Annotation,
    AppMessage,
    CategoryItem,
    CompanyMetadata,
    RecognizedEntity,
    WebhookEvent,
)
from .security import build_challenge_response, compute_signature, verify_signature
from .sender import MessageSender, compose_message
from .webhook import router

__all__ = [
    # Errors
    "CompanyInfoError",
    "AuthenticationError",
    "StartupError",
    "ServiceError",
    "TransportError",
    # Schemas
    "SCORE_THRESHOLD",
    "WebhookEvent",
    "RecognizedEntity",
    "CategoryItem",
    "CompanyMetadata",
    "Annotation",
    "AppMessage",
    # Security
    "compute_signature",
    "verify_signature",
    "build_challenge_response",
    # OAuth
    "acquire_token",
    "TokenProvider",
    # Sender
    "compose_message",
    "MessageSender",
    # Router
    "router",
]
