"""
Watson Work Webhook Receiver

FastAPI router that receives platform events and answers with company info.

Flow:
  verify signature -> challenge | filter | acknowledge (201)
  -> background: recognize -> per entity: metadata -> compose -> send
"""

import asyncio
import json
import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, Response, status
from pydantic import ValidationError

from .errors import AuthenticationError, ServiceError, TransportError
from .schemas import MESSAGE_CREATED, VERIFICATION, RecognizedEntity, WebhookEvent
from .security import SIGNATURE_HEADER, build_challenge_response, verify_signature
from .sender import compose_message

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Watson Work Transport"])


def get_context(request: Request):
    """Application context built at startup (see infra.bootstrap)."""
    return request.app.state.context


def is_qualifying_message(event: WebhookEvent, app_id: str) -> bool:
    """message-created, not authored by the app itself, with content."""
    return (
        event.type == MESSAGE_CREATED
        and event.user_id != app_id
        and bool(event.content)
    )


# ============================================================================
# WEBHOOK RECEIVER
# ============================================================================

@router.post("/companyinfo")
async def companyinfo_webhook(request: Request, background_tasks: BackgroundTasks) -> Response:
    """
    Receive platform events via webhook.

    Returns:
        200 with signed {"response": challenge} for verification events
        201 for every other accepted event (processing continues in background)

    Raises:
        HTTPException(401): Missing or invalid signature
        HTTPException(400): Body is not a JSON event
    """

    context = get_context(request)
    body = await request.body()

    # Step 1: Verify signature on the raw bytes
    try:
        verify_signature(body, request.headers.get(SIGNATURE_HEADER), context.config.webhook_secret)
    except AuthenticationError as e:
        logger.warning(f"Signature verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid request signature"
        )

    # Step 2: Parse the event (only non-objects are rejected)
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Invalid webhook payload: {e}")
        payload = None

    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook payload"
        )

    try:
        event = WebhookEvent.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Ignoring unreadable event: {e}")
        return Response(status_code=status.HTTP_201_CREATED)

    # Step 3: Challenge handshake
    if event.type == VERIFICATION:
        logger.info("Got webhook verification challenge")
        content, signature = build_challenge_response(event.challenge, context.config.webhook_secret)
        return Response(
            content=content,
            status_code=status.HTTP_200_OK,
            media_type="application/json",
            headers={SIGNATURE_HEADER: signature},
        )

    # Step 4: Acknowledge, then process in the background
    if is_qualifying_message(event, context.config.app_id):
        logger.info(
            "Got a message",
            extra={
                "space_id": event.space_id,
                "message_id": event.message_id,
            }
        )
        background_tasks.add_task(process_message, context, event)
    else:
        logger.debug(f"Ignoring {event.type} event")

    return Response(status_code=status.HTTP_201_CREATED)


# ============================================================================
# BACKGROUND PROCESSING
# ============================================================================

async def process_message(context, event: WebhookEvent) -> None:
    """
    Recognize companies in a message and post their info to the space.

    Runs after the webhook was acknowledged. Errors are logged only.
    """

    try:
        entities = await context.recognizer.recognize(
            event.content,
            event.space_id,
            event.message_id,
            event.time,
            event.user_id,
            event.user_name,
        )
    except (ServiceError, TransportError) as e:
        logger.error(
            f"Entity recognition failed: {e}",
            extra={"message_id": event.message_id},
        )
        return

    qualifying = [entity for entity in entities if entity.qualifies]
    if not qualifying:
        return

    await asyncio.gather(
        *(process_entity(context, event.space_id, entity) for entity in qualifying)
    )


async def process_entity(context, space_id: str, entity: RecognizedEntity) -> bool:
    """
    Fetch metadata for one entity and send it.

    Failures are contained to this entity.

    Returns:
        True if a message was sent
    """

    try:
        info = await context.fetcher.fetch(entity.id)
    except (ServiceError, TransportError) as e:
        logger.info(f"No info for entity {entity.id}: {e}")
        return False

    if info is None:
        return False

    try:
        await context.sender.send(space_id, compose_message(info))
    except (ServiceError, TransportError) as e:
        logger.error(f"Failed to send info for entity {entity.id}: {e}")
        return False

    return True
