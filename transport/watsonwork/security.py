"""
Watson Work Signature Verification

SECURITY BOUNDARY - Verify the platform HMAC signature.
No service imports. No retries. No logic.
"""

import hashlib
import hmac
import json
from typing import Any, Optional

from .errors import AuthenticationError

SIGNATURE_HEADER = "X-OUTBOUND-TOKEN"


def compute_signature(body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of body under the webhook secret."""
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256
    ).hexdigest()


def verify_signature(body: bytes, signature: Optional[str], secret: str) -> None:
    """
    Verify the X-OUTBOUND-TOKEN signature of a webhook request.

    The platform sends hex(HMAC-SHA256(webhook_secret, raw_body)).
    Must run on the raw bytes, before any JSON parsing.

    Args:
        body: Raw request body bytes
        signature: Value of the X-OUTBOUND-TOKEN header (None if absent)
        secret: Webhook secret

    Raises:
        AuthenticationError: Missing or invalid signature
    """

    if not signature:
        raise AuthenticationError(f"Missing {SIGNATURE_HEADER} header")

    expected_signature = compute_signature(body, secret)

    # Constant-time compare on bytes; header values may hold non-ASCII text
    if not hmac.compare_digest(signature.encode("utf-8"), expected_signature.encode("ascii")):
        raise AuthenticationError("Invalid request signature")


def build_challenge_response(challenge: Any, secret: str) -> tuple[bytes, str]:
    """
    Answer a webhook verification challenge.

    The platform expects {"response": <challenge>} signed with the
    webhook secret in the X-OUTBOUND-TOKEN response header.

    Returns:
        (body bytes, signature) - the signature covers exactly these bytes
    """

    body = json.dumps({"response": challenge}, separators=(",", ":")).encode("utf-8")
    return body, compute_signature(body, secret)
