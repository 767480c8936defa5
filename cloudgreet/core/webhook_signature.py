"""Telnyx webhook signature verification.

Telnyx signs every webhook with Ed25519. The signed payload is
``"{timestamp}|{raw_body}"``; the signature arrives base64-encoded in the
``telnyx-signature-ed25519`` header and the Unix timestamp in
``telnyx-timestamp``.
"""

import base64
import binascii
import logging
import time

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "telnyx-signature-ed25519"
TIMESTAMP_HEADER = "telnyx-timestamp"


class TelnyxSignatureVerifier:
    """Verifies Telnyx Ed25519 webhook signatures."""

    def __init__(self, public_key: str, tolerance_seconds: int = 300) -> None:
        """Initialize verifier.

        Args:
            public_key: Base64-encoded 32-byte Ed25519 public key
            tolerance_seconds: Maximum accepted age of a webhook timestamp
        """
        self._public_key = Ed25519PublicKey.from_public_bytes(base64.b64decode(public_key))
        self.tolerance_seconds = tolerance_seconds

    def verify(
        self,
        raw_body: bytes,
        signature: str | None,
        timestamp: str | None,
        now: float | None = None,
    ) -> bool:
        """Return True when the signature over timestamp|body is valid and fresh."""
        if not signature or not timestamp:
            logger.warning("Webhook missing signature or timestamp")
            return False

        try:
            webhook_time = int(timestamp)
        except ValueError:
            logger.warning("Webhook timestamp is not an integer", extra={"timestamp": timestamp})
            return False

        current_time = int(now if now is not None else time.time())
        if abs(current_time - webhook_time) > self.tolerance_seconds:
            logger.warning(
                "Webhook timestamp too old",
                extra={"webhook_time": webhook_time, "current_time": current_time},
            )
            return False

        try:
            signature_bytes = base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Webhook signature is not valid base64")
            return False

        signed_payload = f"{timestamp}|".encode() + raw_body
        try:
            self._public_key.verify(signature_bytes, signed_payload)
        except InvalidSignature:
            logger.error("Invalid webhook signature", extra={"payload_length": len(raw_body)})
            return False
        return True
