"""Idempotency key handling for webhook deliveries."""

import hashlib


def generate_webhook_delivery_key(
    event_type: str,
    call_control_id: str | None,
    event_id: str | None = None,
) -> str:
    """Generate a de-duplication key for one webhook delivery.

    Telnyx assigns every event an ``id``; when it is absent the key falls back
    to event type + call, which is still unique for the once-per-call events.

    Args:
        event_type: Telnyx event type
        call_control_id: Call the event belongs to
        event_id: Telnyx event ID, when present

    Returns:
        Idempotency key string
    """
    key_parts = [event_type, call_control_id or ""]
    if event_id:
        key_parts.append(event_id)

    key_string = "|".join(key_parts)
    return "telnyx:voice:" + hashlib.sha256(key_string.encode()).hexdigest()
