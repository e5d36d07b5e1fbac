import hmac
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import ValidationError

from autoreply.logging_config import get_logger
from autoreply.schemas.webhook import MessagingEvent, WebhookEntry, WebhookPayload
from autoreply.services.entities import MessageEvent

logger = get_logger("webhook_service")

PAGE_OBJECT = "page"
SUBSCRIBE_MODE = "subscribe"


class WebhookVerificationError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


def verify_subscription(
    mode: Optional[str],
    token: Optional[str],
    challenge: Optional[str],
    expected_token: str,
) -> str:
    """Return the challenge when the subscription request carries our verify token.

    Raises WebhookVerificationError with 400 for missing parameters and 403
    for a wrong mode or token. An empty configured token rejects everything.
    """
    if not mode or not token or challenge is None:
        raise WebhookVerificationError(400, "Missing mode, verify_token or challenge")

    if not expected_token:
        logger.error("Webhook verification attempted but WEBHOOK_VERIFY_TOKEN is not configured")
        raise WebhookVerificationError(403, "Verification token not configured")

    token_ok = hmac.compare_digest(token.encode("utf-8"), expected_token.encode("utf-8"))
    if mode != SUBSCRIBE_MODE or not token_ok:
        logger.warning("Webhook verification rejected", extra={"context": {"mode": mode}})
        raise WebhookVerificationError(403, "Verification failed")

    logger.info("Webhook verified")
    return challenge


def _received_at(timestamp_ms: Optional[int]) -> datetime:
    if timestamp_ms:
        try:
            return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    return datetime.now(timezone.utc)


def _to_message_event(page_id: str, raw_event: Any) -> Optional[MessageEvent]:
    try:
        messaging = MessagingEvent.model_validate(raw_event)
    except ValidationError as e:
        logger.warning(
            "Skipping malformed messaging event",
            extra={"context": {"page_id": page_id, "errors": e.error_count()}},
        )
        return None

    message = messaging.message
    if message is None or not message.text:
        return None

    # Copies of the page's own outgoing messages
    if message.is_echo:
        return None

    return MessageEvent(
        page_id=page_id,
        sender_id=messaging.sender.id,
        text=message.text,
        received_at=_received_at(messaging.timestamp),
        message_id=message.mid,
    )


def extract_message_events(payload: Any) -> List[MessageEvent]:
    """Flatten a page callback into text message events, in payload order.

    Anything that is not a page callback yields no events. Malformed entries
    and messaging items are skipped one by one without dropping their
    siblings.
    """
    try:
        parsed = WebhookPayload.model_validate(payload)
    except ValidationError:
        logger.info("Ignoring webhook payload with unexpected shape")
        return []

    if parsed.object != PAGE_OBJECT:
        logger.info("Ignoring webhook for object type", extra={"context": {"object": parsed.object}})
        return []

    events: List[MessageEvent] = []
    for raw_entry in parsed.entry:
        try:
            entry = WebhookEntry.model_validate(raw_entry)
        except ValidationError:
            logger.warning("Skipping malformed webhook entry")
            continue

        for raw_event in entry.messaging or []:
            event = _to_message_event(entry.id, raw_event)
            if event is not None:
                events.append(event)

    return events
