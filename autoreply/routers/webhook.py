import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from autoreply.config import settings
from autoreply.logging_config import get_logger
from autoreply.schemas.webhook import EVENT_RECEIVED
from autoreply.services.dispatcher import EventDispatcher
from autoreply.services.webhook_service import (
    WebhookVerificationError,
    extract_message_events,
    verify_subscription,
)

logger = get_logger("webhook")

router = APIRouter()


def get_dispatcher(request: Request) -> Optional[EventDispatcher]:
    return getattr(request.app.state, "dispatcher", None)


def get_verify_token() -> str:
    return settings.webhook_verify_token


async def parse_webhook_body(request: Request) -> Optional[Any]:
    """Decode the callback body; None when it is not JSON."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8", errors="replace"))
    except ValueError as e:
        logger.warning(f"Webhook body is not valid JSON: {e}")
        return None


@router.get("/webhook", response_class=PlainTextResponse)
async def verify_webhook(request: Request, verify_token: str = Depends(get_verify_token)):
    """Subscription handshake: echo hub.challenge when hub.verify_token matches."""
    params = request.query_params
    try:
        challenge = verify_subscription(
            mode=params.get("hub.mode") or params.get("mode"),
            token=params.get("hub.verify_token") or params.get("verify_token"),
            challenge=params.get("hub.challenge", params.get("challenge")),
            expected_token=verify_token,
        )
    except WebhookVerificationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
    return PlainTextResponse(challenge)


@router.post("/webhook", response_class=PlainTextResponse)
async def receive_webhook(request: Request, dispatcher: Optional[EventDispatcher] = Depends(get_dispatcher)):
    """Acknowledge every callback with 200; each text message is processed in the background."""
    body = await parse_webhook_body(request)
    events = extract_message_events(body)

    if events:
        if dispatcher is None:
            logger.error("Dispatcher not running, dropping messages", extra={"context": {"count": len(events)}})
        else:
            submitted = dispatcher.submit_all(events)
            logger.info("Webhook messages dispatched", extra={"context": {"count": submitted}})

    return PlainTextResponse(EVENT_RECEIVED)
