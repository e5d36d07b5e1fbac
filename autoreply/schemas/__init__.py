from autoreply.schemas.webhook import (
    EVENT_RECEIVED,
    MessagingEvent,
    MessagingMessage,
    MessagingParty,
    WebhookEntry,
    WebhookPayload,
)

__all__ = [
    "EVENT_RECEIVED",
    "MessagingEvent",
    "MessagingMessage",
    "MessagingParty",
    "WebhookEntry",
    "WebhookPayload",
]
