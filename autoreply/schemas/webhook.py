from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class MessagingParty(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str


class MessagingMessage(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    mid: Optional[str] = None
    text: Optional[str] = None
    is_echo: bool = False


class MessagingEvent(BaseModel):
    sender: MessagingParty
    recipient: Optional[MessagingParty] = None
    timestamp: Optional[int] = None
    message: Optional[MessagingMessage] = None


class WebhookEntry(BaseModel):
    """One page's slice of a callback. Messaging items are validated one by one."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    time: Optional[int] = None
    messaging: Optional[List[Any]] = None


class WebhookPayload(BaseModel):
    object: str
    entry: List[Any]


EVENT_RECEIVED = "EVENT_RECEIVED"
