from typing import Optional

import httpx

from autoreply.logging_config import get_logger, mask_token

logger = get_logger("delivery_service")


class MessengerClient:
    """Sends replies as a page through the Messenger Send API."""

    def __init__(
        self,
        graph_api_url: str = "https://graph.facebook.com",
        api_version: str = "v18.0",
        timeout_seconds: float = 10.0,
    ):
        self.messages_url = f"{graph_api_url.rstrip('/')}/{api_version}/me/messages"
        self.timeout_seconds = timeout_seconds

    def build_payload(self, recipient_id: str, text: str) -> dict:
        return {
            "recipient": {"id": recipient_id},
            "message": {"text": text},
            "messaging_type": "RESPONSE",
        }

    async def send_text(self, page_access_token: str, recipient_id: str, text: Optional[str]) -> bool:
        """Send text to recipient_id. Returns False on any failure, never raises."""
        if not page_access_token or not recipient_id or not text:
            logger.warning(
                "send_text: missing token, recipient or text",
                extra={"context": {"recipient_id": recipient_id, "has_token": bool(page_access_token)}},
            )
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self.messages_url,
                    params={"access_token": page_access_token},
                    json=self.build_payload(recipient_id, text),
                )
        except httpx.HTTPError as e:
            logger.error(
                f"Messenger send failed: {type(e).__name__}",
                extra={"context": {"recipient_id": recipient_id, "token": mask_token(page_access_token)}},
            )
            return False

        if not 200 <= response.status_code < 300:
            logger.error(
                f"Messenger send rejected: status={response.status_code}",
                extra={"context": {"recipient_id": recipient_id, "body": response.text[:300]}},
            )
            return False

        logger.info("Messenger reply sent", extra={"context": {"recipient_id": recipient_id}})
        return True
