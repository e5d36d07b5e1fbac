"""Keyword-first, AI-fallback reply resolution for one inbound message.

``ReplyPipeline.handle`` runs the whole chain for a single event in order:
page lookup, resolution, delivery, history. Each step awaits storage or the
network, so other events interleave freely between them, but within one event
nothing is reordered.
"""

from typing import Optional

from autoreply.config import settings
from autoreply.logging_config import LoggerAdapter, get_logger
from autoreply.services.delivery_service import MessengerClient
from autoreply.services.entities import MessageEvent, ResolutionOutcome, ResolutionType
from autoreply.services.history_service import record_exchange
from autoreply.services.keyword_matcher import match_keyword
from autoreply.services.llm import generate_reply
from autoreply.services.result import PROVIDER_BAD_RESPONSE
from autoreply.services.store import PipelineStore

logger = get_logger("reply_service")


class ReplyPipeline:
    def __init__(
        self,
        store: PipelineStore,
        messenger: MessengerClient,
        *,
        fallback_text: Optional[str] = None,
        provider_timeout_seconds: float = 15.0,
        provider_max_tokens: int = 600,
    ):
        self.store = store
        self.messenger = messenger
        self.fallback_text = fallback_text or settings.ai_fallback_text
        self.provider_timeout_seconds = provider_timeout_seconds
        self.provider_max_tokens = provider_max_tokens

    async def resolve(self, event: MessageEvent) -> ResolutionOutcome:
        """Pick the reply for an event whose page is already known to be connected."""
        rules = await self.store.get_active_keyword_rules(event.page_id)
        match = match_keyword(event.text, rules)
        if match:
            return ResolutionOutcome(
                resolution=ResolutionType.KEYWORD,
                reply_text=match.reply_text,
                matched_keyword=match.keyword,
            )

        config = await self.store.get_active_ai_config(event.page_id)
        if config is None or not config.is_active:
            return ResolutionOutcome.no_response()

        result = await generate_reply(
            config,
            event.text,
            timeout_seconds=self.provider_timeout_seconds,
            max_tokens=self.provider_max_tokens,
        )
        if result.ok and result.value and result.value.strip():
            return ResolutionOutcome(resolution=ResolutionType.AI, reply_text=result.value)

        # The sender gets the apology; the failure itself stays in logs
        return ResolutionOutcome(
            resolution=ResolutionType.AI,
            reply_text=self.fallback_text,
            error_code=result.error_code or PROVIDER_BAD_RESPONSE,
        )

    async def handle(self, event: MessageEvent) -> Optional[ResolutionOutcome]:
        """Resolve, deliver and record one event.

        Returns None when the page is not connected; nothing is sent or stored
        in that case.
        """
        log = LoggerAdapter(logger, {"page_id": event.page_id, "sender_id": event.sender_id})

        binding = await self.store.get_active_page_binding(event.page_id)
        if binding is None or not binding.is_active:
            log.info("Page not connected or inactive, ignoring message")
            return None

        log.info("Message received", context={"chars": len(event.text), "message_id": event.message_id})

        outcome = await self.resolve(event)
        if outcome.error_code:
            log.warning("AI provider failed, sending fallback", context={"error_code": outcome.error_code})

        delivered = None
        if outcome.reply_text:
            delivered = await self.messenger.send_text(binding.access_token, event.sender_id, outcome.reply_text)
            if not delivered:
                log.error("Reply delivery failed", context={"resolution": outcome.resolution.value})

        saved = await record_exchange(self.store, binding, event, outcome, delivered)
        if not saved.ok:
            log.error("Conversation not recorded", context={"error_code": saved.error_code})

        log.info(
            "Message handled",
            context={
                "resolution": outcome.resolution.value,
                "keyword": outcome.matched_keyword,
                "delivered": delivered,
            },
        )
        return outcome
