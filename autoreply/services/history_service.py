from datetime import datetime, timezone
from typing import Optional

from autoreply.logging_config import get_logger
from autoreply.services.entities import HistoryRecord, MessageEvent, PageBinding, ResolutionOutcome
from autoreply.services.result import DB_ERROR, Result
from autoreply.services.store import PipelineStore

logger = get_logger("history_service")


def build_history_record(
    binding: PageBinding,
    event: MessageEvent,
    outcome: ResolutionOutcome,
    delivered: Optional[bool] = None,
) -> HistoryRecord:
    """Record what the service attempted to say, whether or not delivery worked."""
    return HistoryRecord(
        tenant_id=binding.tenant_id,
        page_id=event.page_id,
        sender_id=event.sender_id,
        inbound_text=event.text,
        outbound_text=outcome.reply_text or None,
        resolution=outcome.resolution,
        created_at=datetime.now(timezone.utc),
        delivered=delivered,
    )


async def record_exchange(
    store: PipelineStore,
    binding: PageBinding,
    event: MessageEvent,
    outcome: ResolutionOutcome,
    delivered: Optional[bool] = None,
) -> Result[HistoryRecord]:
    """Append one history row. Storage errors come back as a failed Result."""
    record = build_history_record(binding, event, outcome, delivered)
    try:
        await store.append_history(record)
    except Exception as e:
        logger.error(
            f"Failed to save conversation: {e}",
            exc_info=True,
            extra={"context": {"page_id": event.page_id, "sender_id": event.sender_id}},
        )
        return Result.failure(str(e), DB_ERROR)
    return Result.success(record)
