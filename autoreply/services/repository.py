from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from autoreply.models import AIConfig, AutoResponse, ConnectedPage, Conversation
from autoreply.services.entities import AIProviderConfig, HistoryRecord, KeywordRule, PageBinding


class SqlAlchemyStore:
    """PipelineStore backed by the SQL tables shared with the admin side.

    Each call opens its own short-lived session, so concurrent events never
    share a session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_active_page_binding(self, page_id: str) -> Optional[PageBinding]:
        """Find the connected page for page_id, oldest binding first if several tenants share it."""
        async with self._session_factory() as session:
            row = (
                await session.execute(
                    select(ConnectedPage)
                    .where(ConnectedPage.page_id == page_id, ConnectedPage.is_active.is_(True))
                    .order_by(ConnectedPage.id.asc())
                    .limit(1)
                )
            ).scalar_one_or_none()

        if row is None:
            return None
        return PageBinding(
            page_id=row.page_id,
            tenant_id=row.tenant_id,
            access_token=row.page_access_token,
            is_active=bool(row.is_active),
            page_name=row.page_name,
        )

    async def get_active_keyword_rules(self, page_id: str) -> List[KeywordRule]:
        async with self._session_factory() as session:
            rows = (
                await session.execute(
                    select(AutoResponse)
                    .where(AutoResponse.page_id == page_id, AutoResponse.is_active.is_(True))
                    .order_by(AutoResponse.priority.desc(), AutoResponse.id.asc())
                )
            ).scalars().all()

        return [
            KeywordRule(
                id=row.id,
                page_id=row.page_id,
                keyword=row.keyword,
                reply_text=row.response,
                priority=row.priority if row.priority is not None else 1,
                is_active=bool(row.is_active),
            )
            for row in rows
        ]

    async def get_active_ai_config(self, page_id: str) -> Optional[AIProviderConfig]:
        """Return the active provider config; duplicates resolve to the lowest id."""
        async with self._session_factory() as session:
            row = (
                await session.execute(
                    select(AIConfig)
                    .where(AIConfig.page_id == page_id, AIConfig.is_active.is_(True))
                    .order_by(AIConfig.id.asc())
                    .limit(1)
                )
            ).scalar_one_or_none()

        if row is None:
            return None
        return AIProviderConfig(
            provider=row.provider,
            api_key=row.api_key,
            model=row.model,
            temperature=float(row.temperature) if row.temperature is not None else 0.7,
            system_prompt=row.system_prompt,
            is_active=bool(row.is_active),
        )

    async def append_history(self, record: HistoryRecord) -> None:
        async with self._session_factory() as session:
            session.add(
                Conversation(
                    tenant_id=record.tenant_id,
                    page_id=record.page_id,
                    sender_id=record.sender_id,
                    message_text=record.inbound_text,
                    response_text=record.outbound_text,
                    response_type=record.resolution.value,
                    delivered=record.delivered,
                    created_at=record.created_at,
                )
            )
            await session.commit()
