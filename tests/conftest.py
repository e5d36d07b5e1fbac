from typing import List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from autoreply.services.entities import AIProviderConfig, HistoryRecord, KeywordRule, MessageEvent, PageBinding
from autoreply.services.keyword_matcher import order_rules


class InMemoryStore:
    """PipelineStore kept in lists, for tests."""

    def __init__(self):
        self.bindings: List[PageBinding] = []
        self.rules: List[KeywordRule] = []
        self.ai_configs: dict[str, List[AIProviderConfig]] = {}
        self.history: List[HistoryRecord] = []
        self.fail_history = False

    async def get_active_page_binding(self, page_id: str) -> Optional[PageBinding]:
        for binding in self.bindings:
            if binding.page_id == page_id and binding.is_active:
                return binding
        return None

    async def get_active_keyword_rules(self, page_id: str) -> List[KeywordRule]:
        return order_rules(rule for rule in self.rules if rule.page_id == page_id and rule.is_active)

    async def get_active_ai_config(self, page_id: str) -> Optional[AIProviderConfig]:
        active = [config for config in self.ai_configs.get(page_id, []) if config.is_active]
        return active[0] if active else None

    async def append_history(self, record: HistoryRecord) -> None:
        if self.fail_history:
            raise RuntimeError("database is down")
        self.history.append(record)


@pytest.fixture
def store():
    store = InMemoryStore()
    store.bindings.append(PageBinding(page_id="page-1", tenant_id="tenant-1", access_token="page-token-1"))
    return store


@pytest.fixture
def messenger():
    """Messenger client stub that reports every send as delivered."""
    client = Mock()
    client.send_text = AsyncMock(return_value=True)
    return client


@pytest.fixture
def make_event():
    def _make(text: str = "Bonjour", page_id: str = "page-1", sender_id: str = "user-1") -> MessageEvent:
        return MessageEvent(page_id=page_id, sender_id=sender_id, text=text)

    return _make
