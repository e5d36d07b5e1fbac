"""Storage operations the reply pipeline consumes.

Rule and provider configuration CRUD lives elsewhere; the pipeline only reads
snapshots and appends history rows through this contract.
"""

from typing import List, Optional, Protocol

from autoreply.services.entities import AIProviderConfig, HistoryRecord, KeywordRule, PageBinding


class PipelineStore(Protocol):
    async def get_active_page_binding(self, page_id: str) -> Optional[PageBinding]:
        ...

    async def get_active_keyword_rules(self, page_id: str) -> List[KeywordRule]:
        """Active rules for the page, ordered by priority desc then id asc."""
        ...

    async def get_active_ai_config(self, page_id: str) -> Optional[AIProviderConfig]:
        ...

    async def append_history(self, record: HistoryRecord) -> None:
        ...
