from autoreply.services.entities import (
    AIProviderConfig,
    HistoryRecord,
    KeywordRule,
    MessageEvent,
    PageBinding,
    ResolutionOutcome,
    ResolutionType,
)
from autoreply.services.result import Result

__all__ = [
    "AIProviderConfig",
    "HistoryRecord",
    "KeywordRule",
    "MessageEvent",
    "PageBinding",
    "ResolutionOutcome",
    "ResolutionType",
    "Result",
]
