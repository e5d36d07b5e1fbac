"""Snapshots handed to the reply pipeline.

Rows read from storage are copied into these frozen dataclasses so one event's
processing never shares mutable state with another.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ResolutionType(str, Enum):
    KEYWORD = "keyword"
    AI = "ai"
    NONE = "none"


@dataclass(frozen=True)
class PageBinding:
    page_id: str
    tenant_id: str
    access_token: str
    is_active: bool = True
    page_name: Optional[str] = None


@dataclass(frozen=True)
class KeywordRule:
    id: int
    page_id: str
    keyword: str
    reply_text: str
    priority: int = 1
    is_active: bool = True


@dataclass(frozen=True)
class AIProviderConfig:
    provider: str
    api_key: str
    model: str
    temperature: float = 0.7
    system_prompt: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class MessageEvent:
    page_id: str
    sender_id: str
    text: str
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    message_id: Optional[str] = None


@dataclass(frozen=True)
class ResolutionOutcome:
    resolution: ResolutionType
    reply_text: Optional[str] = None
    matched_keyword: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def no_response(cls) -> "ResolutionOutcome":
        return cls(resolution=ResolutionType.NONE)


@dataclass(frozen=True)
class HistoryRecord:
    tenant_id: str
    page_id: str
    sender_id: str
    inbound_text: str
    outbound_text: Optional[str]
    resolution: ResolutionType
    created_at: datetime
    delivered: Optional[bool] = None
