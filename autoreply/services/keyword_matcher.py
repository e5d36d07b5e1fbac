from dataclasses import dataclass
from typing import Iterable, List, Optional

from autoreply.services.entities import KeywordRule


@dataclass(frozen=True)
class KeywordMatch:
    keyword: str
    reply_text: str
    rule_id: int


def order_rules(rules: Iterable[KeywordRule]) -> List[KeywordRule]:
    """Priority descending, then creation order (rule id ascending)."""
    return sorted(rules, key=lambda rule: (-rule.priority, rule.id))


def match_keyword(text: str, rules: Iterable[KeywordRule]) -> Optional[KeywordMatch]:
    """Return the first rule whose keyword occurs in the text, ignoring case.

    Rules are evaluated in the order given; callers pass them through
    ``order_rules`` (stores already return them that way). Inactive rules
    never match. Keywords are compared as stored, so surrounding spaces are
    part of the keyword and an empty keyword matches any message.
    """
    lowered = (text or "").lower()
    if not lowered:
        return None

    for rule in rules:
        if not rule.is_active:
            continue
        if (rule.keyword or "").lower() in lowered:
            return KeywordMatch(keyword=rule.keyword, reply_text=rule.reply_text, rule_id=rule.id)

    return None
