from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass(frozen=True)
class LLMRequest:
    message: str
    model: str
    api_key: str
    temperature: float = 0.7
    system_prompt: Optional[str] = None
    max_tokens: int = 600


@dataclass
class LLMResponse:
    content: str
    model: str
    usage: Optional[dict] = None


class ProviderResponseError(Exception):
    """Provider answered 2xx but the body carries no usable reply."""


@dataclass(frozen=True)
class ProviderSpec:
    """Wire mapping for one completion back-end.

    Providers differ only in URL, auth header, request body and where the
    reply sits in the response, so each variant is a set of functions keyed by
    its provider tag rather than a subclass.
    """

    name: str
    url: str
    build_headers: Callable[[LLMRequest], dict]
    build_payload: Callable[[LLMRequest], dict]
    parse_response: Callable[[dict, str], LLMResponse]


def clamp_temperature(value: Optional[float], upper: float = 2.0) -> float:
    if value is None:
        return 0.7
    return max(0.0, min(float(value), upper))


def chat_messages(request: LLMRequest) -> List[dict]:
    """System instructions (if any) followed by the user's message."""
    messages = []
    if request.system_prompt and request.system_prompt.strip():
        messages.append({"role": "system", "content": request.system_prompt.strip()})
    messages.append({"role": "user", "content": request.message})
    return messages
