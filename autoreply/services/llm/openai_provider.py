from autoreply.services.llm.base import (
    LLMRequest,
    LLMResponse,
    ProviderResponseError,
    ProviderSpec,
    chat_messages,
    clamp_temperature,
)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def bearer_headers(request: LLMRequest) -> dict:
    return {
        "Authorization": f"Bearer {request.api_key}",
        "Content-Type": "application/json",
    }


def build_payload(request: LLMRequest) -> dict:
    return {
        "model": request.model,
        "messages": chat_messages(request),
        "temperature": clamp_temperature(request.temperature),
        "max_completion_tokens": request.max_tokens,
    }


def parse_chat_completion(data: dict, model: str) -> LLMResponse:
    """Extract ``choices[0].message.content`` from a chat-completions body."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices or not isinstance(choices, list):
        raise ProviderResponseError("response has no choices")

    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        raise ProviderResponseError("first choice has no text content")

    return LLMResponse(content=content.strip(), model=data.get("model", model), usage=data.get("usage"))


OPENAI = ProviderSpec(
    name="openai",
    url=OPENAI_CHAT_URL,
    build_headers=bearer_headers,
    build_payload=build_payload,
    parse_response=parse_chat_completion,
)
