from autoreply.services.llm.base import (
    LLMRequest,
    LLMResponse,
    ProviderResponseError,
    ProviderSpec,
    clamp_temperature,
)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


def build_headers(request: LLMRequest) -> dict:
    return {
        "x-api-key": request.api_key,
        "anthropic-version": ANTHROPIC_VERSION,
        "Content-Type": "application/json",
    }


def build_payload(request: LLMRequest) -> dict:
    payload = {
        "model": request.model,
        "max_tokens": request.max_tokens,
        "messages": [{"role": "user", "content": request.message}],
        # Messages API accepts 0..1 only
        "temperature": clamp_temperature(request.temperature, upper=1.0),
    }
    if request.system_prompt and request.system_prompt.strip():
        payload["system"] = request.system_prompt.strip()
    return payload


def parse_response(data: dict, model: str) -> LLMResponse:
    blocks = data.get("content") if isinstance(data, dict) else None
    if not blocks or not isinstance(blocks, list):
        raise ProviderResponseError("response has no content blocks")

    parts = [
        block.get("text", "")
        for block in blocks
        if isinstance(block, dict) and block.get("type", "text") == "text"
    ]
    content = "".join(part for part in parts if isinstance(part, str)).strip()
    if not content:
        raise ProviderResponseError("content blocks carry no text")

    return LLMResponse(content=content, model=data.get("model", model), usage=data.get("usage"))


CLAUDE = ProviderSpec(
    name="claude",
    url=ANTHROPIC_MESSAGES_URL,
    build_headers=build_headers,
    build_payload=build_payload,
    parse_response=parse_response,
)
