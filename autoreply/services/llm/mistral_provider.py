from autoreply.services.llm.base import LLMRequest, ProviderSpec, chat_messages, clamp_temperature
from autoreply.services.llm.openai_provider import bearer_headers, parse_chat_completion

MISTRAL_CHAT_URL = "https://api.mistral.ai/v1/chat/completions"


def build_payload(request: LLMRequest) -> dict:
    return {
        "model": request.model,
        "messages": chat_messages(request),
        "temperature": clamp_temperature(request.temperature),
        "max_tokens": request.max_tokens,
    }


# Mistral speaks the chat-completions dialect, only the endpoint and token field differ
MISTRAL = ProviderSpec(
    name="mistral",
    url=MISTRAL_CHAT_URL,
    build_headers=bearer_headers,
    build_payload=build_payload,
    parse_response=parse_chat_completion,
)
