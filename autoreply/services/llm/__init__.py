from autoreply.services.llm.adapter import PROVIDERS, generate_reply, get_provider
from autoreply.services.llm.base import LLMRequest, LLMResponse, ProviderSpec

__all__ = ["PROVIDERS", "LLMRequest", "LLMResponse", "ProviderSpec", "generate_reply", "get_provider"]
