import asyncio
from typing import Dict, Optional

import httpx

from autoreply.logging_config import get_logger
from autoreply.services.entities import AIProviderConfig
from autoreply.services.llm.base import LLMRequest, ProviderResponseError, ProviderSpec
from autoreply.services.llm.claude_provider import CLAUDE
from autoreply.services.llm.mistral_provider import MISTRAL
from autoreply.services.llm.openai_provider import OPENAI
from autoreply.services.result import (
    PROVIDER_BAD_RESPONSE,
    PROVIDER_CONFIG,
    PROVIDER_HTTP_ERROR,
    PROVIDER_TIMEOUT,
    PROVIDER_UNAVAILABLE,
    Result,
)

logger = get_logger("llm.adapter")

PROVIDERS: Dict[str, ProviderSpec] = {spec.name: spec for spec in (OPENAI, MISTRAL, CLAUDE)}
PROVIDER_ALIASES = {"anthropic": "claude"}

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_MAX_TOKENS = 600


def get_provider(name: Optional[str]) -> Optional[ProviderSpec]:
    key = (name or "").strip().lower()
    key = PROVIDER_ALIASES.get(key, key)
    return PROVIDERS.get(key)


async def _post(spec: ProviderSpec, request: LLMRequest, timeout_seconds: float) -> httpx.Response:
    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        return await client.post(
            spec.url,
            headers=spec.build_headers(request),
            json=spec.build_payload(request),
        )


async def generate_reply(
    config: AIProviderConfig,
    message_text: str,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> Result[str]:
    """Ask the configured provider for a reply to one message.

    Never raises: every failure, including unexpected errors while building
    or sending the request, comes back as a failed Result so the caller can
    substitute its own fallback. No retries.
    """
    spec = get_provider(config.provider)
    if spec is None:
        logger.error(
            "Unsupported AI provider",
            extra={"context": {"provider": config.provider}},
        )
        return Result.failure(f"Unsupported AI provider: {config.provider!r}", PROVIDER_CONFIG)

    if not config.api_key or not config.model:
        return Result.failure(f"Provider {spec.name} is missing api_key or model", PROVIDER_CONFIG)

    # Header values must be ASCII; a pasted key with typographic characters never authenticates
    if not config.api_key.isascii():
        logger.error("AI provider api_key contains non-ASCII characters", extra={"context": {"provider": spec.name}})
        return Result.failure(f"Provider {spec.name} api_key contains non-ASCII characters", PROVIDER_CONFIG)

    request = LLMRequest(
        message=message_text,
        model=config.model,
        api_key=config.api_key,
        temperature=config.temperature,
        system_prompt=config.system_prompt,
        max_tokens=max_tokens,
    )
    context = {"provider": spec.name, "model": config.model}

    try:
        # httpx bounds each phase; wait_for bounds the whole exchange
        response = await asyncio.wait_for(_post(spec, request, timeout_seconds), timeout=timeout_seconds)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        logger.warning("AI provider timed out", extra={"context": {**context, "timeout_seconds": timeout_seconds}})
        return Result.failure(f"{spec.name} did not answer within {timeout_seconds}s", PROVIDER_TIMEOUT)
    except httpx.HTTPError as e:
        logger.error(f"AI provider request failed: {e}", extra={"context": context})
        return Result.failure(f"{spec.name} request failed: {e}", PROVIDER_UNAVAILABLE)
    except Exception as e:
        logger.error(f"AI provider call raised unexpectedly: {type(e).__name__}", exc_info=True, extra={"context": context})
        return Result.failure(f"{spec.name} request failed: {type(e).__name__}", PROVIDER_UNAVAILABLE)

    if not 200 <= response.status_code < 300:
        logger.error(
            f"AI provider error: {response.status_code}",
            extra={"context": {**context, "body": response.text[:500]}},
        )
        return Result.failure(f"{spec.name} API error: {response.status_code}", PROVIDER_HTTP_ERROR)

    try:
        llm_response = spec.parse_response(response.json(), config.model)
    except (ValueError, ProviderResponseError) as e:
        logger.error(f"AI provider returned unusable body: {e}", extra={"context": context})
        return Result.failure(f"{spec.name} returned an unusable body: {e}", PROVIDER_BAD_RESPONSE)
    except Exception as e:
        logger.error(f"AI provider body could not be read: {type(e).__name__}", exc_info=True, extra={"context": context})
        return Result.failure(f"{spec.name} returned an unusable body: {type(e).__name__}", PROVIDER_BAD_RESPONSE)

    logger.debug(
        "AI provider replied",
        extra={"context": {**context, "chars": len(llm_response.content), "usage": llm_response.usage}},
    )
    return Result.success(llm_response.content)
