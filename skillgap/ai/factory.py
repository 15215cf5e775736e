from typing import Callable

from skillgap.ai.config import load_ai_config
from skillgap.ai.types import LLMClient

from skillgap.ai.providers.gemini_provider import GeminiProvider
from skillgap.ai.providers.openai_provider import OpenAIProvider

LLMClientFactory = Callable[[str], LLMClient]


def get_llm_client(api_key: str) -> LLMClient:
    cfg = load_ai_config()
    kwargs = {
        "model": cfg.model,
        "api_key": api_key,
        "base_url": cfg.base_url,
        "timeout_s": cfg.timeout_s,
        "max_retries": cfg.max_retries,
        "temperature": cfg.temperature,
    }

    if cfg.provider == "gemini":
        return GeminiProvider(**kwargs)

    if cfg.provider == "openai":
        return OpenAIProvider(**kwargs)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")


def get_llm_client_factory() -> LLMClientFactory:
    return get_llm_client
