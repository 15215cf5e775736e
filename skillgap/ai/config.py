import os
from dataclasses import dataclass

_DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    base_url: str | None
    timeout_s: float
    max_retries: int
    temperature: float


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(
        provider=provider,
        model=model,
        base_url=(os.getenv("LLM_BASE_URL") or "").strip() or None,
        timeout_s=float(os.getenv("LLM_TIMEOUT_S", "60")),
        max_retries=int(os.getenv("LLM_MAX_RETRIES", "0")),
        temperature=float(os.getenv("LLM_TEMPERATURE", "0.2")),
    )
