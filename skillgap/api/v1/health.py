from fastapi import APIRouter

from skillgap.ai.config import load_ai_config

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness plus the configured LLM provider and model.")
async def health_check():
    cfg = load_ai_config()
    return {"status": "healthy", "llmProvider": cfg.provider, "llmModel": cfg.model}
