from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from skillgap.ai.factory import LLMClientFactory
from skillgap.ai.types import LLMClient, LLMError
from skillgap.core.security import CredentialError, decrypt_credential
from skillgap.schemas.records import ResumeRecord, UserRecord
from skillgap.services.errors import (
    AnalysisFailed,
    PreconditionMissing,
    no_credential,
    no_resume,
    no_resume_text,
    user_not_found,
)
from skillgap.storage import store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisContext:
    user: UserRecord
    resume: ResumeRecord
    client: LLMClient


async def load_analysis_context(user_id: str, client_factory: LLMClientFactory) -> AnalysisContext:
    """Read user and resume concurrently, check preconditions and build the user's LLM client."""
    user, resume = await asyncio.gather(
        asyncio.to_thread(store.get_user, user_id),
        asyncio.to_thread(store.get_resume, user_id),
    )
    if user is None:
        raise user_not_found()
    if resume is None:
        raise no_resume()
    if not user.has_credential:
        raise no_credential()
    if not resume.extracted_text.strip():
        raise no_resume_text()

    try:
        api_key = decrypt_credential(user.credential or "")
    except CredentialError as exc:
        logger.warning("credential_decrypt_failed user_id=%s", user_id)
        raise PreconditionMissing(
            "Stored Gemini API key could not be read. Please save your API key again.",
            code="no_credential",
        ) from exc

    try:
        client = client_factory(api_key)
    except (LLMError, ValueError) as exc:
        raise AnalysisFailed("LLM client is not configured correctly.", detail=str(exc)) from exc

    return AnalysisContext(user=user, resume=resume, client=client)
