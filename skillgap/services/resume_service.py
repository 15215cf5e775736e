from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from skillgap.ai.factory import LLMClientFactory
from skillgap.ai.types import LLMClient
from skillgap.analysis.resume_profiler import profile_resume
from skillgap.analysis.skill_extractor import extract_skills
from skillgap.core.config.pipeline import get_pipeline_int
from skillgap.schemas.profile import ResumeProfile
from skillgap.services.context import load_analysis_context
from skillgap.services.errors import AnalysisFailed, UpstreamModelError
from skillgap.services.skill_resolution import first_available
from skillgap.storage import store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResumeAnalysisOutcome:
    skills: list[str]
    profile: Optional[ResumeProfile]

    @property
    def has_comprehensive_profile(self) -> bool:
        return self.profile is not None

    def summary(self) -> Optional[dict]:
        if self.profile is None:
            return None
        max_roles = get_pipeline_int("resume_summary.max_suitable_roles", 3)
        return {
            "careerLevel": self.profile.career_level.to_wire(),
            "primaryDomain": self.profile.career_fit.primary_domain,
            "experienceYears": self.profile.career_level.experience_years,
            "readinessLevel": self.profile.career_fit.readiness_level,
            "suitableRoles": self.profile.career_fit.suitable_roles[:max_roles],
        }


ResumeTier = Callable[[], Awaitable[Optional[ResumeAnalysisOutcome]]]


def _profile_tier(user_id: str, text: str, client: LLMClient) -> ResumeTier:
    async def run() -> Optional[ResumeAnalysisOutcome]:
        try:
            profile = await profile_resume(text, client)
        except UpstreamModelError as exc:
            logger.warning("resume_profile_failed user_id=%s code=%s error=%s", user_id, exc.llm_code, exc)
            return None
        return ResumeAnalysisOutcome(skills=profile.skills.flatten(), profile=profile)

    return run


def _extraction_tier(user_id: str, text: str, client: LLMClient) -> ResumeTier:
    async def run() -> Optional[ResumeAnalysisOutcome]:
        try:
            skills = await extract_skills(text, client)
        except UpstreamModelError as exc:
            logger.warning("resume_extraction_failed user_id=%s code=%s error=%s", user_id, exc.llm_code, exc)
            return None
        return ResumeAnalysisOutcome(skills=skills, profile=None)

    return run


async def analyze_stored_resume(user_id: str, client_factory: LLMClientFactory) -> ResumeAnalysisOutcome:
    """Profile the stored resume, falling back to flat skill extraction when profiling fails."""
    ctx = await load_analysis_context(user_id, client_factory)
    text = ctx.resume.extracted_text

    found = await first_available(
        [
            ("profile", _profile_tier(user_id, text, ctx.client)),
            ("extraction", _extraction_tier(user_id, text, ctx.client)),
        ]
    )
    if found is None:
        raise AnalysisFailed(
            "Skill analysis failed. Please check your Gemini API key and try again.",
            detail="resume profiling and skill extraction both failed",
        )
    tier, outcome = found

    await asyncio.to_thread(store.update_resume_skills, user_id, outcome.skills)
    if outcome.profile is not None:
        try:
            await asyncio.to_thread(store.update_resume_profile, user_id, outcome.profile)
        except sqlite3.Error as exc:
            logger.warning("resume_profile_update_failed user_id=%s error=%s", user_id, exc)

    logger.info(
        json.dumps(
            {
                "event": "resume_analysis_complete",
                "user_id": user_id,
                "tier": tier,
                "skill_count": len(outcome.skills),
            }
        )
    )
    return outcome
