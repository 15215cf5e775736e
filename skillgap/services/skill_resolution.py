from __future__ import annotations

import asyncio
import logging
import sqlite3
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from skillgap.ai.types import LLMClient
from skillgap.analysis.skill_extractor import extract_skills
from skillgap.schemas.records import ResumeRecord
from skillgap.services.errors import UpstreamModelError
from skillgap.storage import store

logger = logging.getLogger(__name__)

T = TypeVar("T")

SkillStrategy = Callable[[], Awaitable[Optional[list[str]]]]


@dataclass(frozen=True)
class ResolvedSkills:
    source: str
    skills: list[str]


async def first_available(
    strategies: Sequence[tuple[str, Callable[[], Awaitable[Optional[T]]]]],
) -> Optional[tuple[str, T]]:
    """Run strategies in order; the first one returning anything but None wins."""
    for name, strategy in strategies:
        result = await strategy()
        if result is not None:
            return name, result
    return None


async def first_non_empty(strategies: Sequence[tuple[str, SkillStrategy]]) -> Optional[ResolvedSkills]:
    """Run strategies in order; the first one returning a non-empty list wins."""
    for name, strategy in strategies:
        skills = await strategy()
        if skills:
            return ResolvedSkills(source=name, skills=skills)
    return None


def cached_skills(resume: ResumeRecord) -> SkillStrategy:
    async def run() -> Optional[list[str]]:
        skills = [skill.strip() for skill in resume.extracted_skills if skill and skill.strip()]
        return skills or None

    return run


def profile_skills(resume: ResumeRecord) -> SkillStrategy:
    async def run() -> Optional[list[str]]:
        if resume.skills_analysis is None:
            return None
        return resume.skills_analysis.flatten() or None

    return run


def extracted_skills(resume: ResumeRecord, client: LLMClient) -> SkillStrategy:
    """On-demand legacy extraction; the result is saved back onto the resume."""

    async def run() -> Optional[list[str]]:
        try:
            skills = await extract_skills(resume.extracted_text, client)
        except UpstreamModelError as exc:
            logger.warning("skill_auto_extraction_failed user_id=%s error=%s", resume.user_id, exc)
            return None
        if not skills:
            return None
        try:
            await asyncio.to_thread(store.update_resume_skills, resume.user_id, skills)
        except sqlite3.Error as exc:
            logger.warning("skill_auto_extraction_persist_failed user_id=%s error=%s", resume.user_id, exc)
        return skills

    return run


async def resolve_resume_skills(resume: ResumeRecord, client: LLMClient) -> Optional[ResolvedSkills]:
    return await first_non_empty(
        [
            ("extracted_skills", cached_skills(resume)),
            ("profile_skills", profile_skills(resume)),
            ("auto_extraction", extracted_skills(resume, client)),
        ]
    )
