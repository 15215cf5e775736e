from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import time
from dataclasses import dataclass
from typing import Any, Optional

from skillgap.ai.factory import LLMClientFactory
from skillgap.ai.types import LLMClient
from skillgap.analysis.job_analyzer import analyze_job
from skillgap.analysis.report_synthesizer import synthesize_report
from skillgap.analysis.resume_profiler import profile_resume
from skillgap.analysis.sanitizer import sanitize_job_html
from skillgap.analysis.skill_gap import analyze_skill_gap
from skillgap.schemas.api import JobAnalysisRequest
from skillgap.schemas.job import JobAnalysis
from skillgap.schemas.profile import ResumeProfile
from skillgap.schemas.records import AnalysisRecord, utcnow
from skillgap.schemas.report import ComprehensiveReport
from skillgap.schemas.skill_gap import SkillGapResult
from skillgap.services.context import load_analysis_context
from skillgap.services.errors import AnalysisFailed, SkillsRequired, UpstreamModelError, ValidationError
from skillgap.services.skill_resolution import resolve_resume_skills
from skillgap.storage import store

logger = logging.getLogger(__name__)

SKILLS_REQUIRED_MESSAGE = (
    "No skills found in resume. Please analyze your resume first using the "
    "'Analyze Resume' button on your dashboard."
)
SKILLS_REQUIRED_SUGGESTION = (
    "Go to your dashboard and click 'Analyze Resume' to extract your skills using AI, "
    "then try analyzing jobs again."
)


@dataclass(frozen=True)
class EnhancedAnalysis:
    profile: ResumeProfile
    job: JobAnalysis
    report: ComprehensiveReport


@dataclass(frozen=True)
class JobAnalysisOutcome:
    record: AnalysisRecord
    legacy: SkillGapResult
    enhanced: Optional[EnhancedAnalysis]
    resume_skill_count: int
    content_hints: dict[str, Any]


def _validate_request(payload: JobAnalysisRequest) -> None:
    if not payload.job_html.strip() or not payload.job_title.strip() or not payload.company.strip():
        raise ValidationError("Missing required job data")


def merge_analysis(
    *,
    user_id: str,
    analysis_id: str,
    payload: JobAnalysisRequest,
    legacy: SkillGapResult,
    enhanced: Optional[EnhancedAnalysis],
) -> AnalysisRecord:
    """Legacy fields always; enhanced companions and quick-decision columns only with a full enhanced run."""
    now = utcnow()
    fields: dict[str, Any] = {
        "id": analysis_id,
        "user_id": user_id,
        "job_title": payload.job_title.strip(),
        "company": payload.company.strip(),
        "location": (payload.location or "").strip(),
        "job_url": payload.job_url,
        "job_html": payload.job_html,
        "job_required_skills": legacy.job_required_skills,
        "job_preferred_skills": legacy.job_preferred_skills,
        "matched_skills": legacy.matched_skills,
        "missing_skills": legacy.missing_skills,
        "partial_skills": legacy.partial_skills,
        "match_percentage": legacy.match_percentage,
        "recommendations": legacy.recommendations,
        "skills_by_category": legacy.skills_by_category,
        "job_insights": legacy.job_insights,
        "experience_level": legacy.experience_level,
        "overall_match": legacy.match_percentage,
        "analyzed_at": now,
        "updated_at": now,
    }

    if enhanced is not None:
        job = enhanced.job
        scores = job.match_analysis
        if scores.overall_match is not None:
            fields["overall_match"] = scores.overall_match
        fields.update(
            {
                "job_details": job.job_details,
                "requirements": job.requirements,
                "job_characteristics": job.job_characteristics,
                "compensation": job.compensation,
                "match_analysis": scores,
                "recommendation": job.recommendation,
                "career_growth": job.career_growth,
                "risk_assessment": job.risk_assessment,
                "comprehensive_report": enhanced.report,
                "skill_match": scores.skill_match,
                "experience_match": scores.experience_match,
                "location_match": scores.location_match,
                "compensation_match": scores.compensation_match,
                "culture_match": scores.culture_match,
                "should_apply": job.recommendation.should_apply,
                "application_priority": job.recommendation.application_priority,
                "confidence": job.recommendation.confidence,
                "work_type": job.job_characteristics.work_type,
                "employment_type": job.job_characteristics.employment_type,
                "is_paid": job.compensation.is_paid,
            }
        )

    return AnalysisRecord(**fields)


async def _run_enhanced(sanitized_html: str, profile: ResumeProfile, client: LLMClient) -> Optional[EnhancedAnalysis]:
    """Job analysis then report synthesis; any failure yields None so the legacy result still ships."""
    stage = "job_analysis"
    try:
        job = await analyze_job(sanitized_html, profile, client)
        stage = "comprehensive_report"
        report = await synthesize_report(profile, job, client)
    except UpstreamModelError as exc:
        logger.warning("job_analysis_enhanced_failed stage=%s code=%s error=%s", exc.stage, exc.llm_code, exc)
        return None
    except Exception as exc:  # noqa: BLE001
        logger.warning("job_analysis_enhanced_failed stage=%s error=%s", stage, exc)
        return None
    return EnhancedAnalysis(profile=profile, job=job, report=report)


async def run_job_analysis(
    user_id: str,
    payload: JobAnalysisRequest,
    client_factory: LLMClientFactory,
) -> JobAnalysisOutcome:
    started = time.perf_counter()
    _validate_request(payload)
    ctx = await load_analysis_context(user_id, client_factory)

    resolved = await resolve_resume_skills(ctx.resume, ctx.client)
    if resolved is None:
        raise SkillsRequired(SKILLS_REQUIRED_MESSAGE, suggestion=SKILLS_REQUIRED_SUGGESTION)

    sanitized = await asyncio.to_thread(sanitize_job_html, payload.job_html)

    profile: Optional[ResumeProfile] = None
    try:
        profile = await profile_resume(ctx.resume.extracted_text, ctx.client)
    except UpstreamModelError as exc:
        logger.warning("job_analysis_profile_failed user_id=%s code=%s error=%s", user_id, exc.llm_code, exc)

    try:
        legacy = await analyze_skill_gap(sanitized, resolved.skills, ctx.client)
    except UpstreamModelError as exc:
        raise AnalysisFailed("Analysis failed", detail=str(exc)) from exc

    enhanced = await _run_enhanced(sanitized, profile, ctx.client) if profile is not None else None

    record = merge_analysis(
        user_id=user_id,
        analysis_id=store.new_id(),
        payload=payload,
        legacy=legacy,
        enhanced=enhanced,
    )
    overall_source = (
        "model"
        if enhanced is not None and enhanced.job.match_analysis.overall_match is not None
        else "match_percentage"
    )

    await asyncio.to_thread(store.replace_analysis, record)
    if enhanced is not None:
        try:
            await asyncio.to_thread(store.update_resume_profile, user_id, enhanced.profile)
        except sqlite3.Error as exc:
            logger.warning("resume_profile_update_failed user_id=%s error=%s", user_id, exc)

    logger.info(
        json.dumps(
            {
                "event": "job_analysis_complete",
                "user_id": user_id,
                "skills_source": resolved.source,
                "resume_skill_count": len(resolved.skills),
                "sanitized_chars": len(sanitized),
                "has_profile": profile is not None,
                "has_enhanced_data": enhanced is not None,
                "match_percentage": legacy.match_percentage,
                "overall_match": record.overall_match,
                "overall_match_source": overall_source,
                "duration_ms": int((time.perf_counter() - started) * 1000),
            }
        )
    )

    return JobAnalysisOutcome(
        record=record,
        legacy=legacy,
        enhanced=enhanced,
        resume_skill_count=len(resolved.skills),
        content_hints=payload.content_hints or {},
    )
