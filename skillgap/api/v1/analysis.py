from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from skillgap.ai.factory import LLMClientFactory, get_llm_client_factory
from skillgap.core.rate_limit import rate_limit
from skillgap.core.security import current_user_id
from skillgap.schemas.api import JobAnalysisRequest
from skillgap.schemas.records import AnalysisRecord
from skillgap.services.job_analysis_service import JobAnalysisOutcome, run_job_analysis
from skillgap.storage import store

router = APIRouter()

_ENHANCED_BLOCKS = (
    "jobDetails",
    "requirements",
    "jobCharacteristics",
    "compensation",
    "matchAnalysis",
    "recommendation",
    "careerGrowth",
    "riskAssessment",
    "comprehensiveReport",
)


def _analysis_context(outcome: JobAnalysisOutcome) -> dict[str, Any]:
    legacy = outcome.legacy
    enhanced = outcome.enhanced
    required = len(legacy.job_required_skills)
    preferred = len(legacy.job_preferred_skills)
    features = None
    if enhanced is not None:
        features = {
            "hasComprehensiveReport": True,
            "hasJobDetails": True,
            "hasCareerGrowthAnalysis": True,
            "hasRiskAssessment": True,
        }
    return {
        "resumeSkillCount": outcome.resume_skill_count,
        "jobRequiredSkillCount": required,
        "jobPreferredSkillCount": preferred,
        "totalJobSkills": required + preferred,
        "contentHints": outcome.content_hints,
        "hasEnhancedData": outcome.record.has_enhanced_data,
        "enhancedFeatures": features,
    }


def _job_analysis_body(outcome: JobAnalysisOutcome) -> dict[str, Any]:
    record = outcome.record.to_wire()
    analysis = {
        "id": record["id"],
        "jobTitle": record["jobTitle"],
        "company": record["company"],
        "location": record["location"],
        **outcome.legacy.to_wire(),
        "overallMatch": record["overallMatch"],
        "analyzedAt": record["analyzedAt"],
        "analysisContext": _analysis_context(outcome),
    }
    return {"message": "Analysis completed successfully", "analysis": analysis}


def _quick_decision(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "shouldApply": record["shouldApply"],
        "applicationPriority": record["applicationPriority"],
        "confidence": record["confidence"],
    }


def _job_info(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "workType": record["workType"],
        "employmentType": record["employmentType"],
        "isPaid": record["isPaid"],
        "experienceLevel": record["experienceLevel"],
    }


async def _latest_or_404(user_id: str) -> AnalysisRecord:
    record = await asyncio.to_thread(store.get_latest_analysis, user_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No analysis found")
    return record


@router.post("/analysis/job")
@rate_limit()
async def analyze_job_posting(
    request: Request,
    payload: JobAnalysisRequest,
    user_id: str = Depends(current_user_id),
    client_factory: LLMClientFactory = Depends(get_llm_client_factory),
):
    _ = request
    outcome = await run_job_analysis(user_id, payload, client_factory)
    return _job_analysis_body(outcome)


@router.get("/analysis/latest")
async def latest_analysis(user_id: str = Depends(current_user_id)):
    record = await _latest_or_404(user_id)
    wire = record.to_wire()
    enhanced = {"hasEnhancedAnalysis": record.has_enhanced_data}
    enhanced.update({key: wire[key] for key in _ENHANCED_BLOCKS})
    enhanced.update(_quick_decision(wire))
    enhanced.update(_job_info(wire))
    enhanced["overallMatch"] = wire["overallMatch"]
    return {
        "id": wire["id"],
        "jobTitle": wire["jobTitle"],
        "company": wire["company"],
        "location": wire["location"],
        "matchedSkills": wire["matchedSkills"],
        "missingSkills": wire["missingSkills"],
        "partialSkills": wire["partialSkills"],
        "matchPercentage": wire["matchPercentage"],
        "recommendations": wire["recommendations"],
        "skillsByCategory": wire["skillsByCategory"],
        "analyzedAt": wire["analyzedAt"],
        "enhancedData": enhanced,
    }


@router.get("/analysis/comprehensive")
async def comprehensive_analysis(user_id: str = Depends(current_user_id)):
    record = await _latest_or_404(user_id)
    wire = record.to_wire()
    body: dict[str, Any] = {"hasEnhancedData": record.has_enhanced_data}
    body.update({key: wire[key] for key in _ENHANCED_BLOCKS})
    body["overallMatch"] = wire["overallMatch"]
    body["quickDecision"] = _quick_decision(wire)
    body["jobInfo"] = _job_info(wire)
    return body
