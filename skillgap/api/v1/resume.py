from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from skillgap.ai.factory import LLMClientFactory, get_llm_client_factory
from skillgap.core.config import settings
from skillgap.core.rate_limit import rate_limit
from skillgap.core.security import current_user_id
from skillgap.parsing.parse import UnsupportedDocumentError, extract_resume_text
from skillgap.schemas.records import ResumeRecord
from skillgap.services.resume_service import analyze_stored_resume
from skillgap.storage import store

logger = logging.getLogger(__name__)

router = APIRouter()


def _safe_filename(name: str) -> str:
    cleaned = "".join(ch for ch in (name or "") if ch.isalnum() or ch in {".", "-", "_", " "}).strip()
    return cleaned[:200] or "resume"


def _resume_summary(resume: ResumeRecord) -> dict[str, Any]:
    wire = resume.to_wire()
    return {
        "id": wire["id"],
        "originalName": wire["originalName"],
        "fileSize": wire["fileSize"],
        "uploadedAt": wire["uploadedAt"],
        "hasSkills": resume.has_skills,
        "skillCount": len(resume.extracted_skills),
    }


async def _resume_or_404(user_id: str) -> ResumeRecord:
    resume = await asyncio.to_thread(store.get_resume, user_id)
    if resume is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No resume found")
    return resume


@router.post("/resume/upload")
async def upload_resume(
    resume: UploadFile = File(...),
    user_id: str = Depends(current_user_id),
):
    content = await resume.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File is too large.",
        )

    original_name = _safe_filename(resume.filename or "")
    try:
        parsed = extract_resume_text(filename=original_name, content=content)
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    user = await asyncio.to_thread(store.get_user, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    # Skills are not analyzed on upload; the user triggers /resume/analyze.
    record = ResumeRecord(
        id=store.new_id(),
        user_id=user_id,
        filename=f"{int(time.time() * 1000)}_{original_name}",
        original_name=original_name,
        file_size=len(content),
        mime_type=parsed.mime_type,
        extracted_text=parsed.text,
        extracted_skills=[],
    )
    await asyncio.to_thread(store.replace_resume, record)
    if parsed.parsing_warnings:
        logger.warning("resume_parse_warnings user_id=%s warnings=%s", user_id, parsed.parsing_warnings)

    return {
        "message": "Resume uploaded successfully",
        "resume": _resume_summary(record),
        "parsingWarnings": parsed.parsing_warnings,
    }


@router.get("/resume")
async def get_resume(user_id: str = Depends(current_user_id)):
    resume = await _resume_or_404(user_id)
    return _resume_summary(resume)


@router.delete("/resume")
async def delete_resume(user_id: str = Depends(current_user_id)):
    await asyncio.to_thread(store.delete_resume, user_id)
    return {"message": "Resume deleted successfully"}


@router.post("/resume/analyze")
@rate_limit()
async def analyze_resume(
    request: Request,
    user_id: str = Depends(current_user_id),
    client_factory: LLMClientFactory = Depends(get_llm_client_factory),
):
    _ = request
    outcome = await analyze_stored_resume(user_id, client_factory)
    return {
        "message": f"Successfully analyzed resume and extracted {len(outcome.skills)} skills",
        "skillCount": len(outcome.skills),
        "skills": outcome.skills,
        "hasComprehensiveProfile": outcome.has_comprehensive_profile,
        "comprehensiveData": outcome.summary(),
    }


@router.get("/resume/profile")
async def resume_profile(user_id: str = Depends(current_user_id)):
    resume = await _resume_or_404(user_id)
    wire = resume.to_wire()
    return {
        "hasProfile": resume.has_profile,
        "personalInfo": wire["personalInfo"],
        "careerLevel": wire["careerLevel"],
        "skillsAnalysis": wire["skillsAnalysis"],
        "projectAnalysis": wire["projectAnalysis"],
        "education": wire["education"],
        "careerFit": wire["careerFit"],
        "workPreferences": wire["workPreferences"],
        "salaryInsights": wire["salaryInsights"],
        "basicInfo": {
            "skillCount": len(resume.extracted_skills),
            "uploadedAt": wire["uploadedAt"],
            "updatedAt": wire["updatedAt"],
        },
    }
