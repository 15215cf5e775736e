from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from .base import CamelModel
from .job import clamp_score


class _Lenient(CamelModel):
    """JSON-mode output: a null or missing field falls back to its default."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Recommendations(_Lenient):
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    interview_tips: list[str] = Field(default_factory=list)
    application_advice: list[str] = Field(default_factory=list)


class CategoryMatch(_Lenient):
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    partial: list[str] = Field(default_factory=list)


class SkillsByCategory(_Lenient):
    technical: CategoryMatch = Field(default_factory=CategoryMatch)
    soft: CategoryMatch = Field(default_factory=CategoryMatch)
    tools: CategoryMatch = Field(default_factory=CategoryMatch)


class JobInsights(_Lenient):
    company_type: str = "unknown"
    work_type: str = "unknown"
    seniority_level: str = "unknown"
    urgency: str = "medium"
    competitive_factors: list[str] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)


class SkillGapResult(_Lenient):
    job_required_skills: list[str] = Field(default_factory=list)
    job_preferred_skills: list[str] = Field(default_factory=list)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    partial_skills: list[str] = Field(default_factory=list)
    match_percentage: float = 0
    experience_level: str = "unknown"
    recommendations: Recommendations = Field(default_factory=Recommendations)
    skills_by_category: SkillsByCategory = Field(default_factory=SkillsByCategory)
    job_insights: JobInsights = Field(default_factory=JobInsights)

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> Any:
        return clamp_score(value)
