from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, field_validator

from .base import CamelModel

WorkType = Literal["remote", "hybrid", "onsite"]
Priority = Literal["high", "medium", "low"]


def clamp_score(value: Any) -> Any:
    """Pin numeric scores to 0-100; leave anything else for pydantic to judge."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    return max(0.0, min(100.0, float(value)))


class JobDetails(CamelModel):
    title: str = ""
    company: str = ""
    location: str = ""
    department: str = ""
    industry: str = ""
    company_size: str = ""
    company_type: str = ""


class RequirementSkills(CamelModel):
    mandatory: list[str] = Field(default_factory=list)
    preferred: list[str] = Field(default_factory=list)
    nice_to_have: list[str] = Field(default_factory=list)


class Requirements(CamelModel):
    experience_required: str = ""
    experience_years: Optional[float] = None
    education: str = ""
    skills: RequirementSkills = Field(default_factory=RequirementSkills)
    certifications: list[str] = Field(default_factory=list)


class JobCharacteristics(CamelModel):
    work_type: WorkType = "onsite"
    employment_type: str = ""
    work_schedule: str = ""
    travel_required: bool = False
    team_size: str = ""
    reporting_structure: str = ""

    @field_validator("work_type", mode="before")
    @classmethod
    def _normalize_work_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "").replace(" ", "")
        return value


class Compensation(CamelModel):
    salary_range: str = ""
    currency: str = ""
    is_paid: bool = True
    compensation_type: str = ""
    benefits: list[str] = Field(default_factory=list)
    bonuses: list[str] = Field(default_factory=list)


class MatchAnalysis(CamelModel):
    overall_match: Optional[float] = None
    skill_match: Optional[float] = None
    experience_match: Optional[float] = None
    location_match: Optional[float] = None
    compensation_match: Optional[float] = None
    culture_match: Optional[float] = None
    matched_requirements: list[str] = Field(default_factory=list)
    missing_requirements: list[str] = Field(default_factory=list)
    overqualified_areas: list[str] = Field(default_factory=list)

    @field_validator(
        "overall_match",
        "skill_match",
        "experience_match",
        "location_match",
        "compensation_match",
        "culture_match",
        mode="before",
    )
    @classmethod
    def _clamp(cls, value: Any) -> Any:
        return clamp_score(value)


class Recommendation(CamelModel):
    should_apply: bool = False
    confidence: float = 0
    application_priority: Priority = "medium"
    reasons_to_apply: list[str] = Field(default_factory=list)
    concerns_to_address: list[str] = Field(default_factory=list)
    preparation_tips: list[str] = Field(default_factory=list)
    interview_focus: list[str] = Field(default_factory=list)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> Any:
        return clamp_score(value)

    @field_validator("application_priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class CareerGrowth(CamelModel):
    growth_potential: str = ""
    skill_development: list[str] = Field(default_factory=list)
    career_path: list[str] = Field(default_factory=list)
    learning_opportunities: list[str] = Field(default_factory=list)


class RiskAssessment(CamelModel):
    risk_level: str = ""
    risk_factors: list[str] = Field(default_factory=list)
    mitigation_strategies: list[str] = Field(default_factory=list)


class JobAnalysis(CamelModel):
    job_details: JobDetails = Field(default_factory=JobDetails)
    requirements: Requirements = Field(default_factory=Requirements)
    job_characteristics: JobCharacteristics = Field(default_factory=JobCharacteristics)
    compensation: Compensation = Field(default_factory=Compensation)
    match_analysis: MatchAnalysis = Field(default_factory=MatchAnalysis)
    recommendation: Recommendation = Field(default_factory=Recommendation)
    career_growth: CareerGrowth = Field(default_factory=CareerGrowth)
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment)
