from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from .base import CamelModel
from .job import (
    CareerGrowth,
    Compensation,
    JobCharacteristics,
    JobDetails,
    MatchAnalysis,
    Recommendation,
    Requirements,
    RiskAssessment,
)
from .profile import (
    CareerFit,
    CareerLevel,
    Education,
    PersonalInfo,
    ProjectAnalysis,
    ResumeProfile,
    SalaryInsights,
    SkillSet,
    WorkPreferences,
)
from .report import ComprehensiveReport
from .skill_gap import JobInsights, Recommendations, SkillsByCategory


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRecord(CamelModel):
    id: str
    email: str
    name: str = ""
    credential: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)


class ResumeRecord(CamelModel):
    id: str
    user_id: str
    filename: str = ""
    original_name: str = ""
    file_size: int = 0
    mime_type: str = ""
    extracted_text: str = ""
    extracted_skills: list[str] = Field(default_factory=list)

    personal_info: Optional[PersonalInfo] = None
    career_level: Optional[CareerLevel] = None
    skills_analysis: Optional[SkillSet] = None
    project_analysis: Optional[ProjectAnalysis] = None
    education: Optional[Education] = None
    career_fit: Optional[CareerFit] = None
    work_preferences: Optional[WorkPreferences] = None
    salary_insights: Optional[SalaryInsights] = None

    uploaded_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def has_profile(self) -> bool:
        return self.personal_info is not None or self.career_level is not None

    @property
    def has_skills(self) -> bool:
        return len(self.extracted_skills) > 0

    def with_profile(self, profile: ResumeProfile) -> "ResumeRecord":
        return self.model_copy(
            update={
                "personal_info": profile.personal_info,
                "career_level": profile.career_level,
                "skills_analysis": profile.skills,
                "project_analysis": profile.project_analysis,
                "education": profile.education,
                "career_fit": profile.career_fit,
                "work_preferences": profile.work_preferences,
                "salary_insights": profile.salary_insights,
                "updated_at": utcnow(),
            }
        )


class AnalysisRecord(CamelModel):
    id: str
    user_id: str
    job_title: str
    company: str
    location: str = ""
    job_url: Optional[str] = None
    job_html: str = ""

    job_required_skills: list[str] = Field(default_factory=list)
    job_preferred_skills: list[str] = Field(default_factory=list)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    partial_skills: list[str] = Field(default_factory=list)
    match_percentage: float = 0
    recommendations: Recommendations = Field(default_factory=Recommendations)
    skills_by_category: SkillsByCategory = Field(default_factory=SkillsByCategory)
    job_insights: JobInsights = Field(default_factory=JobInsights)

    job_details: Optional[JobDetails] = None
    requirements: Optional[Requirements] = None
    job_characteristics: Optional[JobCharacteristics] = None
    compensation: Optional[Compensation] = None
    match_analysis: Optional[MatchAnalysis] = None
    recommendation: Optional[Recommendation] = None
    career_growth: Optional[CareerGrowth] = None
    risk_assessment: Optional[RiskAssessment] = None
    comprehensive_report: Optional[ComprehensiveReport] = None

    skill_match: Optional[float] = None
    experience_match: Optional[float] = None
    location_match: Optional[float] = None
    compensation_match: Optional[float] = None
    culture_match: Optional[float] = None
    overall_match: float = 0
    should_apply: Optional[bool] = None
    application_priority: Optional[str] = None
    confidence: Optional[float] = None
    work_type: Optional[str] = None
    employment_type: Optional[str] = None
    is_paid: Optional[bool] = None
    experience_level: Optional[str] = None

    analyzed_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def has_enhanced_data(self) -> bool:
        return self.job_details is not None or self.comprehensive_report is not None
