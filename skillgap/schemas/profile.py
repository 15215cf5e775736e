from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator

from .base import CamelModel

CareerLevelName = Literal["fresher", "junior", "mid-level", "senior", "lead", "executive"]
ProjectQuality = Literal["excellent", "good", "average", "basic", "poor"]
ComplexityLevel = Literal["basic", "intermediate", "advanced", "expert"]
ReadinessLevel = Literal["job-ready", "needs-improvement", "requires-training"]

SKILL_CATEGORIES: tuple[str, ...] = (
    "technical",
    "programming",
    "frameworks",
    "tools",
    "databases",
    "cloud",
    "soft",
    "languages",
    "certifications",
)


def _slug(value: Any) -> Any:
    if isinstance(value, str):
        return "-".join(value.strip().lower().split())
    return value


class PersonalInfo(CamelModel):
    name: str = ""
    location: str = ""
    email: str = ""
    phone: str = ""
    linked_in: str = ""
    github: str = ""
    portfolio: str = ""


class CareerLevel(CamelModel):
    experience_years: float = 0
    level: CareerLevelName = "fresher"
    is_fresher: bool = False
    career_progression: str = ""

    @field_validator("experience_years", mode="before")
    @classmethod
    def _clamp_years(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and value < 0:
            return 0
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        value = _slug(value)
        return "mid-level" if value in {"mid", "midlevel", "intermediate"} else value


class SkillSet(CamelModel):
    technical: list[str] = Field(default_factory=list)
    programming: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    databases: list[str] = Field(default_factory=list)
    cloud: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)

    def flatten(self) -> list[str]:
        """All categories in fixed order, blank entries dropped."""
        skills: list[str] = []
        for category in SKILL_CATEGORIES:
            for skill in getattr(self, category):
                if isinstance(skill, str) and skill.strip():
                    skills.append(skill.strip())
        return skills


class ProjectAnalysis(CamelModel):
    total_projects: int = 0
    has_good_projects: bool = False
    project_quality: ProjectQuality = "average"
    project_types: list[str] = Field(default_factory=list)
    technologies_used: list[str] = Field(default_factory=list)
    complexity_level: ComplexityLevel = "basic"
    has_team_projects: bool = False
    has_open_source: bool = False

    @field_validator("project_quality", "complexity_level", mode="before")
    @classmethod
    def _normalize_enum(cls, value: Any) -> Any:
        return _slug(value)


class Education(CamelModel):
    degree: str = ""
    field: str = ""
    university: str = ""
    gpa: str = ""
    graduation_year: int | None = None
    additional_courses: list[str] = Field(default_factory=list)


class CareerFit(CamelModel):
    suitable_roles: list[str] = Field(default_factory=list)
    primary_domain: str = ""
    secondary_domains: list[str] = Field(default_factory=list)
    readiness_level: ReadinessLevel = "needs-improvement"
    strength_areas: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)

    @field_validator("readiness_level", mode="before")
    @classmethod
    def _normalize_readiness(cls, value: Any) -> Any:
        return _slug(value)


class WorkPreferences(CamelModel):
    preferred_location: str = ""
    open_to_remote: bool = False
    willing_to_relocate: bool = False
    internship_experience: bool = False
    full_time_ready: bool = False


class SalaryInsights(CamelModel):
    estimated_range: str = ""
    currency: str = ""
    factors_considered: list[str] = Field(default_factory=list)


class ResumeProfile(CamelModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    career_level: CareerLevel = Field(default_factory=CareerLevel)
    skills: SkillSet = Field(default_factory=SkillSet)
    project_analysis: ProjectAnalysis = Field(default_factory=ProjectAnalysis)
    education: Education = Field(default_factory=Education)
    career_fit: CareerFit = Field(default_factory=CareerFit)
    work_preferences: WorkPreferences = Field(default_factory=WorkPreferences)
    salary_insights: SalaryInsights = Field(default_factory=SalaryInsights)
