from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator

from .base import CamelModel
from .job import clamp_score

ReportRecommendation = Literal["APPLY", "CONSIDER", "SKIP"]


class ExecutiveSummary(CamelModel):
    recommendation: ReportRecommendation = "CONSIDER"
    match_score: float = 0
    key_strengths: list[str] = Field(default_factory=list)
    major_concerns: list[str] = Field(default_factory=list)
    one_line_advice: str = ""

    @field_validator("recommendation", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> Any:
        return clamp_score(value)


class DetailedAnalysis(CamelModel):
    fit_assessment: str = ""
    career_impact: str = ""
    compensation_analysis: str = ""
    skill_gap_analysis: str = ""
    interview_preparation: str = ""


class ActionItems(CamelModel):
    before_applying: list[str] = Field(default_factory=list)
    application_tips: list[str] = Field(default_factory=list)
    interview_prep: list[str] = Field(default_factory=list)
    skills_to_improve: list[str] = Field(default_factory=list)


class AlternativeOptions(CamelModel):
    similar_roles: list[str] = Field(default_factory=list)
    better_fit_companies: list[str] = Field(default_factory=list)
    skill_building_path: list[str] = Field(default_factory=list)


class Timeline(CamelModel):
    immediate_actions: list[str] = Field(default_factory=list)
    short_term: list[str] = Field(default_factory=list)
    long_term: list[str] = Field(default_factory=list)


class ComprehensiveReport(CamelModel):
    executive_summary: ExecutiveSummary = Field(default_factory=ExecutiveSummary)
    detailed_analysis: DetailedAnalysis = Field(default_factory=DetailedAnalysis)
    action_items: ActionItems = Field(default_factory=ActionItems)
    alternative_options: AlternativeOptions = Field(default_factory=AlternativeOptions)
    timeline: Timeline = Field(default_factory=Timeline)
