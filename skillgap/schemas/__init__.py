from .job import JobAnalysis
from .profile import ResumeProfile, SkillSet
from .records import AnalysisRecord, ResumeRecord, UserRecord
from .report import ComprehensiveReport
from .skill_gap import SkillGapResult

__all__ = [
    "ResumeProfile",
    "SkillSet",
    "JobAnalysis",
    "ComprehensiveReport",
    "SkillGapResult",
    "UserRecord",
    "ResumeRecord",
    "AnalysisRecord",
]
