from .job_analyzer import analyze_job
from .report_synthesizer import synthesize_report
from .resume_profiler import profile_resume
from .sanitizer import sanitize_job_html
from .skill_extractor import extract_skills
from .skill_gap import analyze_skill_gap

__all__ = [
    "sanitize_job_html",
    "extract_skills",
    "profile_resume",
    "analyze_skill_gap",
    "analyze_job",
    "synthesize_report",
]
