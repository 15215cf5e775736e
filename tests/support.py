"""Shared test environment. Import before anything from skillgap so settings pick it up."""

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Union

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_TMP_DIR = tempfile.mkdtemp(prefix="skillgap-tests-")

os.environ["DB_PATH"] = os.path.join(_TMP_DIR, "skillgap.db")
os.environ["ANALYTICS_DB_PATH"] = os.path.join(_TMP_DIR, "analytics.db")
os.environ["ANALYTICS_ENABLED"] = "1"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["CREDENTIAL_SECRET"] = "test-credential-secret"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["AI_PROVIDER"] = "gemini"

from skillgap.ai.types import LLMError  # noqa: E402
from skillgap.core.security import encrypt_credential, issue_token  # noqa: E402
from skillgap.schemas.records import ResumeRecord  # noqa: E402
from skillgap.storage import store  # noqa: E402

StubResponse = Union[str, dict, list, Exception, Callable[[list], Any]]

RESUME_TEXT = (
    "Jane Doe - Backend Engineer\n"
    "5 years of professional experience building web services with Python, Django and AWS.\n"
    "Designed REST APIs, led a team of three, mentored juniors.\n"
    "Education: BSc Computer Science, 2018."
)

JOB_HTML = (
    "<html><head><style>.x{color:red}</style><script>track()</script></head>"
    "<body><nav>Home | Jobs</nav>"
    "<div class=\"job-description\"><h1>Senior Backend Engineer</h1>"
    "<h2>Required</h2><ul><li>Python</li><li>Django</li><li>Kubernetes</li></ul>"
    "<h2>Preferred</h2><ul><li>AWS</li></ul></div>"
    "<!-- tracking pixel --><footer>Copyright</footer></body></html>"
)

JOB_REQUIRED = ["Python", "Django", "Kubernetes"]
JOB_PREFERRED = ["AWS"]


class StubLLMClient:
    """Deterministic LLMClient: answers per stage, records every call."""

    model = "stub-model"

    def __init__(self, responses: dict[str, StubResponse]):
        self.responses = dict(responses)
        self.calls: list[str] = []
        self.requests: list[dict[str, Any]] = []

    async def complete(self, messages, *, stage, json_mode=False, json_schema=None, max_output_tokens=None):
        self.calls.append(stage)
        self.requests.append(
            {
                "stage": stage,
                "messages": list(messages),
                "json_mode": json_mode,
                "json_schema": json_schema,
                "max_output_tokens": max_output_tokens,
            }
        )
        if stage not in self.responses:
            raise LLMError(f"no stub response for {stage}", code="llm_exception")
        value = self.responses[stage]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(list(messages))
        if isinstance(value, str):
            return value
        return json.dumps(value)

    def prompt_for(self, stage: str) -> str:
        for request in self.requests:
            if request["stage"] == stage:
                return "\n".join(message.content for message in request["messages"])
        raise AssertionError(f"stage {stage} was never called")


class StubFactory:
    def __init__(self, client: StubLLMClient):
        self.client = client
        self.api_keys: list[str] = []

    def __call__(self, api_key: str) -> StubLLMClient:
        self.api_keys.append(api_key)
        return self.client


def profile_payload(**skills: list[str]) -> dict[str, Any]:
    categories = {
        "technical": [],
        "programming": [],
        "frameworks": [],
        "tools": [],
        "databases": [],
        "cloud": [],
        "soft": [],
        "languages": [],
        "certifications": [],
    }
    categories.update(skills)
    return {
        "personalInfo": {
            "name": "Jane Doe",
            "location": "Berlin",
            "email": "jane@example.com",
            "phone": "",
            "linkedIn": "",
            "github": "",
            "portfolio": "",
        },
        "careerLevel": {
            "experienceYears": 5,
            "level": "Mid-Level",
            "isFresher": False,
            "careerProgression": "Steady growth into backend ownership.",
        },
        "skills": categories,
        "projectAnalysis": {
            "totalProjects": 4,
            "hasGoodProjects": True,
            "projectQuality": "good",
            "projectTypes": ["web"],
            "technologiesUsed": ["Python", "Django"],
            "complexityLevel": "intermediate",
            "hasTeamProjects": True,
            "hasOpenSource": False,
        },
        "education": {
            "degree": "BSc",
            "field": "Computer Science",
            "university": "TU Berlin",
            "gpa": "",
            "graduationYear": 2018,
            "additionalCourses": [],
        },
        "careerFit": {
            "suitableRoles": ["Backend Engineer", "Platform Engineer", "Python Developer", "Tech Lead"],
            "primaryDomain": "Backend",
            "secondaryDomains": ["Cloud"],
            "readinessLevel": "job-ready",
            "strengthAreas": ["APIs"],
            "improvementAreas": ["Kubernetes"],
        },
        "workPreferences": {
            "preferredLocation": "Berlin",
            "openToRemote": True,
            "willingToRelocate": False,
            "internshipExperience": False,
            "fullTimeReady": True,
        },
        "salaryInsights": {
            "estimatedRange": "65k-80k",
            "currency": "EUR",
            "factorsConsidered": ["experience"],
        },
    }


def job_analysis_payload(overall_match: Any = 72) -> dict[str, Any]:
    return {
        "jobDetails": {
            "title": "Senior Backend Engineer",
            "company": "Acme",
            "location": "Remote",
            "department": "Platform",
            "industry": "Software",
            "companySize": "200-500",
            "companyType": "startup",
        },
        "requirements": {
            "experienceRequired": "5+ years",
            "experienceYears": 5,
            "education": "BSc",
            "skills": {"mandatory": JOB_REQUIRED, "preferred": JOB_PREFERRED, "niceToHave": []},
            "certifications": [],
        },
        "jobCharacteristics": {
            "workType": "Remote",
            "employmentType": "full-time",
            "workSchedule": "flexible",
            "travelRequired": False,
            "teamSize": "6",
            "reportingStructure": "Engineering Manager",
        },
        "compensation": {
            "salaryRange": "70k-90k",
            "currency": "EUR",
            "isPaid": True,
            "compensationType": "salary",
            "benefits": ["Remote budget"],
            "bonuses": [],
        },
        "matchAnalysis": {
            "overallMatch": overall_match,
            "skillMatch": 70,
            "experienceMatch": 85,
            "locationMatch": None,
            "compensationMatch": 60,
            "cultureMatch": 75,
            "matchedRequirements": ["Python", "Django"],
            "missingRequirements": ["Kubernetes"],
            "overqualifiedAreas": [],
        },
        "recommendation": {
            "shouldApply": True,
            "confidence": 80,
            "applicationPriority": "High",
            "reasonsToApply": ["Strong Python match"],
            "concernsToAddress": ["Kubernetes"],
            "preparationTips": ["Review container orchestration"],
            "interviewFocus": ["System design"],
        },
        "careerGrowth": {
            "growthPotential": "high",
            "skillDevelopment": ["Kubernetes"],
            "careerPath": ["Staff Engineer"],
            "learningOpportunities": ["Platform work"],
        },
        "riskAssessment": {
            "riskLevel": "low",
            "riskFactors": [],
            "mitigationStrategies": [],
        },
    }


def report_payload() -> dict[str, Any]:
    return {
        "executiveSummary": {
            "recommendation": "apply",
            "matchScore": 72,
            "keyStrengths": ["Python", "Django", "APIs"],
            "majorConcerns": ["Kubernetes"],
            "oneLineAdvice": "Apply and highlight API work.",
        },
        "detailedAnalysis": {
            "fitAssessment": "Good fit.",
            "careerImpact": "Positive.",
            "compensationAnalysis": "In range.",
            "skillGapAnalysis": "Kubernetes gap.",
            "interviewPreparation": "System design.",
        },
        "actionItems": {
            "beforeApplying": ["Update resume"],
            "applicationTips": ["Mention APIs"],
            "interviewPrep": ["Practice design"],
            "skillsToImprove": ["Kubernetes"],
        },
        "alternativeOptions": {
            "similarRoles": ["Platform Engineer"],
            "betterFitCompanies": [],
            "skillBuildingPath": ["CKA course"],
        },
        "timeline": {
            "immediateActions": ["Apply"],
            "shortTerm": ["Learn Kubernetes basics"],
            "longTerm": ["Own platform"],
        },
    }


def _candidate_skills(messages: list) -> list[str]:
    prompt = "\n".join(message.content for message in messages)
    marker = "CANDIDATE'S SKILLS:\n"
    start = prompt.index(marker) + len(marker)
    return json.loads(prompt[start:].split("\n", 1)[0])


def keyword_skill_gap(messages: list) -> dict[str, Any]:
    """Weighted keyword matcher standing in for the model's legacy skill-gap answer."""
    have = {skill.lower() for skill in _candidate_skills(messages)}
    matched = [skill for skill in JOB_REQUIRED + JOB_PREFERRED if skill.lower() in have]
    missing = [skill for skill in JOB_REQUIRED + JOB_PREFERRED if skill.lower() not in have]
    required_ratio = sum(1 for s in JOB_REQUIRED if s.lower() in have) / len(JOB_REQUIRED)
    preferred_ratio = sum(1 for s in JOB_PREFERRED if s.lower() in have) / len(JOB_PREFERRED)
    percentage = round(required_ratio * 60 + preferred_ratio * 25 + (15 if matched else 0))
    return {
        "jobRequiredSkills": JOB_REQUIRED,
        "jobPreferredSkills": JOB_PREFERRED,
        "matchedSkills": matched,
        "missingSkills": missing,
        "partialSkills": [],
        "matchPercentage": percentage,
        "experienceLevel": "senior",
        "recommendations": {"strengths": matched, "improvements": missing},
        "skillsByCategory": {"technical": {"matched": matched, "missing": missing}},
        "jobInsights": None,
    }


def create_user(email: str = "jane@example.com", *, api_key: str | None = "user-gemini-key"):
    user = store.create_user(email, "Jane Doe")
    if api_key is not None:
        store.update_user_credential(user.id, encrypt_credential(api_key))
    return store.get_user(user.id)


def create_resume(user_id: str, *, text: str = RESUME_TEXT, skills: list[str] | None = None) -> ResumeRecord:
    return store.replace_resume(
        ResumeRecord(
            id=store.new_id(),
            user_id=user_id,
            filename="1_resume.docx",
            original_name="resume.docx",
            file_size=1234,
            mime_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            extracted_text=text,
            extracted_skills=skills or [],
        )
    )


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user_id)}"}
