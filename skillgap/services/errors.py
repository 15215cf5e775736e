from __future__ import annotations

from typing import Any


class PipelineError(RuntimeError):
    status_code = 500
    code = "pipeline_error"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        return {"message": str(self), "code": self.code}


class ValidationError(PipelineError):
    status_code = 400
    code = "invalid_request"


class PreconditionMissing(PipelineError):
    status_code = 400


class SkillsRequired(PipelineError):
    status_code = 400
    code = "skills_required"
    action = "analyze_resume_required"

    def __init__(self, message: str, *, suggestion: str):
        super().__init__(message)
        self.suggestion = suggestion

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["action"] = self.action
        payload["suggestion"] = self.suggestion
        return payload


class AnalysisFailed(PipelineError):
    status_code = 500
    code = "analysis_failed"

    def __init__(self, message: str, *, code: str | None = None, detail: str | None = None):
        super().__init__(message, code=code)
        self.detail = detail

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.detail:
            payload["error"] = self.detail
        return payload


class UpstreamModelError(AnalysisFailed):
    """A model call failed or returned output that does not fit its schema."""

    code = "upstream_model_error"

    def __init__(self, message: str, *, stage: str, llm_code: str | None = None):
        super().__init__(message, detail=message)
        self.stage = stage
        self.llm_code = llm_code


class ReportGenerationFailed(UpstreamModelError):
    code = "report_generation_failed"


def no_resume(message: str = "No resume found. Please upload a resume first.") -> PreconditionMissing:
    return PreconditionMissing(message, code="no_resume", status_code=404)


def user_not_found() -> PreconditionMissing:
    return PreconditionMissing("User not found", code="user_not_found", status_code=404)


def no_credential() -> PreconditionMissing:
    return PreconditionMissing(
        "Gemini API key not configured. Please add your API key in settings.",
        code="no_credential",
    )


def no_resume_text() -> PreconditionMissing:
    return PreconditionMissing(
        "Resume text not available for analysis. Please re-upload your resume.",
        code="no_resume_text",
    )
