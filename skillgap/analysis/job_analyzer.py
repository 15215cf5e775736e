from __future__ import annotations

import json

from skillgap.ai.types import LLMClient
from skillgap.analysis.common import complete, parse_json, schema_format, validate_output
from skillgap.analysis.prompts import job_analysis_messages
from skillgap.core.config.pipeline import get_pipeline_int
from skillgap.schemas.job import JobAnalysis
from skillgap.schemas.profile import ResumeProfile
from skillgap.services.errors import UpstreamModelError

STAGE = "job_analysis"


async def analyze_job(sanitized_html: str, profile: ResumeProfile, client: LLMClient) -> JobAnalysis:
    profile_json = json.dumps(profile.to_wire(), indent=2)
    content = await complete(
        client,
        job_analysis_messages(sanitized_html, profile_json),
        stage=STAGE,
        json_schema=schema_format(JobAnalysis, "job_analysis"),
        max_output_tokens=get_pipeline_int("job_analyzer.max_output_tokens", 6144),
    )
    try:
        payload = parse_json(content)
    except ValueError as exc:
        raise UpstreamModelError("Job analysis response was not valid JSON.", stage=STAGE, llm_code="invalid_json") from exc
    if not isinstance(payload, dict):
        raise UpstreamModelError("Job analysis response was not a JSON object.", stage=STAGE, llm_code="invalid_schema")
    return validate_output(JobAnalysis, payload, stage=STAGE)
