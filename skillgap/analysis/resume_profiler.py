from __future__ import annotations

from skillgap.ai.types import LLMClient
from skillgap.analysis.common import complete, parse_json, schema_format, validate_output
from skillgap.analysis.prompts import resume_profile_messages, scrub_ascii
from skillgap.core.config.pipeline import get_pipeline_int
from skillgap.schemas.profile import ResumeProfile
from skillgap.services.errors import UpstreamModelError

STAGE = "resume_profile"


async def profile_resume(resume_text: str, client: LLMClient) -> ResumeProfile:
    limit = get_pipeline_int("resume_profiler.max_resume_chars", 20000)
    text = scrub_ascii(resume_text)[:limit]

    content = await complete(
        client,
        resume_profile_messages(text),
        stage=STAGE,
        json_schema=schema_format(ResumeProfile, "resume_profile"),
        max_output_tokens=get_pipeline_int("resume_profiler.max_output_tokens", 4096),
    )
    try:
        payload = parse_json(content)
    except ValueError as exc:
        raise UpstreamModelError("Resume profile response was not valid JSON.", stage=STAGE, llm_code="invalid_json") from exc
    if not isinstance(payload, dict):
        raise UpstreamModelError("Resume profile response was not a JSON object.", stage=STAGE, llm_code="invalid_schema")
    return validate_output(ResumeProfile, payload, stage=STAGE)
