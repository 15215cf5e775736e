from __future__ import annotations

from skillgap.ai.types import LLMClient
from skillgap.analysis.common import complete, parse_json, validate_output
from skillgap.analysis.prompts import skill_gap_messages
from skillgap.core.config.pipeline import get_pipeline_int, get_pipeline_value
from skillgap.schemas.skill_gap import SkillGapResult
from skillgap.services.errors import UpstreamModelError

STAGE = "skill_gap"


async def analyze_skill_gap(sanitized_html: str, resume_skills: list[str], client: LLMClient) -> SkillGapResult:
    weights = get_pipeline_value("skill_gap.weights", {}) or {}
    content = await complete(
        client,
        skill_gap_messages(sanitized_html, resume_skills, weights),
        stage=STAGE,
        json_mode=True,
        max_output_tokens=get_pipeline_int("skill_gap.max_output_tokens", 4096),
    )
    try:
        payload = parse_json(content)
    except ValueError as exc:
        raise UpstreamModelError("Failed to parse analysis results.", stage=STAGE, llm_code="invalid_json") from exc
    if not isinstance(payload, dict):
        raise UpstreamModelError("Skill gap response was not a JSON object.", stage=STAGE, llm_code="invalid_schema")
    return validate_output(SkillGapResult, payload, stage=STAGE)
