from __future__ import annotations

import json
import logging

from skillgap.ai.types import LLMClient
from skillgap.analysis.common import complete, parse_json, schema_format, validate_output
from skillgap.analysis.prompts import report_messages
from skillgap.core.config.pipeline import get_pipeline_int
from skillgap.schemas.job import JobAnalysis
from skillgap.schemas.profile import ResumeProfile
from skillgap.schemas.report import ComprehensiveReport
from skillgap.services.errors import ReportGenerationFailed, UpstreamModelError

logger = logging.getLogger(__name__)

STAGE = "comprehensive_report"


async def synthesize_report(
    profile: ResumeProfile,
    job_analysis: JobAnalysis,
    client: LLMClient,
) -> ComprehensiveReport:
    """List bounds are asked for in the prompt; the response is not post-filtered."""
    max_input = get_pipeline_int("report.max_input_chars", 5000)
    profile_summary = json.dumps(profile.to_wire())[:max_input]
    job_summary = json.dumps(job_analysis.to_wire())[:max_input]

    content = await complete(
        client,
        report_messages(
            profile_summary,
            job_summary,
            max_items=get_pipeline_int("report.max_items_per_list", 3),
            max_strengths=get_pipeline_int("report.max_strengths", 3),
            max_concerns=get_pipeline_int("report.max_concerns", 2),
        ),
        stage=STAGE,
        json_schema=schema_format(ComprehensiveReport, "comprehensive_report"),
        max_output_tokens=get_pipeline_int("report.max_output_tokens", 8192),
    )
    try:
        payload = parse_json(content)
    except ValueError as exc:
        logger.warning("report_parse_failed chars=%s head=%r", len(content), content[:200])
        raise ReportGenerationFailed(
            f"Failed to parse comprehensive report: {exc}",
            stage=STAGE,
            llm_code="invalid_json",
        ) from exc
    if not isinstance(payload, dict):
        raise UpstreamModelError("Report response was not a JSON object.", stage=STAGE, llm_code="invalid_schema")
    return validate_output(ComprehensiveReport, payload, stage=STAGE)
