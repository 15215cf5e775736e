from __future__ import annotations

import logging

from skillgap.ai.types import LLMClient
from skillgap.analysis.common import complete, parse_json
from skillgap.analysis.prompts import scrub_ascii, skill_extraction_messages
from skillgap.core.config.pipeline import get_pipeline_int

logger = logging.getLogger(__name__)

STAGE = "skill_extraction"


def _dedupe(skills: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for skill in skills:
        key = skill.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(skill)
    return out


async def extract_skills(resume_text: str, client: LLMClient) -> list[str]:
    """
    Legacy tier: one plain completion returning a JSON array of skill names.
    Unusable output yields an empty list; provider failures raise UpstreamModelError.
    """
    limit = get_pipeline_int("skill_extractor.max_resume_chars", 15000)
    text = scrub_ascii(resume_text)[:limit]

    content = await complete(client, skill_extraction_messages(text), stage=STAGE)
    try:
        parsed = parse_json(content)
    except ValueError:
        logger.warning("skill_extraction_unparseable chars=%s", len(content))
        return []

    if not isinstance(parsed, list):
        logger.warning("skill_extraction_not_array type=%s", type(parsed).__name__)
        return []

    skills = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
    return _dedupe(skills)
