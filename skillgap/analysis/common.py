from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from skillgap.ai.types import ChatMessage, JsonSchemaFormat, LLMClient, LLMError
from skillgap.schemas.base import strict_json_schema
from skillgap.services.errors import UpstreamModelError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_RE = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)


def strip_code_fence(content: str) -> str:
    text = (content or "").strip()
    match = _FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def schema_format(model: type[BaseModel], name: str) -> JsonSchemaFormat:
    return JsonSchemaFormat(name=name, schema=strict_json_schema(model))


async def complete(
    client: LLMClient,
    messages: Sequence[ChatMessage],
    *,
    stage: str,
    json_mode: bool = False,
    json_schema: JsonSchemaFormat | None = None,
    max_output_tokens: int | None = None,
) -> str:
    try:
        return await client.complete(
            messages,
            stage=stage,
            json_mode=json_mode,
            json_schema=json_schema,
            max_output_tokens=max_output_tokens,
        )
    except LLMError as exc:
        raise UpstreamModelError(str(exc), stage=stage, llm_code=exc.code) from exc


def parse_json(content: str) -> Any:
    """Raises ValueError when the content is not JSON, fenced or not."""
    return json.loads(strip_code_fence(content))


def validate_output(model: type[ModelT], payload: Any, *, stage: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning("model_output_invalid stage=%s errors=%s", stage, exc.error_count())
        raise UpstreamModelError(
            f"Model output for {stage} did not match the expected shape.",
            stage=stage,
            llm_code="invalid_schema",
        ) from exc
