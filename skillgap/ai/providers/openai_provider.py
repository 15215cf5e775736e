from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import time
import uuid
from typing import Any, Optional, Sequence

import openai
from openai import AsyncOpenAI

from skillgap.ai.types import ChatMessage, JsonSchemaFormat, LLMError
from skillgap.analytics.db import log_ai_analysis_run

logger = logging.getLogger(__name__)


def _is_json(content: str) -> bool:
    try:
        json.loads(content)
    except ValueError:
        return False
    return True


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 0,
        temperature: float = 0.2,
    ):
        key = (api_key or "").strip()
        if not key:
            raise LLMError("LLM API key is missing", code="llm_disabled")

        self.model = model
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def _log_run(
        self,
        *,
        run_id: str,
        stage: str,
        schema_constrained: bool,
        schema_valid: bool,
        status: str,
        started: float,
        error_code: str | None = None,
    ) -> None:
        try:
            await asyncio.to_thread(
                log_ai_analysis_run,
                run_id=run_id,
                stage=stage,
                model=self.model,
                schema_constrained=schema_constrained,
                schema_valid=schema_valid,
                status=status,
                error_code=error_code,
                latency_ms=int((time.perf_counter() - started) * 1000),
            )
        except (sqlite3.Error, OSError) as exc:
            logger.warning("ai_run_logging_failed stage=%s error=%s", stage, exc)

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        stage: str,
        json_mode: bool = False,
        json_schema: JsonSchemaFormat | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        run_id = uuid.uuid4().hex
        started = time.perf_counter()
        wants_json = json_mode or json_schema is not None

        create_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": self._temperature,
        }
        if json_schema is not None:
            create_kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": json_schema.name, "schema": json_schema.schema, "strict": True},
            }
        elif json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}
        if max_output_tokens:
            create_kwargs["max_tokens"] = max_output_tokens

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except openai.APITimeoutError as exc:
            logger.warning("llm_call_timeout stage=%s model=%s", stage, self.model)
            await self._log_run(
                run_id=run_id,
                stage=stage,
                schema_constrained=json_schema is not None,
                schema_valid=False,
                status="timeout",
                error_code="llm_timeout",
                started=started,
            )
            raise LLMError(f"LLM call timed out during {stage}", code="llm_timeout") from exc
        except openai.OpenAIError as exc:
            logger.warning("llm_call_failed stage=%s model=%s: %s", stage, self.model, exc)
            await self._log_run(
                run_id=run_id,
                stage=stage,
                schema_constrained=json_schema is not None,
                schema_valid=False,
                status="error",
                error_code="llm_exception",
                started=started,
            )
            raise LLMError(f"LLM call failed during {stage}: {exc}", code="llm_exception") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            await self._log_run(
                run_id=run_id,
                stage=stage,
                schema_constrained=json_schema is not None,
                schema_valid=False,
                status="empty",
                error_code="empty_response",
                started=started,
            )
            raise LLMError(f"LLM returned an empty response during {stage}", code="empty_response")

        schema_valid = _is_json(content) if wants_json else True
        await self._log_run(
            run_id=run_id,
            stage=stage,
            schema_constrained=json_schema is not None,
            schema_valid=schema_valid,
            status="success" if schema_valid else "invalid_schema",
            error_code=None if schema_valid else "invalid_schema",
            started=started,
        )
        return content
