from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from skillgap.services.errors import PipelineError

logger = logging.getLogger(__name__)


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("pipeline_failed path=%s code=%s error=%s", request.url.path, exc.code, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
