import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from skillgap.api.errors import pipeline_error_handler
from skillgap.api.v1.account import router as account_router
from skillgap.api.v1.analysis import router as analysis_router
from skillgap.api.v1.analytics import router as analytics_router
from skillgap.api.v1.health import router as health_router
from skillgap.api.v1.resume import router as resume_router
from skillgap.core.rate_limit import limiter
from skillgap.core.config import settings
from skillgap.core.lifespan import lifespan
from skillgap.services.errors import PipelineError

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="SkillGap AI API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(PipelineError, pipeline_error_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(account_router, prefix="/v1", tags=["Account"])
app.include_router(resume_router, prefix="/v1", tags=["Resume"])
app.include_router(analysis_router, prefix="/v1", tags=["Analysis"])
app.include_router(analytics_router, prefix="/v1", tags=["Analytics"])
