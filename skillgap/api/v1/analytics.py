from fastapi import APIRouter, Depends, Header, Query

from skillgap.analytics import db as analytics_db
from skillgap.core.security import check_admin_key

router = APIRouter()


def _auth(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    check_admin_key(x_api_key)


@router.get("/analytics/ai-runs")
def latest_ai_runs(
    limit: int = Query(default=20, ge=1, le=200),
    _: None = Depends(_auth),
):
    return analytics_db.get_latest_runs(limit=limit)
