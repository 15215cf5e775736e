import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging
import sqlite3

from skillgap.analytics.db import init_db, purge_old_records
from skillgap.storage.store import init_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    init_store()
    init_db()
    purge_old_records()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if deleted:
                    logger.info("analytics_retention_purge deleted=%s", deleted)
            except sqlite3.Error as exc:
                logger.warning("analytics_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
