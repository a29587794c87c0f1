"""
Crawl trigger API endpoints.

Starting a crawl answers immediately with 202 while the run continues
in the background; a second start of the same crawler while one is
active is rejected with 409.

Responsibility: Crawl endpoints for API v1
"""

from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
import logging

from assembly_crawler.db.repositories import FetchLogRepository
from assembly_crawler.db.session import Database
from assembly_crawler.services.trigger import CrawlTrigger, CrawlerKind
from assembly_crawler.utils.date_utils import utc_now
from assembly_crawler.utils.run_lock import CrawlAlreadyRunningError
from api.v1.schemas.crawl import (
    CrawlAcceptedResponse,
    CrawlRunListResponse,
    CrawlRunResponse,
    CrawlStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_database(request: Request) -> Database:
    """Database opened at application startup"""
    return request.app.state.database


def get_trigger(request: Request) -> CrawlTrigger:
    """Crawl trigger shared by every request of this process"""
    return request.app.state.trigger


@router.post("/crawl/{kind}", status_code=202, response_model=CrawlAcceptedResponse)
async def start_crawl(
    kind: CrawlerKind,
    background_tasks: BackgroundTasks,
    trigger: CrawlTrigger = Depends(get_trigger),
):
    """
    Start a crawl run in the background.

    Raises:
        HTTPException: 409 if this crawler is already running
    """
    try:
        trigger.claim(kind)
    except CrawlAlreadyRunningError as e:
        logger.warning(f"Rejected crawl request: {e}")
        raise HTTPException(status_code=409, detail=str(e))

    background_tasks.add_task(trigger.run_claimed, kind)
    logger.info(f"Accepted {kind.value} crawl request")

    return CrawlAcceptedResponse(crawler=kind.value, accepted_at=utc_now())


@router.get("/crawl/status", response_model=CrawlStatusResponse)
async def crawl_status(trigger: CrawlTrigger = Depends(get_trigger)):
    """Report which crawlers have an active run"""
    return CrawlStatusResponse(
        running={kind.value: trigger.is_running(kind) for kind in CrawlerKind}
    )


@router.get("/crawl/runs", response_model=CrawlRunListResponse)
async def list_crawl_runs(
    source: Optional[str] = Query(None, description="Filter by crawler name"),
    limit: int = Query(20, ge=1, le=100, description="Number of results"),
    database: Database = Depends(get_database),
):
    """List the most recent crawl runs"""
    logs = await FetchLogRepository(database).get_recent_logs(limit=limit, source=source)

    return CrawlRunListResponse(
        runs=[CrawlRunResponse.model_validate(log) for log in logs],
        limit=limit,
    )
