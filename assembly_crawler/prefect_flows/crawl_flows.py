"""
Prefect flows for the Assembly crawlers.

Defines flows for:
- Crawling legislative notices (twice a day)
- Crawling national consent petitions (hourly)
- Closing expired notices and petitions (daily)
- Monitoring crawl runs

Responsibility: Orchestrate scheduled crawler runs
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from prefect import flow, task, get_run_logger, serve
from prefect.client.schemas.schedules import CronSchedule

from ..config import CrawlerConfig, settings
from ..db.repositories import FetchLogRepository
from ..db.session import Database
from ..models.adapter_models import AdapterStatus
from ..services.status_sweep import StatusSweeper
from ..services.trigger import CrawlTrigger, CrawlerKind
from ..utils.date_utils import utc_now


@task(
    name="run_crawler",
    description="Run one crawler and persist its records",
    retries=1,
    retry_delay_seconds=300,
)
async def run_crawler_task(kind: str) -> Dict[str, Any]:
    """
    Run a crawler against a fresh database connection.

    Args:
        kind: "bills" or "petitions"

    Returns:
        CrawlStats summary
    """
    logger = get_run_logger()
    logger.info(f"Starting {kind} crawl task")

    database = Database()
    await database.initialize()

    try:
        stats = await CrawlTrigger(database).run(CrawlerKind(kind))
    finally:
        await database.close()

    summary = stats.summary()
    logger.info(
        f"{kind} crawl complete: {summary['saved']} saved, "
        f"{summary['skipped']} skipped, {summary['errors']} errors"
    )
    if stats.error_details:
        logger.warning(f"First error: {stats.error_details[0].message}")

    return summary


@task(
    name="sweep_statuses",
    description="Move expired notices and petitions to ENDED",
    retries=2,
    retry_delay_seconds=60,
)
async def sweep_statuses_task() -> Dict[str, Any]:
    logger = get_run_logger()

    database = Database()
    await database.initialize()

    try:
        result = await StatusSweeper(database).sweep()
    finally:
        await database.close()

    logger.info(
        f"Sweep complete: {result['bills_ended']} bills, "
        f"{result['petitions_ended']} petitions ended"
    )
    return result


def summarize_runs(logs: List[Any]) -> Dict[str, Any]:
    """Aggregate run logs into health statistics"""
    total = len(logs)
    successful = sum(1 for log in logs if log.status == AdapterStatus.SUCCESS.value)
    partial = sum(1 for log in logs if log.status == AdapterStatus.PARTIAL_SUCCESS.value)
    failed = sum(1 for log in logs if log.status == AdapterStatus.FAILURE.value)

    by_source: Dict[str, int] = {}
    for log in logs:
        by_source[log.source] = by_source.get(log.source, 0) + 1

    avg_duration = sum(log.duration_seconds for log in logs) / total if total else 0

    return {
        "total_runs": total,
        "successful": successful,
        "partial": partial,
        "failed": failed,
        "by_source": by_source,
        "records_succeeded": sum(log.records_succeeded for log in logs),
        "records_failed": sum(log.records_failed for log in logs),
        "avg_duration_seconds": round(avg_duration, 2),
        "success_rate": round(successful / total * 100, 2) if total else 0,
    }


@task(
    name="monitor_crawl_runs",
    description="Summarize crawl runs over a recent window",
    retries=2,
    retry_delay_seconds=30,
)
async def monitor_crawl_runs_task(hours_back: int = 24) -> Dict[str, Any]:
    logger = get_run_logger()
    logger.info(f"Monitoring crawl runs for last {hours_back} hours...")

    database = Database()
    await database.initialize()

    try:
        cutoff_time = utc_now() - timedelta(hours=hours_back)
        logs = await FetchLogRepository(database).get_logs_since(cutoff_time)
    finally:
        await database.close()

    stats = summarize_runs(logs)
    logger.info(f"Monitoring stats: {stats}")
    return stats


@flow(
    name="crawl-bills",
    description="Crawl ongoing legislative notices",
    log_prints=True,
)
async def crawl_bills_flow() -> Dict[str, Any]:
    return await run_crawler_task(CrawlerKind.BILLS.value)


@flow(
    name="crawl-petitions",
    description="Crawl ongoing national consent petitions",
    log_prints=True,
)
async def crawl_petitions_flow() -> Dict[str, Any]:
    return await run_crawler_task(CrawlerKind.PETITIONS.value)


@flow(
    name="sweep-statuses",
    description="Close notices and petitions whose period has ended",
    log_prints=True,
)
async def sweep_statuses_flow() -> Dict[str, Any]:
    return await sweep_statuses_task()


@flow(
    name="monitor-crawl-runs",
    description="Monitor crawl runs and report statistics",
    log_prints=True,
)
async def monitor_crawl_runs_flow(hours_back: int = 24) -> Dict[str, Any]:
    """
    Monitoring flow for crawl runs.

    Args:
        hours_back: Number of hours to look back (default 24)
    """
    logger = get_run_logger()

    stats = await monitor_crawl_runs_task(hours_back=hours_back)

    logger.info(
        f"Monitoring complete: {stats['total_runs']} runs, "
        f"{stats['success_rate']}% success rate"
    )
    return stats


def build_deployments(config: Optional[CrawlerConfig] = None) -> list:
    """
    Scheduled deployments for the crawl and sweep flows.

    serve() starts every flow run in its own process, so the in-process
    run lock cannot see scheduled runs; the crawl deployments are capped
    at one active run each instead.
    """
    config = config or settings.crawler

    def schedule(cron: str) -> List[CronSchedule]:
        return [CronSchedule(cron=cron, timezone=config.timezone)]

    return [
        crawl_bills_flow.to_deployment(
            name="crawl-bills-scheduled",
            schedules=schedule(config.bills_cron),
            concurrency_limit=1,
            tags=["crawler", "bills"],
        ),
        crawl_petitions_flow.to_deployment(
            name="crawl-petitions-scheduled",
            schedules=schedule(config.petitions_cron),
            concurrency_limit=1,
            tags=["crawler", "petitions"],
        ),
        sweep_statuses_flow.to_deployment(
            name="sweep-statuses-daily",
            schedules=schedule(config.sweep_cron),
            tags=["maintenance"],
        ),
        monitor_crawl_runs_flow.to_deployment(
            name="monitor-crawl-runs",
            tags=["monitoring"],
        ),
    ]


def serve_schedules() -> None:
    """Serve all scheduled deployments from this process (blocks)"""
    serve(*build_deployments())


if __name__ == "__main__":
    serve_schedules()
