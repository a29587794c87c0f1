from assembly_crawler.config import CrawlerConfig
from assembly_crawler.prefect_flows.crawl_flows import build_deployments


def test_scheduled_crawls_allow_one_active_run() -> None:
    deployments = {
        deployment.name: deployment
        for deployment in build_deployments(CrawlerConfig())
    }

    assert set(deployments) == {
        "crawl-bills-scheduled",
        "crawl-petitions-scheduled",
        "sweep-statuses-daily",
        "monitor-crawl-runs",
    }
    assert deployments["crawl-bills-scheduled"].concurrency_limit == 1
    assert deployments["crawl-petitions-scheduled"].concurrency_limit == 1


def test_crawl_deployments_follow_configured_cron() -> None:
    config = CrawlerConfig(bills_cron="0 */6 * * *", petitions_cron="30 8 * * *")

    deployments = {deployment.name: deployment for deployment in build_deployments(config)}

    bills_schedule = deployments["crawl-bills-scheduled"].schedules[0].schedule
    petitions_schedule = deployments["crawl-petitions-scheduled"].schedules[0].schedule
    assert bills_schedule.cron == "0 */6 * * *"
    assert petitions_schedule.cron == "30 8 * * *"
    assert deployments["monitor-crawl-runs"].schedules == []
