from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from assembly_crawler.models.adapter_models import AdapterError, AdapterStatus
from assembly_crawler.models.bill import Bill, ProposerType
from assembly_crawler.models.crawl import CrawlState, CrawlStats, PersistenceStatus
from assembly_crawler.models.petition import Petition
from assembly_crawler.prefect_flows.crawl_flows import summarize_runs

START = datetime(2024, 3, 1, 9, 0, 0)


def test_proposer_type_from_text() -> None:
    assert ProposerType.from_proposer("정부") == ProposerType.GOVERNMENT
    assert ProposerType.from_proposer("홍길동의원 등 10인") == ProposerType.MEMBER
    assert ProposerType.from_proposer(None) == ProposerType.MEMBER


def test_bill_placeholder_number() -> None:
    bill = Bill(
        bill_number="UNKNOWN-1709283600000",
        bill_name="법률안",
        notice_start=START,
        notice_end=START + timedelta(days=14),
        source_url="https://pal.test/view.do",
    )

    assert bill.has_placeholder_number()
    assert bill.committee == "미정"


def test_petition_progress_rate() -> None:
    petition = Petition(
        petition_id="P1",
        title="청원",
        agree_count=25000,
        start_date=START,
        end_date=START + timedelta(days=30),
        source_url="https://petitions.test/P1",
    )

    assert petition.progress_rate == 50.0
    assert petition.model_dump()["progress_rate"] == 50.0


def test_petition_rejects_zero_goal() -> None:
    with pytest.raises(ValidationError):
        Petition(
            petition_id="P1",
            title="청원",
            agree_goal=0,
            start_date=START,
            end_date=START,
            source_url="https://petitions.test/P1",
        )


def test_crawl_stats_counters_and_status() -> None:
    stats = CrawlStats(crawler="bills", start_time=START)

    stats.record_outcome(PersistenceStatus.CREATED)
    stats.record_outcome(PersistenceStatus.UNCHANGED)
    stats.state = CrawlState.DONE
    stats.end_time = START + timedelta(seconds=12)

    assert stats.adapter_status() == AdapterStatus.SUCCESS

    stats.record_error(AdapterError(timestamp=START, error_type="NavigationError", message="timeout"))
    summary = stats.summary()

    assert stats.adapter_status() == AdapterStatus.PARTIAL_SUCCESS
    assert summary["saved"] == 2
    assert summary["created"] == 1
    assert summary["unchanged"] == 1
    assert summary["errors"] == 1
    assert summary["duration_seconds"] == 12.0
    assert summary["status"] == "partial_success"

    stats.state = CrawlState.FAILED
    assert stats.adapter_status() == AdapterStatus.FAILURE
    assert stats.to_metrics().records_failed == 1


def test_summarize_runs() -> None:
    logs = [
        SimpleNamespace(source="bills", status="success", duration_seconds=10.0, records_succeeded=5, records_failed=0),
        SimpleNamespace(source="bills", status="partial_success", duration_seconds=20.0, records_succeeded=3, records_failed=1),
        SimpleNamespace(source="petitions", status="failure", duration_seconds=0.0, records_succeeded=0, records_failed=0),
        SimpleNamespace(source="petitions", status="success", duration_seconds=2.0, records_succeeded=40, records_failed=0),
    ]

    stats = summarize_runs(logs)

    assert stats["total_runs"] == 4
    assert stats["successful"] == 2
    assert stats["partial"] == 1
    assert stats["failed"] == 1
    assert stats["by_source"] == {"bills": 2, "petitions": 2}
    assert stats["records_succeeded"] == 48
    assert stats["avg_duration_seconds"] == 8.0
    assert stats["success_rate"] == 50.0


def test_summarize_no_runs() -> None:
    assert summarize_runs([])["success_rate"] == 0


def test_run_statuses_are_the_three_run_outcomes() -> None:
    assert {status.value for status in AdapterStatus} == {"success", "partial_success", "failure"}
