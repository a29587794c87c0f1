from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.v1.endpoints import crawl
from assembly_crawler.db.models import FetchLogModel
from assembly_crawler.services.trigger import CrawlerKind
from assembly_crawler.utils.run_lock import CrawlAlreadyRunningError


class StubTrigger:
    def __init__(self):
        self.claimed = set()
        self.completed = []

    def claim(self, kind):
        if kind in self.claimed:
            raise CrawlAlreadyRunningError(kind.value)
        self.claimed.add(kind)

    def is_running(self, kind):
        return kind in self.claimed

    async def run_claimed(self, kind):
        self.completed.append(kind)


class StubFetchLogRepository:
    calls = []

    def __init__(self, database):
        self.database = database

    async def get_recent_logs(self, limit=100, source=None):
        StubFetchLogRepository.calls.append((limit, source))
        return [
            FetchLogModel(
                id=7,
                source="bills",
                status="partial_success",
                records_attempted=10,
                records_succeeded=9,
                records_failed=1,
                duration_seconds=42.5,
                fetch_params={"saved": 9},
                error_count=1,
                error_summary=[{"error_type": "NavigationError"}],
                created_at=datetime(2024, 3, 1, 6, 0, 0),
            )
        ]


@pytest.fixture
def trigger():
    stub = StubTrigger()
    app.dependency_overrides[crawl.get_trigger] = lambda: stub
    app.dependency_overrides[crawl.get_database] = lambda: object()
    yield stub
    app.dependency_overrides.clear()


@pytest.fixture
def client(trigger):
    return TestClient(app)


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "assembly-crawler-api"}


def test_start_crawl_is_accepted(client, trigger) -> None:
    response = client.post("/api/v1/crawl/bills")

    assert response.status_code == 202
    body = response.json()
    assert body["crawler"] == "bills"
    assert body["status"] == "accepted"
    assert trigger.completed == [CrawlerKind.BILLS]


def test_second_start_conflicts(client, trigger) -> None:
    assert client.post("/api/v1/crawl/petitions").status_code == 202

    response = client.post("/api/v1/crawl/petitions")

    assert response.status_code == 409
    assert "already running" in response.json()["detail"]
    assert client.post("/api/v1/crawl/bills").status_code == 202


def test_unknown_crawler_is_unprocessable(client) -> None:
    assert client.post("/api/v1/crawl/votes").status_code == 422


def test_status_reports_running_crawlers(client, trigger) -> None:
    trigger.claim(CrawlerKind.PETITIONS)

    response = client.get("/api/v1/crawl/status")

    assert response.status_code == 200
    assert response.json() == {"running": {"bills": False, "petitions": True}}


def test_recent_runs(client, monkeypatch) -> None:
    StubFetchLogRepository.calls = []
    monkeypatch.setattr(crawl, "FetchLogRepository", StubFetchLogRepository)

    response = client.get("/api/v1/crawl/runs", params={"source": "bills", "limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["limit"] == 5
    assert body["runs"][0]["id"] == 7
    assert body["runs"][0]["status"] == "partial_success"
    assert body["runs"][0]["records_failed"] == 1
    assert StubFetchLogRepository.calls == [(5, "bills")]


def test_runs_limit_is_bounded(client) -> None:
    assert client.get("/api/v1/crawl/runs", params={"limit": 500}).status_code == 422
