from datetime import datetime

import pytest

from assembly_crawler.config import CrawlerConfig, DatabaseConfig
from assembly_crawler.db.session import Database
from assembly_crawler.utils.run_lock import RunLock
from tests.fakes import RecordingSleep
from tests.pages import LISTING_TEMPLATE, PETITIONS_BASE, PETITIONS_LISTING

FIXED_NOW = datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
async def database():
    db = Database(DatabaseConfig(database_url=None, driver="sqlite+aiosqlite", database=":memory:"))
    await db.initialize()
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def crawler_config() -> CrawlerConfig:
    return CrawlerConfig(
        bills_listing_url=LISTING_TEMPLATE,
        bills_max_pages=3,
        petitions_listing_url=PETITIONS_LISTING,
        petitions_base_url=PETITIONS_BASE,
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def lock() -> RunLock:
    return RunLock()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
