"""Create the crawler tables in the configured database (SQLite or PostgreSQL)."""

import asyncio
import sys
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv
from sqlalchemy import inspect


PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def load_environment(files: Iterable[Path]) -> None:
    """Load environment variables from .env files if present."""
    for env_file in files:
        if env_file.exists():
            load_dotenv(env_file, override=False)


# Ensure baseline environment before importing settings
load_environment((PROJECT_ROOT / ".env.local", PROJECT_ROOT / ".env"))

from assembly_crawler.config import settings
from assembly_crawler.db.session import Database


def _mask_connection(url: str) -> str:
    """Mask connection string credentials for safe logging."""
    if "@" not in url:
        return url
    prefix, suffix = url.split("@", 1)
    if ":" in prefix.split("://", 1)[-1]:
        prefix = prefix.rsplit(":", 1)[0]
    return f"{prefix}:***@{suffix}"


async def create_schema() -> bool:
    """Create missing tables and list what the database now contains."""
    print("🏛️  Assembly Crawler Database Initialization")
    print("=" * 70)
    print(f"\n🔗 Connection: {_mask_connection(settings.db.connection_string)}")

    database = Database()
    try:
        await database.initialize()
        await database.create_tables()

        async with database.engine.connect() as conn:
            tables: List[str] = await conn.run_sync(
                lambda sync_conn: sorted(inspect(sync_conn).get_table_names())
            )
    except Exception as exc:
        print(f"\n❌ Initialization failed: {exc}")
        return False
    finally:
        await database.close()

    print("\n✅ Database schema is up to date.")
    print(f"📊 Tables provisioned ({len(tables)}):")
    for table in tables:
        print(f"  • {table}")

    return True


if __name__ == "__main__":
    success = asyncio.run(create_schema())
    sys.exit(0 if success else 1)
