"""
Serve the scheduled crawler deployments.

Usage:
    python scripts/serve_schedules.py

Runs the bills (06:00 and 18:00), petitions (hourly) and status sweep
(daily) schedules in Asia/Seoul time from this process until stopped.
Point PREFECT_API_URL at the Prefect server before starting.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure project packages are importable when the script is run directly
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(PROJECT_ROOT))

load_dotenv(PROJECT_ROOT / ".env")

from assembly_crawler.prefect_flows.crawl_flows import serve_schedules


if __name__ == "__main__":
    serve_schedules()
