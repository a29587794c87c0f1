"""
Command-line interface for running the Assembly crawlers.

Usage:
    assembly-crawler bills
    assembly-crawler petitions --output petitions.json
    assembly-crawler sweep
    python -m assembly_crawler.cli.crawl_cli bills --verbose

Exit code is 0 when the run completed (even with per-item errors) and
1 when it failed.
"""

# Load .env BEFORE importing settings (pydantic-settings reads os.environ at import)
from dotenv import load_dotenv
load_dotenv()

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import settings
from ..db.session import Database
from ..services.status_sweep import StatusSweeper
from ..services.trigger import CrawlTrigger, CrawlerKind

logger = logging.getLogger(__name__)

SWEEP_COMMAND = "sweep"


def print_summary(command: str, result: Dict[str, Any]) -> None:
    print("\n" + "=" * 60)
    print(f"RESULTS: {command}")
    print("=" * 60)
    for key, value in result.items():
        print(f"{key}: {value}")
    print("=" * 60 + "\n")


async def run_command(
    command: str,
    output_file: Optional[str] = None,
    create_tables: bool = False,
) -> int:
    """
    Run one crawler (or the sweep) and report the result.

    Returns:
        Process exit code
    """
    database = Database()

    try:
        await database.initialize()
        if create_tables:
            await database.create_tables()

        if command == SWEEP_COMMAND:
            result = await StatusSweeper(database).sweep()
        else:
            stats = await CrawlTrigger(database).run(CrawlerKind(command))
            result = stats.summary()
            if stats.error_details:
                print("\n⚠️  Errors:")
                for i, error in enumerate(stats.error_details[:5], 1):
                    print(f"  {i}. [{error.error_type}] {error.message} {error.context}")
                if len(stats.error_details) > 5:
                    print(f"  ... and {len(stats.error_details) - 5} more errors")

        print_summary(command, result)

        if output_file:
            output_path = Path(output_file)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(result, f, indent=2, ensure_ascii=False)

            print(f"💾 Results saved to: {output_path.absolute()}")

        return 0

    except Exception as e:
        print(f"\n❌ {command} FAILED with exception: {e}\n")
        logger.error(f"{command} failed", exc_info=True)
        return 1

    finally:
        await database.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assembly-crawler",
        description="Run the National Assembly crawlers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Crawl ongoing legislative notices
  assembly-crawler bills

  # Crawl ongoing petitions and save the run summary
  assembly-crawler petitions --output results/petitions.json

  # Close notices and petitions whose period has ended
  assembly-crawler sweep
        """
    )

    parser.add_argument(
        "command",
        choices=[kind.value for kind in CrawlerKind] + [SWEEP_COMMAND],
        help="Crawler to run, or 'sweep' to close expired records"
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Save the run summary to a JSON file"
    )

    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing database tables before running"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.app.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    return asyncio.run(
        run_command(
            args.command,
            output_file=args.output,
            create_tables=args.create_tables,
        )
    )


def crawl_bills_main() -> int:
    """Entry point for the crawl-bills script"""
    return main([CrawlerKind.BILLS.value])


def crawl_petitions_main() -> int:
    """Entry point for the crawl-petitions script"""
    return main([CrawlerKind.PETITIONS.value])


if __name__ == "__main__":
    raise SystemExit(main())
