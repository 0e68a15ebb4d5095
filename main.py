#!/usr/bin/env python3
"""
Scent Reserve ETL Pipeline - Main Entry Point

Scrapes numbered "Inspired by" fragrances and their notes from
thescentreserve.com and saves them to data/products.json for the scent quiz.

Usage:
    python main.py                    # Run with default settings
    python main.py --delay 2          # Slower, 2 seconds between products
    python main.py --stats            # Show what the last run saved
"""
import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import PipelineConfig
from rich.console import Console
from rich.table import Table
from scentreserve.loaders.file_loader import FileLoader
from scentreserve.pipeline import ScentPipeline
from scentreserve.utils.logging_setup import setup_logging

console = Console()


class CustomHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that preserves formatting and adds width."""

    def __init__(self, prog):
        super().__init__(prog, max_help_position=40, width=100)


def parse_args(argv: Optional[list[str]] = None):
    """Parse command line arguments."""

    epilog = """
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
EXAMPLES
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    python main.py                          Scrape every listing page
    python main.py --max-pages 1            Quick test: first listing page only
    python main.py --start-page 5           Resume the listing walk at page 5
    python main.py -o /tmp/products.json    Write somewhere else
    python main.py --log-level DEBUG --log-file

ENVIRONMENT (.env supported)
    SCENT_LISTING_URL, SCENT_SITE_ROOT, SCENT_OUTPUT_PATH,
    SCENT_REQUEST_DELAY, SCENT_MAX_PAGES, SCENT_LOG_LEVEL

EXIT CODES
    0 success, 1 fatal error (e.g. output not writable), 130 interrupted
"""

    parser = argparse.ArgumentParser(
        prog="python main.py",
        description="""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
                     SCENT RESERVE WEB SCRAPER ETL PIPELINE
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Walks the collection listing page by page and, for every numbered
"Inspired by" fragrance, visits its product page for top/middle/bottom notes.
The whole collection is written to one JSON file at the end of the run.
""",
        epilog=epilog,
        formatter_class=CustomHelpFormatter,
    )

    scrape_group = parser.add_argument_group(
        "Scraping Options", "Control what and how fast to scrape"
    )

    scrape_group.add_argument(
        "--listing-url",
        type=str,
        default=None,
        metavar="URL",
        help="Collection listing URL (default: all-1 collection)",
    )

    scrape_group.add_argument(
        "--delay",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Delay between product pages (default: 1.0)",
    )

    scrape_group.add_argument(
        "--max-pages",
        type=int,
        default=None,
        metavar="NUM",
        help="Stop after this many listing pages (default: 0 = all)",
    )

    scrape_group.add_argument(
        "--start-page",
        type=int,
        default=1,
        metavar="NUM",
        help="First listing page to request (default: 1)",
    )

    storage_group = parser.add_argument_group(
        "Storage Options", "Control where data is saved"
    )

    storage_group.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        metavar="PATH",
        help="Output JSON file (default: data/products.json)",
    )

    storage_group.add_argument(
        "--stats",
        action="store_true",
        help="Show the products in the output file and exit",
    )

    log_group = parser.add_argument_group("Logging Options")

    log_group.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity (default: INFO)",
    )

    log_group.add_argument(
        "--log-file",
        action="store_true",
        help="Also write logs to logs/scrape_<timestamp>.log",
    )

    return parser.parse_args(argv)


def create_config(args) -> PipelineConfig:
    """Create pipeline configuration from environment and arguments."""
    config = PipelineConfig.from_env()

    scraper_overrides = {}
    if args.listing_url:
        scraper_overrides["listing_url"] = args.listing_url
    if args.delay is not None:
        scraper_overrides["request_delay_seconds"] = args.delay
    if args.max_pages is not None:
        scraper_overrides["max_pages"] = args.max_pages

    storage_config = config.storage
    if args.output:
        storage_config = replace(storage_config, output_path=Path(args.output))

    logging_config = config.logging
    if args.log_level:
        logging_config = replace(logging_config, log_level=args.log_level)
    if args.log_file:
        logging_config = replace(logging_config, log_to_file=True)

    return PipelineConfig(
        scraper=replace(config.scraper, **scraper_overrides),
        storage=storage_config,
        logging=logging_config,
    )


def show_stats(config: PipelineConfig) -> int:
    """Print the products saved by the last run."""
    loader = FileLoader(config.storage)
    try:
        products = loader.load_products()
    except (ValueError, OSError) as e:
        console.print(
            f"[bold red]Could not read {config.storage.output_path}: {e}[/bold red]"
        )
        return 1

    if not products:
        console.print(
            f"[yellow]No products saved yet at {config.storage.output_path}[/yellow]"
        )
        return 0

    table = Table(title=f"Saved Products ({len(products)})", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Top", style="green")
    table.add_column("Middle", style="green")
    table.add_column("Bottom", style="green")
    table.add_column("Updated", style="dim")

    for product in products:
        table.add_row(
            product.name,
            product.top_notes or "-",
            product.middle_notes or "-",
            product.bottom_notes or "-",
            product.last_updated,
        )

    console.print(table)
    missing = sum(
        1
        for p in products
        if not (p.top_notes and p.middle_notes and p.bottom_notes)
    )
    if missing:
        console.print(f"[yellow]{missing} products with incomplete notes[/yellow]")
    return 0


async def run_pipeline(config: PipelineConfig, start_page: int = 1):
    """Run the ETL pipeline with given config."""
    pipeline = ScentPipeline(config, console=console)
    return await pipeline.run(start_page=start_page)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = create_config(args)
    except ValueError as e:
        console.print(f"[bold red]Invalid configuration: {e}[/bold red]")
        return 1

    setup_logging(config.logging, console=console)

    if args.stats:
        return show_stats(config)

    if args.start_page < 1:
        console.print("[bold red]--start-page must be >= 1[/bold red]")
        return 1

    try:
        result = asyncio.run(run_pipeline(config, start_page=args.start_page))
    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline cancelled by user[/yellow]")
        return 130
    except Exception as e:
        console.print(f"\n[bold red]Fatal error: {e}[/bold red]")
        return 1

    console.print("\n[bold green]Scraping complete![/bold green]")
    console.print(f"Total products saved: {len(result.products)}")
    console.print(f"Output saved to: {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
