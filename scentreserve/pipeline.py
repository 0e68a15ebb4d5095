"""
Main ETL pipeline orchestrating extraction, transformation, and loading.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import PipelineConfig
from .extractors.detail_extractor import DetailFailure, ProductDetailExtractor
from .extractors.http import build_client
from .extractors.listing_extractor import ListingPaginator, PaginationEnd
from .loaders.file_loader import FileLoader
from .transformers.product_transformer import Product, ProductTransformer
from .utils.rate_limiter import FixedIntervalRateLimiter

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one scraping run."""

    products: list[Product] = field(default_factory=list)
    output_path: Optional[Path] = None
    pages_scraped: int = 0
    failed_urls: list[str] = field(default_factory=list)
    end_reason: Optional[PaginationEnd] = None
    elapsed_seconds: float = 0.0

    @property
    def complete(self) -> bool:
        """True when the listing ran to its natural end."""
        return self.end_reason == PaginationEnd.END_MARKER


class ScentPipeline:
    """
    ETL Pipeline for scraping Scent Reserve fragrances.

    Orchestrates:
    - Extract: Walk listing pages, fetch each product page's notes
    - Transform: Merge stub + notes into a validated Product
    - Load: Write the whole collection to products.json

    Products are processed one at a time in listing order, with the rate
    limiter awaited after every product page.
    """

    def __init__(
        self,
        pipeline_config: Optional[PipelineConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[FixedIntervalRateLimiter] = None,
        loader: Optional[FileLoader] = None,
        console: Optional[Console] = None,
    ):
        self.config = pipeline_config or PipelineConfig()
        self.client = client
        self.rate_limiter = rate_limiter or FixedIntervalRateLimiter(
            self.config.scraper.request_delay_seconds
        )
        self.transformer = ProductTransformer()
        self.loader = loader or FileLoader(self.config.storage)
        self.console = console or Console()

    async def run(self, start_page: int = 1) -> PipelineResult:
        """
        Run the complete ETL pipeline.

        Whatever was collected is written even when pagination stopped on an
        error. Write failures propagate.

        Args:
            start_page: Listing page to start from

        Returns:
            PipelineResult with the saved products
        """
        start_time = datetime.now()
        self._print_header()

        if self.client is not None:
            result = await self._extract(self.client, start_page)
        else:
            async with build_client(self.config.scraper) as client:
                result = await self._extract(client, start_page)

        if result.end_reason == PaginationEnd.ERROR:
            logger.warning(
                "Pagination stopped early; saving %d products collected so far",
                len(result.products),
            )

        result.output_path = await self.loader.save_products(result.products)
        result.elapsed_seconds = (datetime.now() - start_time).total_seconds()
        self._print_summary(result)
        return result

    async def _extract(self, client: httpx.AsyncClient, start_page: int) -> PipelineResult:
        """Extract + transform phase: stubs from listings, notes from product pages."""
        result = PipelineResult()
        paginator = ListingPaginator(client, self.config.scraper)
        details = ProductDetailExtractor(client, self.config.scraper)

        async for page in paginator.iter_pages(start_page):
            for stub in page.stubs:
                logger.info("Scraping details for: %s", stub.name)
                notes = await details.fetch_details(stub.url)

                if isinstance(notes, DetailFailure):
                    result.failed_urls.append(notes.url)
                else:
                    product = self.transformer.transform(stub, notes)
                    if product:
                        result.products.append(product)

                await self.rate_limiter.wait()

        result.pages_scraped = paginator.pages_scraped
        result.end_reason = paginator.end_reason
        return result

    def _print_header(self):
        """Print pipeline header."""
        scraper = self.config.scraper
        header = Panel(
            "[bold white]SCENT RESERVE ETL PIPELINE[/bold white]\n"
            f"[dim]Listing: {scraper.listing_url}[/dim]\n"
            f"[dim]Delay between products: {scraper.request_delay_seconds}s[/dim]\n"
            f"[dim]Output: {self.config.storage.output_path}[/dim]",
            title="Web Scraper",
            border_style="blue",
        )
        self.console.print(header)

    def _print_summary(self, result: PipelineResult):
        """Print final pipeline summary."""
        table = Table(title="Pipeline Results", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Listing Pages", str(result.pages_scraped))
        table.add_row("Products Saved", str(len(result.products)))
        table.add_row("Detail Failures", str(len(result.failed_urls)))
        table.add_row(
            "Stopped Because", result.end_reason.value if result.end_reason else "-"
        )
        table.add_row("Time Elapsed", f"{result.elapsed_seconds:.1f} seconds")
        table.add_row("Output File", str(result.output_path))

        self.console.print()
        self.console.print(table)

        for url in result.failed_urls:
            self.console.print(f"  [red]✗[/red] {url}")
