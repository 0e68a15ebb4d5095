import asyncio
import json
from datetime import datetime

import pytest

from html_fixtures import (
    LISTING_URL,
    SITE_ROOT,
    FakeSite,
    RecordingSleep,
    connection_error,
    end_of_listing_page,
    listing_page,
    product_page,
)
from scentreserve.extractors.http import build_client
from scentreserve.extractors.listing_extractor import PaginationEnd
from scentreserve.pipeline import ScentPipeline
from scentreserve.utils.rate_limiter import FixedIntervalRateLimiter

FULL_NOTES = product_page(
    top="Top Notes: Bergamot, Lemon",
    middle="Middle Notes: Lavender",
    bottom="Bottom Notes: Musk",
)


def run_pipeline(site, pipeline_config, console, delay=1.0, start_page=1):
    sleep = RecordingSleep()

    async def run():
        async with build_client(pipeline_config.scraper, transport=site.transport) as client:
            pipeline = ScentPipeline(
                pipeline_config,
                client=client,
                rate_limiter=FixedIntervalRateLimiter(delay, sleep=sleep),
                console=console,
            )
            return await pipeline.run(start_page=start_page)

    return asyncio.run(run()), sleep


def read_output(pipeline_config):
    return json.loads(pipeline_config.storage.output_path.read_text(encoding="utf-8"))


def test_two_page_listing_end_to_end(pipeline_config, quiet_console):
    site = FakeSite(
        {
            f"{LISTING_URL}?page=1": listing_page(
                [
                    ("598 - Inspired by Mont Blanc", "/products/598"),
                    ("Mystery Blend", "/products/mystery"),
                ]
            ),
            f"{LISTING_URL}?page=2": end_of_listing_page(),
            f"{SITE_ROOT}/products/598": FULL_NOTES,
        }
    )
    result, sleep = run_pipeline(site, pipeline_config, quiet_console)

    data = read_output(pipeline_config)
    assert len(data) == 1
    product = data[0]
    assert product["name"] == "598 - Inspired by Mont Blanc"
    assert product["url"] == f"{SITE_ROOT}/products/598"
    assert product["topNotes"] == "Bergamot, Lemon"
    assert product["middleNotes"] == "Lavender"
    assert product["bottomNotes"] == "Musk"
    datetime.fromisoformat(product["lastUpdated"])

    assert result.complete
    assert result.pages_scraped == 2
    assert result.output_path == pipeline_config.storage.output_path
    assert sleep.calls == [1.0]
    assert f"{SITE_ROOT}/products/mystery" not in site.requested_urls


def test_products_kept_in_listing_order_with_delay_after_each(pipeline_config, quiet_console):
    names = [(f"{n} - Inspired by Scent {n}", f"/products/{n}") for n in (3, 1, 2)]
    routes = {
        f"{LISTING_URL}?page=1": listing_page(names[:2]),
        f"{LISTING_URL}?page=2": listing_page(names[2:]),
        f"{LISTING_URL}?page=3": end_of_listing_page(),
    }
    for _, href in names:
        routes[f"{SITE_ROOT}{href}"] = FULL_NOTES
    site = FakeSite(routes)

    result, sleep = run_pipeline(site, pipeline_config, quiet_console, delay=2.5)

    assert [p["name"] for p in read_output(pipeline_config)] == [n for n, _ in names]
    assert sleep.calls == [2.5, 2.5, 2.5]
    # product pages are fetched right after their own listing page
    assert site.requested_urls == [
        f"{LISTING_URL}?page=1",
        f"{SITE_ROOT}/products/3",
        f"{SITE_ROOT}/products/1",
        f"{LISTING_URL}?page=2",
        f"{SITE_ROOT}/products/2",
        f"{LISTING_URL}?page=3",
    ]


def test_failed_product_is_skipped(pipeline_config, quiet_console):
    site = FakeSite(
        {
            f"{LISTING_URL}?page=1": listing_page(
                [
                    ("1 - Inspired by Gone", "/products/gone"),
                    ("2 - Inspired by Down", "/products/down"),
                    ("3 - Inspired by Fine", "/products/fine"),
                ]
            ),
            f"{LISTING_URL}?page=2": end_of_listing_page(),
            f"{SITE_ROOT}/products/down": connection_error,
            f"{SITE_ROOT}/products/fine": FULL_NOTES,
        }
    )
    result, sleep = run_pipeline(site, pipeline_config, quiet_console)

    assert [p["name"] for p in read_output(pipeline_config)] == ["3 - Inspired by Fine"]
    assert result.failed_urls == [f"{SITE_ROOT}/products/gone", f"{SITE_ROOT}/products/down"]
    # the delay applies after failures too
    assert len(sleep.calls) == 3


def test_product_without_notes_is_kept_with_empty_fields(pipeline_config, quiet_console):
    site = FakeSite(
        {
            f"{LISTING_URL}?page=1": listing_page([("4 - Inspired by Plain", "/products/plain")]),
            f"{LISTING_URL}?page=2": end_of_listing_page(),
            f"{SITE_ROOT}/products/plain": "<html><body>No notes listed</body></html>",
        }
    )
    run_pipeline(site, pipeline_config, quiet_console)

    (product,) = read_output(pipeline_config)
    assert (product["topNotes"], product["middleNotes"], product["bottomNotes"]) == ("", "", "")


def test_partial_results_saved_when_listing_fails(pipeline_config, quiet_console):
    site = FakeSite(
        {
            f"{LISTING_URL}?page=1": listing_page([("1 - Inspired by Early", "/products/early")]),
            f"{LISTING_URL}?page=2": connection_error,
            f"{SITE_ROOT}/products/early": FULL_NOTES,
        }
    )
    result, _ = run_pipeline(site, pipeline_config, quiet_console)

    assert result.end_reason == PaginationEnd.ERROR
    assert not result.complete
    assert [p["name"] for p in read_output(pipeline_config)] == ["1 - Inspired by Early"]


def test_first_page_failure_writes_empty_collection(pipeline_config, quiet_console):
    site = FakeSite({f"{LISTING_URL}?page=1": (500, "oops")})
    result, _ = run_pipeline(site, pipeline_config, quiet_console)

    assert result.end_reason == PaginationEnd.ERROR
    assert read_output(pipeline_config) == []


def test_rerun_only_changes_timestamps(pipeline_config, quiet_console):
    site = FakeSite(
        {
            f"{LISTING_URL}?page=1": listing_page(
                [
                    ("598 - Inspired by Mont Blanc", "/products/598"),
                    ("10 x 20 - Blended Inspired by Two", "/products/blend"),
                ]
            ),
            f"{LISTING_URL}?page=2": end_of_listing_page(),
            f"{SITE_ROOT}/products/598": FULL_NOTES,
            f"{SITE_ROOT}/products/blend": product_page(
                accordion_text="Top Notes: A. Middle Notes: B. Bottom Notes: C"
            ),
        }
    )
    run_pipeline(site, pipeline_config, quiet_console)
    first = read_output(pipeline_config)
    run_pipeline(site, pipeline_config, quiet_console)
    second = read_output(pipeline_config)

    def without_timestamp(items):
        return [{k: v for k, v in item.items() if k != "lastUpdated"} for item in items]

    assert without_timestamp(first) == without_timestamp(second)
    assert second[1]["topNotes"] == "A."
    assert second[1]["bottomNotes"] == "C"


def test_write_failure_propagates(pipeline_config, quiet_console):
    pipeline_config.storage.output_path.parent.parent.mkdir(parents=True, exist_ok=True)
    pipeline_config.storage.output_path.parent.write_text("file in the way")
    site = FakeSite({f"{LISTING_URL}?page=1": end_of_listing_page()})

    with pytest.raises(OSError):
        run_pipeline(site, pipeline_config, quiet_console)


def test_summary_printed(pipeline_config, quiet_console):
    site = FakeSite({f"{LISTING_URL}?page=1": end_of_listing_page()})
    run_pipeline(site, pipeline_config, quiet_console)
    output = quiet_console.file.getvalue()
    assert "Pipeline Results" in output
    assert "end_marker" in output


def test_product_with_malformed_href_is_skipped(pipeline_config, quiet_console):
    site = FakeSite(
        {
            f"{LISTING_URL}?page=1": listing_page(
                [
                    ("1 - Inspired by Good", "/products/good"),
                    ("2 - Inspired by Bad", "/products/bad\tname"),
                ]
            ),
            f"{LISTING_URL}?page=2": end_of_listing_page(),
            f"{SITE_ROOT}/products/good": FULL_NOTES,
        }
    )
    result, _ = run_pipeline(site, pipeline_config, quiet_console)

    assert [p["name"] for p in read_output(pipeline_config)] == ["1 - Inspired by Good"]
    assert result.failed_urls == [f"{SITE_ROOT}/products/bad\tname"]
    assert result.complete
