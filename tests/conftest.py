import io
from pathlib import Path

import pytest
from rich.console import Console

from config.settings import LoggingConfig, PipelineConfig, ScraperConfig, StorageConfig


@pytest.fixture
def scraper_config() -> ScraperConfig:
    return ScraperConfig(request_delay_seconds=0)


@pytest.fixture
def pipeline_config(tmp_path: Path, scraper_config: ScraperConfig) -> PipelineConfig:
    return PipelineConfig(
        scraper=scraper_config,
        storage=StorageConfig(output_path=tmp_path / "data" / "products.json"),
        logging=LoggingConfig(log_dir=tmp_path / "logs"),
    )


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), width=120)
