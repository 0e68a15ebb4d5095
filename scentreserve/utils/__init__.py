"""Utility modules for the scentreserve scraper."""

from .logging_setup import setup_logging
from .rate_limiter import FixedIntervalRateLimiter

__all__ = ["FixedIntervalRateLimiter", "setup_logging"]
