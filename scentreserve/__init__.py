"""
Scent Reserve scraper.

Collects numbered "Inspired by" fragrances and their top / middle / bottom
notes from thescentreserve.com into data/products.json for the scent quiz.
"""

from .pipeline import PipelineResult, ScentPipeline

__version__ = "1.0.0"

__all__ = ["ScentPipeline", "PipelineResult", "__version__"]
