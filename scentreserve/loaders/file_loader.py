"""
File loader for saving the scraped product collection as one JSON document.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from config.settings import StorageConfig
from ..transformers.product_transformer import Product

logger = logging.getLogger(__name__)


class FileLoader:
    """Writes the product collection to products.json."""

    def __init__(self, storage_config: Optional[StorageConfig] = None):
        self.config = storage_config or StorageConfig()

    def serialize(self, products: list[Product]) -> str:
        """Pretty-printed JSON array in the front-end's camelCase schema."""
        return json.dumps(
            [product.to_json_dict() for product in products],
            indent=self.config.indent,
            ensure_ascii=False,
        )

    async def save_products(self, products: list[Product]) -> Path:
        """
        Save all products, replacing any previous file.

        The document is written to a temporary sibling first and renamed over
        the target, so readers never see a half-written file.

        Args:
            products: Products in listing order

        Returns:
            Path of the written file

        Raises:
            OSError: if the directory or file cannot be written
        """
        output_path = self.config.output_path
        self.config.ensure_dirs()
        tmp_path = output_path.with_name(f".{output_path.name}.tmp")

        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(self.serialize(products))
            os.replace(tmp_path, output_path)
        except OSError:
            if tmp_path.exists():
                tmp_path.unlink()
            raise

        logger.info("Saved %d products to %s", len(products), output_path)
        return output_path

    def load_products(self) -> list[Product]:
        """Read a previously written products file (empty list if missing)."""
        output_path = self.config.output_path
        if not output_path.exists():
            return []
        data = json.loads(output_path.read_text(encoding="utf-8"))
        return [Product.model_validate(item) for item in data]
