"""Food search and barcode lookup against OpenFoodFacts."""

import logging
from dataclasses import dataclass

from ninja_training.adapters.openfoodfacts_client import FoodDatabaseClient
from ninja_training.domain.errors import NoNutritionDataError, ProductNotFoundError
from ninja_training.domain.macros import FoodCandidate, MacroData
from ninja_training.services.cache import Cache
from ninja_training.services.macros import (
    describe_product,
    normalize,
    parse_nutrition_record,
)

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """Turns food database hits into portion macros."""

    client: FoodDatabaseClient
    cache: Cache
    search_ttl_seconds: int = 3600
    product_ttl_seconds: int = 86400

    async def search(
        self, query: str, grams: float, limit: int = 10
    ) -> list[FoodCandidate]:
        """Search products and normalize each hit to ``grams``."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"off:search:{cleaned.lower()}:{limit}"
        payload = self.cache.get(cache_key)
        if not isinstance(payload, dict):
            try:
                payload = await self.client.search_products(cleaned, page_size=limit)
            except Exception:
                _logger.exception("Food search failed: query=%s", cleaned)
                raise
            self.cache.set(cache_key, payload, ttl_seconds=self.search_ttl_seconds)

        products = payload.get("products")
        if not isinstance(products, list):
            return []
        candidates = []
        for raw in products[:limit]:
            record = parse_nutrition_record(raw)
            candidates.append(
                FoodCandidate(
                    label=record.product_name or "Unnamed product",
                    record=record,
                    macro_data=normalize(record, grams),
                )
            )
        return candidates

    async def select(self, query: str, index: int, grams: float) -> MacroData:
        """Return macros for the ``index``-th search hit."""
        candidates = await self.search(query, grams)
        if index < 0 or index >= len(candidates):
            raise NoNutritionDataError("No food matches that selection.")
        candidate = candidates[index]
        if candidate.macro_data is None:
            _logger.info("Search hit without nutrition data: %s", candidate.label)
            raise NoNutritionDataError()
        return candidate.macro_data

    async def lookup_barcode(self, barcode: str, grams: float) -> MacroData:
        """Look up a barcode and normalize the product to ``grams``."""
        code = barcode.strip()
        if not code:
            raise ProductNotFoundError()
        cache_key = f"off:product:{code}"
        payload = self.cache.get(cache_key)
        if not isinstance(payload, dict):
            try:
                payload = await self.client.get_product(code)
            except Exception:
                _logger.exception("Barcode lookup failed: barcode=%s", code)
                raise
            self.cache.set(cache_key, payload, ttl_seconds=self.product_ttl_seconds)

        product = payload.get("product")
        if payload.get("status") != 1 or not isinstance(product, dict):
            raise ProductNotFoundError()
        record = parse_nutrition_record(product)
        macro_data = normalize(record, grams)
        if macro_data is None:
            _logger.info(
                "Barcode %s (%s) has no usable nutrition data",
                code,
                describe_product(record),
            )
            raise NoNutritionDataError()
        return macro_data
