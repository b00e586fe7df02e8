"""
Treatment-Grid Mapping — which grid product types a treatment category
may borrow a pricing grid from.

This is catalog data, not a fixed type: the defaults below can be
extended or overridden per category from MongoDB by an administrator.
Unmapped categories are compatible only with themselves.
"""

from __future__ import annotations

import logging
from typing import Any

from interio_pricing.config import get_settings

logger = logging.getLogger(__name__)


DEFAULT_TREATMENT_GRID_MAPPING: dict[str, list[str]] = {
    "roller_blinds": ["roller_blinds", "blinds"],
    "venetian_blinds": ["venetian_blinds", "blinds"],
    "vertical_blinds": ["vertical_blinds", "blinds"],
    "cellular_blinds": ["cellular_blinds", "cellular_shades", "honeycomb_blinds"],
    "zebra_blinds": ["zebra_blinds", "roller_blinds"],
    "roman_blinds": ["roman_blinds", "roman_shades"],
    "panel_glide": ["panel_glide", "panel_blinds", "vertical_blinds"],
    "shutters": ["shutters", "plantation_shutters"],
    "plantation_shutters": ["plantation_shutters", "shutters"],
    "awning": ["awning", "awnings"],
    "curtains": ["curtains"],
}


class TreatmentMappingStore:
    """
    Loads category → product-type mappings from MongoDB on top of the
    defaults. Cached after first load for the lifetime of the process.
    """

    def __init__(self, db: Any = None, overrides: dict[str, list[str]] | None = None):
        self.settings = get_settings()
        self._db = db
        self._overrides = dict(overrides or {})
        self._cache: dict[str, list[str]] | None = None

    def _load(self) -> dict[str, list[str]]:
        if self._cache is not None:
            return self._cache

        mapping = {k: list(v) for k, v in DEFAULT_TREATMENT_GRID_MAPPING.items()}
        if self._db is not None:
            try:
                collection = self._db[self.settings.treatment_mappings_collection]
                for doc in collection.find({}):
                    category = doc.get("treatment_category")
                    product_types = doc.get("product_types")
                    if category and isinstance(product_types, list):
                        mapping[category] = [str(p) for p in product_types]
            except Exception as e:
                logger.warning(f"Failed loading treatment mappings from MongoDB, using defaults: {e}")
        mapping.update(self._overrides)

        self._cache = mapping
        return mapping

    def get_compatible_product_types(self, treatment_category: str) -> list[str]:
        mapping = self._load()
        return list(mapping.get(treatment_category, [treatment_category]))

    def invalidate(self) -> None:
        self._cache = None


def get_compatible_product_types(treatment_category: str) -> list[str]:
    """Compatible grid product types from the built-in table."""
    return list(DEFAULT_TREATMENT_GRID_MAPPING.get(treatment_category, [treatment_category]))
