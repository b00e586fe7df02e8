"""Engine — pure pricing computations (no data-store access)."""

from interio_pricing.engine.grid_lookup import get_price_from_grid
from interio_pricing.engine.pricing_strategies import (
    apply_grid_adjustments,
    calculate_price,
    normalize_pricing_method,
)
from interio_pricing.engine.treatment_mapping import (
    DEFAULT_TREATMENT_GRID_MAPPING,
    TreatmentMappingStore,
    get_compatible_product_types,
)

__all__ = [
    "get_price_from_grid",
    "calculate_price",
    "normalize_pricing_method",
    "apply_grid_adjustments",
    "DEFAULT_TREATMENT_GRID_MAPPING",
    "TreatmentMappingStore",
    "get_compatible_product_types",
]
