"""Services — GridAutoMatcher, GridResolver, template enrichment, diagnostics."""

from interio_pricing.services.auto_matcher import GridAutoMatcher, auto_match_pricing_grid
from interio_pricing.services.grid_resolver import (
    GridResolver,
    resolve_grid_for_product,
    get_available_price_groups,
    has_matching_grid,
    has_valid_pricing_grid,
)
from interio_pricing.services.template_enricher import enrich_template_with_grid
from interio_pricing.services.grid_diagnostic import diagnose_grid_resolution

__all__ = [
    "GridAutoMatcher",
    "auto_match_pricing_grid",
    "GridResolver",
    "resolve_grid_for_product",
    "get_available_price_groups",
    "has_matching_grid",
    "has_valid_pricing_grid",
    "enrich_template_with_grid",
    "diagnose_grid_resolution",
]
