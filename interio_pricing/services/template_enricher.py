"""
Template Enricher — attaches a resolved pricing grid to a product
template record so calculators can price it without resolving again.
"""

from __future__ import annotations

import logging
from typing import Any

from .grid_resolver import GridResolver

logger = logging.getLogger(__name__)

PRICING_GRID_TYPE = "pricing_grid"


def enrich_template_with_grid(
    template: dict[str, Any],
    fabric_item: dict[str, Any] | None = None,
    *,
    user_id: str,
    resolver: GridResolver | None = None,
) -> dict[str, Any]:
    """
    Return the template with grid fields attached, or the template itself
    when it is not grid-priced, already carries grid data, or cannot be
    resolved. The input record is never modified.
    """
    if template.get("pricing_type") != PRICING_GRID_TYPE or template.get("pricing_grid_data"):
        return template

    fabric = fabric_item or {}
    system_type = template.get("system_type") or fabric.get("system_type")
    price_group = template.get("price_group") or fabric.get("price_group")
    template_name = template.get("name", template.get("id", "?"))

    if not system_type or not price_group:
        logger.warning(
            f"Template '{template_name}' is grid-priced but has no "
            f"{'system type' if not system_type else 'price group'}; left unchanged"
        )
        return template

    product_type = template.get("treatment_category") or template.get("product_type") or ""
    resolver = resolver or GridResolver()
    result = resolver.resolve(
        product_type=product_type,
        user_id=user_id,
        system_type=system_type,
        fabric_price_group=price_group,
        fabric_supplier_id=fabric.get("supplier_id") or fabric.get("vendor_id"),
    )
    if result.grid_id is None:
        logger.info(f"No grid resolved for template '{template_name}': {result.match_details}")
        return template

    enriched = dict(template)
    enriched.update({
        "pricing_grid_data": result.grid_data,
        "resolved_grid_id": result.grid_id,
        "resolved_grid_code": result.grid_code,
        "resolved_grid_name": result.grid_name,
        "pricing_grid_markup": result.markup_percentage,
        "pricing_grid_discount": result.discount_percentage,
        "includes_fabric_price": result.includes_fabric_price,
    })
    logger.debug(f"Template '{template_name}' enriched with grid {result.grid_code}")
    return enriched
