"""
Grid Diagnostic — explains why a product configuration does or does
not resolve to a pricing grid. Used by catalog administrators when a
quote unexpectedly prices without a grid.
"""

from __future__ import annotations

import logging

from interio_pricing.models.schemas import GridDiagnosticResult

from .auto_matcher import normalize_price_group
from .grid_resolver import GridResolver

logger = logging.getLogger(__name__)


def diagnose_grid_resolution(
    product_type: str,
    price_group: str,
    user_id: str,
    supplier_id: str | None = None,
    resolver: GridResolver | None = None,
) -> GridDiagnosticResult:
    resolver = resolver or GridResolver()
    search_params = {
        "product_type": product_type,
        "price_group": price_group,
        "supplier_id": supplier_id,
    }
    issues: list[str] = []

    try:
        all_grids = resolver.repository.list_grids(user_id)
        resolution = resolver.resolve(
            product_type=product_type,
            user_id=user_id,
            fabric_price_group=price_group,
            fabric_supplier_id=supplier_id,
        )
    except Exception as e:
        logger.warning(f"Diagnostic failed for {search_params}: {e}")
        return GridDiagnosticResult(
            search_params=search_params,
            possible_issues=[f"Error: {e}"],
        )

    if resolution.grid_id is None:
        group = normalize_price_group(price_group)
        same_type = [g for g in all_grids if g.product_type == product_type]
        same_group = [g for g in all_grids if normalize_price_group(g.price_group) == group]
        same_supplier = [g for g in all_grids if g.supplier_id == supplier_id] if supplier_id else all_grids

        if not same_type:
            issues.append(f'No grids exist for product type "{product_type}"')
        elif not same_group:
            issues.append(f'No grids exist with price group "{price_group}"')
        elif supplier_id and not same_supplier:
            issues.append(f'No grids exist for supplier "{supplier_id}"')
        else:
            issues.append(
                "No grid matches the exact combination of supplier + product type + price group"
            )
            close = [
                g for g in all_grids
                if g.product_type == product_type or normalize_price_group(g.price_group) == group
            ]
            if close:
                issues.append(f"Found {len(close)} grids with partial matches")

    return GridDiagnosticResult(
        success=resolution.grid_id is not None,
        grid_id=resolution.grid_id,
        grid_code=resolution.grid_code,
        grid_name=resolution.grid_name,
        match_details=resolution.match_details,
        search_params=search_params,
        available_grid_count=len(all_grids),
        possible_issues=issues,
    )
