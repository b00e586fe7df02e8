"""
Interio Pricing Engine — command-line entry points.

Explain why a configuration does (not) resolve a grid:
    python -m interio_pricing diagnose --user-id U --product-type roller_blinds --price-group A

Price a configuration end to end:
    python -m interio_pricing quote --user-id U --product-type roller_blinds \\
        --price-group A --width-mm 1200 --drop-mm 1500

Both read grids from MongoDB, or from --grids-file (JSON with "grids" and
"rules" lists) in mock mode.

Or import and run programmatically:
    from interio_pricing.main import quote
    summary = quote("roller_blinds", user_id, 1200, 1500, price_group="A")
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from interio_pricing.config import get_settings
from interio_pricing.engine.pricing_strategies import apply_grid_adjustments, calculate_price
from interio_pricing.models.enums import PricingMethod
from interio_pricing.models.schemas import GridDiagnosticResult, PricingContext
from interio_pricing.persistence.grid_repository import GridRepository, get_grid_repository
from interio_pricing.services.grid_diagnostic import diagnose_grid_resolution
from interio_pricing.services.grid_resolver import GridResolver
from interio_pricing.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def load_repository(grids_file: str | None = None) -> GridRepository:
    """Configured repository, or an in-memory one seeded from a JSON file."""
    if not grids_file:
        return get_grid_repository()
    payload = json.loads(Path(grids_file).read_text(encoding="utf-8"))
    repository = GridRepository(payload.get("grids", []), payload.get("rules", []))
    logger.info(f"Loaded {len(payload.get('grids', []))} grids from {grids_file}")
    return repository


def diagnose(
    product_type: str,
    price_group: str,
    user_id: str,
    supplier_id: str | None = None,
    repository: GridRepository | None = None,
) -> GridDiagnosticResult:
    """Run the grid diagnostic and log a readable report."""
    result = diagnose_grid_resolution(
        product_type=product_type,
        price_group=price_group,
        user_id=user_id,
        supplier_id=supplier_id,
        resolver=GridResolver(repository),
    )

    logger.info("-" * 60)
    logger.info("  GRID RESOLUTION DIAGNOSTIC")
    logger.info("-" * 60)
    logger.info(f"  Product Type:   {product_type}")
    logger.info(f"  Price Group:    {price_group}")
    logger.info(f"  Supplier:       {supplier_id or 'any'}")
    logger.info(f"  Grids Known:    {result.available_grid_count}")
    logger.info(f"  Resolved:       {result.grid_code or 'NO'}")
    if result.match_details:
        logger.info(f"  Details:        {result.match_details}")
    for issue in result.possible_issues:
        logger.info(f"    • {issue}")
    logger.info("-" * 60)
    return result


def quote(
    product_type: str,
    user_id: str,
    width_mm: float,
    drop_mm: float,
    price_group: str | None = None,
    supplier_id: str | None = None,
    system_type: str | None = None,
    quantity: float = 1,
    method: str | None = None,
    base_cost: float = 0.0,
    repository: GridRepository | None = None,
) -> dict[str, Any]:
    """
    Resolve a grid and price the configuration. Without a grid the given
    method (default fixed) prices base_cost instead.
    """
    resolution = GridResolver(repository).resolve(
        product_type=product_type,
        user_id=user_id,
        system_type=system_type,
        fabric_price_group=price_group,
        fabric_supplier_id=supplier_id,
    )

    context = PricingContext(
        base_cost=base_cost,
        rail_width=width_mm,
        drop=drop_mm,
        quantity=quantity,
        pricing_grid_data=resolution.grid_data,
    )
    if resolution.grid_id is not None:
        pricing = calculate_price(PricingMethod.PRICING_GRID, context)
        total = apply_grid_adjustments(
            pricing.cost, resolution.markup_percentage, resolution.discount_percentage
        )
    else:
        pricing = calculate_price(method or PricingMethod.FIXED, context)
        total = pricing.cost

    logger.info("-" * 60)
    logger.info("  QUOTE")
    logger.info("-" * 60)
    logger.info(f"  Grid:           {resolution.grid_code or 'none'} ({resolution.match_details})")
    logger.info(f"  Calculation:    {pricing.calculation}")
    if pricing.error:
        logger.info(f"  Error:          {pricing.error.value}")
    logger.info(f"  Total:          {context.currency_symbol}{total:,.2f}")
    logger.info("-" * 60)

    return {
        "resolution": resolution.model_dump(mode="json"),
        "pricing": pricing.model_dump(mode="json"),
        "total": total,
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Window-covering pricing engine")
    sub = parser.add_subparsers(dest="command", required=True)

    def common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--user-id", required=True, help="Owner scope of the catalog")
        p.add_argument("--product-type", required=True, help="e.g. roller_blinds")
        p.add_argument("--supplier-id", default=None)
        p.add_argument("--grids-file", default=None, help="JSON seed for mock mode")

    diag = sub.add_parser("diagnose", help="Explain grid resolution for a configuration")
    common(diag)
    diag.add_argument("--price-group", required=True)

    q = sub.add_parser("quote", help="Price a configuration")
    common(q)
    q.add_argument("--price-group", default=None)
    q.add_argument("--system-type", default=None)
    q.add_argument("--width-mm", type=float, required=True)
    q.add_argument("--drop-mm", type=float, required=True)
    q.add_argument("--quantity", type=float, default=1)
    q.add_argument("--method", default=None, help="Pricing method when no grid resolves")
    q.add_argument("--base-cost", type=float, default=0.0)
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging(get_settings().log_level)
    args = _build_parser().parse_args(argv)
    repository = load_repository(args.grids_file)

    if args.command == "diagnose":
        result = diagnose(
            args.product_type, args.price_group, args.user_id, args.supplier_id, repository
        )
        return 0 if result.success else 1

    summary = quote(
        product_type=args.product_type,
        user_id=args.user_id,
        width_mm=args.width_mm,
        drop_mm=args.drop_mm,
        price_group=args.price_group,
        supplier_id=args.supplier_id,
        system_type=args.system_type,
        quantity=args.quantity,
        method=args.method,
        base_cost=args.base_cost,
        repository=repository,
    )
    return 0 if summary["pricing"]["error"] is None else 1


if __name__ == "__main__":
    sys.exit(main())
