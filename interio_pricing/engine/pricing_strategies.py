"""
Pricing Strategy Calculator.

calculate_price() dispatches on a PricingMethod and returns the cost
together with a human-readable calculation string for quote
explanations. It is total: unknown methods price like "fixed".

Dimensions in PricingContext are millimetres; fabric_width is cm.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from interio_pricing.models.enums import LengthUnit, PricingError, PricingMethod
from interio_pricing.models.schemas import PricingBreakdown, PricingContext, PricingResult
from interio_pricing.utils.currency import format_money
from interio_pricing.utils.units import MM_PER_UNIT, mm_to_cm, mm_to_m

from .grid_lookup import get_price_from_grid

logger = logging.getLogger(__name__)

MM_PER_YARD = MM_PER_UNIT[LengthUnit.YARD]

# Legacy / variant spellings found in stored templates and options
_METHOD_ALIASES: dict[str, PricingMethod] = {
    "per-running-meter": PricingMethod.PER_LINEAR_METER,
    "per-running-metre": PricingMethod.PER_LINEAR_METER,
    "per-linear-metre": PricingMethod.PER_LINEAR_METER,
    "linear-meter": PricingMethod.PER_LINEAR_METER,
    "linear-metre": PricingMethod.PER_LINEAR_METER,
    "per-m": PricingMethod.PER_LINEAR_METER,
    "per-running-yard": PricingMethod.PER_LINEAR_YARD,
    "per-square-metre": PricingMethod.PER_SQUARE_METER,
    "per-m2": PricingMethod.PER_SQM,
    "grid": PricingMethod.PRICING_GRID,
    "fixed-price": PricingMethod.FIXED,
    "flat": PricingMethod.FIXED,
    "flat-rate": PricingMethod.FIXED,
    "per-item": PricingMethod.PER_UNIT,
    "percent": PricingMethod.PERCENTAGE,
}


def normalize_pricing_method(method: PricingMethod | str | None) -> PricingMethod | None:
    """Map a stored method string onto PricingMethod; None if unrecognised."""
    if method is None or isinstance(method, PricingMethod):
        return method
    key = method.strip().lower().replace("_", "-")
    if not key:
        return None
    try:
        return PricingMethod(key)
    except ValueError:
        return _METHOD_ALIASES.get(key)


# ── Strategies ───────────────────────────────────────────


def _money(ctx: PricingContext, amount: float) -> str:
    return format_money(amount, ctx.currency_symbol)


def _per_unit(ctx: PricingContext, label: str = "unit") -> PricingResult:
    cost = ctx.base_cost * ctx.quantity
    return PricingResult(
        cost=cost,
        calculation=f"{_money(ctx, ctx.base_cost)} × {ctx.quantity:g} {label} = {_money(ctx, cost)}",
        breakdown=PricingBreakdown(units=ctx.quantity, unit_cost=ctx.base_cost, unit_label=label),
    )


def _fixed(ctx: PricingContext) -> PricingResult:
    return _per_unit(ctx, "item")


def _per_piece(ctx: PricingContext) -> PricingResult:
    return _per_unit(ctx, "piece")


def _per_roll(ctx: PricingContext) -> PricingResult:
    return _per_unit(ctx, "roll")


def _per_drop(ctx: PricingContext) -> PricingResult:
    return _per_unit(ctx, "drop")


def _per_panel(ctx: PricingContext) -> PricingResult:
    if ctx.fullness is None:
        return PricingResult(
            cost=0.0,
            calculation="Per-panel pricing requires a fullness ratio on the template",
            error=PricingError.FULLNESS_REQUIRED,
        )
    if ctx.fabric_width is None or ctx.fabric_width <= 0:
        return PricingResult(
            cost=0.0,
            calculation="Per-panel pricing requires the fabric width",
            error=PricingError.FABRIC_WIDTH_REQUIRED,
        )

    fabric_width_mm = ctx.fabric_width * 10
    panels = math.ceil((ctx.rail_width * ctx.fullness) / fabric_width_mm)
    cost = panels * ctx.base_cost * ctx.quantity
    return PricingResult(
        cost=cost,
        calculation=(
            f"{panels} panels (⌈{ctx.rail_width:g}mm × {ctx.fullness:g} ÷ {fabric_width_mm:g}mm⌉) "
            f"× {_money(ctx, ctx.base_cost)} × {ctx.quantity:g} = {_money(ctx, cost)}"
        ),
        breakdown=PricingBreakdown(
            units=panels, unit_cost=ctx.base_cost, multiplier=ctx.quantity, unit_label="panel"
        ),
    )


def _per_length(ctx: PricingContext, length: float, label: str) -> PricingResult:
    cost = ctx.base_cost * length * ctx.quantity
    return PricingResult(
        cost=cost,
        calculation=(
            f"{_money(ctx, ctx.base_cost)}/{label} × {length:.2f}{label} "
            f"× {ctx.quantity:g} = {_money(ctx, cost)}"
        ),
        breakdown=PricingBreakdown(
            units=length, unit_cost=ctx.base_cost, multiplier=ctx.quantity, unit_label=label
        ),
    )


def _per_meter(ctx: PricingContext) -> PricingResult:
    return _per_length(ctx, mm_to_m(ctx.rail_width), "m")


def _per_yard(ctx: PricingContext) -> PricingResult:
    return _per_length(ctx, ctx.rail_width / MM_PER_YARD, "yd")


def _per_sqm(ctx: PricingContext) -> PricingResult:
    width_m = mm_to_m(ctx.rail_width)
    drop_m = mm_to_m(ctx.drop)
    area = width_m * drop_m
    cost = ctx.base_cost * area * ctx.quantity
    return PricingResult(
        cost=cost,
        calculation=(
            f"{_money(ctx, ctx.base_cost)}/m² × {width_m:.2f}m × {drop_m:.2f}m "
            f"× {ctx.quantity:g} = {_money(ctx, cost)}"
        ),
        breakdown=PricingBreakdown(
            units=area, unit_cost=ctx.base_cost, multiplier=ctx.quantity, unit_label="m²"
        ),
    )


def _percentage(ctx: PricingContext) -> PricingResult:
    fabric_total = ctx.fabric_cost * ctx.fabric_usage
    cost = (ctx.base_cost / 100) * fabric_total
    return PricingResult(
        cost=cost,
        calculation=(
            f"{ctx.base_cost:g}% of fabric {_money(ctx, ctx.fabric_cost)} "
            f"× {ctx.fabric_usage:g} = {_money(ctx, cost)}"
        ),
        breakdown=PricingBreakdown(
            units=fabric_total, unit_cost=ctx.base_cost / 100, unit_label="% of fabric"
        ),
    )


def _pricing_grid(ctx: PricingContext) -> PricingResult:
    if ctx.pricing_grid_data is None:
        fallback = _fixed(ctx)
        return fallback.model_copy(
            update={"calculation": f"No pricing grid attached, priced as fixed: {fallback.calculation}"}
        )

    width_cm = mm_to_cm(ctx.rail_width)
    drop_cm = mm_to_cm(ctx.drop)
    grid_price = get_price_from_grid(ctx.pricing_grid_data, width_cm, drop_cm)
    cost = grid_price * ctx.quantity
    note = "" if grid_price > 0 else " (no usable grid price)"
    return PricingResult(
        cost=cost,
        calculation=(
            f"Grid price for {width_cm:g}cm × {drop_cm:g}cm = {_money(ctx, grid_price)} "
            f"× {ctx.quantity:g} = {_money(ctx, cost)}{note}"
        ),
        breakdown=PricingBreakdown(units=ctx.quantity, unit_cost=grid_price, unit_label="grid"),
    )


def _inherit(ctx: PricingContext) -> PricingResult:
    parent = normalize_pricing_method(ctx.window_covering_pricing_method)
    # One level of indirection only: an inheriting parent prices as fixed
    if parent is None or parent is PricingMethod.INHERIT:
        parent = PricingMethod.FIXED
    result = _STRATEGIES[parent](ctx)
    return result.model_copy(
        update={"calculation": f"Inherited {parent.value}: {result.calculation}"}
    )


_STRATEGIES: dict[PricingMethod, Callable[[PricingContext], PricingResult]] = {
    PricingMethod.FIXED: _fixed,
    PricingMethod.PER_UNIT: _per_unit,
    PricingMethod.PER_PIECE: _per_piece,
    PricingMethod.PER_ROLL: _per_roll,
    PricingMethod.PER_PANEL: _per_panel,
    PricingMethod.PER_DROP: _per_drop,
    PricingMethod.PER_WIDTH: _per_meter,
    PricingMethod.PER_METER: _per_meter,
    PricingMethod.PER_METRE: _per_meter,
    PricingMethod.PER_LINEAR_METER: _per_meter,
    PricingMethod.PER_YARD: _per_yard,
    PricingMethod.PER_LINEAR_YARD: _per_yard,
    PricingMethod.PER_SQM: _per_sqm,
    PricingMethod.PER_SQUARE_METER: _per_sqm,
    PricingMethod.PERCENTAGE: _percentage,
    PricingMethod.INHERIT: _inherit,
    PricingMethod.PRICING_GRID: _pricing_grid,
}


def calculate_price(method: PricingMethod | str | None, context: PricingContext) -> PricingResult:
    """Price a configuration with the given method."""
    resolved = normalize_pricing_method(method)
    if resolved is None:
        logger.warning(f"Unknown pricing method {method!r}, pricing as fixed")
        result = _fixed(context)
        return result.model_copy(
            update={"calculation": f"Unknown method '{method}', priced as fixed: {result.calculation}"}
        )
    return _STRATEGIES[resolved](context)


def apply_grid_adjustments(
    cost: float,
    markup_percentage: float = 0.0,
    discount_percentage: float = 0.0,
) -> float:
    """Apply a resolved grid's markup, then its discount."""
    return cost * (1 + markup_percentage / 100) * (1 - discount_percentage / 100)
