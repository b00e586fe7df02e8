"""
Tests: pricing strategy calculator.

Run with:
    pytest interio_pricing/tests/test_pricing_strategies.py -v
"""

import pytest

from interio_pricing.engine.pricing_strategies import (
    apply_grid_adjustments,
    calculate_price,
    normalize_pricing_method,
)
from interio_pricing.models.enums import PricingError, PricingMethod
from interio_pricing.models.schemas import PricingContext

GRID = {
    "widthColumns": [50, 100, 150, 200, 250],
    "dropRows": [
        {"drop": 100, "prices": [45, 55, 65, 75, 85]},
        {"drop": 150, "prices": [55, 65, 75, 85, 95]},
    ],
}


def _ctx(**overrides) -> PricingContext:
    values = {"base_cost": 50, "rail_width": 2000, "drop": 1500, "quantity": 1}
    values.update(overrides)
    return PricingContext(**values)


class TestUnitMethods:
    @pytest.mark.parametrize("method", ["fixed", "per-unit", "per-drop", "per-piece", "per-roll"])
    def test_base_cost_times_quantity(self, method):
        result = calculate_price(method, _ctx(base_cost=12.5, quantity=4))
        assert result.cost == 50
        assert result.error is None
        assert result.calculation

    def test_breakdown(self):
        result = calculate_price(PricingMethod.FIXED, _ctx(base_cost=20, quantity=3))
        assert result.breakdown.units == 3
        assert result.breakdown.unit_cost == 20

    def test_currency_symbol_in_calculation(self):
        result = calculate_price("fixed", _ctx(currency_symbol="€"))
        assert "€50.00" in result.calculation

    def test_default_currency_from_settings(self):
        assert _ctx().currency_symbol == "£"


class TestPerPanel:
    def test_formula(self):
        # ceil(2000 × 2 / 1400) = 3 panels
        result = calculate_price("per-panel", _ctx(fullness=2, fabric_width=140))
        assert result.cost == 150
        assert result.breakdown.units == 3
        assert "3 panels" in result.calculation

    def test_quantity_multiplies(self):
        result = calculate_price("per-panel", _ctx(fullness=2, fabric_width=140, quantity=2))
        assert result.cost == 300

    @pytest.mark.parametrize("fabric_width", [None, 137, 280])
    def test_missing_fullness(self, fabric_width):
        result = calculate_price("per-panel", _ctx(fullness=None, fabric_width=fabric_width))
        assert result.error is PricingError.FULLNESS_REQUIRED
        assert result.cost == 0

    @pytest.mark.parametrize("fabric_width", [None, 0])
    def test_missing_fabric_width(self, fabric_width):
        result = calculate_price("per-panel", _ctx(fullness=2.5, fabric_width=fabric_width))
        assert result.error is PricingError.FABRIC_WIDTH_REQUIRED
        assert result.cost == 0


class TestLinearAndArea:
    @pytest.mark.parametrize("method", ["per-meter", "per-metre", "per-linear-meter", "per-width"])
    def test_per_meter(self, method):
        result = calculate_price(method, _ctx(base_cost=10, rail_width=3000))
        assert result.cost == pytest.approx(30)

    @pytest.mark.parametrize("method", ["per-yard", "per-linear-yard"])
    def test_per_yard(self, method):
        result = calculate_price(method, _ctx(base_cost=12, rail_width=1828.8, quantity=2))
        assert result.cost == pytest.approx(48)

    @pytest.mark.parametrize("method", ["per-sqm", "per-square-meter"])
    def test_per_sqm(self, method):
        result = calculate_price(method, _ctx(base_cost=40, rail_width=2000, drop=1500))
        assert result.cost == pytest.approx(120)
        assert result.breakdown.units == pytest.approx(3.0)

    def test_percentage_of_fabric_total(self):
        result = calculate_price("percentage", _ctx(base_cost=10, fabric_cost=20, fabric_usage=5))
        assert result.cost == pytest.approx(10)


class TestInherit:
    def test_inherits_parent_method(self):
        ctx = _ctx(base_cost=10, rail_width=1000, window_covering_pricing_method="per-meter")
        inherited = calculate_price("inherit", ctx)
        direct = calculate_price("per-meter", ctx)
        assert inherited.cost == direct.cost
        assert inherited.calculation.startswith("Inherited per-meter")

    @pytest.mark.parametrize("parent", [None, "inherit"])
    def test_no_usable_parent_prices_fixed(self, parent):
        result = calculate_price("inherit", _ctx(base_cost=7, quantity=3, window_covering_pricing_method=parent))
        assert result.cost == 21
        assert "fixed" in result.calculation


class TestPricingGrid:
    def test_grid_lookup_in_cm(self):
        # 1000mm × 1500mm → 100cm × 150cm → 65
        result = calculate_price("pricing-grid", _ctx(rail_width=1000, drop=1500, quantity=2, pricing_grid_data=GRID))
        assert result.cost == 130
        assert result.breakdown.unit_cost == 65

    def test_without_grid_degrades_to_fixed(self):
        result = calculate_price("pricing-grid", _ctx(base_cost=80, quantity=2))
        assert result.cost == 160
        assert "No pricing grid" in result.calculation

    def test_empty_grid_flagged(self):
        result = calculate_price("pricing-grid", _ctx(pricing_grid_data={"widthColumns": [], "dropRows": []}))
        assert result.cost == 0
        assert "no usable grid price" in result.calculation


class TestDispatch:
    def test_unknown_method_prices_fixed(self):
        result = calculate_price("per-furlong", _ctx(base_cost=9, quantity=2))
        assert result.cost == 18
        assert result.error is None
        assert "Unknown method" in result.calculation

    def test_missing_method_prices_fixed(self):
        assert calculate_price(None, _ctx(base_cost=9)).cost == 9

    @pytest.mark.parametrize("raw,expected", [
        ("per_metre", PricingMethod.PER_METRE),
        ("Per-Running-Meter", PricingMethod.PER_LINEAR_METER),
        ("grid", PricingMethod.PRICING_GRID),
        ("flat", PricingMethod.FIXED),
        ("per-m2", PricingMethod.PER_SQM),
        ("percent", PricingMethod.PERCENTAGE),
        (PricingMethod.INHERIT, PricingMethod.INHERIT),
        ("", None),
        ("bespoke", None),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_pricing_method(raw) is expected

    def test_every_method_is_priced(self):
        ctx = _ctx(fullness=2, fabric_width=140, pricing_grid_data=GRID)
        for method in PricingMethod:
            result = calculate_price(method, ctx)
            assert result.cost >= 0
            assert result.calculation


class TestGridAdjustments:
    def test_markup_then_discount(self):
        assert apply_grid_adjustments(100, 50, 10) == pytest.approx(135)

    def test_no_adjustment(self):
        assert apply_grid_adjustments(100) == 100
