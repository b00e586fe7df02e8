"""
Input and output shapes of the pricing engine.
The engine receives these by value and never mutates them.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from interio_pricing.config import get_settings
from interio_pricing.utils.currency import get_currency_symbol

from .enums import MatchTier, MatchType, PricingError
from .grid import GridData, GridRule


def _default_currency_symbol() -> str:
    return get_currency_symbol(get_settings().currency_code)


# ── Strategy calculator ──────────────────────────────────


class PricingContext(BaseModel):
    """
    Everything a pricing method may need.
    rail_width and drop are millimetres; fabric_width is centimetres.
    """
    model_config = ConfigDict(frozen=True)

    base_cost: float = 0.0
    rail_width: float = 0.0
    drop: float = 0.0
    quantity: float = 1
    fullness: Optional[float] = None        # required by per-panel
    fabric_width: Optional[float] = None    # required by per-panel
    fabric_cost: float = 0.0
    fabric_usage: float = 0.0
    pricing_grid_data: Optional[GridData] = None
    window_covering_pricing_method: Optional[str] = None  # parent, for inherit
    currency_symbol: str = Field(default_factory=_default_currency_symbol)

    @field_validator("pricing_grid_data", mode="before")
    @classmethod
    def _coerce_grid(cls, v: Any) -> Any:
        if v is None:
            return None
        return GridData.from_raw(v)


class PricingBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    units: float
    unit_cost: float
    multiplier: float = 1.0
    unit_label: str = ""


class PricingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    cost: float
    calculation: str
    breakdown: Optional[PricingBreakdown] = None
    error: Optional[PricingError] = None


# ── Grid matching / resolution ───────────────────────────


class AutoMatchResult(BaseModel):
    """Outcome of supplier/product-type/price-group grid matching."""
    model_config = ConfigDict(frozen=True)

    grid_id: Optional[str] = None
    grid_code: Optional[str] = None
    grid_name: Optional[str] = None
    grid_data: Optional[GridData] = None
    price_group: Optional[str] = None
    supplier_id: Optional[str] = None
    markup_percentage: float = 0.0
    discount_percentage: float = 0.0
    includes_fabric_price: bool = True
    match_type: MatchType = MatchType.NONE
    match_tier: Optional[MatchTier] = None
    match_details: str = ""


class GridResolutionResult(BaseModel):
    """Unified result of auto-match or legacy-rule grid resolution."""
    model_config = ConfigDict(frozen=True)

    grid_id: Optional[str] = None
    grid_code: Optional[str] = None
    grid_name: Optional[str] = None
    grid_data: Optional[GridData] = None
    markup_percentage: float = 0.0
    discount_percentage: float = 0.0
    includes_fabric_price: bool = True
    matched_rule: Optional[GridRule] = None
    match_type: MatchType = MatchType.NONE
    match_details: str = ""


class GridDiagnosticResult(BaseModel):
    """Explains why a product configuration does or does not resolve a grid."""
    success: bool = False
    grid_id: Optional[str] = None
    grid_code: Optional[str] = None
    grid_name: Optional[str] = None
    match_details: str = ""
    search_params: dict[str, Any] = {}
    available_grid_count: int = 0
    possible_issues: list[str] = []
