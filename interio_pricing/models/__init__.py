"""Models — enums, grid records, engine input/output schemas."""

from .enums import (
    PricingMethod,
    PricingError,
    MatchType,
    MatchTier,
    LengthUnit,
    GridUnit,
)
from .grid import GridData, DropRow, PriceGrid, GridRule
from .schemas import (
    PricingContext,
    PricingBreakdown,
    PricingResult,
    AutoMatchResult,
    GridResolutionResult,
    GridDiagnosticResult,
)

__all__ = [
    "PricingMethod",
    "PricingError",
    "MatchType",
    "MatchTier",
    "LengthUnit",
    "GridUnit",
    "GridData",
    "DropRow",
    "PriceGrid",
    "GridRule",
    "PricingContext",
    "PricingBreakdown",
    "PricingResult",
    "AutoMatchResult",
    "GridResolutionResult",
    "GridDiagnosticResult",
]
