from enum import Enum

class PricingMethod(str, Enum):
    FIXED = "fixed"
    PER_UNIT = "per-unit"
    PER_PIECE = "per-piece"
    PER_ROLL = "per-roll"
    PER_PANEL = "per-panel"
    PER_DROP = "per-drop"
    PER_WIDTH = "per-width"
    PER_METER = "per-meter"
    PER_METRE = "per-metre"
    PER_LINEAR_METER = "per-linear-meter"
    PER_YARD = "per-yard"
    PER_LINEAR_YARD = "per-linear-yard"
    PER_SQM = "per-sqm"
    PER_SQUARE_METER = "per-square-meter"
    PERCENTAGE = "percentage"
    INHERIT = "inherit"
    PRICING_GRID = "pricing-grid"

class PricingError(str, Enum):
    FULLNESS_REQUIRED = "fullness_required"
    FABRIC_WIDTH_REQUIRED = "fabric_width_required"

class MatchType(str, Enum):
    EXACT = "exact"        # requested supplier + product type
    FALLBACK = "fallback"  # product type, any supplier
    FLEXIBLE = "flexible"  # compatible product types, any supplier
    NONE = "none"

class MatchTier(str, Enum):
    EXACT = "exact"
    STRIPPED_PREFIX = "stripped_prefix"
    SUFFIX = "suffix"
    NUMERIC = "numeric"

class LengthUnit(str, Enum):
    MM = "mm"
    CM = "cm"
    M = "m"
    INCH = "inch"
    FEET = "feet"
    YARD = "yard"

class GridUnit(str, Enum):
    CM = "cm"
    MM = "mm"
