"""
Length unit conversion.

Millimetres are the canonical physical unit: every conversion goes
through mm, so any pair of supported units round-trips.
"""

from __future__ import annotations

from interio_pricing.models.enums import LengthUnit

MM_PER_UNIT: dict[LengthUnit, float] = {
    LengthUnit.MM: 1.0,
    LengthUnit.CM: 10.0,
    LengthUnit.M: 1000.0,
    LengthUnit.INCH: 25.4,
    LengthUnit.FEET: 304.8,
    LengthUnit.YARD: 914.4,
}

_ALIASES: dict[str, LengthUnit] = {
    "mm": LengthUnit.MM,
    "millimeter": LengthUnit.MM,
    "millimetre": LengthUnit.MM,
    "cm": LengthUnit.CM,
    "centimeter": LengthUnit.CM,
    "centimetre": LengthUnit.CM,
    "m": LengthUnit.M,
    "meter": LengthUnit.M,
    "metre": LengthUnit.M,
    "in": LengthUnit.INCH,
    "inch": LengthUnit.INCH,
    "inches": LengthUnit.INCH,
    "ft": LengthUnit.FEET,
    "foot": LengthUnit.FEET,
    "feet": LengthUnit.FEET,
    "yd": LengthUnit.YARD,
    "yard": LengthUnit.YARD,
    "yards": LengthUnit.YARD,
}


def parse_unit(unit: LengthUnit | str) -> LengthUnit:
    """Resolve a unit name or alias; raises ValueError for unknown units."""
    if isinstance(unit, LengthUnit):
        return unit
    key = str(unit).strip().lower()
    # Plural metric names ("meters", "centimetres")
    if key not in _ALIASES and key.endswith("s"):
        key = key[:-1]
    try:
        return _ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown length unit: {unit!r}") from None


def convert_length(
    value: float,
    from_unit: LengthUnit | str,
    to_unit: LengthUnit | str,
) -> float:
    """Convert a length between any two supported units."""
    src = parse_unit(from_unit)
    dst = parse_unit(to_unit)
    if src is dst:
        return float(value)
    return value * MM_PER_UNIT[src] / MM_PER_UNIT[dst]


def mm_to_cm(value: float) -> float:
    return value / 10.0


def cm_to_mm(value: float) -> float:
    return value * 10.0


def mm_to_m(value: float) -> float:
    return value / 1000.0
