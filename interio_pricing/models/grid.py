"""
Pricing grid records: the canonical 2-D price table plus the stored
grid and legacy routing-rule rows that carry it.

Stored catalog data holds grid tables in several historical shapes.
GridData normalizes all of them into one validated structure when a
record is loaded, so the lookup code only ever sees one shape.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import GridUnit

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def _to_number(value: Any, what: str) -> float:
    """Coerce a stored axis/price value ("120", "£45.50", 45) to float."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid {what}: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        try:
            return float(cleaned)
        except ValueError:
            raise ValueError(f"Invalid {what}: {value!r}") from None
    raise ValueError(f"Invalid {what}: {value!r}")


def _to_price(value: Any) -> float:
    # Blank cells are stored as "" or null; they price as 0 (unusable)
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    return _to_number(value, "price")


class DropRow(BaseModel):
    """One drop (height) band with a price per width column."""
    model_config = ConfigDict(frozen=True)

    drop: float
    prices: list[float] = []


class GridData(BaseModel):
    """
    Canonical pricing grid table.

    Invariants enforced on construction:
      • width_columns ascending, drop_rows ascending by drop
      • every row has exactly len(width_columns) prices
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    width_columns: list[float] = Field(default_factory=list, alias="widthColumns")
    drop_rows: list[DropRow] = Field(default_factory=list, alias="dropRows")
    unit: GridUnit = GridUnit.CM

    @model_validator(mode="before")
    @classmethod
    def _normalize_shape(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_grid_payload(data)
        return data

    @model_validator(mode="after")
    def _check_dimensions(self) -> "GridData":
        expected = len(self.width_columns)
        for idx, row in enumerate(self.drop_rows):
            if len(row.prices) != expected:
                raise ValueError(
                    f"Row {idx} (drop {row.drop:g}) has {len(row.prices)} prices "
                    f"but expected {expected}"
                )
        return self

    @classmethod
    def from_raw(cls, raw: Any) -> "GridData":
        """Validating factory for stored grid payloads of any known shape."""
        if isinstance(raw, GridData):
            return raw
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(f"Grid data must be an object, got {type(raw).__name__}")
        return cls.model_validate(raw)

    @property
    def is_empty(self) -> bool:
        return not self.width_columns or not self.drop_rows


# ── Shape normalization ──────────────────────────────────

def _rows_from_matrix(drops: list[Any], matrix: Any) -> list[tuple[float, list[Any]]]:
    if not isinstance(matrix, list):
        raise ValueError("Grid prices must be a 2-D list")
    rows = []
    for idx, drop in enumerate(drops):
        prices = matrix[idx] if idx < len(matrix) else []
        if not isinstance(prices, list):
            raise ValueError(f"Price row {idx} is not a list")
        rows.append((_to_number(drop, "drop"), prices))
    return rows


def _rows_from_keyed_prices(
    widths: list[float], drops: list[Any], prices: dict[str, Any]
) -> list[tuple[float, list[Any]]]:
    rows = []
    for drop in drops:
        d = _to_number(drop, "drop")
        row = []
        for w in widths:
            keys = (f"{w:g}_{d:g}", f"{w:g}-{d:g}", f"{d:g}_{w:g}")
            row.append(next((prices[k] for k in keys if k in prices), None))
        rows.append((d, row))
    return rows


MM_INFERENCE_THRESHOLD = 500


def _infer_unit(widths: list[float], rows: list[tuple[float, list[Any]]]) -> GridUnit:
    """Undeclared grids with any axis value of 500 or more were entered in mm."""
    largest = max([*widths, *(drop for drop, _ in rows)], default=0)
    return GridUnit.MM if largest >= MM_INFERENCE_THRESHOLD else GridUnit.CM


def normalize_grid_payload(data: dict[str, Any]) -> dict[str, Any]:
    """
    Convert any known stored grid shape into GridData field values.

    Accepted shapes:
      • {widthColumns, dropRows: [{drop, prices}]}        (current)
      • {widthRanges, dropRanges, prices: [[...]]}
      • {widthColumns, dropRows: [d, ...], prices: {"w_d": p}}
      • {widths, heights | drops, prices: [[...]]}
    """
    raw_widths = data.get("width_columns", data.get("widthColumns"))
    raw_rows = data.get("drop_rows", data.get("dropRows"))

    if raw_widths is not None and isinstance(raw_rows, list) and isinstance(data.get("prices"), dict):
        widths = [_to_number(w, "width") for w in raw_widths]
        rows = _rows_from_keyed_prices(widths, raw_rows, data["prices"])
    elif raw_widths is not None and isinstance(raw_rows, list):
        widths = [_to_number(w, "width") for w in raw_widths]
        rows = []
        for row in raw_rows:
            if isinstance(row, DropRow):
                rows.append((row.drop, list(row.prices)))
            elif isinstance(row, dict) and "drop" in row:
                rows.append((_to_number(row["drop"], "drop"), list(row.get("prices") or [])))
            else:
                raise ValueError(f"Unrecognised drop row: {row!r}")
    elif "widthRanges" in data and "dropRanges" in data:
        widths = [_to_number(w, "width") for w in data["widthRanges"]]
        rows = _rows_from_matrix(data["dropRanges"], data.get("prices"))
    elif "widths" in data and ("heights" in data or "drops" in data):
        widths = [_to_number(w, "width") for w in data["widths"]]
        drops = data["heights"] if "heights" in data else data["drops"]
        rows = _rows_from_matrix(drops, data.get("prices"))
    elif not data or set(data) <= {"unit", "currency", "version"}:
        widths, rows = [], []
    else:
        raise ValueError(f"Unrecognised grid data shape (keys: {sorted(data)})")

    for idx, (drop, prices) in enumerate(rows):
        if len(prices) != len(widths):
            raise ValueError(
                f"Row {idx} (drop {drop:g}) has {len(prices)} prices "
                f"but expected {len(widths)}"
            )

    declared = data.get("unit")
    unit = declared if declared in ("cm", "mm") else _infer_unit(widths, rows)

    # Sort columns and permute each row with them so prices stay aligned
    order = sorted(range(len(widths)), key=lambda i: widths[i])
    sorted_rows = sorted(rows, key=lambda r: r[0])

    return {
        "width_columns": [widths[i] for i in order],
        "drop_rows": [
            {"drop": drop, "prices": [_to_price(prices[i]) for i in order]}
            for drop, prices in sorted_rows
        ],
        "unit": unit,
    }


# ── Stored records ───────────────────────────────────────


class PriceGrid(BaseModel):
    """A named pricing grid as stored in the catalog."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str = ""
    grid_code: str = ""
    name: str = ""
    product_type: str
    system_type: Optional[str] = None
    price_group: Optional[str] = None
    supplier_id: Optional[str] = None
    grid_data: GridData = Field(default_factory=GridData)
    markup_percentage: float = 0.0
    discount_percentage: float = 0.0
    includes_fabric_price: Optional[bool] = None
    active: bool = True

    @field_validator("markup_percentage", "discount_percentage", mode="before")
    @classmethod
    def _null_percentage(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("grid_data", mode="before")
    @classmethod
    def _coerce_grid_data(cls, v: Any) -> Any:
        return GridData.from_raw(v)


class GridRule(BaseModel):
    """Legacy explicit routing rule: (type, system, group, options) → grid."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str = ""
    product_type: str
    system_type: Optional[str] = None
    price_group: Optional[str] = None
    option_conditions: Optional[dict[str, Any]] = None
    grid_id: str
    priority: int = 0
    active: bool = True

    def applies_to(
        self,
        system_type: str | None,
        selected_options: dict[str, Any] | None,
    ) -> bool:
        """System type is only enforced when the rule names one; same for options."""
        if self.system_type and self.system_type != system_type:
            return False
        if self.option_conditions:
            options = selected_options or {}
            for key, value in self.option_conditions.items():
                if options.get(key) != value:
                    return False
        return True
