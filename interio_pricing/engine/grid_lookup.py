"""
Grid Price Lookup — nearest-neighbour price for a (width, drop) pair.

Grids represent discrete supplier price bands, so there is no
interpolation: the closest column and the closest row are used as-is.
On equal distances the first candidate in ascending stored order wins.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pydantic import ValidationError

from interio_pricing.models.enums import GridUnit
from interio_pricing.models.grid import GridData
from interio_pricing.utils.units import cm_to_mm

logger = logging.getLogger(__name__)


def _nearest_index(values: Sequence[float], target: float) -> int:
    best_idx = 0
    best_distance = abs(values[0] - target)
    for idx in range(1, len(values)):
        distance = abs(values[idx] - target)
        if distance < best_distance:
            best_idx = idx
            best_distance = distance
    return best_idx


def get_price_from_grid(grid_data: GridData | dict[str, Any] | None, width_cm: float, drop_cm: float) -> float:
    """
    Price at the grid cell nearest to (width_cm, drop_cm).

    Returns 0 for an empty or malformed grid; real prices are always
    positive, so callers treat 0 as "no usable price".
    """
    try:
        grid = GridData.from_raw(grid_data)
    except (ValueError, ValidationError) as e:
        logger.debug(f"Unusable grid data, pricing as 0: {e}")
        return 0.0

    if grid.is_empty:
        return 0.0

    width, drop = width_cm, drop_cm
    if grid.unit == GridUnit.MM:
        width, drop = cm_to_mm(width_cm), cm_to_mm(drop_cm)

    col = _nearest_index(grid.width_columns, width)
    row = grid.drop_rows[_nearest_index([r.drop for r in grid.drop_rows], drop)]
    price = row.prices[col]

    logger.debug(
        f"Grid lookup {width_cm:g}×{drop_cm:g}cm → column "
        f"{grid.width_columns[col]:g}, row {row.drop:g} = {price}"
    )
    return price
