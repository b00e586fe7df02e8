"""
Grid Auto-Matcher — picks a pricing grid from (supplier, product type,
price group) without explicit routing rules.

Price-group labels are typed by people and are inconsistent ("A",
"Group A", "AUTO-A", "2", "GROUP2"). Labels are compared in four tiers,
strictest first:

  1. exact          normalized labels equal
  2. stripped       equal after removing GROUP/AUTO/... prefixes
  3. suffix         grid label ends with "-<requested suffix>"
  4. numeric        the digits in both labels are equal

Grids are searched in three widening scopes (supplier + type, type,
compatible types); the first scope with any tier hit wins.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterator, NamedTuple, Optional

from interio_pricing.engine.treatment_mapping import TreatmentMappingStore
from interio_pricing.models.enums import MatchTier, MatchType
from interio_pricing.models.grid import PriceGrid
from interio_pricing.models.schemas import AutoMatchResult
from interio_pricing.persistence.grid_repository import GridRepository, get_grid_repository

logger = logging.getLogger(__name__)

_GROUP_PREFIX = re.compile(r"^(GROUP|AUTO|STRAIGHT|ZIP|FOLDING|EXTERNAL)[\s\-_]*")
_NON_DIGITS = re.compile(r"\D")


# ── Price group normalization ────────────────────────────


def normalize_price_group(value: str | None) -> str:
    return (value or "").strip().upper()


def strip_group_prefix(group: str) -> str:
    """'GROUP-A' → 'A', 'AUTO GROUP 2' → '2'. Expects a normalized label."""
    previous = None
    while previous != group:
        previous = group
        group = _GROUP_PREFIX.sub("", group, count=1)
    return group


class PriceGroupForms(NamedTuple):
    normalized: str
    stripped: str
    suffix: str
    digits: str

    @classmethod
    def of(cls, value: str | None) -> "PriceGroupForms":
        normalized = normalize_price_group(value)
        return cls(
            normalized=normalized,
            stripped=strip_group_prefix(normalized),
            suffix=normalized.rsplit("-", 1)[-1],
            digits=_NON_DIGITS.sub("", normalized),
        )


def _tier_matches(tier: MatchTier, requested: PriceGroupForms, grid_group: PriceGroupForms) -> bool:
    if tier is MatchTier.EXACT:
        return bool(requested.normalized) and requested.normalized == grid_group.normalized
    if tier is MatchTier.STRIPPED_PREFIX:
        return bool(requested.stripped) and requested.stripped == grid_group.stripped
    if tier is MatchTier.SUFFIX:
        suffix = requested.suffix
        return bool(suffix) and (
            grid_group.normalized == suffix or grid_group.normalized.endswith(f"-{suffix}")
        )
    return bool(requested.digits) and requested.digits == grid_group.digits


def select_best_grid(
    grids: list[PriceGrid], price_group: str
) -> Optional[tuple[PriceGrid, MatchTier]]:
    """First grid matching at the strictest tier, scanning in stored order."""
    requested = PriceGroupForms.of(price_group)
    candidates = [(g, PriceGroupForms.of(g.price_group)) for g in grids if g.price_group]
    for tier in MatchTier:
        for grid, forms in candidates:
            if _tier_matches(tier, requested, forms):
                logger.debug(
                    f"Price group '{price_group}' matched grid {grid.grid_code} "
                    f"('{grid.price_group}') at tier {tier.value}"
                )
                return grid, tier
    return None


# ── Matcher ──────────────────────────────────────────────


@lru_cache()
def get_default_mapping_store() -> TreatmentMappingStore:
    """Mapping store over the configured repository, shared for the process."""
    return TreatmentMappingStore(db=get_grid_repository().database)


class GridAutoMatcher:
    """
    Supplier/product-type/price-group grid matching.

    Usage:
        matcher = GridAutoMatcher(repository)
        result = matcher.auto_match(
            product_type="roller_blinds", price_group="GROUP-2",
            user_id=user_id, supplier_id=supplier_id,
        )
    """

    def __init__(
        self,
        repository: GridRepository | None = None,
        mapping_store: TreatmentMappingStore | None = None,
    ):
        if repository is None:
            self.repository = get_grid_repository()
            self.mapping_store = mapping_store or get_default_mapping_store()
        else:
            self.repository = repository
            self.mapping_store = mapping_store or TreatmentMappingStore(db=repository.database)

    def _scopes(
        self, product_type: str, supplier_id: str | None
    ) -> Iterator[tuple[MatchType, list[str], str | None]]:
        if supplier_id:
            yield MatchType.EXACT, [product_type], supplier_id
        yield MatchType.FALLBACK, [product_type], None
        # Resolved lazily: only needed when the narrower scopes miss
        compatible = self.mapping_store.get_compatible_product_types(product_type)
        if set(compatible) - {product_type}:
            yield MatchType.FLEXIBLE, compatible, None

    def _fetch(
        self, user_id: str, product_types: list[str], supplier_id: str | None
    ) -> list[PriceGrid]:
        try:
            return self.repository.find_grids(user_id, product_types, supplier_id)
        except Exception as e:
            logger.warning(
                f"Grid lookup failed for {product_types} (supplier={supplier_id}), "
                f"treating as no match: {e}"
            )
            return []

    def auto_match(
        self,
        product_type: str,
        price_group: str | None = None,
        user_id: str = "",
        supplier_id: str | None = None,
    ) -> AutoMatchResult:
        if not price_group or not price_group.strip():
            return AutoMatchResult(match_details="No price group given; auto-match not possible")

        for match_type, product_types, scope_supplier in self._scopes(product_type, supplier_id):
            grids = self._fetch(user_id, product_types, scope_supplier)
            hit = select_best_grid(grids, price_group)
            if hit is None:
                logger.debug(f"No {match_type.value} match among {len(grids)} grids")
                continue

            grid, tier = hit
            details = (
                f"{match_type.value} match: '{price_group}' → {grid.grid_code} "
                f"('{grid.price_group}', {grid.product_type}) via {tier.value} tier"
            )
            logger.info(f"[AUTO-MATCH] {details}")
            return AutoMatchResult(
                grid_id=grid.id,
                grid_code=grid.grid_code,
                grid_name=grid.name,
                grid_data=grid.grid_data,
                price_group=grid.price_group,
                supplier_id=grid.supplier_id,
                markup_percentage=grid.markup_percentage,
                discount_percentage=grid.discount_percentage,
                # Unless a grid says fabric is excluded, assume it is priced in
                includes_fabric_price=(
                    True if grid.includes_fabric_price is None else grid.includes_fabric_price
                ),
                match_type=match_type,
                match_tier=tier,
                match_details=details,
            )

        logger.info(
            f"[AUTO-MATCH] No grid for {product_type} / '{price_group}' "
            f"(supplier={supplier_id})"
        )
        return AutoMatchResult(
            match_details=f"No active grid matches {product_type} price group '{price_group}'"
        )


def auto_match_pricing_grid(
    product_type: str,
    price_group: str | None = None,
    user_id: str = "",
    supplier_id: str | None = None,
    repository: GridRepository | None = None,
) -> AutoMatchResult:
    """Convenience wrapper around GridAutoMatcher.auto_match()."""
    return GridAutoMatcher(repository).auto_match(
        product_type=product_type,
        price_group=price_group,
        user_id=user_id,
        supplier_id=supplier_id,
    )
