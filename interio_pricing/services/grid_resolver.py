"""
Grid Resolver — finds the pricing grid for a product configuration.

Step 1 asks the auto-matcher; any hit wins outright and is reported as
a synthetic rule with the configured auto-match priority. Step 2 falls
back to legacy routing rules (exact product type + price group,
optional system type and option conditions, highest priority first).

A miss is not an error: grid_id is None and the caller decides how to
price without a grid.
"""

from __future__ import annotations

import logging
from typing import Any

from interio_pricing.config import get_settings
from interio_pricing.models.enums import MatchType
from interio_pricing.models.grid import GridRule
from interio_pricing.models.schemas import AutoMatchResult, GridResolutionResult
from interio_pricing.persistence.grid_repository import GridRepository, get_grid_repository

from .auto_matcher import GridAutoMatcher

logger = logging.getLogger(__name__)

AUTO_MATCH_RULE_ID = "auto-match"


class GridResolver:
    """Auto-match first, legacy rules second."""

    def __init__(
        self,
        repository: GridRepository | None = None,
        auto_matcher: GridAutoMatcher | None = None,
    ):
        self.settings = get_settings()
        self.repository = repository if repository is not None else get_grid_repository()
        self.auto_matcher = auto_matcher or GridAutoMatcher(repository)

    def resolve(
        self,
        product_type: str,
        user_id: str,
        system_type: str | None = None,
        fabric_price_group: str | None = None,
        fabric_supplier_id: str | None = None,
        selected_options: dict[str, Any] | None = None,
    ) -> GridResolutionResult:
        if not fabric_price_group or not fabric_price_group.strip():
            return GridResolutionResult(match_details="No price group; nothing to resolve")

        # ── Step 1: auto-match ───────────────────────────
        match = self.auto_matcher.auto_match(
            product_type=product_type,
            price_group=fabric_price_group,
            user_id=user_id,
            supplier_id=fabric_supplier_id,
        )
        if match.match_type is not MatchType.NONE:
            return self._from_auto_match(match, product_type, system_type)

        # ── Step 2: legacy rules ─────────────────────────
        return self._resolve_legacy(
            product_type, user_id, system_type, fabric_price_group, selected_options
        )

    def _from_auto_match(
        self, match: AutoMatchResult, product_type: str, system_type: str | None
    ) -> GridResolutionResult:
        rule = GridRule(
            id=AUTO_MATCH_RULE_ID,
            product_type=product_type,
            system_type=system_type,
            price_group=match.price_group,
            grid_id=match.grid_id or "",
            priority=self.settings.auto_match_priority,
        )
        return GridResolutionResult(
            grid_id=match.grid_id,
            grid_code=match.grid_code,
            grid_name=match.grid_name,
            grid_data=match.grid_data,
            markup_percentage=match.markup_percentage,
            discount_percentage=match.discount_percentage,
            includes_fabric_price=match.includes_fabric_price,
            matched_rule=rule,
            match_type=match.match_type,
            match_details=f"Matched via Auto-Match ({match.match_details})",
        )

    def _resolve_legacy(
        self,
        product_type: str,
        user_id: str,
        system_type: str | None,
        price_group: str,
        selected_options: dict[str, Any] | None,
    ) -> GridResolutionResult:
        try:
            rules = self.repository.find_rules(user_id, product_type, price_group)
            for rule in rules:
                if not rule.applies_to(system_type, selected_options):
                    logger.debug(f"Legacy rule {rule.id} skipped: system type / options differ")
                    continue
                grid = self.repository.get_grid(rule.grid_id, user_id)
                if grid is None or not grid.active:
                    logger.debug(f"Legacy rule {rule.id} points at missing/inactive grid {rule.grid_id}")
                    continue

                logger.info(
                    f"[RESOLVER] Legacy rule {rule.id} (priority {rule.priority}) → {grid.grid_code}"
                )
                return GridResolutionResult(
                    grid_id=grid.id,
                    grid_code=grid.grid_code,
                    grid_name=grid.name,
                    grid_data=grid.grid_data,
                    markup_percentage=grid.markup_percentage,
                    discount_percentage=grid.discount_percentage,
                    includes_fabric_price=(
                        True if grid.includes_fabric_price is None else grid.includes_fabric_price
                    ),
                    matched_rule=rule,
                    match_details=f"Matched via Legacy Rule {rule.id} (priority {rule.priority})",
                )
        except Exception as e:
            logger.warning(
                f"Legacy rule lookup failed for {product_type} / '{price_group}', "
                f"treating as no match: {e}"
            )
            return GridResolutionResult(match_details=f"Grid lookup failed: {e}")

        logger.info(f"[RESOLVER] No grid for {product_type} / '{price_group}'")
        return GridResolutionResult(
            match_details=f"No auto-match or legacy rule for {product_type} price group '{price_group}'"
        )

    # ── Convenience ──────────────────────────────────────

    def get_available_price_groups(self, product_type: str, user_id: str) -> list[str]:
        try:
            return self.repository.list_price_groups(user_id, product_type)
        except Exception as e:
            logger.warning(f"Could not list price groups for {product_type}: {e}")
            return []

    def has_matching_grid(self, product_type: str, user_id: str, **params: Any) -> bool:
        return self.resolve(product_type, user_id, **params).grid_id is not None

    def has_valid_pricing_grid(self, product_type: str, user_id: str, **params: Any) -> bool:
        """A grid resolves and its table has at least one column and one row."""
        result = self.resolve(product_type, user_id, **params)
        return (
            result.grid_id is not None
            and result.grid_data is not None
            and not result.grid_data.is_empty
        )


# ── Module-level API ─────────────────────────────────────


def resolve_grid_for_product(
    product_type: str,
    user_id: str,
    system_type: str | None = None,
    fabric_price_group: str | None = None,
    fabric_supplier_id: str | None = None,
    selected_options: dict[str, Any] | None = None,
    repository: GridRepository | None = None,
) -> GridResolutionResult:
    return GridResolver(repository).resolve(
        product_type=product_type,
        user_id=user_id,
        system_type=system_type,
        fabric_price_group=fabric_price_group,
        fabric_supplier_id=fabric_supplier_id,
        selected_options=selected_options,
    )


def get_available_price_groups(
    product_type: str, user_id: str, repository: GridRepository | None = None
) -> list[str]:
    return GridResolver(repository).get_available_price_groups(product_type, user_id)


def has_matching_grid(
    product_type: str, user_id: str, repository: GridRepository | None = None, **params: Any
) -> bool:
    return GridResolver(repository).has_matching_grid(product_type, user_id, **params)


def has_valid_pricing_grid(
    product_type: str, user_id: str, repository: GridRepository | None = None, **params: Any
) -> bool:
    return GridResolver(repository).has_valid_pricing_grid(product_type, user_id, **params)
