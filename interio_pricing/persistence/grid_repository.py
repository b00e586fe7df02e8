"""
Grid Repository — read access to pricing grids and legacy grid rules.

GridRepository keeps records in memory (mock mode and tests);
MongoGridRepository reads the same shapes from MongoDB. Both only
return records belonging to the given owner scope (user_id), which the
caller always passes explicitly.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable

from pydantic import ValidationError

from interio_pricing.config import get_settings
from interio_pricing.models.grid import GridRule, PriceGrid
from interio_pricing.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)


class GridRepository:
    """
    In-memory grid and rule store.
    Records are validated on insert; malformed grid tables are rejected.
    """

    def __init__(
        self,
        grids: Iterable[PriceGrid | dict[str, Any]] = (),
        rules: Iterable[GridRule | dict[str, Any]] = (),
    ):
        self._grids: dict[str, PriceGrid] = {}
        self._rules: dict[str, GridRule] = {}
        for grid in grids:
            self.add_grid(grid)
        for rule in rules:
            self.add_rule(rule)

    @property
    def database(self) -> Any:
        """Underlying database handle, if any (None in memory)."""
        return None

    # ── Writes (fixtures / mock mode only) ───────────────

    def add_grid(self, grid: PriceGrid | dict[str, Any]) -> PriceGrid:
        record = grid if isinstance(grid, PriceGrid) else PriceGrid.model_validate(grid)
        self._grids[record.id] = record
        return record

    def add_rule(self, rule: GridRule | dict[str, Any]) -> GridRule:
        record = rule if isinstance(rule, GridRule) else GridRule.model_validate(rule)
        self._rules[record.id] = record
        return record

    # ── Reads ────────────────────────────────────────────

    def find_grids(
        self,
        user_id: str,
        product_types: list[str],
        supplier_id: str | None = None,
    ) -> list[PriceGrid]:
        """Active grids of any of the product types, optionally for one supplier."""
        return [
            g for g in self._grids.values()
            if g.user_id == user_id
            and g.active
            and g.product_type in product_types
            and (supplier_id is None or g.supplier_id == supplier_id)
        ]

    def get_grid(self, grid_id: str, user_id: str) -> PriceGrid | None:
        grid = self._grids.get(grid_id)
        if grid is None or grid.user_id != user_id:
            return None
        return grid

    def find_rules(self, user_id: str, product_type: str, price_group: str) -> list[GridRule]:
        """Active legacy rules for the exact type and group, highest priority first."""
        rules = [
            r for r in self._rules.values()
            if r.user_id == user_id
            and r.active
            and r.product_type == product_type
            and r.price_group == price_group
        ]
        return sorted(rules, key=lambda r: r.priority, reverse=True)

    def list_grids(self, user_id: str, active_only: bool = True) -> list[PriceGrid]:
        return [
            g for g in self._grids.values()
            if g.user_id == user_id and (g.active or not active_only)
        ]

    def list_price_groups(self, user_id: str, product_type: str) -> list[str]:
        groups = {
            g.price_group for g in self.find_grids(user_id, [product_type])
            if g.price_group
        }
        return sorted(groups)


class MongoGridRepository(GridRepository):
    """Reads pricing_grids / pricing_grid_rules collections from MongoDB."""

    def __init__(self, db: Any):
        super().__init__()
        self.settings = get_settings()
        self._db = db

    @property
    def database(self) -> Any:
        return self._db

    @property
    def _grid_collection(self):
        return self._db[self.settings.grids_collection]

    @property
    def _rule_collection(self):
        return self._db[self.settings.rules_collection]

    @staticmethod
    def _with_id(doc: dict[str, Any]) -> dict[str, Any]:
        record = dict(doc)
        object_id = record.pop("_id", None)
        if "id" not in record and object_id is not None:
            record["id"] = str(object_id)
        return record

    def _to_grids(self, docs: Iterable[dict[str, Any]]) -> list[PriceGrid]:
        grids = []
        for doc in docs:
            try:
                grids.append(PriceGrid.model_validate(self._with_id(doc)))
            except ValidationError as e:
                logger.warning(f"Skipping malformed pricing grid {doc.get('grid_code', doc.get('_id'))}: {e}")
        return grids

    def find_grids(
        self,
        user_id: str,
        product_types: list[str],
        supplier_id: str | None = None,
    ) -> list[PriceGrid]:
        query: dict[str, Any] = {
            "user_id": user_id,
            "active": True,
            "product_type": {"$in": list(product_types)},
        }
        if supplier_id is not None:
            query["supplier_id"] = supplier_id
        return self._to_grids(self._grid_collection.find(query).sort("grid_code", 1))

    def get_grid(self, grid_id: str, user_id: str) -> PriceGrid | None:
        doc = self._grid_collection.find_one({"id": grid_id, "user_id": user_id})
        grids = self._to_grids([doc]) if doc else []
        return grids[0] if grids else None

    def find_rules(self, user_id: str, product_type: str, price_group: str) -> list[GridRule]:
        cursor = self._rule_collection.find({
            "user_id": user_id,
            "active": True,
            "product_type": product_type,
            "price_group": price_group,
        }).sort("priority", -1)
        return [GridRule.model_validate(self._with_id(doc)) for doc in cursor]

    def list_grids(self, user_id: str, active_only: bool = True) -> list[PriceGrid]:
        query: dict[str, Any] = {"user_id": user_id}
        if active_only:
            query["active"] = True
        return self._to_grids(self._grid_collection.find(query).sort("grid_code", 1))

    def list_price_groups(self, user_id: str, product_type: str) -> list[str]:
        groups = self._grid_collection.distinct(
            "price_group",
            {"user_id": user_id, "active": True, "product_type": product_type},
        )
        return sorted(g for g in groups if g)


@lru_cache()
def get_grid_repository() -> GridRepository:
    """
    In-memory repository in mock mode, MongoDB otherwise.
    One instance (and one pymongo connection pool) per process.
    """
    settings = get_settings()
    if settings.mock_mode:
        logger.info("[MOCK] Using in-memory grid repository")
        return GridRepository()

    client = MongoClient()
    return MongoGridRepository(client.get_database())
