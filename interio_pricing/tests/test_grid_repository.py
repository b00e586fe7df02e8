"""
Tests: MongoDB-backed grid repository against a fake collection.

Run with:
    pytest interio_pricing/tests/test_grid_repository.py -v
"""

import pytest

from interio_pricing.config import get_settings
from interio_pricing.persistence import mongo_client
from interio_pricing.persistence.grid_repository import MongoGridRepository, get_grid_repository
from interio_pricing.services.auto_matcher import GridAutoMatcher, get_default_mapping_store
from interio_pricing.services.grid_resolver import get_available_price_groups, resolve_grid_for_product

USER = "user-1"
TABLE = {"widthColumns": [100], "dropRows": [{"drop": 100, "prices": [40]}]}


class FakeCursor(list):
    def sort(self, key, direction):
        return FakeCursor(sorted(self, key=lambda d: d.get(key) or 0, reverse=direction < 0))


class FakeCollection:
    """Just enough of pymongo's Collection for equality and $in queries."""

    def __init__(self, docs):
        self.docs = docs
        self.queries = []

    @staticmethod
    def _matches(doc, query):
        for key, expected in query.items():
            if isinstance(expected, dict) and "$in" in expected:
                if doc.get(key) not in expected["$in"]:
                    return False
            elif doc.get(key, True if key == "active" else None) != expected:
                return False
        return True

    def find(self, query):
        self.queries.append(query)
        return FakeCursor(d for d in self.docs if self._matches(d, query))

    def find_one(self, query):
        return next((d for d in self.docs if self._matches(d, query)), None)

    def distinct(self, field, query):
        return list({d.get(field) for d in self.docs if self._matches(d, query)})


def _repo(grids=(), rules=()) -> MongoGridRepository:
    db = {
        "pricing_grids": FakeCollection(list(grids)),
        "pricing_grid_rules": FakeCollection(list(rules)),
    }
    return MongoGridRepository(db)


def _doc(object_id, code, **extra):
    doc = {
        "_id": object_id, "user_id": USER, "grid_code": code,
        "product_type": "roller_blinds", "price_group": "A", "grid_data": TABLE,
    }
    doc.update(extra)
    return doc


class TestMongoGridRepository:
    def test_object_id_becomes_id(self):
        grids = _repo([_doc(101, "RB-A")]).find_grids(USER, ["roller_blinds"])
        assert [g.id for g in grids] == ["101"]

    def test_supplier_filter_in_query(self):
        repo = _repo([_doc(1, "X", supplier_id="s"), _doc(2, "Y", supplier_id="t")])
        grids = repo.find_grids(USER, ["roller_blinds", "blinds"], supplier_id="s")
        assert [g.grid_code for g in grids] == ["X"]
        assert repo.database["pricing_grids"].queries[-1]["product_type"] == {"$in": ["roller_blinds", "blinds"]}

    def test_malformed_grid_skipped(self, caplog):
        bad = _doc(2, "BAD", grid_data={"widthColumns": [1, 2], "dropRows": [{"drop": 1, "prices": [1]}]})
        grids = _repo([_doc(1, "GOOD"), bad]).find_grids(USER, ["roller_blinds"])
        assert [g.grid_code for g in grids] == ["GOOD"]
        assert "Skipping malformed pricing grid BAD" in caplog.text

    def test_rules_sorted_by_priority(self):
        rules = [
            {"_id": "r1", "user_id": USER, "product_type": "roller_blinds", "price_group": "A",
             "grid_id": "1", "priority": 1},
            {"_id": "r2", "user_id": USER, "product_type": "roller_blinds", "price_group": "A",
             "grid_id": "2", "priority": 7},
        ]
        found = _repo(rules=rules).find_rules(USER, "roller_blinds", "A")
        assert [r.id for r in found] == ["r2", "r1"]

    def test_get_grid(self):
        repo = _repo([_doc(1, "RB-A", id="g1")])
        assert repo.get_grid("g1", USER).grid_code == "RB-A"
        assert repo.get_grid("g1", "someone-else") is None

    def test_price_groups_distinct_sorted(self):
        repo = _repo([_doc(1, "X", price_group="B"), _doc(2, "Y"), _doc(3, "Z"), _doc(4, "W", price_group=None)])
        assert repo.list_price_groups(USER, "roller_blinds") == ["A", "B"]


class CountingPyMongo:
    """Stands in for pymongo.MongoClient and counts connections."""

    created = 0

    def __init__(self, uri):
        type(self).created += 1
        self.uri = uri

    def __getitem__(self, name):
        return {
            "pricing_grids": FakeCollection([_doc(1, "RB-A"), _doc(2, "RB-B", price_group="B")]),
            "pricing_grid_rules": FakeCollection([]),
            "treatment_grid_mappings": FakeCollection([]),
        }

    def close(self):
        pass


def _clear_caches():
    get_settings.cache_clear()
    get_grid_repository.cache_clear()
    get_default_mapping_store.cache_clear()


@pytest.fixture
def live_store(monkeypatch):
    monkeypatch.setenv("INTERIO_MOCK_MODE", "false")
    monkeypatch.setattr(mongo_client, "PyMongoClient", CountingPyMongo)
    CountingPyMongo.created = 0
    _clear_caches()
    yield
    _clear_caches()


class TestConfiguredRepository:
    def test_one_client_per_process(self, live_store):
        for _ in range(3):
            assert get_available_price_groups("roller_blinds", USER) == ["A", "B"]
        assert CountingPyMongo.created == 1

    def test_repository_shared(self, live_store):
        assert get_grid_repository() is get_grid_repository()
        assert isinstance(get_grid_repository(), MongoGridRepository)

    def test_mapping_store_loaded_once(self, live_store):
        for _ in range(3):
            assert resolve_grid_for_product("roller_blinds", USER, fabric_price_group="Z").grid_id is None
        mappings = get_grid_repository().database["treatment_grid_mappings"]
        assert len(mappings.queries) == 1
        assert GridAutoMatcher().mapping_store is get_default_mapping_store()

    def test_resolves_through_shared_client(self, live_store):
        result = resolve_grid_for_product("roller_blinds", USER, fabric_price_group="Group B")
        assert result.grid_code == "RB-B"
        assert CountingPyMongo.created == 1
