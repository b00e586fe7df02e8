"""
Tests: grid resolution diagnostic messages.

Run with:
    pytest interio_pricing/tests/test_grid_diagnostic.py -v
"""

from interio_pricing.persistence.grid_repository import GridRepository
from interio_pricing.services.grid_diagnostic import diagnose_grid_resolution
from interio_pricing.services.grid_resolver import GridResolver

USER = "user-1"


def _grid(grid_id: str, product_type: str, price_group: str, supplier_id: str = "t") -> dict:
    return {
        "id": grid_id,
        "user_id": USER,
        "grid_code": grid_id.upper(),
        "product_type": product_type,
        "price_group": price_group,
        "supplier_id": supplier_id,
        "grid_data": {"widthColumns": [100], "dropRows": [{"drop": 100, "prices": [40]}]},
    }


def _diagnose(grids, price_group, product_type="roller_blinds", supplier_id=None):
    return diagnose_grid_resolution(
        product_type=product_type,
        price_group=price_group,
        user_id=USER,
        supplier_id=supplier_id,
        resolver=GridResolver(GridRepository(grids=grids)),
    )


class TestDiagnostic:
    def test_success(self):
        result = _diagnose([_grid("rb-a", "roller_blinds", "A")], "Group A")
        assert result.success is True
        assert result.grid_code == "RB-A"
        assert result.possible_issues == []
        assert result.available_grid_count == 1
        assert result.search_params["price_group"] == "Group A"

    def test_no_grids_for_product_type(self):
        result = _diagnose([_grid("c", "curtains", "A")], "A")
        assert result.success is False
        assert result.possible_issues == ['No grids exist for product type "roller_blinds"']

    def test_no_grids_with_price_group(self):
        result = _diagnose([_grid("rb", "roller_blinds", "B")], "Z")
        assert result.possible_issues == ['No grids exist with price group "Z"']

    def test_no_grids_for_supplier(self):
        grids = [_grid("rb", "roller_blinds", "B"), _grid("c", "curtains", "Z")]
        result = _diagnose(grids, "Z", supplier_id="s")
        assert result.possible_issues == ['No grids exist for supplier "s"']

    def test_no_exact_combination(self):
        grids = [_grid("rb", "roller_blinds", "B"), _grid("c", "curtains", "Z")]
        result = _diagnose(grids, "Z")
        assert result.possible_issues == [
            "No grid matches the exact combination of supplier + product type + price group",
            "Found 2 grids with partial matches",
        ]

    def test_store_error_reported(self):
        class Broken(GridRepository):
            def list_grids(self, user_id, active_only=True):
                raise ConnectionError("down")

        result = diagnose_grid_resolution(
            "roller_blinds", "A", USER, resolver=GridResolver(Broken()),
        )
        assert result.success is False
        assert result.possible_issues == ["Error: down"]
