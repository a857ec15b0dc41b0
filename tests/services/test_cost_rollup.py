"""
Tests for line totals and the Total B / Total C / grand total roll-up.
"""

from decimal import Decimal

import pytest

from app.schemas.line_items import PartAndConsumable, PartsAndConsumables, Lubricant, LubricantsUsed
from app.services import cost_rollup


class TestMoney:

    def test_to_decimal(self):
        assert cost_rollup.to_decimal("12.50") == Decimal("12.50")
        assert cost_rollup.to_decimal(3) == Decimal("3")
        assert cost_rollup.to_decimal("  ") is None
        assert cost_rollup.to_decimal(None) is None

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
    def test_to_decimal_rejects(self, value):
        with pytest.raises(ValueError):
            cost_rollup.to_decimal(value)

    def test_quantize_rounds_half_up(self):
        assert cost_rollup.quantize("2.345") == Decimal("2.35")
        assert cost_rollup.quantize(None) == Decimal("0.00")

    def test_format_money(self):
        assert cost_rollup.format_money(90) == "90.00"
        assert cost_rollup.format_money("") == "0.00"

    def test_quantize_too_large(self):
        with pytest.raises(ValueError, match="too large"):
            cost_rollup.quantize("1e30")
        with pytest.raises(ValueError, match="too large"):
            cost_rollup.line_total(Decimal("1e20"), Decimal("1e10"))


class TestLineTotals:

    def test_line_total(self):
        assert cost_rollup.line_total(12.50, 3) == Decimal("37.50")

    def test_missing_factor_gives_null(self):
        assert cost_rollup.line_total(None, 3) is None
        assert cost_rollup.line_total(12.5, None) is None
        assert cost_rollup.line_total(-1, 3) is None

    def test_binary_float_inputs(self):
        assert cost_rollup.line_total(0.1, 3) == Decimal("0.30")

    def test_null_lines_add_nothing(self):
        parts = cost_rollup.recompute_parts(
            PartsAndConsumables(parts=[
                PartAndConsumable(price=12.5, qty_used=3),
                PartAndConsumable(price=7),
            ])
        )
        assert parts.parts[0].total_cost == 37.5
        assert parts.parts[1].total_cost is None
        assert parts.total_b == 37.5

    def test_stale_totals_are_overwritten(self):
        stale = PartsAndConsumables(
            parts=[PartAndConsumable(price=2, qty_used=2, total_cost=999)], total_b=999
        )
        parts = cost_rollup.recompute_parts(stale)
        assert parts.parts[0].total_cost == 4
        assert parts.total_b == 4

    def test_lubricant_line_total(self):
        lubricants = cost_rollup.recompute_lubricants(
            LubricantsUsed(lubricants=[Lubricant(name="Engine Oil", qty=4, cost_per_litre=5)])
        )
        assert lubricants.lubricants[0].total_cost == 20
        assert lubricants.total_c == 20


class TestRowEditing:

    def test_update_part_field_recomputes(self):
        parts = cost_rollup.add_part(None)
        parts = cost_rollup.update_part_field(parts, 0, "price", "10")
        assert parts.parts[0].total_cost is None

        parts = cost_rollup.update_part_field(parts, 0, "qty_used", "2")
        assert parts.parts[0].total_cost == 20
        assert parts.total_b == 20

        parts = cost_rollup.update_part_field(parts, 0, "qty_used", "")
        assert parts.total_b == 0

    def test_update_part_rejects_derived_field(self):
        parts = cost_rollup.add_part(None)
        with pytest.raises(ValueError):
            cost_rollup.update_part_field(parts, 0, "total_cost", 5)
        with pytest.raises(IndexError):
            cost_rollup.update_part_field(parts, 1, "price", 5)

    def test_remove_part(self):
        parts = cost_rollup.add_part(cost_rollup.add_part(None))
        parts = cost_rollup.update_part_field(parts, 1, "price", 1)
        parts = cost_rollup.remove_part(parts, 0)
        assert len(parts.parts) == 1
        assert parts.parts[0].price == 1

    def test_default_lubricants(self):
        lubricants = cost_rollup.default_lubricants()
        assert len(lubricants.lubricants) == 10
        assert all(lub.qty is None for lub in lubricants.lubricants)

    def test_lubricant_rows(self):
        lubricants = cost_rollup.default_lubricants()
        lubricants = cost_rollup.update_lubricant_field(lubricants, 0, "qty", "4")
        lubricants = cost_rollup.update_lubricant_field(lubricants, 0, "cost_per_litre", "5.5")
        assert lubricants.total_c == 22

        lubricants = cost_rollup.add_lubricant(lubricants)
        assert len(lubricants.lubricants) == 11
        lubricants = cost_rollup.remove_lubricant(lubricants, 0)
        assert lubricants.total_c == 0


class TestGrandTotal:

    def test_rollup(self):
        parts = PartsAndConsumables(parts=[PartAndConsumable(price=10, qty_used=2)])
        lubricants = LubricantsUsed(lubricants=[Lubricant(cost_per_litre=5, qty=4)])

        parts, lubricants, total = cost_rollup.rollup("50.00", parts, lubricants)
        assert parts.total_b == 20
        assert lubricants.total_c == 20
        assert total == Decimal("90.00")

    def test_rollup_is_idempotent(self):
        parts = PartsAndConsumables(parts=[PartAndConsumable(price=12.5, qty_used=3)])
        first = cost_rollup.rollup(1, parts, None)
        second = cost_rollup.rollup(1, first[0], first[1])
        assert first == second

    def test_missing_documents_count_as_zero(self):
        assert cost_rollup.grand_total(None, None, None) == Decimal("0.00")
        assert cost_rollup.grand_total("12.3", None, None) == Decimal("12.30")

    def test_grand_total_must_fit_storage(self):
        parts = PartsAndConsumables(parts=[PartAndConsumable(price=9_000_000_000, qty_used=2)])
        with pytest.raises(ValueError, match="Grand total"):
            cost_rollup.rollup(0, parts, None)

    def test_line_values_are_bounded(self):
        with pytest.raises(ValueError):
            PartAndConsumable(price=1e20, qty_used=1)
        with pytest.raises(ValueError):
            Lubricant(cost_per_litre=1, qty=1e11)
