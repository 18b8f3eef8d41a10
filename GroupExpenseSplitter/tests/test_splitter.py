"""
Tests for the balance calculator and split builders.

Checked properties:
1. One entry per member, in member order
2. Payer credited with the declared total, split members debited
3. Settlements reduce debts and credits
4. Zero-sum of balances
5. Half-up rounding to cents
6. Non-finite amounts are rejected
"""

import math

import pytest

from models import Expense, ExpenseSplit, Member, Settlement
from splitter import build_custom_splits, build_equal_splits, calculate_balances


def _members(*names):
    return [Member(member_id=name, name=f"Member {name}") for name in names]


def _expense(expense_id, payer, amount, splits):
    return Expense(
        expense_id=expense_id,
        group_id="G1",
        paid_by_id=payer,
        amount=amount,
        splits=[ExpenseSplit(member_id=m, amount=a) for m, a in splits]
    )


def _settlement(from_id, to_id, amount):
    return Settlement(settlement_id=None, group_id="G1", from_id=from_id, to_id=to_id, amount=amount)


def _as_map(balances):
    return {b.member_id: b.balance for b in balances}


# =============================================================================
# calculate_balances
# =============================================================================


class TestCalculateBalances:
    """Net balances from expenses and settlements."""

    def test_equal_three_way_expense(self):
        members = _members("A", "B", "C")
        expenses = [_expense("E1", "A", 90, [("A", 30), ("B", 30), ("C", 30)])]

        balances = calculate_balances(members, expenses, [])

        assert _as_map(balances) == {"A": 60.0, "B": -30.0, "C": -30.0}

    def test_settlement_clears_debt(self):
        members = _members("A", "B")
        expenses = [_expense("E1", "A", 100, [("A", 50), ("B", 50)])]
        settlements = [_settlement("B", "A", 50)]

        balances = calculate_balances(members, expenses, settlements)

        assert _as_map(balances) == {"A": 0.0, "B": 0.0}

    def test_members_without_activity_appear_with_zero(self):
        members = _members("A", "B", "C")
        expenses = [_expense("E1", "A", 20, [("B", 20)])]

        balances = calculate_balances(members, expenses, [])

        assert _as_map(balances)["C"] == 0.0

    def test_no_members_gives_empty_result(self):
        assert calculate_balances([], [], []) == []

    def test_output_follows_member_order(self):
        members = _members("C", "A", "B")
        expenses = [_expense("E1", "A", 30, [("A", 10), ("B", 10), ("C", 10)])]

        balances = calculate_balances(members, expenses, [])

        assert [b.member_id for b in balances] == ["C", "A", "B"]
        assert [b.member_name for b in balances] == ["Member C", "Member A", "Member B"]

    def test_payer_not_in_splits(self):
        members = _members("A", "B", "C")
        expenses = [_expense("E1", "A", 40, [("B", 20), ("C", 20)])]

        assert _as_map(calculate_balances(members, expenses, [])) == {"A": 40.0, "B": -20.0, "C": -20.0}

    def test_payer_credited_with_declared_total_not_split_sum(self):
        """Splits summing to 9 on a declared 10 skew the sheet by 1."""
        members = _members("A", "B", "C")
        expenses = [_expense("E1", "A", 10, [("A", 3), ("B", 3), ("C", 3)])]

        balances = _as_map(calculate_balances(members, expenses, []))

        assert balances == {"A": 7.0, "B": -3.0, "C": -3.0}
        assert sum(balances.values()) == pytest.approx(1.0)

    def test_unknown_ids_are_tallied_but_not_returned(self):
        members = _members("A", "B")
        expenses = [_expense("E1", "X", 30, [("A", 10), ("B", 10), ("X", 10)])]
        settlements = [_settlement("A", "Y", 5)]

        balances = calculate_balances(members, expenses, settlements)

        assert _as_map(balances) == {"A": -5.0, "B": -10.0}

    def test_multiple_splits_for_same_member(self):
        members = _members("A", "B")
        expense = _expense("E1", "A", 25, [("B", 10), ("B", 5), ("A", 10)])

        assert _as_map(calculate_balances(members, [expense], [])) == {"A": 15.0, "B": -15.0}

    def test_settlement_in_opposite_direction_increases_credit(self):
        members = _members("A", "B")
        settlements = [_settlement("A", "B", 12.5)]

        assert _as_map(calculate_balances(members, [], settlements)) == {"A": 12.5, "B": -12.5}

    def test_no_float_drift(self):
        members = _members("A", "B")
        expenses = [_expense(f"E{i}", "A", 0.1, [("B", 0.1)]) for i in range(3)]

        balances = _as_map(calculate_balances(members, expenses, []))

        assert balances == {"A": 0.3, "B": -0.3}

    def test_rounds_half_up_to_cents(self):
        members = _members("A", "B")
        expenses = [_expense("E1", "A", 0.125, [("B", 0.125)])]

        assert _as_map(calculate_balances(members, expenses, [])) == {"A": 0.13, "B": -0.13}

    def test_zero_sum_with_uneven_equal_split(self):
        members = _members("A", "B", "C")
        expense = _expense("E1", "A", 10, [])
        expense.splits = build_equal_splits(10, ["A", "B", "C"])

        balances = calculate_balances(members, [expense], [])

        assert _as_map(balances) == {"A": 6.67, "B": -3.33, "C": -3.33}
        assert abs(sum(b.balance for b in balances)) <= 0.01 * len(members) + 1e-9

    def test_inputs_are_not_mutated(self):
        members = _members("A", "B")
        expense = _expense("E1", "A", 10, [("B", 10)])
        before = expense.to_dict()

        calculate_balances(members, [expense], [])

        assert expense.to_dict() == before

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_expense_amount_rejected(self, bad):
        members = _members("A", "B")
        expenses = [_expense("E1", "A", bad, [("B", 10)])]

        with pytest.raises(ValueError, match="E1"):
            calculate_balances(members, expenses, [])

    def test_non_finite_split_rejected(self):
        members = _members("A", "B")
        expenses = [_expense("E1", "A", 10, [("B", math.nan)])]

        with pytest.raises(ValueError, match="finite"):
            calculate_balances(members, expenses, [])

    def test_non_finite_settlement_rejected(self):
        members = _members("A", "B")

        with pytest.raises(ValueError, match="finite"):
            calculate_balances(members, [], [_settlement("A", "B", math.inf)])


# =============================================================================
# Split builders
# =============================================================================


class TestBuildEqualSplits:
    """Equal split of an amount between selected members."""

    def test_exact_division(self):
        splits = build_equal_splits(90, ["A", "B", "C"])

        assert [(s.member_id, s.amount) for s in splits] == [("A", 30.0), ("B", 30.0), ("C", 30.0)]

    def test_per_person_share_is_rounded(self):
        splits = build_equal_splits(10, ["A", "B", "C"])

        assert [s.amount for s in splits] == [3.33, 3.33, 3.33]

    def test_rounding_half_up(self):
        assert build_equal_splits(0.05, ["A", "B"])[0].amount == 0.03

    def test_requires_a_member(self):
        with pytest.raises(ValueError, match="at least one member"):
            build_equal_splits(10, [])


class TestBuildCustomSplits:
    """Splits from explicit per-member amounts."""

    def test_keeps_entry_order(self):
        splits = build_custom_splits(100, {"B": 60, "A": 40})

        assert [(s.member_id, s.amount) for s in splits] == [("B", 60.0), ("A", 40.0)]

    def test_small_mismatch_is_accepted(self):
        splits = build_custom_splits(100, {"A": 33.33, "B": 33.33, "C": 33.33})

        assert len(splits) == 3

    def test_large_mismatch_is_rejected(self):
        with pytest.raises(ValueError, match="don't add up"):
            build_custom_splits(100, {"A": 40, "B": 40})

    def test_custom_tolerance(self):
        with pytest.raises(ValueError):
            build_custom_splits(100, {"A": 50, "B": 49.9}, tolerance=0.05)

    def test_empty_mapping_rejected(self):
        with pytest.raises(ValueError):
            build_custom_splits(100, {})
