"""
Splitter Module

This module handles the balance calculation for the group expense
splitter application.

Features:
    - Per-member net balance from expenses and recorded settlements
    - Equal and custom split builders
    - Decimal-safe rounding

Data Model:
    Input - members: list of Member
    Input - expenses: list of Expense (payer, declared total, splits)
    Input - settlements: list of Settlement (from_id pays to_id)

    Output - list of BalanceEntry, one per member in input order:
        - balance: float (positive = is owed money, negative = owes money)

Functions:
    calculate_balances: Calculate per-member net balances.
    build_equal_splits: Split an amount equally between members.
    build_custom_splits: Build splits from explicit per-member amounts.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from models import BalanceEntry, ExpenseSplit

logger = logging.getLogger(__name__)


def to_decimal(value, label: str) -> Decimal:
    """
    Convert a monetary value to Decimal, rejecting NaN and infinities.

    Args:
        value: Number to convert.
        label: Description of the value, used in the error message.

    Returns:
        Decimal: Exact decimal form of the value's string representation.

    Raises:
        ValueError: If the value is not a finite number.
    """
    amount = Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"{label} must be a finite number, got: {value}")
    return amount


def _round_decimal(value: Decimal) -> float:
    """
    Round a Decimal to 2 decimal places and convert to float.

    Uses ROUND_HALF_UP on the cent value.

    Args:
        value: Decimal value to round.

    Returns:
        float: Rounded value as float.
    """
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def calculate_balances(members: list, expenses: list, settlements: list) -> list[BalanceEntry]:
    """
    Calculate the net balance of every member of a group.

    For each expense:
        1. The payer's balance increases by the declared expense amount
        2. Each split's member balance decreases by the split amount
           (the payer's own split included)

    For each settlement:
        1. The paying member's balance increases by the amount
        2. The receiving member's balance decreases by the amount

    Args:
        members: List of Member.
        expenses: List of Expense.
        settlements: List of Settlement.

    Returns:
        list[BalanceEntry]: One entry per member, in the order of ``members``.

    Notes:
        - Splits are summed as given, independently of the declared total
        - Ids missing from ``members`` are tallied but not returned
        - Raises ValueError on non-finite amounts
    """
    # Every member starts at zero, even without any activity
    balance_map = {m.member_id: Decimal("0") for m in members}

    for expense in expenses:
        amount = to_decimal(expense.amount, f"Expense {expense.expense_id} amount")
        balance_map[expense.paid_by_id] = balance_map.get(expense.paid_by_id, Decimal("0")) + amount

        for split in expense.splits:
            share = to_decimal(split.amount, f"Split of {split.member_id} in expense {expense.expense_id}")
            balance_map[split.member_id] = balance_map.get(split.member_id, Decimal("0")) - share

    for settlement in settlements:
        amount = to_decimal(settlement.amount, f"Settlement {settlement.settlement_id} amount")
        balance_map[settlement.from_id] = balance_map.get(settlement.from_id, Decimal("0")) + amount
        balance_map[settlement.to_id] = balance_map.get(settlement.to_id, Decimal("0")) - amount

    unknown = set(balance_map) - {m.member_id for m in members}
    if unknown:
        logger.debug("Ignoring balances of ids outside the member list: %s", sorted(unknown))

    return [
        BalanceEntry(
            member_id=m.member_id,
            member_name=m.name,
            balance=_round_decimal(balance_map[m.member_id])
        )
        for m in members
    ]


def build_equal_splits(amount: float, member_ids: list[str]) -> list[ExpenseSplit]:
    """
    Split an amount equally between members.

    Each member owes the per-person share rounded to 2 decimal places, so
    the splits may differ from the total by a few cents (10 / 3 gives
    three splits of 3.33).

    Raises:
        ValueError: If no member is selected or the amount is not finite.
    """
    if len(member_ids) == 0:
        raise ValueError("Select at least one member")

    per_person = _round_decimal(to_decimal(amount, "Expense amount") / Decimal(len(member_ids)))
    return [ExpenseSplit(member_id=member_id, amount=per_person) for member_id in member_ids]


def build_custom_splits(
    amount: float,
    custom_amounts: dict,
    tolerance: float = 0.5
) -> list[ExpenseSplit]:
    """
    Build splits from explicit per-member amounts.

    Args:
        amount: Declared total of the expense.
        custom_amounts: Mapping of member_id to amount owed, in entry order.
        tolerance: Largest accepted gap between the split total and ``amount``.

    Returns:
        list[ExpenseSplit]: One split per entry of ``custom_amounts``.

    Raises:
        ValueError: If no amounts are given or they don't add up to the total.
    """
    if not custom_amounts:
        raise ValueError("Select at least one member")

    total = to_decimal(amount, "Expense amount")
    splits = []
    split_total = Decimal("0")
    for member_id, member_amount in custom_amounts.items():
        share = to_decimal(member_amount, f"Split of {member_id}")
        split_total += share
        splits.append(ExpenseSplit(member_id=member_id, amount=_round_decimal(share)))

    if abs(split_total - total) > Decimal(str(tolerance)):
        raise ValueError(
            f"Individual amounts ({_round_decimal(split_total):.2f}) "
            f"don't add up to total ({_round_decimal(total):.2f})"
        )

    return splits
