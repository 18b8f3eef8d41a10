"""
Utilities Module

This module provides transparency helpers for the group expense splitter
application.

Features:
    - Per-member breakdown of how a balance was reached
    - Breakdown for every member of a group

Data Model:
    Input - members: list of Member
    Input - expenses: list of Expense
    Input - settlements: list of Settlement

    Output - explanation dict with:
        - member_id, member_name
        - expense_contributions: list of per-expense records
        - total_paid, total_share: float
        - settlements_paid, settlements_received: float
        - net_balance: float (same value calculate_balances() reports)

Functions:
    explain_member_balance: Get detailed breakdown for one member.
    explain_all_members: Get detailed breakdown for all members.
"""

from decimal import Decimal, ROUND_HALF_UP

from splitter import to_decimal


def _round_decimal(value: Decimal) -> float:
    """
    Round a Decimal to 2 decimal places and convert to float.

    Args:
        value: Decimal value to round.

    Returns:
        float: Rounded value as float.
    """
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def explain_member_balance(
    member_id: str,
    members: list,
    expenses: list,
    settlements: list
) -> dict:
    """
    Generate a detailed explanation of how a member's balance was calculated.

    For each expense the member paid for or has a split in:
        - Shows expense details (id, description, category, date, total)
        - Shows whether the member paid it
        - Shows the member's share (sum of their splits in that expense)

    Args:
        member_id: ID of the member to explain.
        members: List of Member.
        expenses: List of Expense.
        settlements: List of Settlement.

    Returns:
        dict: Explanation containing:
            - member_id, member_name
            - expense_contributions: list of dicts with expense breakdown
            - total_paid: float (declared totals of expenses paid)
            - total_share: float (sum of the member's splits)
            - settlements_paid: float (repayments made by the member)
            - settlements_received: float (repayments made to the member)
            - net_balance: float

    Notes:
        - Unknown members get a zeroed explanation with an "error" key
        - A member with several splits in one expense (itemwise) gets one
          contribution with the summed share
    """
    member_map = {m.member_id: m for m in members}

    if member_id not in member_map:
        return {
            "member_id": member_id,
            "member_name": None,
            "expense_contributions": [],
            "total_paid": 0.0,
            "total_share": 0.0,
            "settlements_paid": 0.0,
            "settlements_received": 0.0,
            "net_balance": 0.0,
            "error": f"Member {member_id} not found"
        }

    total_paid = Decimal("0")
    total_share = Decimal("0")
    expense_contributions = []

    for expense in expenses:
        paid = expense.paid_by_id == member_id
        member_splits = [s for s in expense.splits if s.member_id == member_id]

        if not paid and not member_splits:
            continue

        expense_amount = to_decimal(expense.amount, f"Expense {expense.expense_id} amount")
        share = sum(
            (to_decimal(s.amount, f"Split of {member_id} in expense {expense.expense_id}") for s in member_splits),
            Decimal("0")
        )

        if paid:
            total_paid += expense_amount
        total_share += share

        expense_contributions.append({
            "expense_id": expense.expense_id,
            "description": expense.description,
            "category": expense.category,
            "date": expense.date,
            "total_expense_amount": _round_decimal(expense_amount),
            "paid": paid,
            "member_share": _round_decimal(share),
            "items": [s.item_name for s in member_splits if s.item_name]
        })

    settlements_paid = Decimal("0")
    settlements_received = Decimal("0")
    for settlement in settlements:
        if settlement.from_id != member_id and settlement.to_id != member_id:
            continue
        amount = to_decimal(settlement.amount, f"Settlement {settlement.settlement_id} amount")
        if settlement.from_id == member_id:
            settlements_paid += amount
        if settlement.to_id == member_id:
            settlements_received += amount

    net_balance = total_paid - total_share + settlements_paid - settlements_received

    return {
        "member_id": member_id,
        "member_name": member_map[member_id].name,
        "expense_contributions": expense_contributions,
        "total_paid": _round_decimal(total_paid),
        "total_share": _round_decimal(total_share),
        "settlements_paid": _round_decimal(settlements_paid),
        "settlements_received": _round_decimal(settlements_received),
        "net_balance": _round_decimal(net_balance)
    }


def explain_all_members(members: list, expenses: list, settlements: list) -> list[dict]:
    """
    Generate detailed explanations for all members, in member order.

    Includes members with no expenses or settlements.
    """
    return [
        explain_member_balance(m.member_id, members, expenses, settlements)
        for m in members
    ]
