"""
Settlement Module

This module handles the settlement suggestions for the group expense
splitter application.

Features:
    - Convert net balances into suggested repayments
    - Reduce the number of repayments using a greedy algorithm
    - Handle rounding safely
    - Turn a suggestion into a recordable settlement

Data Model:
    Input - balances: list of BalanceEntry
        - balance: float (positive = owed money, negative = owes money)

    Output - list of TransactionSuggestion:
        - from_id / from_name: debtor who pays
        - to_id / to_name: creditor who receives
        - amount: float (rounded to 2 decimal places)

Functions:
    calculate_minimum_transactions: Suggest repayments for a group snapshot.
    minimize_transactions: Suggest repayments for precomputed balances.
    suggestion_to_settlement: Record a suggestion as a Settlement.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from models import BalanceEntry, Settlement, TransactionSuggestion
from splitter import calculate_balances, to_decimal

logger = logging.getLogger(__name__)

# Balances within one cent of zero are treated as settled
EPSILON = Decimal("0.01")


def _round_decimal(value: Decimal) -> float:
    """
    Round a Decimal to 2 decimal places and convert to float.

    Args:
        value: Decimal value to round.

    Returns:
        float: Rounded value as float.
    """
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def minimize_transactions(balances: list[BalanceEntry]) -> list[TransactionSuggestion]:
    """
    Convert net balances into a short list of repayments.

    Uses a greedy algorithm:
        1. Separate members into debtors (balance < -0.01) and creditors (balance > 0.01)
        2. Sort debtors by largest debt first
        3. Sort creditors by largest credit first
        4. Iteratively match the current debtor with the current creditor:
           - Settle the minimum of their remaining amounts
           - Update remaining amounts
           - Move past whoever dropped below one cent

    Args:
        balances: List of BalanceEntry.

    Returns:
        list[TransactionSuggestion]: Repayments in the order they were matched.

    Notes:
        - Sorting is stable, ties keep the input order
        - At most (unsettled members - 1) suggestions are produced
        - Does NOT modify the input balances
    """
    # Working lists hold [member_id, member_name, remaining] with positive amounts
    debtors = []
    creditors = []

    for entry in balances:
        net = to_decimal(entry.balance, f"Balance of {entry.member_id}")

        if net < -EPSILON:
            debtors.append([entry.member_id, entry.member_name, -net])
        elif net > EPSILON:
            creditors.append([entry.member_id, entry.member_name, net])

    debtors.sort(key=lambda x: x[2], reverse=True)
    creditors.sort(key=lambda x: x[2], reverse=True)

    logger.debug("Matching %d debtors against %d creditors", len(debtors), len(creditors))

    suggestions = []
    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor = debtors[debtor_idx]
        creditor = creditors[creditor_idx]

        amount = min(debtor[2], creditor[2])

        if amount > EPSILON:
            suggestions.append(TransactionSuggestion(
                from_id=debtor[0],
                from_name=debtor[1],
                to_id=creditor[0],
                to_name=creditor[1],
                amount=_round_decimal(amount)
            ))

        debtor[2] -= amount
        creditor[2] -= amount

        if debtor[2] < EPSILON:
            debtor_idx += 1
        if creditor[2] < EPSILON:
            creditor_idx += 1

    return suggestions


def calculate_minimum_transactions(
    members: list,
    expenses: list,
    settlements: list
) -> list[TransactionSuggestion]:
    """
    Suggest the repayments that settle up a group.

    Applying every suggestion (debtor pays creditor the stated amount)
    brings each member's balance to within one cent of zero.

    Args:
        members: List of Member.
        expenses: List of Expense.
        settlements: List of Settlement already recorded.

    Returns:
        list[TransactionSuggestion]: Suggested repayments.
    """
    balances = calculate_balances(members, expenses, settlements)
    suggestions = minimize_transactions(balances)
    logger.debug("Suggested %d repayments for %d members", len(suggestions), len(members))
    return suggestions


def suggestion_to_settlement(
    suggestion: TransactionSuggestion,
    group_id: Optional[str],
    settlement_id: Optional[str] = None,
    date: Optional[str] = None
) -> Settlement:
    """
    Record a suggested repayment as a Settlement.

    The id and date come from the caller; the suggested payer becomes the
    settlement's ``from_id``.
    """
    return Settlement(
        settlement_id=settlement_id,
        group_id=group_id,
        from_id=suggestion.from_id,
        to_id=suggestion.to_id,
        amount=suggestion.amount,
        date=date
    )
