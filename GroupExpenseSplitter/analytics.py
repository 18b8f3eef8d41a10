"""
Analytics Module

This module provides spending analytics for the group expense splitter
application.

Features:
    - Total group spending
    - Category-wise expense breakdown
    - Monthly spending for the most recent months

Data Model:
    Input - expenses: list of Expense with:
        - amount: float
        - category: string
        - date: string (ISO date or timestamp)

    Output - dict containing:
        - total_spending: float
        - category_breakdown: list of {"category", "amount"}
        - monthly_spending: list of {"month", "amount"}

Functions:
    get_total_spending: Sum of all expense totals.
    get_spending_by_category: Spending per category, largest first.
    get_monthly_spending: Spending per month, oldest first.
    generate_analytics: All of the above in one dict.
"""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from splitter import to_decimal

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_WINDOW = 6


def _round_decimal(value: Decimal) -> float:
    """
    Round a Decimal to 2 decimal places and convert to float.

    Args:
        value: Decimal value to round.

    Returns:
        float: Rounded value as float.
    """
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _month_key(date_str: Optional[str]) -> Optional[str]:
    """Return the YYYY-MM key of an ISO date, or None if it can't be parsed."""
    if not date_str:
        return None
    try:
        parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    return f"{parsed.year}-{parsed.month:02d}"


def get_total_spending(expenses: list) -> float:
    """Return the sum of the declared totals of all expenses."""
    total = Decimal("0")
    for expense in expenses:
        total += to_decimal(expense.amount, f"Expense {expense.expense_id} amount")
    return _round_decimal(total)


def get_spending_by_category(expenses: list) -> list[dict]:
    """
    Calculate spending per category.

    Returns:
        list[dict]: ``{"category": str, "amount": float}`` sorted by amount,
        largest first. Categories with equal totals keep first-seen order.
    """
    category_totals = defaultdict(Decimal)
    for expense in expenses:
        category_totals[expense.category] += to_decimal(
            expense.amount, f"Expense {expense.expense_id} amount"
        )

    breakdown = [
        {"category": category, "amount": _round_decimal(amount)}
        for category, amount in category_totals.items()
    ]
    breakdown.sort(key=lambda x: x["amount"], reverse=True)
    return breakdown


def get_monthly_spending(expenses: list, months: int = DEFAULT_MONTHLY_WINDOW) -> list[dict]:
    """
    Calculate spending per calendar month.

    Args:
        expenses: List of Expense.
        months: Number of most recent months to keep.

    Returns:
        list[dict]: ``{"month": "YYYY-MM", "amount": float}`` sorted by month,
        oldest first, limited to the last ``months`` entries.

    Notes:
        - Expenses without a parseable date are skipped
    """
    monthly_totals = defaultdict(Decimal)
    for expense in expenses:
        key = _month_key(expense.date)
        if key is None:
            logger.debug("Skipping expense %s without a usable date", expense.expense_id)
            continue
        monthly_totals[key] += to_decimal(expense.amount, f"Expense {expense.expense_id} amount")

    monthly = [
        {"month": month, "amount": _round_decimal(amount)}
        for month, amount in sorted(monthly_totals.items())
    ]
    if months <= 0:
        return []
    return monthly[-months:]


def generate_analytics(expenses: list, months: int = DEFAULT_MONTHLY_WINDOW) -> dict:
    """
    Generate the spending analytics of a group.

    Args:
        expenses: List of Expense.
        months: Number of months in the monthly breakdown.

    Returns:
        dict: Contains total_spending, category_breakdown and monthly_spending.
    """
    return {
        "total_spending": get_total_spending(expenses),
        "category_breakdown": get_spending_by_category(expenses),
        "monthly_spending": get_monthly_spending(expenses, months)
    }
