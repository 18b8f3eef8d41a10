"""
Models Module

This module defines the plain data records exchanged with the settlement
engine of the group expense splitter application.

Features:
    - Members, expenses (with per-member splits) and settlements
    - Derived balance entries and transaction suggestions
    - Dictionary conversion for the API layer

Data Model:
    Member:
        - member_id: string (unique within a group)
        - name: string
        - group_id: string or None
        - color: string or None

    Expense:
        - expense_id: string
        - group_id: string
        - paid_by_id: string (member_id who paid)
        - amount: float (total, > 0)
        - splits: list of ExpenseSplit
        - description, category, split_type, date

    Settlement:
        - settlement_id: string
        - group_id: string
        - from_id: string (member who repaid)
        - to_id: string (member who received)
        - amount: float (> 0)
        - date: string

    BalanceEntry / TransactionSuggestion are derived and never stored.
"""

from typing import Optional


class Member:
    """
    A member of a group.

    Attributes:
        member_id (str): Unique identifier within the group.
        name (str): Display name.
        group_id (str | None): Owning group.
        color (str | None): Avatar color, carried through untouched.
    """

    def __init__(
        self,
        member_id: str,
        name: str,
        group_id: Optional[str] = None,
        color: Optional[str] = None
    ):
        self.member_id = member_id
        self.name = name
        self.group_id = group_id
        self.color = color

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "name": self.name,
            "group_id": self.group_id,
            "color": self.color
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        return cls(
            member_id=data.get("member_id"),
            name=data.get("name"),
            group_id=data.get("group_id"),
            color=data.get("color")
        )

    def __repr__(self) -> str:
        return f"Member(id='{self.member_id}', name='{self.name}')"


class ExpenseSplit:
    """
    The share of one expense owed by one member.

    Attributes:
        member_id (str): Member who owes this share.
        amount (float): Amount owed (>= 0).
        item_name (str | None): Optional item label, no effect on balances.
    """

    def __init__(self, member_id: str, amount: float, item_name: Optional[str] = None):
        self.member_id = member_id
        self.amount = amount
        self.item_name = item_name

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "amount": self.amount,
            "item_name": self.item_name
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExpenseSplit":
        return cls(
            member_id=data.get("member_id"),
            amount=data.get("amount", 0),
            item_name=data.get("item_name")
        )

    def __repr__(self) -> str:
        return f"ExpenseSplit(member='{self.member_id}', amount={self.amount})"


class Expense:
    """
    Represents a single expense recorded in a group.

    Attributes:
        expense_id (str): Unique identifier.
        group_id (str): Owning group.
        paid_by_id (str): Member ID of who paid.
        amount (float): Declared total of the expense.
        splits (list[ExpenseSplit]): Per-member shares, in entry order.
        description (str | None): Free text.
        category (str): Expense category (default: general).
        split_type (str): One of: equal, unequal, itemwise.
        date (str | None): ISO date or timestamp.

    The declared amount is not reconciled against the splits; the balance
    calculator credits the payer with ``amount`` and debits the split
    amounts as given.
    """

    def __init__(
        self,
        expense_id: str,
        group_id: str,
        paid_by_id: str,
        amount: float,
        splits: list[ExpenseSplit],
        description: Optional[str] = None,
        category: str = "general",
        split_type: str = "equal",
        date: Optional[str] = None
    ):
        self.expense_id = expense_id
        self.group_id = group_id
        self.paid_by_id = paid_by_id
        self.amount = amount
        self.splits = splits
        self.description = description
        self.category = category
        self.split_type = split_type
        self.date = date

    def to_dict(self) -> dict:
        return {
            "expense_id": self.expense_id,
            "group_id": self.group_id,
            "paid_by_id": self.paid_by_id,
            "amount": self.amount,
            "splits": [split.to_dict() for split in self.splits],
            "description": self.description,
            "category": self.category,
            "split_type": self.split_type,
            "date": self.date
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        return cls(
            expense_id=data.get("expense_id"),
            group_id=data.get("group_id"),
            paid_by_id=data.get("paid_by_id"),
            amount=data.get("amount"),
            splits=[ExpenseSplit.from_dict(s) for s in data.get("splits", [])],
            description=data.get("description"),
            category=data.get("category") or "general",
            split_type=data.get("split_type") or "equal",
            date=data.get("date")
        )

    def __repr__(self) -> str:
        return (
            f"Expense(id='{self.expense_id}', payer='{self.paid_by_id}', "
            f"amount={self.amount}, splits={len(self.splits)})"
        )


class Settlement:
    """
    A repayment that has already happened between two members.

    Attributes:
        settlement_id (str): Unique identifier.
        group_id (str): Owning group.
        from_id (str): Member who paid.
        to_id (str): Member who received the money.
        amount (float): Amount repaid (> 0).
        date (str | None): ISO timestamp.
    """

    def __init__(
        self,
        settlement_id: Optional[str],
        group_id: Optional[str],
        from_id: str,
        to_id: str,
        amount: float,
        date: Optional[str] = None
    ):
        self.settlement_id = settlement_id
        self.group_id = group_id
        self.from_id = from_id
        self.to_id = to_id
        self.amount = amount
        self.date = date

    def to_dict(self) -> dict:
        return {
            "settlement_id": self.settlement_id,
            "group_id": self.group_id,
            "from_id": self.from_id,
            "to_id": self.to_id,
            "amount": self.amount,
            "date": self.date
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settlement":
        return cls(
            settlement_id=data.get("settlement_id"),
            group_id=data.get("group_id"),
            from_id=data.get("from_id"),
            to_id=data.get("to_id"),
            amount=data.get("amount"),
            date=data.get("date")
        )

    def __repr__(self) -> str:
        return f"Settlement(from='{self.from_id}', to='{self.to_id}', amount={self.amount})"


class BalanceEntry:
    """
    Net position of one member.

    Positive balance = the group owes this member money.
    Negative balance = this member owes the group money.
    """

    def __init__(self, member_id: str, member_name: str, balance: float):
        self.member_id = member_id
        self.member_name = member_name
        self.balance = balance

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "member_name": self.member_name,
            "balance": self.balance
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, BalanceEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"BalanceEntry(member='{self.member_id}', balance={self.balance})"


class TransactionSuggestion:
    """A suggested repayment from a debtor to a creditor."""

    def __init__(self, from_id: str, from_name: str, to_id: str, to_name: str, amount: float):
        self.from_id = from_id
        self.from_name = from_name
        self.to_id = to_id
        self.to_name = to_name
        self.amount = amount

    def to_dict(self) -> dict:
        return {
            "from_id": self.from_id,
            "from_name": self.from_name,
            "to_id": self.to_id,
            "to_name": self.to_name,
            "amount": self.amount
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransactionSuggestion):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"TransactionSuggestion('{self.from_id}' -> '{self.to_id}', amount={self.amount})"
