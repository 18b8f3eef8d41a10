"""
GroupExpenseSplitter - FastAPI Web Backend

This module serves as the HTTP entry point for the group expense splitting
settlement engine using FastAPI.

Features:
    - Stateless API: every request carries a full group snapshot
    - Balance calculation and settle-up suggestions
    - Spending analytics and transparency reports

Endpoints:
    POST /balances   - Net balance per member
    POST /settle     - Balances plus suggested repayments
    POST /analytics  - Spending analytics
    POST /explain    - Per-member balance breakdown
    GET  /health     - Health check

Usage:
    uvicorn main:app --reload
"""

import logging
from typing import Optional
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from models import Member, Expense, Settlement
from splitter import calculate_balances
from settlement import minimize_transactions
from analytics import generate_analytics
from utils import explain_all_members
from config.settings import get_settings

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class MemberIn(BaseModel):
    """A group member."""
    member_id: str = Field(..., min_length=1, description="Member identifier")
    name: str = Field(..., min_length=1, description="Display name")
    group_id: Optional[str] = Field(None, description="Owning group")
    color: Optional[str] = Field(None, description="Avatar color")


class SplitIn(BaseModel):
    """The share of an expense owed by one member."""
    member_id: str = Field(..., min_length=1, description="Member who owes the share")
    amount: float = Field(..., ge=0, description="Amount owed (>= 0)")
    item_name: Optional[str] = Field(None, description="Optional item label")


class ExpenseIn(BaseModel):
    """A recorded expense with its splits."""
    expense_id: str = Field(..., min_length=1, description="Expense identifier")
    group_id: Optional[str] = Field(None, description="Owning group")
    paid_by_id: str = Field(..., min_length=1, description="Member ID of payer")
    amount: float = Field(..., gt=0, description="Expense total (must be > 0)")
    splits: list[SplitIn] = Field(..., min_length=1, description="Per-member splits")
    description: Optional[str] = Field(None, description="Optional description")
    category: str = Field("general", description="Expense category")
    split_type: str = Field("equal", pattern=r"^(equal|unequal|itemwise)$", description="Split type")
    date: Optional[str] = Field(None, description="ISO date or timestamp")


class SettlementIn(BaseModel):
    """A repayment already made between two members."""
    settlement_id: Optional[str] = Field(None, description="Settlement identifier")
    group_id: Optional[str] = Field(None, description="Owning group")
    from_id: str = Field(..., min_length=1, description="Member who paid")
    to_id: str = Field(..., min_length=1, description="Member who received")
    amount: float = Field(..., gt=0, description="Amount repaid (must be > 0)")
    date: Optional[str] = Field(None, description="ISO timestamp")


class GroupSnapshot(BaseModel):
    """Request model carrying a group's full state."""
    members: list[MemberIn] = Field(..., description="Group members, in display order")
    expenses: list[ExpenseIn] = Field(default_factory=list)
    settlements: list[SettlementIn] = Field(default_factory=list)


class BalanceOut(BaseModel):
    member_id: str
    member_name: str
    balance: float


class TransactionOut(BaseModel):
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    amount: float


class BalancesResponse(BaseModel):
    """Response model for balance calculation."""
    balances: list[BalanceOut]


class SettleResponse(BaseModel):
    """Response model for settle-up suggestions."""
    balances: list[BalanceOut]
    transactions: list[TransactionOut]


class AnalyticsResponse(BaseModel):
    """Response model for spending analytics."""
    total_spending: float
    category_breakdown: list
    monthly_spending: list


class ExplainResponse(BaseModel):
    """Response model for transparency reports."""
    explanations: list


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Group Expense Splitter",
    description="Balances and settle-up suggestions for shared group expenses",
    version="1.0.0"
)


# =============================================================================
# Helper Functions
# =============================================================================

def _snapshot_to_domain(snapshot: GroupSnapshot) -> tuple[list, list, list]:
    """Convert a validated request body into engine records."""
    members = [Member.from_dict(m.model_dump()) for m in snapshot.members]
    expenses = [Expense.from_dict(e.model_dump()) for e in snapshot.expenses]
    settlements = [Settlement.from_dict(s.model_dump()) for s in snapshot.settlements]
    return members, expenses, settlements


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/balances", response_model=BalancesResponse)
async def get_balances(snapshot: GroupSnapshot):
    """
    Calculate the net balance of every member.

    Request flow:
        1. Validate input using Pydantic models
        2. Calculate balances (splitter.py)
        3. Return one entry per member, in request order
    """
    try:
        members, expenses, settlements = _snapshot_to_domain(snapshot)
        balances = calculate_balances(members, expenses, settlements)
        return BalancesResponse(balances=[b.to_dict() for b in balances])

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Balance calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/settle", response_model=SettleResponse)
async def settle_up(snapshot: GroupSnapshot):
    """
    Calculate balances and the repayments that settle the group.

    Request flow:
        1. Validate input using Pydantic models
        2. Calculate balances (splitter.py)
        3. Match debtors with creditors (settlement.py)
        4. Return balances and suggested repayments
    """
    try:
        members, expenses, settlements = _snapshot_to_domain(snapshot)
        balances = calculate_balances(members, expenses, settlements)
        transactions = minimize_transactions(balances)

        logger.info(
            "Settled %d members with %d suggested repayments",
            len(members), len(transactions)
        )

        return SettleResponse(
            balances=[b.to_dict() for b in balances],
            transactions=[t.to_dict() for t in transactions]
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Settlement calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/analytics", response_model=AnalyticsResponse)
async def get_analytics(snapshot: GroupSnapshot):
    """Spending analytics of the group's expenses."""
    try:
        _, expenses, _ = _snapshot_to_domain(snapshot)
        return AnalyticsResponse(**generate_analytics(expenses, settings.monthly_window))

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Analytics generation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/explain", response_model=ExplainResponse)
async def explain_balances(snapshot: GroupSnapshot):
    """Per-member breakdown of paid amounts, shares and repayments."""
    try:
        members, expenses, settlements = _snapshot_to_domain(snapshot)
        return ExplainResponse(explanations=explain_all_members(members, expenses, settlements))

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Explanation generation failed")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Group Expense Splitter"}


# =============================================================================
# Run with: python main.py
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)
