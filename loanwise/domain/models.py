"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional

APPROVED = "approved"
REJECTED = "rejected"
PENDING = "pending"
DISBURSED = "disbursed"

LOAN_STATUSES = (PENDING, APPROVED, REJECTED, DISBURSED)

# Decided loans only move forward; rejected and disbursed are terminal
STATUS_TRANSITIONS = {
    APPROVED: frozenset({DISBURSED}),
}


def can_transition(current: str, target: str) -> bool:
    """Whether a loan in status `current` may be moved to `target`"""
    return current == target or target in STATUS_TRANSITIONS.get(current, frozenset())


@dataclass(frozen=True)
class LoanDecision:
    """Output of the loan decision engine.

    Approved decisions carry every derived amount; rejected ones carry only
    the approval score.
    """

    approval_score: int
    approved: bool
    status: str
    sanctioned_amount: Optional[Decimal] = None
    monthly_emi: Optional[Decimal] = None
    total_interest: Optional[Decimal] = None
    processing_fee: Optional[Decimal] = None

    def derived_fields(self) -> Dict[str, Optional[Decimal]]:
        """Amount fields to persist on the loan record"""
        return {
            "sanctioned_amount": self.sanctioned_amount,
            "monthly_emi": self.monthly_emi,
            "total_interest": self.total_interest,
            "processing_fee": self.processing_fee,
        }


@dataclass
class ScheduleEntry:
    """Single monthly row of an amortization schedule"""

    installment_number: int
    due_date: date
    emi: Decimal
    principal_component: Decimal
    interest_component: Decimal
    outstanding_balance: Decimal


@dataclass
class PortfolioSummary:
    """Aggregated view of a user's credit, loans, transactions and bills"""

    credit_limit: Decimal
    used_credit: Decimal
    utilization_percent: Decimal
    utilization_band: str
    total_loans: int
    approved_loans: int
    total_sanctioned: Decimal
    average_approval_score: Decimal
    total_transaction_amount: Decimal
    completed_transactions: int
    transaction_totals_by_type: Dict[str, Decimal] = field(default_factory=dict)
    total_bill_amount: Decimal = Decimal("0.00")
    paid_bills: int = 0
    bill_totals_by_type: Dict[str, Decimal] = field(default_factory=dict)
