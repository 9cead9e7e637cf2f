"""Portfolio analytics - credit utilization and spend breakdowns for a user"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, Optional

from loanwise.domain.amortization import round_currency
from loanwise.domain.models import PortfolioSummary, APPROVED, DISBURSED

# Utilization at or below this share of the limit is considered healthy
HEALTHY_UTILIZATION_PERCENT = Decimal("30")

ZERO = Decimal("0.00")


def _amount(value: Optional[Decimal]) -> Decimal:
    return Decimal(value) if value is not None else ZERO


def credit_utilization(used_credit: Decimal, credit_limit: Decimal) -> Decimal:
    """Used credit as a percentage of the limit (0 when there is no limit)"""
    limit = _amount(credit_limit)
    if limit <= 0:
        return ZERO
    return round_currency(_amount(used_credit) / limit * 100)


def utilization_band(utilization_percent: Decimal) -> str:
    return "excellent" if utilization_percent <= HEALTHY_UTILIZATION_PERCENT else "needs_attention"


def _totals_by(items: Iterable, key: str) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for item in items:
        totals[getattr(item, key)] += _amount(item.amount)
    return dict(totals)


def summarize_portfolio(user, loans: list, transactions: list, bills: list) -> PortfolioSummary:
    """
    Aggregate a user's records into the dashboard summary.

    Accepts any objects exposing the ORM attribute names (user.credit_limit,
    loan.status, transaction.amount, bill.bill_type, ...).
    """
    utilization = credit_utilization(user.used_credit, user.credit_limit)

    sanctioned_loans = [loan for loan in loans if loan.status in (APPROVED, DISBURSED)]
    total_sanctioned = sum((_amount(loan.sanctioned_amount) for loan in sanctioned_loans), ZERO)

    scores = [loan.approval_score or 0 for loan in loans]
    average_score = round_currency(Decimal(sum(scores)) / len(scores)) if scores else ZERO

    total_transactions = sum((_amount(t.amount) for t in transactions), ZERO)
    completed = sum(1 for t in transactions if t.status == "completed")

    total_bills = sum((_amount(b.amount) for b in bills), ZERO)
    paid_bills = sum(1 for b in bills if b.payment_status == "paid")

    return PortfolioSummary(
        credit_limit=_amount(user.credit_limit),
        used_credit=_amount(user.used_credit),
        utilization_percent=utilization,
        utilization_band=utilization_band(utilization),
        total_loans=len(loans),
        approved_loans=len(sanctioned_loans),
        total_sanctioned=total_sanctioned,
        average_approval_score=average_score,
        total_transaction_amount=total_transactions,
        completed_transactions=completed,
        transaction_totals_by_type=_totals_by(transactions, "type"),
        total_bill_amount=total_bills,
        paid_bills=paid_bills,
        bill_totals_by_type=_totals_by(bills, "bill_type"),
    )
