"""EMI calculation and amortization schedule generation"""

from datetime import date
from decimal import Decimal, Overflow, ROUND_HALF_UP, localcontext
from typing import List

from loanwise.domain.exceptions import InvalidInput
from loanwise.domain.models import ScheduleEntry
from loanwise.utils.date_utils import add_months

CENT = Decimal("0.01")

# Enough digits for (1 + r) ** 120 without drifting the cent
_PRECISION = 40

# Longest tenure a loan or schedule may run (40 years)
MAX_TENURE_MONTHS = 480


def round_currency(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up on the cent"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_rate(interest_rate: Decimal) -> Decimal:
    """Convert an annual percentage rate to a monthly fraction"""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(interest_rate) / Decimal(1200)


def calculate_emi(principal: Decimal, interest_rate: Decimal, tenure_months: int) -> Decimal:
    """
    Equated monthly installment for a fully amortizing loan.

    EMI = P * r * (1 + r)^n / ((1 + r)^n - 1), rounded half-up to the cent.
    A zero rate collapses the closed form to 0/0, so it pays P / n instead.
    When (1 + r)^n overflows the decimal exponent range the ratio has
    converged, so the EMI is the interest-only limit P * r.

    Example:
        P=75000, 9.5% p.a., 60 months -> 1575.14
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        principal = Decimal(principal)
        rate = monthly_rate(interest_rate)

        if rate == 0:
            return round_currency(principal / tenure_months)

        try:
            growth = (1 + rate) ** tenure_months
        except Overflow:
            return round_currency(principal * rate)

        denominator = growth - 1
        if denominator == 0:
            return round_currency(principal / tenure_months)

        emi = principal * rate * growth / denominator

    return round_currency(emi)


def generate_amortization_schedule(
    principal: Decimal,
    interest_rate: Decimal,
    tenure_months: int,
    start_date: date | None = None,
) -> List[ScheduleEntry]:
    """
    Build the month-by-month repayment schedule for a sanctioned loan.

    Requirements:
    - One row per month, first due one month after start_date
    - Interest each month is charged on the outstanding balance
    - Last installment absorbs rounding drift so the balance ends at exactly 0

    Returns:
        List of ScheduleEntry rows in due-date order

    Raises:
        InvalidInput: tenure_months above MAX_TENURE_MONTHS
    """
    principal = Decimal(principal)
    if principal <= 0 or tenure_months <= 0:
        return []
    if tenure_months > MAX_TENURE_MONTHS:
        raise InvalidInput(f"tenure_months must be at most {MAX_TENURE_MONTHS}")

    if start_date is None:
        start_date = date.today()

    emi = calculate_emi(principal, interest_rate, tenure_months)
    rate = monthly_rate(interest_rate)

    balance = principal
    schedule = []
    for number in range(1, tenure_months + 1):
        interest = round_currency(balance * rate)

        if number == tenure_months:
            principal_part = balance
            payment = principal_part + interest
        else:
            principal_part = min(emi - interest, balance)
            payment = emi

        balance = balance - principal_part

        schedule.append(
            ScheduleEntry(
                installment_number=number,
                due_date=add_months(start_date, number),
                emi=payment,
                principal_component=principal_part,
                interest_component=interest,
                outstanding_balance=balance,
            )
        )

    return schedule
