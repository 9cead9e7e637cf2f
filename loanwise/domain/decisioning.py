"""Loan decision engine - approval, sanctioned amount and EMI for a loan application"""

import math
import random
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Protocol

from loanwise.domain.amortization import MAX_TENURE_MONTHS, calculate_emi, round_currency
from loanwise.domain.exceptions import InvalidInput
from loanwise.domain.models import LoanDecision, APPROVED, REJECTED

APPROVAL_THRESHOLD = 70
SANCTION_RATIO = Decimal("0.75")
PROCESSING_FEE_RATE = Decimal("0.01")

# Score = floor(signal * SCORE_SPAN) + SCORE_FLOOR -> integer in [60, 99]
SCORE_FLOOR = 60
SCORE_SPAN = 40


class RiskScorer(Protocol):
    """Source of the risk signal that drives the approval score"""

    def draw(self) -> float:
        """Return a value in [0, 1)"""
        ...


class RandomRiskScorer:
    """
    Placeholder scorer: uniform random draw, no creditworthiness model.

    A real model only has to implement draw() to replace it.
    """

    def __init__(self, seed: int | None = None):
        self._random = random.Random(seed)

    def draw(self) -> float:
        return self._random.random()


def _to_decimal(value, name: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidInput(f"{name} must be a number") from e
    if not result.is_finite():
        raise InvalidInput(f"{name} must be finite")
    return result


def validate_application(
    requested_amount,
    interest_rate,
    tenure_months,
    max_tenure_months: int = MAX_TENURE_MONTHS,
) -> tuple[Decimal, Decimal, int]:
    """
    Normalise and validate loan inputs.

    Raises:
        InvalidInput: On non-numeric or non-positive amount, rate or tenure,
            or a tenure longer than max_tenure_months
    """
    amount = _to_decimal(requested_amount, "requested_amount")
    rate = _to_decimal(interest_rate, "interest_rate")

    if amount <= 0:
        raise InvalidInput("requested_amount must be greater than 0")
    if rate <= 0:
        raise InvalidInput("interest_rate must be greater than 0")
    if isinstance(tenure_months, bool) or not isinstance(tenure_months, int):
        raise InvalidInput("tenure_months must be an integer")
    if tenure_months <= 0:
        raise InvalidInput("tenure_months must be greater than 0")
    if tenure_months > max_tenure_months:
        raise InvalidInput(f"tenure_months must be at most {max_tenure_months}")

    return amount, rate, tenure_months


def approval_score_from_signal(risk_signal: float) -> int:
    """Map a risk signal in [0, 1) to an integer score in [60, 99]"""
    if isinstance(risk_signal, bool) or not isinstance(risk_signal, (int, float)):
        raise InvalidInput("risk_signal must be a number")
    if not 0 <= risk_signal < 1:
        raise InvalidInput("risk_signal must be in [0, 1)")
    return math.floor(risk_signal * SCORE_SPAN) + SCORE_FLOOR


def decide(
    requested_amount,
    interest_rate,
    tenure_months: int,
    risk_signal: float,
    approval_threshold: int = APPROVAL_THRESHOLD,
    sanction_ratio: Decimal = SANCTION_RATIO,
    processing_fee_rate: Decimal = PROCESSING_FEE_RATE,
    max_tenure_months: int = MAX_TENURE_MONTHS,
) -> LoanDecision:
    """
    Decide a loan application.

    Steps:
    1. Score = floor(risk_signal * 40) + 60
    2. Approved iff score >= approval_threshold (inclusive)
    3. Approved loans sanction floor(requested * 0.75) and derive EMI,
       total interest and a 1% processing fee

    Pure function: same inputs and signal always yield the same decision.

    Raises:
        InvalidInput: On invalid amount, rate, tenure or risk signal
    """
    amount, rate, tenure = validate_application(
        requested_amount, interest_rate, tenure_months, max_tenure_months
    )
    score = approval_score_from_signal(risk_signal)

    if score < approval_threshold:
        return LoanDecision(approval_score=score, approved=False, status=REJECTED)

    sanctioned = (amount * sanction_ratio).to_integral_value(rounding=ROUND_FLOOR)
    emi = calculate_emi(sanctioned, rate, tenure)

    # Cent rounding on tiny principals can push this fractionally below zero
    total_interest = max(emi * tenure - sanctioned, Decimal("0")).quantize(Decimal("0.01"))
    processing_fee = round_currency(sanctioned * processing_fee_rate)

    return LoanDecision(
        approval_score=score,
        approved=True,
        status=APPROVED,
        sanctioned_amount=sanctioned.quantize(Decimal("0.01")),
        monthly_emi=emi,
        total_interest=total_interest,
        processing_fee=processing_fee,
    )


class LoanDecisionEngine:
    """Binds the decision policy to a RiskScorer"""

    def __init__(
        self,
        scorer: RiskScorer,
        approval_threshold: int = APPROVAL_THRESHOLD,
        sanction_ratio: Decimal = SANCTION_RATIO,
        processing_fee_rate: Decimal = PROCESSING_FEE_RATE,
        max_tenure_months: int = MAX_TENURE_MONTHS,
    ):
        self.scorer = scorer
        self.approval_threshold = approval_threshold
        self.sanction_ratio = sanction_ratio
        self.processing_fee_rate = processing_fee_rate
        self.max_tenure_months = max_tenure_months

    def evaluate(self, requested_amount, interest_rate, tenure_months: int) -> LoanDecision:
        """Validate inputs, draw a risk signal and decide"""
        validate_application(requested_amount, interest_rate, tenure_months, self.max_tenure_months)
        return decide(
            requested_amount,
            interest_rate,
            tenure_months,
            self.scorer.draw(),
            approval_threshold=self.approval_threshold,
            sanction_ratio=self.sanction_ratio,
            processing_fee_rate=self.processing_fee_rate,
            max_tenure_months=self.max_tenure_months,
        )
