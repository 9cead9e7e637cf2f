"""Unit tests for the loan decision engine"""

import pytest
from decimal import Decimal
from loanwise.domain.decisioning import (
    LoanDecisionEngine,
    RandomRiskScorer,
    approval_score_from_signal,
    decide,
)
from loanwise.domain.exceptions import InvalidInput


class FixedScorer:
    def __init__(self, signal: float):
        self.signal = signal

    def draw(self) -> float:
        return self.signal


def test_decide_approved_scenario():
    """100000 at 9.5% over 60 months with a score of 80"""
    decision = decide(Decimal("100000"), Decimal("9.5"), 60, 0.5)

    assert decision.approved is True
    assert decision.status == "approved"
    assert decision.approval_score == 80
    assert decision.sanctioned_amount == Decimal("75000.00")
    assert decision.monthly_emi == Decimal("1575.14")
    assert decision.total_interest == Decimal("19508.40")  # 1575.14 * 60 - 75000
    assert decision.processing_fee == Decimal("750.00")


def test_decide_rejected_has_no_derived_fields():
    """Score 65 is below the threshold"""
    decision = decide(Decimal("100000"), Decimal("9.5"), 60, 0.125)

    assert decision.approval_score == 65
    assert decision.approved is False
    assert decision.status == "rejected"
    assert decision.sanctioned_amount is None
    assert decision.monthly_emi is None
    assert decision.total_interest is None
    assert decision.processing_fee is None


def test_threshold_is_inclusive():
    """Score of exactly 70 approves, 69 rejects"""
    at_threshold = decide(Decimal("50000"), Decimal("10"), 24, 0.25)
    below = decide(Decimal("50000"), Decimal("10"), 24, 0.2499)

    assert at_threshold.approval_score == 70
    assert at_threshold.approved is True
    assert below.approval_score == 69
    assert below.approved is False


@pytest.mark.parametrize("signal", [0.0, 0.1, 0.2499, 0.25, 0.5, 0.75, 0.999999])
def test_exactly_one_field_set_populated(signal):
    decision = decide(Decimal("250000"), Decimal("11"), 36, signal)
    derived = decision.derived_fields().values()

    assert 60 <= decision.approval_score < 100
    if decision.approved:
        assert all(value is not None for value in derived)
    else:
        assert all(value is None for value in derived)


def test_score_range_bounds():
    assert approval_score_from_signal(0.0) == 60
    assert approval_score_from_signal(0.999999) == 99


def test_decide_is_idempotent_for_fixed_signal():
    first = decide(Decimal("420000"), Decimal("8.5"), 84, 0.6)
    second = decide(Decimal("420000"), Decimal("8.5"), 84, 0.6)
    assert first == second


def test_sanctioned_amount_floors_three_quarters():
    """10001 * 0.75 = 7500.75 -> 7500"""
    decision = decide(Decimal("10001"), Decimal("9"), 12, 0.9)
    assert decision.sanctioned_amount == Decimal("7500.00")
    assert decision.sanctioned_amount <= Decimal("10001")
    assert decision.processing_fee == Decimal("75.00")


def test_emi_decreases_as_tenure_grows():
    emis = [
        decide(Decimal("500000"), Decimal("10.5"), tenure, 0.9).monthly_emi
        for tenure in (12, 24, 36, 48, 60, 84, 120)
    ]
    assert all(longer < shorter for shorter, longer in zip(emis, emis[1:]))


def test_total_interest_never_negative_for_tiny_principal():
    """Cent rounding of a 1.00 principal must not produce negative interest"""
    decision = decide(Decimal("2"), Decimal("0.01"), 12, 0.9)
    assert decision.sanctioned_amount == Decimal("1.00")
    assert decision.total_interest >= 0


def test_decide_accepts_plain_numbers():
    decision = decide(100000, 9.5, 60, 0.5)
    assert decision.monthly_emi == Decimal("1575.14")


@pytest.mark.parametrize(
    "amount, rate, tenure",
    [
        (Decimal("0"), Decimal("9.5"), 60),
        (Decimal("-100"), Decimal("9.5"), 60),
        (Decimal("100000"), Decimal("0"), 60),
        (Decimal("100000"), Decimal("-1"), 60),
        (Decimal("100000"), Decimal("9.5"), 0),
        (Decimal("100000"), Decimal("9.5"), -12),
        (Decimal("100000"), Decimal("9.5"), 12.5),
        (Decimal("100000"), Decimal("9.5"), 481),
        (Decimal("100000"), Decimal("9.5"), 10**9),
        ("abc", Decimal("9.5"), 12),
    ],
)
def test_decide_invalid_input(amount, rate, tenure):
    with pytest.raises(InvalidInput):
        decide(amount, rate, tenure, 0.5)


@pytest.mark.parametrize("signal", [-0.1, 1.0, 1.5])
def test_decide_rejects_out_of_range_signal(signal):
    with pytest.raises(InvalidInput):
        decide(Decimal("100000"), Decimal("9.5"), 60, signal)


def test_engine_uses_injected_scorer():
    engine = LoanDecisionEngine(FixedScorer(0.125))
    assert engine.evaluate(Decimal("100000"), Decimal("9.5"), 60).status == "rejected"

    engine = LoanDecisionEngine(FixedScorer(0.5))
    assert engine.evaluate(Decimal("100000"), Decimal("9.5"), 60).status == "approved"


def test_engine_validates_before_drawing():
    class ExplodingScorer:
        def draw(self) -> float:
            raise AssertionError("scorer should not be consulted")

    with pytest.raises(InvalidInput):
        LoanDecisionEngine(ExplodingScorer()).evaluate(Decimal("100000"), Decimal("9.5"), 0)


def test_engine_custom_policy():
    engine = LoanDecisionEngine(FixedScorer(0.5), approval_threshold=90, sanction_ratio=Decimal("1"))
    assert engine.evaluate(Decimal("100000"), Decimal("9.5"), 60).approved is False

    engine = LoanDecisionEngine(FixedScorer(0.9), sanction_ratio=Decimal("1"))
    assert engine.evaluate(Decimal("100000"), Decimal("9.5"), 60).sanctioned_amount == Decimal("100000.00")


def test_tenure_ceiling_is_inclusive_and_configurable():
    decision = decide(Decimal("100000"), Decimal("9.5"), 480, 0.5)
    assert decision.approved is True
    assert decision.monthly_emi > 0

    engine = LoanDecisionEngine(FixedScorer(0.5), max_tenure_months=120)
    assert engine.evaluate(Decimal("100000"), Decimal("9.5"), 120).approved is True
    with pytest.raises(InvalidInput, match="at most 120"):
        engine.evaluate(Decimal("100000"), Decimal("9.5"), 121)


def test_random_scorer_range_and_seed():
    draws = [RandomRiskScorer().draw() for _ in range(200)]
    assert all(0 <= d < 1 for d in draws)

    seeded_a = RandomRiskScorer(seed=42)
    seeded_b = RandomRiskScorer(seed=42)
    assert [seeded_a.draw() for _ in range(5)] == [seeded_b.draw() for _ in range(5)]
