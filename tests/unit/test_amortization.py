"""Unit tests for EMI calculation and amortization schedules"""

from datetime import date
from decimal import Decimal

import pytest
from loanwise.domain.amortization import (
    MAX_TENURE_MONTHS,
    calculate_emi,
    generate_amortization_schedule,
    round_currency,
)
from loanwise.domain.exceptions import InvalidInput


def test_calculate_emi_reference_values():
    assert calculate_emi(Decimal("75000"), Decimal("9.5"), 60) == Decimal("1575.14")
    assert calculate_emi(Decimal("100000"), Decimal("12"), 12) == Decimal("8884.88")


def test_calculate_emi_zero_rate_splits_principal():
    """Zero interest must not divide by zero"""
    assert calculate_emi(Decimal("75000"), Decimal("0"), 60) == Decimal("1250.00")
    assert calculate_emi(Decimal("1000"), Decimal("0"), 3) == Decimal("333.33")


def test_calculate_emi_near_zero_rate_approaches_even_split():
    emi = calculate_emi(Decimal("12000"), Decimal("0.0001"), 12)
    assert Decimal("1000.00") <= emi <= Decimal("1000.01")


def test_round_currency_half_up():
    assert round_currency(Decimal("1.005")) == Decimal("1.01")
    assert round_currency(Decimal("1.004")) == Decimal("1.00")
    assert round_currency(Decimal("2.5")) == Decimal("2.50")


def test_schedule_first_installment_split():
    """Month 1 interest = 75000 * 9.5 / 1200 = 593.75"""
    schedule = generate_amortization_schedule(Decimal("75000"), Decimal("9.5"), 60, start_date=date(2024, 1, 15))
    first = schedule[0]

    assert first.installment_number == 1
    assert first.emi == Decimal("1575.14")
    assert first.interest_component == Decimal("593.75")
    assert first.principal_component == Decimal("981.39")
    assert first.outstanding_balance == Decimal("74018.61")


def test_schedule_amortizes_to_zero():
    principal = Decimal("75000")
    schedule = generate_amortization_schedule(principal, Decimal("9.5"), 60, start_date=date(2024, 1, 15))

    assert len(schedule) == 60
    assert schedule[-1].outstanding_balance == Decimal("0")
    assert sum(entry.principal_component for entry in schedule) == principal
    # Every installment but the last pays exactly the EMI
    assert all(entry.emi == Decimal("1575.14") for entry in schedule[:-1])
    # Last installment only differs by rounding drift
    assert abs(schedule[-1].emi - Decimal("1575.14")) < Decimal("1.00")


def test_schedule_balances_decrease():
    schedule = generate_amortization_schedule(Decimal("300000"), Decimal("10"), 36, start_date=date(2024, 1, 1))
    balances = [entry.outstanding_balance for entry in schedule]
    assert all(later < earlier for earlier, later in zip(balances, balances[1:]))


def test_schedule_due_dates_are_monthly():
    schedule = generate_amortization_schedule(Decimal("12000"), Decimal("9"), 3, start_date=date(2024, 1, 31))

    assert [entry.due_date for entry in schedule] == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_schedule_zero_rate_last_absorbs_remainder():
    schedule = generate_amortization_schedule(Decimal("1000"), Decimal("0"), 3, start_date=date(2024, 1, 1))

    assert [entry.principal_component for entry in schedule] == [
        Decimal("333.33"),
        Decimal("333.33"),
        Decimal("333.34"),
    ]
    assert all(entry.interest_component == Decimal("0.00") for entry in schedule)


def test_schedule_empty_for_zero_principal():
    assert generate_amortization_schedule(Decimal("0"), Decimal("9.5"), 12) == []


def test_calculate_emi_huge_tenure_tends_to_interest_only():
    """(1 + r)^n past the decimal exponent range yields P * r, not an error"""
    emi = calculate_emi(Decimal("100000"), Decimal("9.5"), 10**9)
    assert emi == Decimal("791.67")


def test_schedule_rejects_tenure_above_ceiling():
    assert len(generate_amortization_schedule(Decimal("1000"), Decimal("9.5"), MAX_TENURE_MONTHS)) == MAX_TENURE_MONTHS
    with pytest.raises(InvalidInput, match="at most"):
        generate_amortization_schedule(Decimal("1000"), Decimal("9.5"), MAX_TENURE_MONTHS + 1)
