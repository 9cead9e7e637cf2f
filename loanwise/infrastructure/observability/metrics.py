"""Prometheus metrics for approval rates, sanctioned amounts and request latency"""

from decimal import Decimal
from typing import Optional
from prometheus_client import Counter, Histogram

# Decision metrics
loan_decision_counter = Counter(
    "loanwise_loan_decision_total",
    "Total loan decisions made",
    ["outcome"],  # approved | rejected
)

sanctioned_amount_bucket_counter = Counter(
    "loanwise_sanctioned_amount_bucket_total",
    "Sanctioned loan amounts by bucket",
    ["bucket"],
)

invalid_loan_input_counter = Counter(
    "loanwise_invalid_loan_input_total",
    "Loan applications failing input validation",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_loan_decision(status: str, sanctioned_amount: Optional[Decimal]) -> None:
    """Record decision metrics for monitoring approval rates and sanction sizes"""
    loan_decision_counter.labels(outcome=status).inc()

    amount = sanctioned_amount or Decimal("0")
    if amount == 0:
        bucket = "0"
    elif amount <= 100_000:
        bucket = "0-1L"
    elif amount <= 1_000_000:
        bucket = "1L-10L"
    else:
        bucket = "10L+"

    sanctioned_amount_bucket_counter.labels(bucket=bucket).inc()
