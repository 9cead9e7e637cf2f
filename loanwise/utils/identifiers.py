"""Public identifiers for loan applications and transactions"""

import random
import time


def _generate(prefix: str) -> str:
    # <prefix><epoch millis><0-999>
    return f"{prefix}{int(time.time() * 1000)}{random.randint(0, 999)}"


def generate_application_id() -> str:
    """Loan application reference, e.g. LN1718000000000123"""
    return _generate("LN")


def generate_transaction_id() -> str:
    """Transaction reference, e.g. TXN1718000000000456"""
    return _generate("TXN")
