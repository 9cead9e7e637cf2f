"""Default reference data: banks and digital wallets"""

import logging
from sqlalchemy.orm import Session
from loanwise.infrastructure.database.repositories import BankRepository, DigitalWalletRepository

logger = logging.getLogger(__name__)

DEFAULT_BANKS = [
    {"name": "State Bank of India", "code": "SBI"},
    {"name": "HDFC Bank", "code": "HDFC"},
    {"name": "ICICI Bank", "code": "ICICI"},
    {"name": "Axis Bank", "code": "AXIS"},
    {"name": "Punjab National Bank", "code": "PNB"},
    {"name": "Central Bank of India", "code": "CBI"},
]

DEFAULT_WALLETS = [
    {"name": "Google Pay", "code": "GPAY", "icon_class": "fab fa-google-pay"},
    {"name": "PhonePe", "code": "PHONEPE", "icon_class": "fas fa-mobile-alt"},
    {"name": "BHIM UPI", "code": "BHIM", "icon_class": "fas fa-university"},
    {"name": "Razorpay", "code": "RAZORPAY", "icon_class": "fas fa-credit-card"},
    {"name": "PayPal", "code": "PAYPAL", "icon_class": "fab fa-paypal"},
]


def seed_reference_data(db: Session) -> None:
    """Insert default banks and wallets that are not already present"""
    bank_repo = BankRepository(db)
    wallet_repo = DigitalWalletRepository(db)

    created = 0
    for bank in DEFAULT_BANKS:
        if bank_repo.get_bank_by_code(bank["code"]) is None:
            bank_repo.create_bank(logo_url="", is_active=True, **bank)
            created += 1

    for wallet in DEFAULT_WALLETS:
        if wallet_repo.get_wallet_by_code(wallet["code"]) is None:
            wallet_repo.create_wallet(is_active=True, **wallet)
            created += 1

    db.commit()
    logger.info("Reference data seeded", extra={"step": "seed", "records_created": created})
