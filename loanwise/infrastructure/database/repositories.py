"""Data access layer for users, banks, bills, loans, transactions and wallets"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy.orm import Session
from loanwise.infrastructure.database.models import (
    User,
    Bank,
    UtilityBill,
    Loan,
    Transaction,
    DigitalWallet,
)
from loanwise.domain.models import LoanDecision
from loanwise.utils.identifiers import generate_application_id, generate_transaction_id

# Fields a user may change through the profile endpoint
PROFILE_FIELDS = {"username", "first_name", "last_name", "phone", "selected_bank_id"}

_MAX_ID_ATTEMPTS = 5


def _unique_reference(db: Session, column, generate: Callable[[], str]) -> str:
    """Generate a public reference not yet used in column"""
    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = generate()
        if not db.query(column).filter(column == candidate).first():
            return candidate
    raise RuntimeError(f"Could not allocate a unique {column.key}")


class UserRepository:
    """Repository for registered users"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, **fields: Any) -> User:
        """Persist a new user; password must already be hashed"""
        db_user = User(**fields)
        self.db.add(db_user)
        self.db.flush()
        return db_user

    def update_user(self, user_id: int, updates: Dict[str, Any]) -> Optional[User]:
        """Apply profile updates, ignoring fields outside PROFILE_FIELDS"""
        db_user = self.get_user(user_id)
        if db_user is None:
            return None
        for key, value in updates.items():
            if key in PROFILE_FIELDS:
                setattr(db_user, key, value)
        self.db.flush()
        return db_user


class BankRepository:
    """Repository for lending banks"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_banks(self) -> List[Bank]:
        return self.db.query(Bank).filter(Bank.is_active.is_(True)).order_by(Bank.id).all()

    def get_bank_by_id(self, bank_id: int) -> Optional[Bank]:
        return self.db.get(Bank, bank_id)

    def get_bank_by_code(self, code: str) -> Optional[Bank]:
        return self.db.query(Bank).filter(Bank.code == code).first()

    def create_bank(self, **fields: Any) -> Bank:
        db_bank = Bank(**fields)
        self.db.add(db_bank)
        self.db.flush()
        return db_bank


class UtilityBillRepository:
    """Repository for uploaded utility bills"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_bills(self, user_id: int) -> List[UtilityBill]:
        """Bills for a user, newest upload first"""
        return (
            self.db.query(UtilityBill)
            .filter(UtilityBill.user_id == user_id)
            .order_by(UtilityBill.uploaded_at.desc(), UtilityBill.id.desc())
            .all()
        )

    def create_bill(self, **fields: Any) -> UtilityBill:
        db_bill = UtilityBill(**fields)
        self.db.add(db_bill)
        self.db.flush()
        return db_bill


class LoanRepository:
    """Repository for loan applications"""

    def __init__(self, db: Session):
        self.db = db

    def create_loan(
        self,
        user_id: int,
        bank_id: int,
        requested_amount,
        interest_rate,
        tenure: int,
        decision: LoanDecision,
    ) -> Loan:
        """Persist a decided loan application under a fresh application_id"""
        db_loan = Loan(
            user_id=user_id,
            bank_id=bank_id,
            application_id=_unique_reference(self.db, Loan.application_id, generate_application_id),
            requested_amount=requested_amount,
            interest_rate=interest_rate,
            tenure=tenure,
            status=decision.status,
            approval_score=decision.approval_score,
            approved_at=datetime.now(timezone.utc) if decision.approved else None,
            **decision.derived_fields(),
        )
        self.db.add(db_loan)
        self.db.flush()  # Get ID without committing
        return db_loan

    def get_user_loans(self, user_id: int) -> List[Loan]:
        """Loans for a user, most recent application first"""
        return (
            self.db.query(Loan)
            .filter(Loan.user_id == user_id)
            .order_by(Loan.applied_at.desc(), Loan.id.desc())
            .all()
        )

    def get_user_loan(self, user_id: int, loan_id: int) -> Optional[Loan]:
        return (
            self.db.query(Loan)
            .filter(Loan.id == loan_id, Loan.user_id == user_id)
            .first()
        )

    def update_status(self, loan: Loan, status: str) -> Loan:
        loan.status = status
        self.db.flush()
        return loan


class TransactionRepository:
    """Repository for transaction history"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_transactions(self, user_id: int) -> List[Transaction]:
        """Transactions for a user, newest first"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.user_id == user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .all()
        )

    def create_transaction(self, **fields: Any) -> Transaction:
        db_transaction = Transaction(
            transaction_id=_unique_reference(self.db, Transaction.transaction_id, generate_transaction_id),
            **fields,
        )
        self.db.add(db_transaction)
        self.db.flush()
        return db_transaction


class DigitalWalletRepository:
    """Repository for digital wallet payment options"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_wallets(self) -> List[DigitalWallet]:
        return self.db.query(DigitalWallet).filter(DigitalWallet.is_active.is_(True)).order_by(DigitalWallet.id).all()

    def get_wallet_by_code(self, code: str) -> Optional[DigitalWallet]:
        return self.db.query(DigitalWallet).filter(DigitalWallet.code == code).first()

    def create_wallet(self, **fields: Any) -> DigitalWallet:
        db_wallet = DigitalWallet(**fields)
        self.db.add(db_wallet)
        self.db.flush()
        return db_wallet
