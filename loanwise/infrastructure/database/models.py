"""SQLAlchemy ORM models for users, banks, bills, loans, transactions and wallets"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Text, Numeric
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class User(Base):
    """Registered customer"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, unique=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    password = Column(Text, nullable=False)  # bcrypt hash
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    selected_bank_id = Column(Integer, ForeignKey("banks.id"), nullable=True)
    credit_limit = Column(Numeric(12, 2), nullable=True, default=75000)
    used_credit = Column(Numeric(12, 2), nullable=True, default=40000)
    credit_score = Column(Integer, nullable=True, default=785)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    selected_bank = relationship("Bank")
    utility_bills = relationship("UtilityBill", back_populates="user", cascade="all, delete-orphan")
    loans = relationship("Loan", back_populates="user", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")


class Bank(Base):
    """Lending bank a user can apply through"""

    __tablename__ = "banks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    code = Column(Text, nullable=False, unique=True)
    logo_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    loans = relationship("Loan", back_populates="bank")


class UtilityBill(Base):
    """Uploaded power/water/gas bill"""

    __tablename__ = "utility_bills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    bill_type = Column(String(50), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    payment_status = Column(String(20), nullable=False, default="pending")
    file_name = Column(Text, nullable=True)
    file_path = Column(Text, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="utility_bills")


class Loan(Base):
    """Loan application with its decision fields"""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    bank_id = Column(Integer, ForeignKey("banks.id"), nullable=False)
    application_id = Column(Text, nullable=False, unique=True)
    requested_amount = Column(Numeric(12, 2), nullable=False)
    sanctioned_amount = Column(Numeric(12, 2), nullable=True)
    interest_rate = Column(Numeric(5, 2), nullable=False)
    tenure = Column(Integer, nullable=False)  # months
    monthly_emi = Column(Numeric(10, 2), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    approval_score = Column(Integer, nullable=True)
    processing_fee = Column(Numeric(8, 2), nullable=True)
    total_interest = Column(Numeric(12, 2), nullable=True)
    applied_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    approved_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="loans")
    bank = relationship("Bank", back_populates="loans")
    transactions = relationship("Transaction", back_populates="loan")


class Transaction(Base):
    """Money movement: EMI, bill payment, disbursal, fee"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=True)
    transaction_id = Column(Text, nullable=False, unique=True)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    payment_method = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="transactions")
    loan = relationship("Loan", back_populates="transactions")


class DigitalWallet(Base):
    """UPI / wallet payment option"""

    __tablename__ = "digital_wallets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    code = Column(Text, nullable=False, unique=True)
    icon_class = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
