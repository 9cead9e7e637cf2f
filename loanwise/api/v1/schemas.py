"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer, field_validator

from loanwise.domain.amortization import MAX_TENURE_MONTHS, round_currency
from loanwise.domain.models import LOAN_STATUSES

# Monetary amounts travel as fixed 2-dp strings, e.g. "75000.00"
Money = Annotated[Decimal, PlainSerializer(lambda v: str(round_currency(v)), return_type=str, when_used="json")]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Auth


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register"""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    selected_bank_id: Optional[int] = None


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login"""

    email: EmailStr
    password: str = Field(..., min_length=6)


class UserResponse(ORMModel):
    """User profile; never includes the password hash"""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    selected_bank_id: Optional[int] = None
    credit_limit: Optional[Money] = None
    used_credit: Optional[Money] = None
    credit_score: Optional[int] = None
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Response for register/login"""

    user: UserResponse
    token: str


class ProfileUpdateRequest(BaseModel):
    """Request body for PATCH /api/user/profile"""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    selected_bank_id: Optional[int] = None


# Reference data


class BankResponse(ORMModel):
    id: int
    name: str
    code: str
    logo_url: Optional[str] = None
    is_active: bool


class DigitalWalletResponse(ORMModel):
    id: int
    name: str
    code: str
    icon_class: Optional[str] = None
    is_active: bool


# Utility bills


class UtilityBillResponse(ORMModel):
    id: int
    user_id: int
    bill_type: str
    amount: Money
    due_date: datetime
    payment_status: str
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    uploaded_at: Optional[datetime] = None


# Loans


class LoanApplicationRequest(BaseModel):
    """Request body for POST /api/loans"""

    bank_id: int = Field(..., gt=0)
    requested_amount: Decimal = Field(..., gt=0, decimal_places=2, description="Requested principal")
    interest_rate: Decimal = Field(..., gt=0, decimal_places=2, description="Annual interest rate in percent")
    tenure: int = Field(..., gt=0, le=MAX_TENURE_MONTHS, description="Tenure in months")


class LoanResponse(ORMModel):
    """Loan record including decision fields"""

    id: int
    user_id: int
    bank_id: int
    application_id: str
    requested_amount: Money
    sanctioned_amount: Optional[Money] = None
    interest_rate: Decimal
    tenure: int
    monthly_emi: Optional[Money] = None
    status: str
    approval_score: Optional[int] = None
    processing_fee: Optional[Money] = None
    total_interest: Optional[Money] = None
    applied_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None


class LoanStatusUpdateRequest(BaseModel):
    """Request body for PATCH /api/loans/{loan_id}"""

    status: str = Field(..., description="Target status, e.g. disbursed")

    @field_validator("status")
    @classmethod
    def check_known_status(cls, v: str) -> str:
        if v not in LOAN_STATUSES:
            raise ValueError(f"status must be one of {list(LOAN_STATUSES)}")
        return v


class ScheduleEntrySchema(ORMModel):
    """Single month of a repayment schedule"""

    installment_number: int
    due_date: date
    emi: Money
    principal_component: Money
    interest_component: Money
    outstanding_balance: Money


class ScheduleResponse(BaseModel):
    """Response for GET /api/loans/{loan_id}/schedule"""

    loan_id: int
    application_id: str
    principal: Money
    interest_rate: Decimal
    tenure: int
    monthly_emi: Money
    installments: List[ScheduleEntrySchema]


# Transactions


class TransactionCreateRequest(BaseModel):
    """Request body for POST /api/transactions"""

    amount: Decimal = Field(..., gt=0, decimal_places=2)
    type: str = Field(..., min_length=1, max_length=50)
    status: Literal["pending", "completed", "failed"] = "pending"
    loan_id: Optional[int] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None


class TransactionResponse(ORMModel):
    id: int
    user_id: int
    loan_id: Optional[int] = None
    transaction_id: str
    amount: Money
    type: str
    status: str
    payment_method: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


# Analytics


class PortfolioSummaryResponse(ORMModel):
    """Response for GET /api/analytics/summary"""

    credit_limit: Money
    used_credit: Money
    utilization_percent: Decimal
    utilization_band: str
    total_loans: int
    approved_loans: int
    total_sanctioned: Money
    average_approval_score: Decimal
    total_transaction_amount: Money
    completed_transactions: int
    transaction_totals_by_type: Dict[str, Money]
    total_bill_amount: Money
    paid_bills: int
    bill_totals_by_type: Dict[str, Money]
