"""GET /api/analytics/summary - credit utilization and spend breakdown"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from loanwise.api.dependencies import get_current_user
from loanwise.api.v1.schemas import PortfolioSummaryResponse
from loanwise.domain.analytics import summarize_portfolio
from loanwise.infrastructure.database.models import User
from loanwise.infrastructure.database.repositories import (
    LoanRepository,
    TransactionRepository,
    UtilityBillRepository,
)
from loanwise.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/analytics/summary", response_model=PortfolioSummaryResponse)
def get_summary(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    summary = summarize_portfolio(
        current_user,
        LoanRepository(db).get_user_loans(current_user.id),
        TransactionRepository(db).get_user_transactions(current_user.id),
        UtilityBillRepository(db).get_user_bills(current_user.id),
    )
    return PortfolioSummaryResponse.model_validate(summary)
