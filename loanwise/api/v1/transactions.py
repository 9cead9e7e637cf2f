"""GET/POST /api/transactions - payment history"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from loanwise.api.dependencies import get_current_user
from loanwise.api.v1.schemas import TransactionCreateRequest, TransactionResponse
from loanwise.infrastructure.database.models import User
from loanwise.infrastructure.database.repositories import LoanRepository, TransactionRepository
from loanwise.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return TransactionRepository(db).get_user_transactions(current_user.id)


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    request_body: TransactionCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a transaction; loan_id, when given, must be one of the user's loans"""
    if request_body.loan_id is not None and LoanRepository(db).get_user_loan(current_user.id, request_body.loan_id) is None:
        raise HTTPException(status_code=404, detail=f"Loan {request_body.loan_id} not found")

    transaction = TransactionRepository(db).create_transaction(
        user_id=current_user.id,
        **request_body.model_dump(),
    )
    db.commit()
    return transaction
