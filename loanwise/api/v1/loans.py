"""Loan application, listing, status update and repayment schedule endpoints"""

import time
import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from loanwise.api.dependencies import get_current_user, get_decision_engine, get_request_id
from loanwise.api.v1.schemas import (
    LoanApplicationRequest,
    LoanResponse,
    LoanStatusUpdateRequest,
    ScheduleResponse,
    ScheduleEntrySchema,
)
from loanwise.config import settings
from loanwise.domain.amortization import generate_amortization_schedule
from loanwise.domain.decisioning import LoanDecisionEngine
from loanwise.domain.exceptions import (
    InvalidInput,
    InvalidStatusTransitionError,
    LoanNotFoundError,
    ScheduleUnavailableError,
)
from loanwise.domain.models import APPROVED, DISBURSED, can_transition
from loanwise.infrastructure.database.models import Loan, User
from loanwise.infrastructure.database.repositories import BankRepository, LoanRepository
from loanwise.infrastructure.database.session import get_db
from loanwise.infrastructure.observability.logging import log_loan_decision
from loanwise.infrastructure.observability.metrics import invalid_loan_input_counter, record_loan_decision

router = APIRouter()

OFFERED_TENURES = {12, 24, 36, 48, 60, 84, 120}
OFFERED_RATES = {Decimal(r) for r in ("8.5", "9.0", "9.5", "10.0", "10.5", "11.0")}


def check_loan_policy(request_body: LoanApplicationRequest) -> None:
    """
    Apply server-side policy bounds on top of the engine's positivity checks.

    Raises:
        InvalidInput: Amount outside the lending range, or tenure/rate not offered
    """
    if not settings.min_requested_amount <= request_body.requested_amount <= settings.max_requested_amount:
        raise InvalidInput(
            f"requested_amount must be between {settings.min_requested_amount} and {settings.max_requested_amount}"
        )
    if settings.enforce_loan_options:
        if request_body.tenure not in OFFERED_TENURES:
            raise InvalidInput(f"tenure must be one of {sorted(OFFERED_TENURES)}")
        if request_body.interest_rate not in OFFERED_RATES:
            raise InvalidInput(f"interest_rate must be one of {sorted(str(r) for r in OFFERED_RATES)}")


def _get_owned_loan(db: Session, user: User, loan_id: int) -> Loan:
    loan = LoanRepository(db).get_user_loan(user.id, loan_id)
    if loan is None:
        raise LoanNotFoundError(f"Loan {loan_id} not found")
    return loan


@router.get("/loans", response_model=List[LoanResponse])
def list_loans(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Loans for the current user, newest first"""
    return LoanRepository(db).get_user_loans(current_user.id)


@router.post("/loans", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
def apply_for_loan(
    request_body: LoanApplicationRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    engine: LoanDecisionEngine = Depends(get_decision_engine),
):
    """
    Submit a loan application and decide it synchronously.

    Flow:
    1. Validate policy bounds and bank
    2. Run the decision engine (score, sanction, EMI, fees)
    3. Persist the loan with a generated application_id
    4. Record metrics and logs
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        check_loan_policy(request_body)

        if BankRepository(db).get_bank_by_id(request_body.bank_id) is None:
            raise HTTPException(status_code=404, detail="Bank not found")

        decision = engine.evaluate(
            request_body.requested_amount,
            request_body.interest_rate,
            request_body.tenure,
        )

        loan = LoanRepository(db).create_loan(
            user_id=current_user.id,
            bank_id=request_body.bank_id,
            requested_amount=request_body.requested_amount,
            interest_rate=request_body.interest_rate,
            tenure=request_body.tenure,
            decision=decision,
        )
        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_loan_decision(decision.status, decision.sanctioned_amount)
        log_loan_decision(
            request_id,
            current_user.id,
            loan.application_id,
            decision.status,
            decision.approval_score,
            duration_ms,
        )

        return loan

    except InvalidInput as e:
        invalid_loan_input_counter.inc()
        db.rollback()
        logging.warning(f"Invalid loan input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except HTTPException:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/loans/{loan_id}", response_model=LoanResponse)
def update_loan_status(
    loan_id: int,
    request_body: LoanStatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Move a loan to a new status, e.g. approved -> disbursed.

    Decisions are final: rejected loans cannot be approved or disbursed, and
    disbursed loans stay disbursed.
    """
    try:
        loan = _get_owned_loan(db, current_user, loan_id)
        if not can_transition(loan.status, request_body.status):
            raise InvalidStatusTransitionError(
                f"Loan {loan.application_id} cannot move from {loan.status} to {request_body.status}"
            )
    except LoanNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    LoanRepository(db).update_status(loan, request_body.status)
    db.commit()
    logging.info(
        "Loan status updated",
        extra={"user_id": current_user.id, "loan_id": loan_id, "status": request_body.status},
    )
    return loan


@router.get("/loans/{loan_id}/schedule", response_model=ScheduleResponse)
def get_repayment_schedule(
    loan_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Month-by-month repayment schedule for a sanctioned loan.

    Returns:
        EMI split into principal and interest with the outstanding balance
    """
    try:
        loan = _get_owned_loan(db, current_user, loan_id)
        if loan.status not in (APPROVED, DISBURSED) or not loan.sanctioned_amount:
            raise ScheduleUnavailableError(f"Loan {loan.application_id} has no sanctioned amount")
    except LoanNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ScheduleUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))

    start = loan.approved_at.date() if loan.approved_at else loan.applied_at.date()
    schedule = generate_amortization_schedule(
        Decimal(loan.sanctioned_amount),
        Decimal(loan.interest_rate),
        loan.tenure,
        start_date=start,
    )

    return ScheduleResponse(
        loan_id=loan.id,
        application_id=loan.application_id,
        principal=loan.sanctioned_amount,
        interest_rate=loan.interest_rate,
        tenure=loan.tenure,
        monthly_emi=loan.monthly_emi,
        installments=[ScheduleEntrySchema.model_validate(entry) for entry in schedule],
    )
