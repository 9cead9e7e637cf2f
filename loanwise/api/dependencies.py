"""Dependency injection for FastAPI endpoints"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from loanwise.config import settings
from loanwise.domain.decisioning import LoanDecisionEngine, RandomRiskScorer, RiskScorer
from loanwise.infrastructure.database.models import User
from loanwise.infrastructure.database.repositories import UserRepository
from loanwise.infrastructure.database.session import get_db
from loanwise.infrastructure.security import decode_access_token
from loanwise.infrastructure.uploads import BillFileStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Shared across requests; draw() holds no per-request state
_risk_scorer = RandomRiskScorer(seed=settings.risk_seed)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_risk_scorer() -> RiskScorer:
    """Provide the risk scorer backing loan decisions"""
    return _risk_scorer


def get_decision_engine(scorer: RiskScorer = Depends(get_risk_scorer)) -> LoanDecisionEngine:
    """Provide a decision engine configured from settings"""
    return LoanDecisionEngine(
        scorer,
        approval_threshold=settings.approval_threshold,
        sanction_ratio=settings.sanction_ratio,
        processing_fee_rate=settings.processing_fee_rate,
        max_tenure_months=settings.max_tenure_months,
    )


def get_bill_store() -> BillFileStore:
    """Provide bill upload storage"""
    return BillFileStore()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        HTTPException 401: No token supplied
        HTTPException 403: Token invalid, expired, or user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")

    payload = decode_access_token(credentials.credentials)
    if payload is None or "sub" not in payload:
        logger.warning("Token validation failed")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")

    user = UserRepository(db).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")
    return user
