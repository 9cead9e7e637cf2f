"""GET /api/banks and /api/digital-wallets - public reference data"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from loanwise.api.v1.schemas import BankResponse, DigitalWalletResponse
from loanwise.infrastructure.database.repositories import BankRepository, DigitalWalletRepository
from loanwise.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/banks", response_model=List[BankResponse])
def list_banks(db: Session = Depends(get_db)):
    return BankRepository(db).get_active_banks()


@router.get("/digital-wallets", response_model=List[DigitalWalletResponse])
def list_digital_wallets(db: Session = Depends(get_db)):
    return DigitalWalletRepository(db).get_active_wallets()
