"""GET/PATCH /api/user/profile"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from loanwise.api.dependencies import get_current_user
from loanwise.api.v1.schemas import ProfileUpdateRequest, UserResponse
from loanwise.infrastructure.database.models import User
from loanwise.infrastructure.database.repositories import BankRepository, UserRepository
from loanwise.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/user/profile", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/user/profile", response_model=UserResponse)
def update_profile(
    request_body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update profile fields of the current user.

    Password and credit fields cannot be changed here.
    """
    updates = request_body.model_dump(exclude_unset=True)

    bank_id = updates.get("selected_bank_id")
    if bank_id is not None and BankRepository(db).get_bank_by_id(bank_id) is None:
        raise HTTPException(status_code=404, detail="Bank not found")

    user = UserRepository(db).update_user(current_user.id, updates)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    db.commit()
    return user
