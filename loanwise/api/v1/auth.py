"""POST /api/auth/register and /api/auth/login"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from loanwise.api.v1.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from loanwise.infrastructure.database.repositories import UserRepository
from loanwise.infrastructure.database.session import get_db
from loanwise.infrastructure.security import create_access_token, hash_password, verify_password

router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request_body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return it with a fresh access token"""
    user_repo = UserRepository(db)
    if user_repo.get_user_by_email(request_body.email) or user_repo.get_user_by_username(request_body.username):
        raise HTTPException(status_code=400, detail="User already exists")

    fields = request_body.model_dump()
    fields["password"] = hash_password(request_body.password)
    user = user_repo.create_user(**fields)
    db.commit()

    logging.info("User registered", extra={"user_id": user.id, "step": "register"})
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=create_access_token(user.id, user.email),
    )


@router.post("/auth/login", response_model=AuthResponse)
def login(request_body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for an access token"""
    user = UserRepository(db).get_user_by_email(request_body.email)
    if user is None or not verify_password(request_body.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=create_access_token(user.id, user.email),
    )
