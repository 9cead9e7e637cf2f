"""GET/POST /api/utility-bills - bill upload and listing"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from loanwise.api.dependencies import get_bill_store, get_current_user
from loanwise.api.v1.schemas import UtilityBillResponse
from loanwise.domain.exceptions import InvalidUploadError
from loanwise.infrastructure.database.models import User
from loanwise.infrastructure.database.repositories import UtilityBillRepository
from loanwise.infrastructure.database.session import get_db
from loanwise.infrastructure.uploads import BillFileStore

router = APIRouter()


@router.get("/utility-bills", response_model=List[UtilityBillResponse])
def list_bills(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return UtilityBillRepository(db).get_user_bills(current_user.id)


@router.post("/utility-bills", response_model=UtilityBillResponse, status_code=status.HTTP_201_CREATED)
def upload_bill(
    bill_type: Literal["power", "water", "gas"] = Form(...),
    amount: Decimal = Form(..., gt=0),
    due_date: date = Form(...),
    payment_status: Literal["pending", "paid", "overdue"] = Form("pending"),
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: BillFileStore = Depends(get_bill_store),
):
    """
    Record a utility bill, optionally with its scanned file.

    Files must be PDF/JPEG/PNG and at most 5MB.
    """
    file_name, file_path = None, None
    if file is not None and file.filename:
        try:
            file_name, file_path = store.save(file)
        except InvalidUploadError as e:
            logging.warning(f"Rejected bill upload: {e}", extra={"user_id": current_user.id})
            raise HTTPException(status_code=400, detail=str(e))

    try:
        bill = UtilityBillRepository(db).create_bill(
            user_id=current_user.id,
            bill_type=bill_type,
            amount=amount,
            due_date=datetime.combine(due_date, time.min, tzinfo=timezone.utc),
            payment_status=payment_status,
            file_name=file_name,
            file_path=file_path,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        store.discard(file_path)
        logging.error(f"Failed to record utility bill: {e}", extra={"user_id": current_user.id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return bill
