from typing import Optional

from fastapi import APIRouter, Depends

import crud
from auth import SessionContext
from dependencies import get_ledger, require_admin
from filter_helpers import blank_to_none, normalize_loan_status
from ledger import LoanLedger
from models import Loan, LoanDetail, LoanIn, LoanReturn

router = APIRouter()


@router.get("/loans", response_model=list[LoanDetail])
def list_loans_api(
    q: Optional[str] = None,
    status: Optional[str] = None,
    active_only: bool = False,
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    q = blank_to_none(q)
    status = normalize_loan_status(status)
    loans = ledger.list_loans(status=status, active_only=active_only)
    return crud.describe_loans(ledger.store, loans, q=q)


@router.post("/loans", response_model=Loan, status_code=201)
def issue_loan_api(
    body: LoanIn,
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return ledger.issue_loan(
        body.borrower_id,
        body.asset_id,
        body.quantity,
        body.loan_date,
        body.planned_return_date,
        body.condition_on_loan,
    )


@router.get("/loans/{loan_id}", response_model=LoanDetail)
def get_loan_api(
    loan_id: str,
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    loan = ledger.get_loan(loan_id)
    return crud.describe_loans(ledger.store, [loan])[0]


@router.post("/loans/{loan_id}/return", response_model=Loan)
def return_loan_api(
    loan_id: str,
    body: LoanReturn,
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return ledger.return_loan(loan_id, body.return_date, body.condition)
