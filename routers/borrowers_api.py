from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

import crud
from auth import SessionContext
from dependencies import get_storage, require_admin
from filter_helpers import blank_to_none, normalize_role
from models import Borrower, BorrowerIn, BorrowerUpdate
from storage import Storage

router = APIRouter()


@router.get("/borrowers", response_model=list[Borrower])
def list_borrowers_api(
    q: Optional[str] = None,
    role: Optional[str] = None,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    q = blank_to_none(q)
    role = normalize_role(role)
    return crud.list_borrowers(store, q=q, role=role)


@router.post("/borrowers", response_model=Borrower, status_code=201)
def create_borrower_api(
    body: BorrowerIn,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    return crud.create_borrower(store, body)


@router.get("/borrowers/{borrower_id}", response_model=Borrower)
def get_borrower_api(
    borrower_id: str,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    borrower = crud.get_borrower(store, borrower_id)
    if not borrower:
        raise HTTPException(status_code=404, detail="borrower not found")
    return borrower


@router.patch("/borrowers/{borrower_id}", response_model=Borrower)
def update_borrower_api(
    borrower_id: str,
    body: BorrowerUpdate,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    return crud.update_borrower(store, borrower_id, body)


@router.delete("/borrowers/{borrower_id}", status_code=204)
def delete_borrower_api(
    borrower_id: str,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    ok = crud.delete_borrower(store, borrower_id)
    if not ok:
        raise HTTPException(status_code=404, detail="borrower not found")
    return None
