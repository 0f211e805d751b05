from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

import crud
from auth import SessionContext
from dependencies import get_ledger, get_storage, require_admin
from filter_helpers import normalize_maintenance_status
from ledger import LoanLedger
from models import Maintenance, MaintenanceDetail, MaintenanceIn, MaintenanceUpdate
from storage import Storage

router = APIRouter()


@router.get("/maintenance", response_model=list[MaintenanceDetail])
def list_maintenance_api(
    status: Optional[str] = None,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    status = normalize_maintenance_status(status)
    return crud.describe_maintenance(store, crud.list_maintenance(store, status=status))


@router.post("/maintenance", response_model=Maintenance, status_code=201)
def create_maintenance_api(
    body: MaintenanceIn,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    return crud.create_maintenance(store, body)


@router.get("/maintenance/{maintenance_id}", response_model=MaintenanceDetail)
def get_maintenance_api(
    maintenance_id: str,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    record = crud.get_maintenance(store, maintenance_id)
    if not record:
        raise HTTPException(status_code=404, detail="maintenance not found")
    return crud.describe_maintenance(store, [record])[0]


@router.patch("/maintenance/{maintenance_id}", response_model=Maintenance)
def update_maintenance_api(
    maintenance_id: str,
    body: MaintenanceUpdate,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    return crud.update_maintenance(store, maintenance_id, body)


@router.post("/maintenance/{maintenance_id}/complete", response_model=Maintenance)
def complete_maintenance_api(
    maintenance_id: str,
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return ledger.complete_maintenance(maintenance_id)


@router.delete("/maintenance/{maintenance_id}", status_code=204)
def delete_maintenance_api(
    maintenance_id: str,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    ok = crud.delete_maintenance(store, maintenance_id)
    if not ok:
        raise HTTPException(status_code=404, detail="maintenance not found")
    return None
