from typing import Optional

from fastapi import APIRouter, Depends

import stats
from auth import SessionContext
from dependencies import get_ledger, require_admin
from filter_helpers import parse_date
from ledger import LoanLedger
from models import (
    AssetReportRow,
    DashboardStats,
    InventoryDiscrepancy,
    LoanReportRow,
    MaintenanceReportRow,
)

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats_api(
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return stats.dashboard_stats(ledger)


@router.get("/dashboard/audit", response_model=list[InventoryDiscrepancy])
def inventory_audit_api(
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return ledger.audit_inventory()


@router.get("/reports/assets", response_model=list[AssetReportRow])
def asset_report_api(
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return stats.asset_report(ledger)


@router.get("/reports/loans", response_model=list[LoanReportRow])
def loan_report_api(
    start: Optional[str] = None,
    end: Optional[str] = None,
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return stats.loan_report(
        ledger,
        start=parse_date(start, "start"),
        end=parse_date(end, "end"),
    )


@router.get("/reports/maintenance", response_model=list[MaintenanceReportRow])
def maintenance_report_api(
    ledger: LoanLedger = Depends(get_ledger),
    ctx: SessionContext = Depends(require_admin),
):
    return stats.maintenance_report(ledger)
