from __future__ import annotations

from datetime import date
from typing import Optional

import crud
from ledger import LoanLedger
from models import (
    AssetReportRow,
    CATEGORIES,
    CategoryUnits,
    DashboardStats,
    LoanReportRow,
    MaintenanceReportRow,
    MonthlyLoans,
)

RECENT_LIMIT = 5
MONTHS_SHOWN = 6


def last_months(today: date, count: int = MONTHS_SHOWN) -> list[str]:
    """``YYYY-MM`` keys for the last ``count`` months, oldest first."""
    keys = []
    for back in range(count - 1, -1, -1):
        month_index = today.year * 12 + (today.month - 1) - back
        year, month = divmod(month_index, 12)
        keys.append(f"{year:04d}-{month + 1:02d}")
    return keys


def dashboard_stats(ledger: LoanLedger) -> DashboardStats:
    store = ledger.store
    assets = store.list_assets()
    all_loans = ledger.list_loans()
    active = [l for l in all_loans if l.status in ("Borrowed", "Late")]

    units_by_category = [
        CategoryUnits(
            category=cat,  # type: ignore[arg-type]
            units=sum(a.total_quantity for a in assets if a.category == cat),
        )
        for cat in CATEGORIES
    ]

    month_counts = {key: 0 for key in last_months(ledger.today())}
    for loan in all_loans:
        key = loan.loan_date.strftime("%Y-%m")
        if key in month_counts:
            month_counts[key] += 1

    return DashboardStats(
        total_units=sum(a.total_quantity for a in assets),
        available_units=sum(a.available_quantity for a in assets),
        borrowed_units=sum(l.quantity for l in active),
        late_loans=sum(1 for l in active if l.status == "Late"),
        maintenance_in_progress=crud.count_active_maintenance(store),
        units_by_category=units_by_category,
        loans_by_month=[MonthlyLoans(month=k, count=v) for k, v in month_counts.items()],
        active_loans=crud.describe_loans(store, active[:RECENT_LIMIT]),
        recent_assets=assets[:RECENT_LIMIT],
    )


def asset_report(ledger: LoanLedger) -> list[AssetReportRow]:
    return [
        AssetReportRow(
            name=a.name,
            category=a.category,
            brand=a.brand,
            total_quantity=a.total_quantity,
            available_quantity=a.available_quantity,
            condition=a.condition,
            status=a.status,
            purchase_price=a.purchase_price,
        )
        for a in ledger.store.list_assets()
    ]


def loan_report(
    ledger: LoanLedger,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[LoanReportRow]:
    loans = ledger.list_loans()
    if start:
        loans = [l for l in loans if l.loan_date >= start]
    if end:
        loans = [l for l in loans if l.loan_date <= end]

    return [
        LoanReportRow(
            borrower=d.borrower_name or "-",
            asset=d.asset_name or "-",
            quantity=d.quantity,
            loan_date=d.loan_date,
            planned_return_date=d.planned_return_date,
            actual_return_date=d.actual_return_date,
            condition_on_return=d.condition_on_return,
            status=d.status,
        )
        for d in crud.describe_loans(ledger.store, loans)
    ]


def maintenance_report(ledger: LoanLedger) -> list[MaintenanceReportRow]:
    records = crud.describe_maintenance(ledger.store, ledger.store.list_maintenance())
    return [
        MaintenanceReportRow(
            asset=m.asset_name or "-",
            maintenance_date=m.maintenance_date,
            technician=m.technician,
            estimated_cost=m.estimated_cost,
            status=m.status,
            notes=m.notes,
        )
        for m in records
    ]
