from __future__ import annotations

from datetime import datetime, timezone

from typing import Optional

from errors import NotFoundError, StateError, ValidationError
from locks import asset_lock, forget_asset_lock
from models import (
    Asset,
    AssetIn,
    AssetUpdate,
    Borrower,
    BorrowerIn,
    BorrowerUpdate,
    Loan,
    LoanDetail,
    Maintenance,
    MaintenanceDetail,
    MaintenanceIn,
    MaintenanceUpdate,
)
from sample_data import SAMPLE_ASSETS, SAMPLE_BORROWERS
from storage import Storage

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- Asset ----------
def get_asset(store: Storage, asset_id: str) -> Optional[Asset]:
    return store.find_asset(asset_id)


def list_assets(store: Storage, *, q: str | None = None, category: str | None = None) -> list[Asset]:
    return store.list_assets(q=q, category=category)


def create_asset(store: Storage, body: AssetIn, *, commit: bool = True) -> Asset:
    now = utcnow()
    a = Asset(
        id=store.new_id("asset"),
        **body.model_dump(),
        available_quantity=body.total_quantity,
        created_at=now,
        updated_at=now,
    )
    store.save_asset(a)
    store.persist(commit=commit)
    return a


def update_asset(store: Storage, asset_id: str, body: AssetUpdate, *, commit: bool = True) -> Asset:
    if store.find_asset(asset_id) is None:
        raise NotFoundError(f"asset {asset_id} not found")

    data = body.model_dump(exclude_unset=True)
    for field in ("name", "category", "total_quantity", "condition", "status", "purchase_price"):
        if field in data and data[field] is None:
            data.pop(field)

    # same lock as issue/return: available is recomputed from a fresh read
    with asset_lock(asset_id):
        a = store.find_asset(asset_id)
        if not a:
            raise NotFoundError(f"asset {asset_id} not found")

        # available moves with total so units on loan stay accounted for
        if "total_quantity" in data:
            on_loan = a.total_quantity - a.available_quantity
            if data["total_quantity"] < on_loan:
                raise ValidationError(
                    f"total_quantity cannot be below the {on_loan} unit(s) currently on loan"
                )
            data["available_quantity"] = data["total_quantity"] - on_loan

        updated = a.model_copy(update={**data, "updated_at": utcnow()})
        try:
            store.save_asset(updated)
            store.persist(commit=commit)
        except Exception:
            store.rollback()
            raise
    return updated


def delete_asset(store: Storage, asset_id: str, *, commit: bool = True) -> bool:
    if store.find_asset(asset_id) is None:
        return False
    with asset_lock(asset_id):
        if store.list_loans(active_only=True, asset_id=asset_id):
            raise StateError("asset has open loans and cannot be deleted")
        deleted = store.delete_asset(asset_id)
        store.persist(commit=commit)
    if deleted and commit:
        forget_asset_lock(asset_id)
    return deleted


# ---------- Borrower ----------
def _normalize_class(role: str, class_name: Optional[str]) -> Optional[str]:
    class_name = (class_name or "").strip() or None
    if role == "Student" and not class_name:
        raise ValidationError("class_name is required for students")
    if role == "Teacher":
        return None
    return class_name


def get_borrower(store: Storage, borrower_id: str) -> Optional[Borrower]:
    return store.find_borrower(borrower_id)


def list_borrowers(store: Storage, *, q: str | None = None, role: str | None = None) -> list[Borrower]:
    return store.list_borrowers(q=q, role=role)


def create_borrower(store: Storage, body: BorrowerIn, *, commit: bool = True) -> Borrower:
    b = Borrower(
        id=store.new_id("borrower"),
        name=body.name.strip(),
        role=body.role,
        class_name=_normalize_class(body.role, body.class_name),
        phone=body.phone,
        created_at=utcnow(),
    )
    store.save_borrower(b)
    store.persist(commit=commit)
    return b


def update_borrower(store: Storage, borrower_id: str, body: BorrowerUpdate, *, commit: bool = True) -> Borrower:
    b = store.find_borrower(borrower_id)
    if not b:
        raise NotFoundError(f"borrower {borrower_id} not found")

    data = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None or k == "class_name"}
    role = data.get("role", b.role)
    class_name = data.get("class_name", b.class_name)
    data["class_name"] = _normalize_class(role, class_name)

    updated = b.model_copy(update=data)
    store.save_borrower(updated)
    store.persist(commit=commit)
    return updated


def delete_borrower(store: Storage, borrower_id: str, *, commit: bool = True) -> bool:
    deleted = store.delete_borrower(borrower_id)
    store.persist(commit=commit)
    return deleted


# ---------- Maintenance ----------
def get_maintenance(store: Storage, maintenance_id: str) -> Optional[Maintenance]:
    return store.find_maintenance(maintenance_id)


def list_maintenance(store: Storage, *, status: str | None = None) -> list[Maintenance]:
    return store.list_maintenance(status=status)


def count_active_maintenance(store: Storage) -> int:
    return len(store.list_maintenance(status="In Progress"))


def create_maintenance(store: Storage, body: MaintenanceIn, *, commit: bool = True) -> Maintenance:
    if store.find_asset(body.asset_id) is None:
        raise NotFoundError(f"asset {body.asset_id} not found")

    now = utcnow()
    m = Maintenance(
        id=store.new_id("maint"),
        loan_id=None,
        **body.model_dump(),
        created_at=now,
        updated_at=now,
    )
    store.save_maintenance(m)
    store.persist(commit=commit)
    return m


def update_maintenance(
    store: Storage,
    maintenance_id: str,
    body: MaintenanceUpdate,
    *,
    commit: bool = True,
) -> Maintenance:
    m = store.find_maintenance(maintenance_id)
    if not m:
        raise NotFoundError(f"maintenance {maintenance_id} not found")

    data = body.model_dump(exclude_unset=True)
    if m.status == "Completed" and data.get("status") == "In Progress":
        raise StateError("completed maintenance cannot be reopened")
    for field in ("maintenance_date", "estimated_cost", "status"):
        if field in data and data[field] is None:
            data.pop(field)

    updated = m.model_copy(update={**data, "updated_at": utcnow()})
    store.save_maintenance(updated)
    store.persist(commit=commit)
    return updated


def delete_maintenance(store: Storage, maintenance_id: str, *, commit: bool = True) -> bool:
    deleted = store.delete_maintenance(maintenance_id)
    store.persist(commit=commit)
    return deleted


def describe_maintenance(store: Storage, records: list[Maintenance]) -> list[MaintenanceDetail]:
    assets: dict[str, Optional[Asset]] = {}
    result = []
    for m in records:
        if m.asset_id not in assets:
            assets[m.asset_id] = store.find_asset(m.asset_id)
        asset = assets[m.asset_id]
        result.append(
            MaintenanceDetail(
                **m.model_dump(),
                asset_name=asset.name if asset else None,
                asset_category=asset.category if asset else None,
            )
        )
    return result


# ---------- Loan details ----------
def describe_loans(store: Storage, loans: list[Loan], *, q: str | None = None) -> list[LoanDetail]:
    """Attach borrower and asset names; ``q`` matches either name."""
    borrowers: dict[str, Optional[Borrower]] = {}
    assets: dict[str, Optional[Asset]] = {}
    search = (q or "").strip().lower()

    result = []
    for loan in loans:
        if loan.borrower_id not in borrowers:
            borrowers[loan.borrower_id] = store.find_borrower(loan.borrower_id)
        if loan.asset_id not in assets:
            assets[loan.asset_id] = store.find_asset(loan.asset_id)
        b = borrowers[loan.borrower_id]
        a = assets[loan.asset_id]

        detail = LoanDetail(
            **loan.model_dump(),
            borrower_name=b.name if b else None,
            borrower_class=b.class_name if b else None,
            borrower_role=b.role if b else None,
            asset_name=a.name if a else None,
        )
        if search and search not in (detail.borrower_name or "").lower() \
                and search not in (detail.asset_name or "").lower():
            continue
        result.append(detail)
    return result


# ---------- Seed ----------
def seed_sample_data(store: Storage, *, commit: bool = True) -> dict:
    """Insert the starter assets and borrowers whose ids are not present yet."""
    now = utcnow()
    created = 0
    skipped = 0

    try:
        for row in SAMPLE_ASSETS:
            if store.find_asset(row["id"]) is not None:
                skipped += 1
                continue
            store.save_asset(
                Asset(**row, available_quantity=row["total_quantity"], created_at=now, updated_at=now)
            )
            created += 1
        for row in SAMPLE_BORROWERS:
            if store.find_borrower(row["id"]) is not None:
                skipped += 1
                continue
            store.save_borrower(Borrower(**row, created_at=now))
            created += 1
        store.persist(commit=commit)
    except Exception:
        store.rollback()
        raise

    return {"created": created, "skipped": skipped}
