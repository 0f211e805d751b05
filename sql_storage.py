from __future__ import annotations

from typing import Optional
from uuid import uuid4

from sqlalchemy import select, delete, or_
from sqlalchemy.orm import Session, sessionmaker

from models import Asset, Borrower, Loan, Maintenance, OPEN_LOAN_STATUSES
from orm import AssetORM, BorrowerORM, LoanORM, MaintenanceORM
from storage import Storage, StorageBackend


def persist(db: Session, *, commit: bool) -> None:
    if commit:
        db.commit()
    else:
        db.flush()

def _asset_to_schema(a: AssetORM) -> Asset:
    return Asset(
        id=a.id,
        name=a.name,
        category=a.category,  # type: ignore
        brand=a.brand,
        purchase_date=a.purchase_date,
        purchase_price=a.purchase_price,
        notes=a.notes,
        photo_url=a.photo_url,
        total_quantity=a.total_quantity,
        available_quantity=a.available_quantity,
        condition=a.condition,  # type: ignore
        status=a.status,  # type: ignore
        created_at=a.created_at,
        updated_at=a.updated_at,
    )

def _borrower_to_schema(b: BorrowerORM) -> Borrower:
    return Borrower(
        id=b.id,
        name=b.name,
        role=b.role,  # type: ignore
        class_name=b.class_name,
        phone=b.phone,
        created_at=b.created_at,
    )

def _loan_to_schema(l: LoanORM) -> Loan:
    return Loan(
        id=l.id,
        borrower_id=l.borrower_id,
        asset_id=l.asset_id,
        quantity=l.quantity,
        loan_date=l.loan_date,
        planned_return_date=l.planned_return_date,
        actual_return_date=l.actual_return_date,
        condition_on_loan=l.condition_on_loan,  # type: ignore
        condition_on_return=l.condition_on_return,  # type: ignore
        status=l.status,  # type: ignore
        created_at=l.created_at,
        updated_at=l.updated_at,
    )

def _maintenance_to_schema(m: MaintenanceORM) -> Maintenance:
    return Maintenance(
        id=m.id,
        asset_id=m.asset_id,
        loan_id=m.loan_id,
        maintenance_date=m.maintenance_date,
        technician=m.technician,
        estimated_cost=m.estimated_cost,
        status=m.status,  # type: ignore
        notes=m.notes,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


class SqlStorage(Storage):
    def __init__(self, db: Session):
        self.db = db

    def new_id(self, prefix: str) -> str:
        return str(uuid4())

    def _upsert(self, orm_cls, record) -> None:
        row = self.db.get(orm_cls, record.id)
        data = record.model_dump()
        if row is None:
            self.db.add(orm_cls(**data))
        else:
            for k, v in data.items():
                setattr(row, k, v)
        self.db.flush()

    def _delete(self, orm_cls, record_id: str) -> bool:
        result = self.db.execute(delete(orm_cls).where(orm_cls.id == record_id))
        self.db.flush()
        return result.rowcount > 0

    # ---------- Asset ----------
    def find_asset(self, asset_id: str) -> Optional[Asset]:
        # populate_existing: the availability counter must be read fresh
        row = self.db.get(AssetORM, asset_id, populate_existing=True)
        return _asset_to_schema(row) if row else None

    def save_asset(self, asset: Asset) -> None:
        self._upsert(AssetORM, asset)

    def list_assets(self, *, q: str | None = None, category: str | None = None) -> list[Asset]:
        stmt = select(AssetORM)
        if q:
            like = f"%{q}%"
            stmt = stmt.where(or_(AssetORM.name.ilike(like), AssetORM.brand.ilike(like)))
        if category:
            stmt = stmt.where(AssetORM.category == category)
        stmt = stmt.order_by(AssetORM.created_at.desc())
        return [_asset_to_schema(a) for a in self.db.execute(stmt).scalars().all()]

    def delete_asset(self, asset_id: str) -> bool:
        return self._delete(AssetORM, asset_id)

    # ---------- Borrower ----------
    def find_borrower(self, borrower_id: str) -> Optional[Borrower]:
        row = self.db.get(BorrowerORM, borrower_id)
        return _borrower_to_schema(row) if row else None

    def save_borrower(self, borrower: Borrower) -> None:
        self._upsert(BorrowerORM, borrower)

    def list_borrowers(self, *, q: str | None = None, role: str | None = None) -> list[Borrower]:
        stmt = select(BorrowerORM)
        if q:
            like = f"%{q}%"
            stmt = stmt.where(or_(BorrowerORM.name.ilike(like), BorrowerORM.class_name.ilike(like)))
        if role:
            stmt = stmt.where(BorrowerORM.role == role)
        stmt = stmt.order_by(BorrowerORM.created_at.desc())
        return [_borrower_to_schema(b) for b in self.db.execute(stmt).scalars().all()]

    def delete_borrower(self, borrower_id: str) -> bool:
        return self._delete(BorrowerORM, borrower_id)

    # ---------- Loan ----------
    def find_loan(self, loan_id: str) -> Optional[Loan]:
        row = self.db.get(LoanORM, loan_id, populate_existing=True)
        return _loan_to_schema(row) if row else None

    def save_loan(self, loan: Loan) -> None:
        self._upsert(LoanORM, loan)

    def list_loans(
        self,
        *,
        status: str | None = None,
        active_only: bool = False,
        asset_id: str | None = None,
    ) -> list[Loan]:
        stmt = select(LoanORM)
        if status:
            stmt = stmt.where(LoanORM.status == status)
        if active_only:
            stmt = stmt.where(LoanORM.status.in_(OPEN_LOAN_STATUSES))
        if asset_id:
            stmt = stmt.where(LoanORM.asset_id == asset_id)
        stmt = stmt.order_by(LoanORM.created_at.desc())
        return [_loan_to_schema(l) for l in self.db.execute(stmt).scalars().all()]

    # ---------- Maintenance ----------
    def find_maintenance(self, maintenance_id: str) -> Optional[Maintenance]:
        row = self.db.get(MaintenanceORM, maintenance_id, populate_existing=True)
        return _maintenance_to_schema(row) if row else None

    def save_maintenance(self, record: Maintenance) -> None:
        self._upsert(MaintenanceORM, record)

    def list_maintenance(self, *, status: str | None = None, asset_id: str | None = None) -> list[Maintenance]:
        stmt = select(MaintenanceORM)
        if status:
            stmt = stmt.where(MaintenanceORM.status == status)
        if asset_id:
            stmt = stmt.where(MaintenanceORM.asset_id == asset_id)
        stmt = stmt.order_by(MaintenanceORM.created_at.desc())
        return [_maintenance_to_schema(m) for m in self.db.execute(stmt).scalars().all()]

    def delete_maintenance(self, maintenance_id: str) -> bool:
        return self._delete(MaintenanceORM, maintenance_id)

    # ---------- Unit of work ----------
    def persist(self, *, commit: bool) -> None:
        persist(self.db, commit=commit)

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()


class SqlBackend(StorageBackend):
    name = "sql"

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def open(self) -> Storage:
        return SqlStorage(self.session_factory())
