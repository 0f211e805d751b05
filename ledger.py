"""Loan lifecycle and inventory bookkeeping.

Every unit of an asset is either on the shelf (``available_quantity``) or
out on an open loan, so for each asset::

    available_quantity + sum(open loan quantities) == total_quantity

Issue and return are the only operations that move units between the two.
Loan status follows ``Borrowed -> Late -> Returned`` or
``Borrowed -> Returned``; Late is derived from the planned return date at
read time and is never written back by a read.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from crud import utcnow
from errors import NotFoundError, StateError, ValidationError
from locks import asset_lock
from models import Condition, InventoryDiscrepancy, Loan, Maintenance, OPEN_LOAN_STATUSES
from storage import Storage

logger = logging.getLogger("app.ledger")

DAMAGE_NOTE = "Damage detected on return"
CONDITIONS = ("Good", "Damaged")


def effective_status(loan: Loan, today: date) -> str:
    if loan.status == "Borrowed" and loan.planned_return_date < today:
        return "Late"
    return loan.status


def recompute_late_status(loans: Iterable[Loan], today: date) -> list[Loan]:
    """Return the loans with Late applied where due; inputs are not mutated."""
    result = []
    for loan in loans:
        status = effective_status(loan, today)
        if status != loan.status:
            loan = loan.model_copy(update={"status": status})
        result.append(loan)
    return result


def _check_condition(value: str, field: str) -> None:
    if value not in CONDITIONS:
        raise ValidationError(f"{field} must be one of {', '.join(CONDITIONS)}")


class LoanLedger:
    def __init__(
        self,
        store: Storage,
        *,
        today: Callable[[], date] = date.today,
        actor: Optional[str] = None,
    ):
        self.store = store
        self.today = today
        self.actor = actor or "system"

    @contextmanager
    def _unit_of_work(self, *, commit: bool) -> Iterator[None]:
        try:
            yield
            self.store.persist(commit=commit)
        except Exception:
            self.store.rollback()
            raise

    # ---------- reads ----------
    def list_loans(self, *, status: str | None = None, active_only: bool = False) -> list[Loan]:
        loans = recompute_late_status(
            self.store.list_loans(active_only=active_only),
            self.today(),
        )
        if status:
            loans = [l for l in loans if l.status == status]
        return loans

    def get_loan(self, loan_id: str) -> Loan:
        loan = self.store.find_loan(loan_id)
        if loan is None:
            raise NotFoundError(f"loan {loan_id} not found")
        return recompute_late_status([loan], self.today())[0]

    # ---------- issue ----------
    def issue_loan(
        self,
        borrower_id: str,
        asset_id: str,
        quantity: int,
        loan_date: date,
        planned_return_date: date,
        condition_on_loan: Condition = "Good",
        *,
        commit: bool = True,
    ) -> Loan:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("quantity must be a positive integer")
        _check_condition(condition_on_loan, "condition_on_loan")

        if self.store.find_borrower(borrower_id) is None:
            raise NotFoundError(f"borrower {borrower_id} not found")
        if self.store.find_asset(asset_id) is None:
            raise NotFoundError(f"asset {asset_id} not found")

        with asset_lock(asset_id):
            asset = self.store.find_asset(asset_id)
            if asset is None:
                raise NotFoundError(f"asset {asset_id} not found")
            if asset.status != "Active":
                raise StateError(f"asset {asset.name} is {asset.status} and cannot be loaned")
            if quantity > asset.available_quantity:
                raise ValidationError(
                    f"quantity {quantity} exceeds available {asset.available_quantity} for {asset.name}"
                )

            now = utcnow()
            loan = Loan(
                id=self.store.new_id("loan"),
                borrower_id=borrower_id,
                asset_id=asset_id,
                quantity=quantity,
                loan_date=loan_date,
                planned_return_date=planned_return_date,
                actual_return_date=None,
                condition_on_loan=condition_on_loan,
                condition_on_return=None,
                status="Borrowed",
                created_at=now,
                updated_at=now,
            )
            updated_asset = asset.model_copy(
                update={"available_quantity": asset.available_quantity - quantity, "updated_at": now}
            )
            with self._unit_of_work(commit=commit):
                self.store.save_loan(loan)
                self.store.save_asset(updated_asset)

        logger.info(
            "loan_issued loan_id=%s asset_id=%s borrower_id=%s quantity=%s available=%s actor=%s",
            loan.id, asset_id, borrower_id, quantity, updated_asset.available_quantity, self.actor,
        )
        return loan

    # ---------- return ----------
    def return_loan(
        self,
        loan_id: str,
        return_date: date,
        condition_on_return: Condition,
        *,
        commit: bool = True,
    ) -> Loan:
        _check_condition(condition_on_return, "condition_on_return")

        loan = self.store.find_loan(loan_id)
        if loan is None:
            raise NotFoundError(f"loan {loan_id} not found")

        with asset_lock(loan.asset_id):
            # re-read under the lock so a concurrent return is seen
            loan = self.store.find_loan(loan_id)
            if loan is None:
                raise NotFoundError(f"loan {loan_id} not found")
            if loan.status not in OPEN_LOAN_STATUSES:
                raise StateError(f"loan {loan_id} is already {loan.status}")
            if return_date < loan.loan_date:
                raise ValidationError("return_date cannot be before loan_date")
            asset = self.store.find_asset(loan.asset_id)
            if asset is None:
                raise NotFoundError(f"asset {loan.asset_id} not found")
            if asset.available_quantity + loan.quantity > asset.total_quantity:
                raise StateError(
                    f"returning {loan.quantity} unit(s) would exceed total_quantity of {asset.name}"
                )

            now = utcnow()
            returned = loan.model_copy(
                update={
                    "actual_return_date": return_date,
                    "condition_on_return": condition_on_return,
                    "status": "Returned",
                    "updated_at": now,
                }
            )
            updated_asset = asset.model_copy(
                update={"available_quantity": asset.available_quantity + loan.quantity, "updated_at": now}
            )
            maintenance = None
            if condition_on_return == "Damaged":
                maintenance = Maintenance(
                    id=self.store.new_id("maint"),
                    asset_id=loan.asset_id,
                    loan_id=loan.id,
                    maintenance_date=return_date,
                    technician=None,
                    estimated_cost=0,
                    status="In Progress",
                    notes=DAMAGE_NOTE,
                    created_at=now,
                    updated_at=now,
                )

            with self._unit_of_work(commit=commit):
                self.store.save_loan(returned)
                self.store.save_asset(updated_asset)
                if maintenance is not None:
                    self.store.save_maintenance(maintenance)

        logger.info(
            "loan_returned loan_id=%s asset_id=%s quantity=%s condition=%s available=%s actor=%s",
            loan_id, loan.asset_id, loan.quantity, condition_on_return, updated_asset.available_quantity, self.actor,
        )
        if maintenance is not None:
            logger.info(
                "maintenance_opened maintenance_id=%s asset_id=%s loan_id=%s",
                maintenance.id, maintenance.asset_id, loan_id,
            )
        return returned

    # ---------- maintenance ----------
    def complete_maintenance(self, maintenance_id: str, *, commit: bool = True) -> Maintenance:
        record = self.store.find_maintenance(maintenance_id)
        if record is None:
            raise NotFoundError(f"maintenance {maintenance_id} not found")
        if record.status == "Completed":
            raise StateError(f"maintenance {maintenance_id} is already Completed")

        completed = record.model_copy(update={"status": "Completed", "updated_at": utcnow()})
        with self._unit_of_work(commit=commit):
            self.store.save_maintenance(completed)

        logger.info("maintenance_completed maintenance_id=%s asset_id=%s actor=%s",
                    maintenance_id, record.asset_id, self.actor)
        return completed

    # ---------- reconciliation ----------
    def reconcile_late_loans(self, *, commit: bool = True) -> list[Loan]:
        """Persist Late for every Borrowed loan past its planned return date."""
        today = self.today()
        overdue = [
            l.model_copy(update={"status": "Late", "updated_at": utcnow()})
            for l in self.store.list_loans(status="Borrowed")
            if effective_status(l, today) == "Late"
        ]
        with self._unit_of_work(commit=commit):
            for loan in overdue:
                self.store.save_loan(loan)
        if overdue:
            logger.info("late_loans_reconciled count=%s", len(overdue))
        return overdue

    def audit_inventory(self) -> list[InventoryDiscrepancy]:
        on_loan: dict[str, int] = {}
        for loan in self.store.list_loans(active_only=True):
            on_loan[loan.asset_id] = on_loan.get(loan.asset_id, 0) + loan.quantity

        discrepancies = []
        for asset in self.store.list_assets():
            units_out = on_loan.get(asset.id, 0)
            expected = asset.total_quantity - units_out
            if expected != asset.available_quantity:
                discrepancies.append(
                    InventoryDiscrepancy(
                        asset_id=asset.id,
                        asset_name=asset.name,
                        total_quantity=asset.total_quantity,
                        available_quantity=asset.available_quantity,
                        on_loan=units_out,
                        expected_available=expected,
                    )
                )
        return discrepancies
