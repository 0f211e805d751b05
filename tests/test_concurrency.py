import threading
from datetime import date

import pytest

import crud
import locks
from errors import NotFoundError
from ledger import LoanLedger
from local_storage import LocalStore
from models import AssetIn, AssetUpdate, BorrowerIn

TODAY = date(2026, 3, 15)


def _ledger(backend):
    return LoanLedger(backend.open(), today=lambda: TODAY)


def _setup(tmp_path, total):
    backend = LocalStore(tmp_path / "store.json")
    store = backend.open()
    asset = crud.create_asset(store, AssetIn(name="Tripod", category="Studio", total_quantity=total))
    borrower = crud.create_borrower(store, BorrowerIn(name="Bu Sri", role="Teacher"))
    return backend, asset, borrower


def test_parallel_issue_and_return_conserve_units(tmp_path):
    backend, asset, borrower = _setup(tmp_path, total=10)
    open_loans = [
        _ledger(backend).issue_loan(borrower.id, asset.id, 1, TODAY, TODAY) for _ in range(5)
    ]
    barrier = threading.Barrier(10)
    errors = []

    def issue():
        barrier.wait()
        try:
            _ledger(backend).issue_loan(borrower.id, asset.id, 1, TODAY, TODAY)
        except Exception as exc:
            errors.append(exc)

    def give_back(loan_id):
        barrier.wait()
        try:
            _ledger(backend).return_loan(loan_id, TODAY, "Good")
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=issue) for _ in range(5)]
    threads += [threading.Thread(target=give_back, args=(l.id,)) for l in open_loans]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    ledger = _ledger(backend)
    assert ledger.audit_inventory() == []
    assert ledger.store.find_asset(asset.id).available_quantity == 5


def test_asset_edit_waits_for_a_concurrent_issue(tmp_path):
    backend, asset, borrower = _setup(tmp_path, total=5)
    worker = threading.Thread(
        target=lambda: _ledger(backend).issue_loan(borrower.id, asset.id, 3, TODAY, TODAY)
    )

    editing = backend.open()
    save_asset = editing.save_asset

    def save_asset_while_issuing(record):
        # an issue started between the edit's read and its write
        if worker.ident is None:
            worker.start()
            worker.join(timeout=0.2)
        save_asset(record)

    editing.save_asset = save_asset_while_issuing
    crud.update_asset(editing, asset.id, AssetUpdate(total_quantity=6))
    worker.join()

    ledger = _ledger(backend)
    assert ledger.audit_inventory() == []
    stored = ledger.store.find_asset(asset.id)
    assert stored.total_quantity == 6
    assert stored.available_quantity == 3


def test_lock_registry_only_tracks_stored_assets(tmp_path):
    backend, asset, borrower = _setup(tmp_path, total=2)
    ledger = _ledger(backend)

    with pytest.raises(NotFoundError):
        ledger.issue_loan(borrower.id, "asset_missing", 1, TODAY, TODAY)
    assert "asset_missing" not in locks.tracked_asset_ids()

    loan = ledger.issue_loan(borrower.id, asset.id, 1, TODAY, TODAY)
    assert asset.id in locks.tracked_asset_ids()

    ledger.return_loan(loan.id, TODAY, "Good")
    assert crud.delete_asset(ledger.store, asset.id) is True
    assert asset.id not in locks.tracked_asset_ids()
