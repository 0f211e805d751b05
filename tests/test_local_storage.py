import json
from datetime import date

import pytest

import crud
from dependencies import create_backend
from ledger import LoanLedger
from local_storage import LocalStore
from models import AssetIn, AssetUpdate, BorrowerIn
from sample_data import SAMPLE_ASSETS, SAMPLE_BORROWERS


def test_pending_changes_stay_in_session_until_commit(tmp_path):
    path = tmp_path / "store.json"
    backend = LocalStore(path)
    store = backend.open()

    asset = crud.create_asset(store, AssetIn(name="Tablet", category="IT", total_quantity=2), commit=False)
    assert crud.get_asset(store, asset.id) is not None
    # another session does not see uncommitted writes
    assert backend.open().find_asset(asset.id) is None
    assert not path.exists()

    store.persist(commit=True)
    assert backend.open().find_asset(asset.id) is not None
    assert not (tmp_path / "store.json.tmp").exists()


def test_rollback_discards_pending(tmp_path):
    backend = LocalStore(tmp_path / "store.json")
    store = backend.open()
    asset = crud.create_asset(store, AssetIn(name="Tablet", category="IT", total_quantity=2), commit=False)

    store.rollback()
    assert store.find_asset(asset.id) is None
    assert store.list_assets() == []


def test_committed_data_survives_reload(tmp_path):
    path = tmp_path / "store.json"
    store = LocalStore(path).open()
    asset = crud.create_asset(store, AssetIn(name="Tripod", category="Studio", total_quantity=3))
    borrower = crud.create_borrower(store, BorrowerIn(name="Budi", role="Student", class_name="XII DKV 1"))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert asset.id in raw["assets"]
    assert raw["loans"] == {}

    reloaded = LocalStore(path).open()
    assert reloaded.find_asset(asset.id) == asset
    assert reloaded.find_borrower(borrower.id).class_name == "XII DKV 1"


def test_pending_delete_hides_record(tmp_path):
    backend = LocalStore(tmp_path / "store.json")
    store = backend.open()
    asset = crud.create_asset(store, AssetIn(name="Tablet", category="IT", total_quantity=1))

    assert crud.delete_asset(store, asset.id, commit=False) is True
    assert store.find_asset(asset.id) is None
    assert store.list_assets() == []
    assert store.delete_asset(asset.id) is False

    store.persist(commit=True)
    assert backend.open().find_asset(asset.id) is None


def test_seed_sample_data_skips_existing(tmp_path):
    store = LocalStore(tmp_path / "store.json").open()

    first = crud.seed_sample_data(store)
    assert first == {"created": len(SAMPLE_ASSETS) + len(SAMPLE_BORROWERS), "skipped": 0}

    second = crud.seed_sample_data(store)
    assert second["created"] == 0
    assert len(store.list_assets()) == len(SAMPLE_ASSETS)


def test_local_backend_seeds_only_a_fresh_file(tmp_path, monkeypatch):
    path = tmp_path / "seeded.json"
    monkeypatch.setenv("APP_LOCAL_STORE_PATH", str(path))
    monkeypatch.setenv("APP_SEED_SAMPLE_DATA", "1")

    store = create_backend("local").open()
    assets = store.list_assets()
    assert len(assets) == len(SAMPLE_ASSETS)

    assert crud.delete_asset(store, assets[0].id) is True
    # a second start must not bring the deleted sample back
    again = create_backend("local").open()
    assert len(again.list_assets()) == len(SAMPLE_ASSETS) - 1


def test_unknown_storage_backend_rejected(monkeypatch):
    import config

    monkeypatch.setenv("APP_STORAGE", "cloud")
    with pytest.raises(ValueError):
        config.storage_backend()


def test_failed_file_write_leaves_store_unchanged(tmp_path, monkeypatch):
    import local_storage

    path = tmp_path / "store.json"
    backend = LocalStore(path)
    setup = backend.open()
    asset = crud.create_asset(setup, AssetIn(name="Tripod", category="Studio", total_quantity=5))
    borrower = crud.create_borrower(setup, BorrowerIn(name="Bu Sri", role="Teacher"))
    on_disk = path.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(local_storage.os, "replace", broken_replace)
    ledger = LoanLedger(backend.open(), today=lambda: date(2026, 3, 15))
    with pytest.raises(OSError):
        ledger.issue_loan(borrower.id, asset.id, 3, date(2026, 3, 15), date(2026, 3, 20))
    monkeypatch.undo()

    fresh = backend.open()
    assert fresh.find_asset(asset.id).available_quantity == 5
    assert fresh.list_loans() == []
    assert path.read_text(encoding="utf-8") == on_disk
    assert not (tmp_path / "store.json.tmp").exists()

    # the next commit must not carry the failed write along
    crud.create_borrower(fresh, BorrowerIn(name="Pak Joko", role="Teacher"))
    reloaded = LocalStore(path).open()
    assert reloaded.find_asset(asset.id).available_quantity == 5
    assert reloaded.list_loans() == []


def test_writes_from_another_process_are_not_lost(tmp_path):
    path = tmp_path / "store.json"
    server = LocalStore(path)
    asset = crud.create_asset(server.open(), AssetIn(name="Tripod", category="Studio", total_quantity=5))

    # a script run against the same file while the server is up
    script = LocalStore(path).open()
    borrower = crud.create_borrower(script, BorrowerIn(name="Budi", role="Student", class_name="XII DKV 1"))

    session = server.open()
    assert session.find_borrower(borrower.id) is not None
    crud.update_asset(session, asset.id, AssetUpdate(notes="checked"))

    on_disk = LocalStore(path).open()
    assert on_disk.find_borrower(borrower.id) is not None
    assert on_disk.find_asset(asset.id).notes == "checked"
