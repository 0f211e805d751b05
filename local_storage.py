from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel

from models import Asset, Borrower, Loan, Maintenance, OPEN_LOAN_STATUSES
from storage import Storage, StorageBackend

logger = logging.getLogger("app.local_storage")

KEYS = {
    "assets": Asset,
    "borrowers": Borrower,
    "loans": Loan,
    "maintenance": Maintenance,
}


class LocalStore(StorageBackend):
    """JSON file holding every record, keyed by collection then id.

    The file is the committed state. Sessions opened with ``open()`` keep
    their writes in memory until they commit, then the whole file is
    replaced in one step. Writes made to the file by another process (the
    maintenance scripts) are picked up at the next ``open()`` or commit.
    """

    name = "local"

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._stamp: Optional[tuple[int, int]] = None
        self._data: dict[str, dict[str, dict]] = self._load()

    def _file_stamp(self) -> Optional[tuple[int, int]]:
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def _load(self) -> dict[str, dict[str, dict]]:
        data: dict[str, dict[str, dict]] = {key: {} for key in KEYS}
        self._stamp = self._file_stamp()
        if self._stamp is None:
            return data
        raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        for key in KEYS:
            data[key] = dict(raw.get(key) or {})
        return data

    def _refresh(self) -> None:
        if self._file_stamp() != self._stamp:
            logger.info("local store changed on disk, reloading path=%s", self.path)
            self._data = self._load()

    def _write(self, data: dict[str, dict[str, dict]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        self._stamp = self._file_stamp()

    def read(self, key: str, record_id: str) -> Optional[dict]:
        with self._lock:
            row = self._data[key].get(record_id)
            return dict(row) if row is not None else None

    def rows(self, key: str) -> list[dict]:
        with self._lock:
            return [dict(row) for row in self._data[key].values()]

    def apply(self, pending: dict[str, dict[str, Optional[dict]]]) -> None:
        """Write ``pending`` to the file; memory changes only once the file has."""
        with self._lock:
            self._refresh()
            data = {key: dict(rows) for key, rows in self._data.items()}
            for key, changes in pending.items():
                for record_id, row in changes.items():
                    if row is None:
                        data[key].pop(record_id, None)
                    else:
                        data[key][record_id] = row
            self._write(data)
            self._data = data

    def open(self) -> Storage:
        with self._lock:
            self._refresh()
        return LocalStorage(self)


class LocalStorage(Storage):
    def __init__(self, store: LocalStore):
        self.store = store
        # None marks a pending delete
        self._pending: dict[str, dict[str, Optional[dict]]] = {key: {} for key in KEYS}

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid4().hex}"

    def _find(self, key: str, record_id: str):
        if record_id in self._pending[key]:
            row = self._pending[key][record_id]
        else:
            row = self.store.read(key, record_id)
        return KEYS[key].model_validate(row) if row is not None else None

    def _save(self, key: str, record: BaseModel) -> None:
        self._pending[key][record.id] = record.model_dump(mode="json")  # type: ignore[attr-defined]

    def _delete(self, key: str, record_id: str) -> bool:
        if self._find(key, record_id) is None:
            return False
        self._pending[key][record_id] = None
        return True

    def _all(self, key: str) -> list:
        merged = {row["id"]: row for row in self.store.rows(key)}
        for record_id, row in self._pending[key].items():
            if row is None:
                merged.pop(record_id, None)
            else:
                merged[record_id] = row
        records = [KEYS[key].model_validate(row) for row in merged.values()]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    # ---------- Asset ----------
    def find_asset(self, asset_id: str) -> Optional[Asset]:
        return self._find("assets", asset_id)

    def save_asset(self, asset: Asset) -> None:
        self._save("assets", asset)

    def list_assets(self, *, q: str | None = None, category: str | None = None) -> list[Asset]:
        assets = self._all("assets")
        if q:
            search = q.lower()
            assets = [
                a for a in assets
                if search in a.name.lower() or (a.brand and search in a.brand.lower())
            ]
        if category:
            assets = [a for a in assets if a.category == category]
        return assets

    def delete_asset(self, asset_id: str) -> bool:
        return self._delete("assets", asset_id)

    # ---------- Borrower ----------
    def find_borrower(self, borrower_id: str) -> Optional[Borrower]:
        return self._find("borrowers", borrower_id)

    def save_borrower(self, borrower: Borrower) -> None:
        self._save("borrowers", borrower)

    def list_borrowers(self, *, q: str | None = None, role: str | None = None) -> list[Borrower]:
        borrowers = self._all("borrowers")
        if q:
            search = q.lower()
            borrowers = [
                b for b in borrowers
                if search in b.name.lower() or (b.class_name and search in b.class_name.lower())
            ]
        if role:
            borrowers = [b for b in borrowers if b.role == role]
        return borrowers

    def delete_borrower(self, borrower_id: str) -> bool:
        return self._delete("borrowers", borrower_id)

    # ---------- Loan ----------
    def find_loan(self, loan_id: str) -> Optional[Loan]:
        return self._find("loans", loan_id)

    def save_loan(self, loan: Loan) -> None:
        self._save("loans", loan)

    def list_loans(
        self,
        *,
        status: str | None = None,
        active_only: bool = False,
        asset_id: str | None = None,
    ) -> list[Loan]:
        loans = self._all("loans")
        if status:
            loans = [l for l in loans if l.status == status]
        if active_only:
            loans = [l for l in loans if l.status in OPEN_LOAN_STATUSES]
        if asset_id:
            loans = [l for l in loans if l.asset_id == asset_id]
        return loans

    # ---------- Maintenance ----------
    def find_maintenance(self, maintenance_id: str) -> Optional[Maintenance]:
        return self._find("maintenance", maintenance_id)

    def save_maintenance(self, record: Maintenance) -> None:
        self._save("maintenance", record)

    def list_maintenance(self, *, status: str | None = None, asset_id: str | None = None) -> list[Maintenance]:
        records = self._all("maintenance")
        if status:
            records = [m for m in records if m.status == status]
        if asset_id:
            records = [m for m in records if m.asset_id == asset_id]
        return records

    def delete_maintenance(self, maintenance_id: str) -> bool:
        return self._delete("maintenance", maintenance_id)

    # ---------- Unit of work ----------
    def persist(self, *, commit: bool) -> None:
        if not commit:
            return
        self.store.apply(self._pending)
        self._pending = {key: {} for key in KEYS}

    def rollback(self) -> None:
        self._pending = {key: {} for key in KEYS}

    def close(self) -> None:
        if any(self._pending.values()):
            logger.debug("discarding uncommitted local changes")
        self._pending = {key: {} for key in KEYS}
