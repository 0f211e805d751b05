from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from models import Asset, Borrower, Loan, Maintenance


class Storage(ABC):
    """Unit of work over one storage backend.

    Writes made through ``save_*``/``delete_*`` become durable only on
    ``persist(commit=True)``; ``rollback()`` discards them. Errors raised by
    the backend propagate to the caller unchanged.
    """

    @abstractmethod
    def new_id(self, prefix: str) -> str: ...

    # ---------- Asset ----------
    @abstractmethod
    def find_asset(self, asset_id: str) -> Optional[Asset]: ...

    @abstractmethod
    def save_asset(self, asset: Asset) -> None: ...

    @abstractmethod
    def list_assets(self, *, q: str | None = None, category: str | None = None) -> list[Asset]: ...

    @abstractmethod
    def delete_asset(self, asset_id: str) -> bool: ...

    # ---------- Borrower ----------
    @abstractmethod
    def find_borrower(self, borrower_id: str) -> Optional[Borrower]: ...

    @abstractmethod
    def save_borrower(self, borrower: Borrower) -> None: ...

    @abstractmethod
    def list_borrowers(self, *, q: str | None = None, role: str | None = None) -> list[Borrower]: ...

    @abstractmethod
    def delete_borrower(self, borrower_id: str) -> bool: ...

    # ---------- Loan ----------
    @abstractmethod
    def find_loan(self, loan_id: str) -> Optional[Loan]: ...

    @abstractmethod
    def save_loan(self, loan: Loan) -> None: ...

    @abstractmethod
    def list_loans(
        self,
        *,
        status: str | None = None,
        active_only: bool = False,
        asset_id: str | None = None,
    ) -> list[Loan]: ...

    # ---------- Maintenance ----------
    @abstractmethod
    def find_maintenance(self, maintenance_id: str) -> Optional[Maintenance]: ...

    @abstractmethod
    def save_maintenance(self, record: Maintenance) -> None: ...

    @abstractmethod
    def list_maintenance(self, *, status: str | None = None, asset_id: str | None = None) -> list[Maintenance]: ...

    @abstractmethod
    def delete_maintenance(self, maintenance_id: str) -> bool: ...

    # ---------- Unit of work ----------
    @abstractmethod
    def persist(self, *, commit: bool) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class StorageBackend(ABC):
    """Chosen once at startup; opens one Storage per request."""

    name: str

    @abstractmethod
    def open(self) -> Storage: ...
