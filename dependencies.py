from collections.abc import Generator
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

import config
import crud
from auth import SessionContext
from db import Base, SessionLocal, engine
from ledger import LoanLedger
from local_storage import LocalStore
from sql_storage import SqlBackend
from storage import Storage, StorageBackend


def create_backend(name: str) -> StorageBackend:
    if name == "sql":
        Base.metadata.create_all(bind=engine)
        return SqlBackend(SessionLocal)

    path = config.resolve_local_store_path(config.app_root_dir())
    fresh = not path.exists()
    backend = LocalStore(path)
    if fresh and config.seed_sample_data():
        store = backend.open()
        try:
            crud.seed_sample_data(store)
        finally:
            store.close()
    return backend


def get_storage(request: Request) -> Generator[Storage, None, None]:
    store = request.app.state.backend.open()
    try:
        yield store
    finally:
        store.close()


def get_session_context(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> SessionContext:
    token = ""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    ctx = request.app.state.sessions.get(token) if token else None
    if ctx is None:
        raise HTTPException(status_code=401, detail="not authenticated")
    return ctx


def require_admin(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail="admin role required")
    return ctx


def get_ledger(
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(get_session_context),
) -> LoanLedger:
    return LoanLedger(store, actor=ctx.username)
