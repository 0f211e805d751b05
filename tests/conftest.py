import os
import tempfile
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# ---- テスト用DBパス: app modules read these at import time ----
_TMP_DIR = Path(tempfile.mkdtemp(prefix="lending_test_"))
os.environ["APP_DB_PATH"] = str(_TMP_DIR / "test_lending.db")
os.environ["APP_LOCAL_STORE_PATH"] = str(_TMP_DIR / "local_store.json")
os.environ["APP_STORAGE"] = "sql"
os.environ["APP_SEED_SAMPLE_DATA"] = "0"
os.environ["APP_ADMIN_USERNAME"] = "admin"
os.environ["APP_ADMIN_PASSWORD"] = "admin123"
os.environ["APP_STUDENT_USERNAME"] = "siswa"
os.environ["APP_STUDENT_PASSWORD"] = "siswa123"

TODAY = date(2026, 3, 15)


@pytest.fixture(scope="session")
def app_module():
    import main

    return main


def _login(client, username, password):
    r = client.post("/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    client.headers["Authorization"] = f"Bearer {r.json()['token']}"
    return client


@pytest.fixture()
def anon_client(app_module):
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture()
def client(app_module):
    with TestClient(app_module.app) as c:
        yield _login(c, "admin", "admin123")


@pytest.fixture()
def student_client(app_module):
    with TestClient(app_module.app) as c:
        yield _login(c, "siswa", "siswa123")


@pytest.fixture()
def db_session(app_module):
    from db import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db(app_module, db_session):
    # 各テスト前にテーブルを全消し（順序注意：maintenance -> loans -> borrowers -> assets）
    from sqlalchemy import delete
    from orm import MaintenanceORM, LoanORM, BorrowerORM, AssetORM

    db_session.execute(delete(MaintenanceORM))
    db_session.execute(delete(LoanORM))
    db_session.execute(delete(BorrowerORM))
    db_session.execute(delete(AssetORM))
    db_session.commit()
    app_module.app.state.sessions.clear()
    yield


@pytest.fixture(params=["sql", "local"])
def store(request, db_session, tmp_path):
    if request.param == "sql":
        from sql_storage import SqlStorage

        s = SqlStorage(db_session)
    else:
        from local_storage import LocalStore

        s = LocalStore(tmp_path / "store.json").open()
    yield s
    s.close()


@pytest.fixture()
def ledger(store):
    from ledger import LoanLedger

    return LoanLedger(store, today=lambda: TODAY, actor="tester")
