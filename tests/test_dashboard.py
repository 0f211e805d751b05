from datetime import date, timedelta

from stats import last_months


def test_last_months_wraps_year():
    assert last_months(date(2026, 2, 10)) == [
        "2025-09", "2025-10", "2025-11", "2025-12", "2026-01", "2026-02",
    ]


def _setup(client):
    cam = client.post("/assets", json={"name": "Canon EOS 80D", "category": "Studio", "total_quantity": 5}).json()
    mac = client.post("/assets", json={"name": "MacBook Pro", "category": "IT", "total_quantity": 3}).json()
    b = client.post("/borrowers", json={"name": "Budi", "role": "Student", "class_name": "XII DKV 1"}).json()
    return cam, mac, b


def test_dashboard_stats(client):
    cam, mac, b = _setup(client)
    today = date.today()
    yesterday = today - timedelta(days=1)

    client.post("/loans", json={
        "borrower_id": b["id"], "asset_id": cam["id"], "quantity": 2,
        "loan_date": today.isoformat(), "planned_return_date": (today + timedelta(days=3)).isoformat(),
    })
    late = client.post("/loans", json={
        "borrower_id": b["id"], "asset_id": mac["id"], "quantity": 1,
        "loan_date": yesterday.isoformat(), "planned_return_date": yesterday.isoformat(),
    }).json()
    client.post("/maintenance", json={"asset_id": cam["id"], "maintenance_date": today.isoformat()})

    r = client.get("/dashboard/stats")
    assert r.status_code == 200, r.text
    s = r.json()
    assert s["total_units"] == 8
    assert s["available_units"] == 5
    assert s["borrowed_units"] == 3
    assert s["late_loans"] == 1
    assert s["maintenance_in_progress"] == 1
    units = {c["category"]: c["units"] for c in s["units_by_category"]}
    assert units == {"Studio": 5, "IT": 3, "ATK": 0, "Furniture": 0}
    assert len(s["loans_by_month"]) == 6
    assert s["loans_by_month"][-1]["month"] == today.strftime("%Y-%m")
    assert sum(m["count"] for m in s["loans_by_month"]) == 2
    assert late["id"] in [l["id"] for l in s["active_loans"]]

    r = client.get("/dashboard/audit")
    assert r.json() == []


def test_loan_report_date_range(client):
    cam, _, b = _setup(client)
    today = date.today()
    old = today - timedelta(days=40)
    for loan_date in (old, today):
        client.post("/loans", json={
            "borrower_id": b["id"], "asset_id": cam["id"], "quantity": 1,
            "loan_date": loan_date.isoformat(), "planned_return_date": (today + timedelta(days=1)).isoformat(),
        })

    r = client.get("/reports/loans")
    assert len(r.json()) == 2

    r = client.get(f"/reports/loans?start={(today - timedelta(days=1)).isoformat()}&end=")
    rows = r.json()
    assert len(rows) == 1
    assert rows[0]["borrower"] == "Budi"
    assert rows[0]["asset"] == "Canon EOS 80D"

    assert client.get("/reports/loans?start=yesterday").status_code == 422


def test_asset_and_maintenance_reports(client):
    cam, _, _ = _setup(client)
    client.post("/maintenance", json={"asset_id": cam["id"], "maintenance_date": "2026-01-02", "technician": "Andi"})

    rows = client.get("/reports/assets").json()
    assert {r["name"] for r in rows} == {"Canon EOS 80D", "MacBook Pro"}

    [m] = client.get("/reports/maintenance").json()
    assert m["asset"] == "Canon EOS 80D"
    assert m["technician"] == "Andi"
