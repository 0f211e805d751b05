def test_borrower_crud_smoke(client):
    r = client.post("/borrowers", json={"name": "Budi Santoso", "role": "Student", "class_name": "XII DKV 1"})
    assert r.status_code == 201, r.text
    budi = r.json()

    r = client.post("/borrowers", json={"name": "Pak Joko", "role": "Teacher", "class_name": "ignored"})
    assert r.status_code == 201
    assert r.json()["class_name"] is None

    r = client.get("/borrowers?role=Student")
    assert [b["name"] for b in r.json()] == ["Budi Santoso"]

    # class is searchable
    r = client.get("/borrowers?q=dkv")
    assert [b["id"] for b in r.json()] == [budi["id"]]

    r = client.patch(f"/borrowers/{budi['id']}", json={"class_name": "XI DKV 2"})
    assert r.status_code == 200
    assert r.json()["class_name"] == "XI DKV 2"

    assert client.delete(f"/borrowers/{budi['id']}").status_code == 204
    assert client.get(f"/borrowers/{budi['id']}").status_code == 404


def test_student_requires_class(client):
    r = client.post("/borrowers", json={"name": "Ani", "role": "Student"})
    assert r.status_code == 422

    teacher = client.post("/borrowers", json={"name": "Bu Sri", "role": "Teacher"}).json()
    r = client.patch(f"/borrowers/{teacher['id']}", json={"role": "Student"})
    assert r.status_code == 422

    r = client.patch(f"/borrowers/{teacher['id']}", json={"role": "Student", "class_name": "X DKV 1"})
    assert r.status_code == 200
    assert r.json()["role"] == "Student"


def test_update_missing_borrower(client):
    r = client.patch("/borrowers/nope", json={"name": "X"})
    assert r.status_code == 404
