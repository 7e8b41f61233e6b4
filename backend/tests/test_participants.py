import re
from fastapi.testclient import TestClient
from labstudy.main import app
from conftest import signup_and_login

client = TestClient(app)
_, _, H = signup_and_login(client)

def test_requires_auth():
    assert TestClient(app).get("/api/participants").status_code == 401

def test_create_requires_name_or_external_id():
    r = client.post("/api/participants", headers=H, json={"email": "a@ex.com"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing name or externalId"

def test_create_assigns_external_id():
    r = client.post("/api/participants", headers=H, json={"name": "Ada", "email": "", "phone": "555"})
    assert r.status_code == 201
    body = r.json()
    assert re.fullmatch(r"P-\d{5,}", body["external_id"])
    assert body["email"] is None
    assert body["phone"] == "555"

def test_create_keeps_given_external_id():
    r = client.post("/api/participants", headers=H, json={"external_id": "EXT-42"})
    assert r.status_code == 201
    assert r.json()["external_id"] == "EXT-42"
    assert r.json()["name"] is None

def test_generated_external_id_falls_back_when_taken():
    count = len(client.get("/api/participants", headers=H).json())
    taken = f"P-{count + 2:05d}"
    client.post("/api/participants", headers=H, json={"external_id": taken})
    r = client.post("/api/participants", headers=H, json={"name": "Ben"})
    assert r.status_code == 201
    assert r.json()["external_id"] != taken

def test_get_list_and_404():
    p = client.post("/api/participants", headers=H, json={"name": "Cy"}).json()
    assert client.get(f"/api/participants/{p['id']}", headers=H).json()["name"] == "Cy"
    assert p["id"] in {x["id"] for x in client.get("/api/participants", headers=H).json()}
    assert client.get("/api/participants/nope", headers=H).status_code == 404

def test_update_partial_and_blank_to_null():
    p = client.post("/api/participants", headers=H, json={"name": "Di", "notes": "old"}).json()
    r = client.put(f"/api/participants/{p['id']}", headers=H, json={"notes": "", "phone": "123"})
    assert r.status_code == 200
    body = r.json()
    assert body["notes"] is None
    assert body["phone"] == "123"
    assert body["name"] == "Di"

def test_update_without_fields_400():
    p = client.post("/api/participants", headers=H, json={"name": "Ed"}).json()
    r = client.put(f"/api/participants/{p['id']}", headers=H, json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "No fields to update"

def test_update_missing_404():
    r = client.put("/api/participants/nope", headers=H, json={"name": "X"})
    assert r.status_code == 404

def test_delete_then_404():
    p = client.post("/api/participants", headers=H, json={"name": "Fay"}).json()
    assert client.delete(f"/api/participants/{p['id']}", headers=H).status_code == 204
    assert client.get(f"/api/participants/{p['id']}", headers=H).status_code == 404
    assert client.delete(f"/api/participants/{p['id']}", headers=H).status_code == 404

def test_overlong_fields_rejected():
    assert client.post("/api/participants", headers=H, json={"name": "n" * 121}).status_code == 422
    assert client.post("/api/participants", headers=H, json={"external_id": "e" * 41}).status_code == 422
    p = client.post("/api/participants", headers=H, json={"name": "Gil"}).json()
    assert client.put(f"/api/participants/{p['id']}", headers=H, json={"phone": "1" * 41}).status_code == 422
