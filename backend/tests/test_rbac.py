from fastapi.testclient import TestClient
from labstudy.main import app
from labstudy.db import SessionLocal
from labstudy.repositories.user_repo import UserRepository
from conftest import signup_and_login

client = TestClient(app)

def test_viewer_cannot_delete_but_admin_can():
    _, admin_email, admin_h = signup_and_login(client)
    _, viewer_email, viewer_h = signup_and_login(client)

    # Demote via repo (pure Python); role is re-read from the DB on every request
    db = SessionLocal()
    repo = UserRepository(db)
    viewer = repo.get_by_email(viewer_email)
    repo.set_role(viewer.id, role="viewer")
    db.close()

    s = client.post("/api/studies", headers=admin_h, json={"title": "Guarded"}).json()

    r = client.delete(f"/api/studies/{s['id']}", headers=viewer_h)
    assert r.status_code == 403
    assert r.json()["detail"] == "Insufficient role"

    # viewers may still read and record sessions
    assert client.get(f"/api/studies/{s['id']}", headers=viewer_h).status_code == 200
    assert client.post("/api/sessions", headers=viewer_h, json={"study_id": s["id"]}).status_code == 201

    assert client.delete(f"/api/studies/{s['id']}", headers=admin_h).status_code == 204
