from fastapi.testclient import TestClient
from labstudy.main import app
from labstudy.security import create_access_token
from conftest import PWD, signup_and_login, uniq_name

client = TestClient(app)

def signup(name=None, email=None, password=PWD):
    name = name or uniq_name()
    email = email or f"{name}@ex.com"
    return client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})

def test_signup_sets_cookie_and_me_roundtrip():
    c = TestClient(app)
    name = uniq_name()
    r = c.post("/api/auth/signup", json={"name": name, "email": f"{name}@ex.com", "password": PWD})
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert "lsm_token" in r.cookies

    me = c.get("/api/auth/me")
    assert me.status_code == 200
    body = me.json()["user"]
    assert body["name"] == name
    assert body["role"] == "admin"
    assert "password_hash" not in body

def test_signup_missing_fields_400():
    r = client.post("/api/auth/signup", json={"name": "x", "email": "x@ex.com"})
    assert r.status_code == 400
    assert r.json()["detail"] == "All fields are required"

def test_signup_duplicate_email_409():
    name = uniq_name()
    signup(name=name)
    r = signup(name=uniq_name(), email=f"{name}@ex.com")
    assert r.status_code == 409
    assert r.json()["detail"] == "Email already registered"

def test_signup_duplicate_name_409():
    name = uniq_name()
    signup(name=name)
    r = signup(name=name, email=f"{uniq_name()}@ex.com")
    assert r.status_code == 409
    assert r.json()["detail"] == "Username already taken"

def test_login_unknown_email_401():
    r = client.post("/api/auth/login", json={"email": f"{uniq_name()}@ex.com", "password": PWD})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"

def test_login_wrong_password_401():
    name = uniq_name()
    signup(name=name)
    r = client.post("/api/auth/login", json={"email": f"{name}@ex.com", "password": "WrongPass123!"})
    assert r.status_code == 401

def test_bearer_token_me():
    name, email, headers = signup_and_login(client)
    c = TestClient(app)
    me = c.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["user"]["email"] == email

def test_logout_clears_cookie():
    c = TestClient(app)
    name = uniq_name()
    c.post("/api/auth/signup", json={"name": name, "email": f"{name}@ex.com", "password": PWD})
    assert c.get("/api/auth/me").status_code == 200
    r = c.post("/api/auth/logout")
    assert r.status_code == 200
    assert c.get("/api/auth/me").status_code == 401

def test_me_without_token_401():
    assert TestClient(app).get("/api/auth/me").status_code == 401

def test_garbage_token_401():
    r = TestClient(app).get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401

def test_token_expired():
    name, email, headers = signup_and_login(client)
    c = TestClient(app)
    user_id = c.get("/api/auth/me", headers=headers).json()["user"]["id"]

    # craft an already-expired token for the same user id
    expired = create_access_token(user_id, expires_minutes=-1)
    r = c.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

def test_expired_token_rejected_on_protected_route(monkeypatch):
    _, _, headers = signup_and_login(client)

    from jose.exceptions import ExpiredSignatureError
    def fake_decode(_): raise ExpiredSignatureError()

    # deps.auth imports decode_token at import-time
    import labstudy.deps.auth as deps_auth
    monkeypatch.setattr(deps_auth, "decode_token", fake_decode)

    r = TestClient(app).post("/api/sessions", headers=headers, json={"notes": "x"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

def test_user_schema_shares_model_roles():
    from labstudy.models.user import UserRole as ModelRole
    from labstudy.schemas.user import UserRole as SchemaRole
    assert SchemaRole is ModelRole
    assert {r.value for r in ModelRole} == {"admin", "viewer"}
