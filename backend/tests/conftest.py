"""
Point the app at a throwaway SQLite database before anything imports
labstudy.settings, then build the schema from the model metadata.
"""
import os
import tempfile
import uuid

_DB_DIR = tempfile.mkdtemp(prefix="labstudy-tests-")
os.environ["SQLALCHEMY_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["ENV"] = "test"

from labstudy.db import Base, engine
from labstudy import models  # noqa: F401  # registers tables

PWD = "StrongPassw0rd!"

Base.metadata.create_all(engine)


def uniq_name(prefix="u"):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def signup_and_login(client, name=None, password=PWD):
    """Register a user and return (name, email, bearer headers). Leaves no cookie behind."""
    name = name or uniq_name()
    email = f"{name}@ex.com"
    r = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert r.status_code == 200, r.text
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return name, email, {"Authorization": f"Bearer {r.json()['access_token']}"}

