import os
import tempfile

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="pokemon-api-test-")

os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"

from fastapi.testclient import TestClient  # noqa: E402

from database import SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from models import Base  # noqa: E402


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(client):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register(client, email="a@x.com", password="pw", username="a"):
    return client.post("/register", json={"email": email, "password": password, "username": username})


@pytest.fixture
def login(client):
    """Registers (if needed) and logs in a user, returning auth headers."""

    def _login(email="a@x.com", password="pw", username="a"):
        register(client, email=email, password=password, username=username)
        res = client.post("/login", json={"email": email, "password": password})
        assert res.status_code == 200
        return {"Authorization": f"Bearer {res.json()['token']}"}

    return _login
