import os

# Must be set before scribz_api reads its settings
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from scribz_api.auth import register_user
from scribz_api.client import NotesClient
from scribz_api.database import SessionLocal, engine
from scribz_api.main import app
from scribz_api.models import Base

PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def alice(db):
    """Registered user as (token, user)."""
    return register_user(db, "alice@scribz.io", PASSWORD)


@pytest.fixture
def bob(db):
    return register_user(db, "bob@scribz.io", PASSWORD)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def api(client):
    return NotesClient(http=client)


@pytest.fixture
def token(api):
    return api.signup("carol@scribz.io", PASSWORD)["token"]


@pytest.fixture
def other_token(api):
    return api.signup("dave@scribz.io", PASSWORD)["token"]
