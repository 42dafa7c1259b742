import uuid

import pytest
from sqlalchemy.orm import sessionmaker

from database.db import build_engine, init_db
from database.models.auth_models import User
from services.credential_store import InMemoryCredentialStore, SqlCredentialStore, build_credential_store
from services.errors import ConflictError


@pytest.fixture
def sql_store():
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    return SqlCredentialStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture(params=["memory", "sql"])
def store(request, sql_store):
    return InMemoryCredentialStore() if request.param == "memory" else sql_store


def _user(email="ada@example.com"):
    return User(id=str(uuid.uuid4()), name="Ada", email=email, password_hash="hash")


def test_create_and_lookup(store):
    created = store.create_user(_user())

    by_email = store.get_user_by_email("ada@example.com")
    by_id = store.get_user_by_id(created.id)

    assert by_email.id == created.id
    assert by_id.email == "ada@example.com"
    assert by_id.name == "Ada"
    assert by_id.password_hash == "hash"


def test_duplicate_email_conflicts(store):
    store.create_user(_user())
    with pytest.raises(ConflictError):
        store.create_user(_user())


def test_unknown_lookups_return_none(store):
    assert store.get_user_by_email("nobody@example.com") is None
    assert store.get_user_by_id("missing") is None


def test_backend_selection():
    assert isinstance(build_credential_store("memory"), InMemoryCredentialStore)
    assert isinstance(build_credential_store("sql"), SqlCredentialStore)
    with pytest.raises(ValueError):
        build_credential_store("redis")
