"""Shared fixtures: every test gets its own data directory."""

from datetime import datetime, timedelta, timezone

import pytest

from minisocial.services.identity_store import IdentityStore
from minisocial.services.post_store import PostStore
from minisocial.storage.json_storage import JsonStorage


class FakeClock:
    """Returns strictly increasing timestamps, one second apart."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture(autouse=True)
def isolated_data_dir(monkeypatch, tmp_path):
    """Point the default data directory at the test's temp dir."""
    monkeypatch.setenv("MINISOCIAL_DATA_DIR", str(tmp_path))
    yield tmp_path


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(tmp_path / "store")


@pytest.fixture
def identity(storage):
    return IdentityStore(storage)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def posts(storage, clock):
    return PostStore(storage, clock=clock)


@pytest.fixture
def alice(identity):
    return identity.sign_up("Alice", "alice@example.com", "secret-a")


@pytest.fixture
def bob(identity):
    session = identity.sign_up("Bob", "bob@example.com", "secret-b")
    return session
