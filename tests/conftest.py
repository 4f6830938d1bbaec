from pathlib import Path

import pytest

from passvault.client.database import CredentialStore
from passvault.client.service import VaultService

STRONG_PASSWORD = "Tr0ub4dor&3x"


@pytest.fixture
def store(tmp_path: Path):
    store = CredentialStore(f"sqlite:///{(tmp_path / 'vault.db').as_posix()}")
    yield store
    store.dispose()


@pytest.fixture
def service(store: CredentialStore) -> VaultService:
    return VaultService(store)


@pytest.fixture
def alice(store: CredentialStore) -> int:
    return store.create_user("alice", STRONG_PASSWORD, "favourite horse")
