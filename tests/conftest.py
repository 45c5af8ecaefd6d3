import pytest

from urna import config
from urna.contract import LedgerContract
from urna.metrics import metrics
from urna.storage.memory import MemoryStore
from urna.storage.sqlite import SqliteStore

FIXED_TS = "2025-01-01T00:00:00+00:00"
ADMIN = "admin1"


@pytest.fixture(autouse=True)
def reset_urna_state(monkeypatch, tmp_path):
    """Isolate config and metrics between every test."""
    monkeypatch.setenv("URNA_DIR", str(tmp_path / "urna-home"))
    monkeypatch.delenv("URNA_DB", raising=False)
    monkeypatch.delenv("URNA_STORAGE", raising=False)
    monkeypatch.delenv("URNA_AUDIT", raising=False)
    config.reload()
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Every backend must honour the same KeyValueStore contract."""
    if request.param == "memory":
        backend = MemoryStore()
    else:
        backend = SqliteStore(tmp_path / "ledger.db")
    yield backend
    backend.close()


@pytest.fixture
def contract(store):
    return LedgerContract(store, audit=True, clock=lambda: FIXED_TS)


@pytest.fixture
def admin(contract):
    return contract.register_admin(ADMIN, "root", "2000-01-01", "h")


@pytest.fixture
def open_election(contract):
    return contract.create_election("E1", "open", "2025-01-01")


@pytest.fixture
def ledger(contract, admin, open_election):
    """Admin, open election E1, candidates C1/C2 and voters V1/V2."""
    contract.create_candidate(ADMIN, "C1", "Alice", "1990-01-01", "logo.png", "NY")
    contract.create_candidate(ADMIN, "C2", "Bob", "1985-05-05", "bob.png", "LA")
    contract.register_user("V1", "Vera", "1995-03-03", "Quito", "vera", "hv1")
    contract.register_user("V2", "Victor", "1996-04-04", "Lima", "victor", "hv2")
    return contract
