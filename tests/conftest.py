import os

# keep the process-wide engine off disk while tests import the app
os.environ["LEDGER_URL"] = "sqlite://"

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.challenge_store import ChallengeStore
from app.core.dependencies import get_auth_service, get_registry
from app.services.auth_service import AuthService
from app.services.registry_client import RegistryClient
from app.services.registry_state import RegistryStateMachine, init_ledger
from main import app


START_TIME = 1700000000

# fixed keys so addresses are stable across runs
ALICE_KEY = "0x" + "11" * 32
BOB_KEY = "0x" + "22" * 32
ADMIN_KEY = "0x" + "33" * 32


class FakeClock:
    """Callable clock the tests move by hand"""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _sign(account, message: str) -> str:
    """personal_sign of *message*, hex encoded"""
    signed = Account.sign_message(encode_defunct(text=message), private_key=account.key)
    return signed.signature.hex()


@pytest.fixture
def sign():
    return _sign


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger_engine():
    """In-memory SQLite ledger shared by every session of a test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_ledger(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def registry_state(ledger_engine, clock) -> RegistryStateMachine:
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=ledger_engine)
    return RegistryStateMachine(session_factory, clock=clock)


@pytest.fixture
def registry(registry_state) -> RegistryClient:
    return RegistryClient(registry_state)


@pytest.fixture
def alice():
    return Account.from_key(ALICE_KEY)


@pytest.fixture
def bob():
    return Account.from_key(BOB_KEY)


@pytest.fixture
def admin():
    return Account.from_key(ADMIN_KEY)


@pytest.fixture
def challenge_store(clock) -> ChallengeStore:
    return ChallengeStore(ttl_seconds=300, clock=clock)


@pytest.fixture
def auth_service(challenge_store, admin) -> AuthService:
    return AuthService(challenge_store, admin_addresses=[admin.address])


@pytest.fixture
def client(registry, auth_service) -> TestClient:
    """Create a test client wired to the in-memory registry and auth service"""
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Run the nonce/verify flow for an account and return its bearer headers"""

    def _login(account) -> dict:
        nonce = client.post("/auth/nonce", json={"address": account.address}).json()["nonce"]
        response = client.post(
            "/auth/verify", json={"address": account.address, "signature": _sign(account, nonce)}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login
