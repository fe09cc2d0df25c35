import hashlib
import hmac
import json
import os
import time

# Must be set before any app module reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_BASE_URL"] = "http://frontend.test"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["PRICE_CENTS"] = "100"

import pytest
import pytest_asyncio
from datetime import timedelta
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base, import_models
from app.db.session import get_db
from app.main import app
from app.models.account import Account
from app.services.account_service import issue_session

WEBHOOK_SECRET = os.environ["STRIPE_WEBHOOK_SECRET"]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_account(session_factory):
    """
    Create an account (optionally already paid) and return (account_id, token).
    """
    async def _make(user_id="u1", email=None, paid=False, ttl=timedelta(hours=1)):
        async with session_factory() as session:
            session.add(Account(id=user_id, email=email or f"{user_id}@example.com", paid=paid))
            await session.commit()
            token = await issue_session(session, user_id, ttl=ttl)
        return user_id, token

    return _make


@pytest.fixture
def fetch_paid(session_factory):
    async def _fetch(user_id):
        async with session_factory() as session:
            account = await session.get(Account, user_id)
            return None if account is None else account.paid

    return _fetch


def sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = timestamp if timestamp is not None else int(time.time())
    digest = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.".encode("utf-8") + payload,
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={digest}"


def make_event(event_type="checkout.session.completed", metadata=None, event_id="evt_001") -> bytes:
    return json.dumps(
        {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "created": int(time.time()),
            "data": {
                "object": {
                    "id": "cs_test_001",
                    "object": "checkout.session",
                    "metadata": metadata if metadata is not None else {"userId": "u1"},
                    "payment_status": "paid",
                }
            },
        }
    ).encode("utf-8")


@pytest.fixture
def signed_event():
    """Returns (payload, headers) for a webhook delivery."""
    def _build(event_type="checkout.session.completed", metadata=None, event_id="evt_001", **sign_kwargs):
        payload = make_event(event_type, metadata, event_id)
        headers = {
            "stripe-signature": sign(payload, **sign_kwargs),
            "Content-Type": "application/json",
        }
        return payload, headers

    return _build
