import os
import time

# Set test environment before any app imports
os.environ["MODE"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["MONTHLY_FLASHCARDS_LIMIT"] = "3"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import jwt
import pytest
import pytest_asyncio
from jwcrypto import jwk
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.core.config import AuthSettings
from app.core.db import schemas  # noqa: F401
from app.core.db.base import Base, get_session
from app.core.db_services import FlashcardStore
from app.modules.auth import ProviderTokenVerifier, get_token_verifier
from app.modules.flashcards.client import get_generation_client
from app.modules.flashcards.models.flashcards import Flashcard

ISSUER = "https://clerk.test.example"


class FakeGenerationClient:
    """Stands in for the generation endpoint."""

    def __init__(self):
        self.calls: list[str] = []
        self.cards = [
            Flashcard(front="What is the largest planet?", back="Jupiter."),
            Flashcard(front="Which planet is closest to the Sun?", back="Mercury."),
        ]
        self.error: Exception | None = None

    async def generate(self, text: str) -> list[Flashcard]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.cards)


@pytest.fixture(scope="session")
def rsa_key():
    return jwk.JWK.generate(kty="RSA", size=2048, kid="test-key")


@pytest.fixture(scope="session")
def public_pem(rsa_key) -> str:
    return rsa_key.export_to_pem(private_key=False, password=None).decode("utf-8")


@pytest.fixture
def make_token(rsa_key):
    def _make(key=None, **claims) -> str:
        key = key or rsa_key
        now = int(time.time())
        payload = {"sub": "user_123", "iss": ISSUER, "iat": now, "exp": now + 300}
        payload.update(claims)
        return jwt.encode(
            payload,
            key.export_to_pem(private_key=True, password=None),
            algorithm="RS256",
            headers={"kid": key.key_id},
        )

    return _make


@pytest.fixture
def verifier(public_pem) -> ProviderTokenVerifier:
    return ProviderTokenVerifier(
        AuthSettings(AUTH_ISSUER=ISSUER, AUTH_PUBLIC_KEY=public_pem)
    )


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'flashcards.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest.fixture
def store(session) -> FlashcardStore:
    return FlashcardStore(session)


@pytest.fixture
def app(session_maker, verifier, fake_client):
    from main import create_app

    application = create_app()

    async def _get_session():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    application.dependency_overrides[get_session] = _get_session
    application.dependency_overrides[get_token_verifier] = lambda: verifier
    application.dependency_overrides[get_generation_client] = lambda: fake_client
    return application


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}
