from __future__ import annotations

import os
from typing import Any, Callable, Sequence

import pytest
from fastapi.testclient import TestClient


ADMIN_WALLET = "AdminWa11et1111111111111111111111111111111"


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"

    # Ensure local .env cannot leak real endpoints or keys into tests.
    os.environ["ENVIRONMENT"] = "test"
    os.environ["ADMIN_WALLET_ADDRESS"] = ADMIN_WALLET
    os.environ.pop("GROQ_API_KEY", None)


class FakeTermExtractor:
    """Every token is a candidate; keeps tests independent of NLTK data."""

    def extract(self, text: str) -> Sequence[str]:
        from connectus.services.skill_extractor import tokenize_text

        return tokenize_text(text)


class FakeChatAssistant:
    def __init__(self) -> None:
        self.messages: list[str] = []
        self.reply_text = "Here are tips: 1. Update your profile 2. Apply early"

    def reply(self, message: str) -> str:
        from connectus.services.chat_service import format_numbered_lists

        self.messages.append(message)
        return format_numbered_lists(self.reply_text)


class FakeTransferVerifier:
    """Answers from a signature -> outcome table instead of the Solana RPC node."""

    def __init__(self) -> None:
        self.outcomes: dict[str, Any] = {}
        self.calls: list[tuple[str, str, str]] = []

    def verify_transfer(self, signature: str, expected_recipient: str, expected_sender: str):
        from connectus.services.payment_verifier import VerifiedTransfer

        self.calls.append((signature, expected_recipient, expected_sender))
        outcome = self.outcomes.get(signature)
        if isinstance(outcome, Exception):
            raise outcome
        lamports = outcome if isinstance(outcome, int) else 10_000_000
        return VerifiedTransfer(
            signature=signature,
            sender=expected_sender,
            recipient=expected_recipient,
            amount_lamports=lamports,
        )


@pytest.fixture()
def verifier() -> FakeTransferVerifier:
    return FakeTransferVerifier()


@pytest.fixture()
def chat_bot() -> FakeChatAssistant:
    return FakeChatAssistant()


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, tmp_path, verifier, chat_bot) -> Any:
    from connectus.config import settings
    from connectus.database import Base, engine
    from connectus.main import create_app
    from connectus.routers import dependencies

    monkeypatch.setattr(settings, "admin_wallet_address", ADMIN_WALLET)
    monkeypatch.setattr(settings, "upload_dir", tmp_path / "uploads")

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app()
    extractor = FakeTermExtractor()
    app.dependency_overrides[dependencies.term_extractor] = lambda: extractor
    app.dependency_overrides[dependencies.transfer_verifier] = lambda: verifier
    app.dependency_overrides[dependencies.chat_assistant] = lambda: chat_bot
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def register_and_login(client) -> Callable[..., dict[str, str]]:
    def _register_and_login(email: str, password: str = "SecretPass123", name: str | None = None) -> dict[str, str]:
        r = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
        assert r.status_code == 201
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _register_and_login
